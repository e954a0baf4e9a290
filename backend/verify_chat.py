"""
Smoke check against the configured provider.

    python verify_chat.py

Sends the three canonical messages without a report loaded and prints
the detected intent and reply for each.
"""
import logging
import time

from chat_service import ChatService, APOLOGY_REPLY
from llm import build_gateway
from store import ReportStore

CASES = [
    ("hii", "General Intent"),
    ("What is LCP?", "Concept Intent"),
    ("Why is my score low?", "Report Intent, No Report"),
]


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    service = ChatService(build_gateway(), ReportStore.from_env())
    print(f"--- Starting chat verification ({service.gateway.provider}: {service.gateway.model}) ---")

    for i, (message, label) in enumerate(CASES, 1):
        print(f'\n[{i}/{len(CASES)}] Testing "{message}" ({label})...')
        result = service.chat(None, message)
        if result.reply == APOLOGY_REPLY:
            print("API error (handled):", result.reply)
        else:
            print("Response:", result.reply)
        print("Intent:", result.intent)
        time.sleep(1)

    print("\n--- Verification complete ---")


if __name__ == "__main__":
    main()
