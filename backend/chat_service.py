"""
Chat service.

Pipeline per message: intent -> (report context) -> prompt -> LLM.
Three modes: RAG (report questions), hybrid (web concepts), open (general).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from context import build_report_context, build_report_summary
from intent import (
    REPORT_INTENT,
    WEBSITE_CONCEPT_INTENT,
    ERROR_INTENT,
    detect_intent,
    detect_sources,
)
from llm import LLMGateway
from prompts import (
    ChatMode,
    system_prompt,
    report_prompt,
    concept_prompt,
    general_prompt,
)

logger = logging.getLogger(__name__)

NO_REPORT_REPLY = (
    "I'd love to help with your website analysis, but I don't have a report loaded. "
    "Please run a website scan first, then ask me questions from the dashboard."
)
APOLOGY_REPLY = "I'm sorry, I encountered an error. Please try asking again in a slightly different way."


@dataclass(frozen=True)
class ChatResult:
    reply: str
    intent: str
    sources: List[str] = field(default_factory=list)


class ChatService:
    def __init__(self, gateway: LLMGateway, store):
        self.gateway = gateway
        self.store = store

    def chat(self, report_id: Optional[str], message: str,
             history: Optional[Sequence[Dict]] = None) -> ChatResult:
        history = list(history or [])
        if not self.gateway.configured:
            return ChatResult(self.gateway.config_reply(), ERROR_INTENT, [])

        result = detect_intent(message, bool(report_id))
        logger.info("Intent: %s (confidence: %s)", result.intent, result.confidence)
        intent = result.intent

        try:
            if intent == REPORT_INTENT:
                return self.handle_report(report_id, message, history)
            if intent == WEBSITE_CONCEPT_INTENT:
                return ChatResult(self.handle_concept(report_id, message, history), intent, [])
            return ChatResult(self.handle_general(message, history), intent, [])
        except Exception:
            logger.exception("Error processing chat request")
            return ChatResult(APOLOGY_REPLY, intent, [])

    def handle_report(self, report_id: Optional[str], message: str, history: List[Dict]) -> ChatResult:
        if not report_id:
            return ChatResult(NO_REPORT_REPLY, REPORT_INTENT, [])
        ctx = build_report_context(self.store, report_id)
        sources = detect_sources(message)
        reply = self.gateway.call_model(
            system_prompt(ChatMode.RAG),
            report_prompt(ctx.full_context, message),
            history,
        )
        return ChatResult(reply, REPORT_INTENT, sources)

    def handle_concept(self, report_id: Optional[str], message: str, history: List[Dict]) -> str:
        summary = build_report_summary(self.store, report_id) if report_id else ""
        return self.gateway.call_model(
            system_prompt(ChatMode.HYBRID),
            concept_prompt(message, summary),
            history,
        )

    def handle_general(self, message: str, history: List[Dict]) -> str:
        return self.gateway.call_model(
            system_prompt(ChatMode.OPEN),
            general_prompt(message),
            history,
        )
