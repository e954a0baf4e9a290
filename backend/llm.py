from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from utils import get_env, env_flag

logger = logging.getLogger(__name__)

# ================= Config =================
PROVIDER = get_env("PROVIDER", "gemini").lower()
GEMINI_MODEL = get_env("GEMINI_MODEL", "gemini-2.0-flash")
GROQ_MODEL = get_env("GROQ_MODEL", "llama-3.3-70b-versatile")

TEMPERATURE = 0.7
TOP_P = 1.0
MAX_OUTPUT_TOKENS = 2048
MAX_HISTORY_TURNS = 10

FALLBACK_REPLY = "I couldn't generate a response. Please try rephrasing your question."
RATE_LIMIT_REPLY = (
    "I'm experiencing high demand right now. Please wait a moment and try again."
)

_AUTH_MARKERS = ("api_key", "api key", "invalid_api_key", "unauthenticated")
_RATE_MARKERS = ("429", "rate limit", "rate_limit", "resource_exhausted", "resource exhausted", "quota")

Turn = Tuple[str, str]


def trim_history(history: Optional[Sequence[Dict]], limit: int = MAX_HISTORY_TURNS) -> List[Turn]:
    """Last `limit` turns as (role, text); role is 'assistant' or 'user'."""
    turns = []
    for h in list(history or [])[-limit:]:
        role = "assistant" if h.get("role") == "assistant" else "user"
        turns.append((role, h.get("text") or h.get("content") or ""))
    return turns


def classify_vendor_error(err: Exception) -> Optional[str]:
    msg = str(err).lower()
    if any(m in msg for m in _AUTH_MARKERS):
        return "auth"
    if any(m in msg for m in _RATE_MARKERS):
        return "rate_limit"
    return None


class LLMGateway:
    """Sends one system instruction + history + user turn to a chat model."""

    provider = "base"
    key_env = ""
    key_url = ""

    def __init__(self, api_key: str = "", model: str = ""):
        self.api_key = api_key
        self.model = model

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def config_reply(self) -> str:
        reply = f"Chat is unavailable. Please configure {self.key_env} in the backend .env file."
        if self.key_url:
            reply += f" You can get a free API key from {self.key_url}"
        return reply

    def invalid_key_reply(self) -> str:
        return (
            f"Chat is unavailable. The {self.provider.capitalize()} API key appears to be invalid. "
            f"Please check your {self.key_env} configuration."
        )

    def call_model(self, system_instruction: str, user_prompt: str,
                   history: Optional[Sequence[Dict]] = None) -> str:
        turns = trim_history(history)
        try:
            text = self._complete(system_instruction, turns, user_prompt)
        except Exception as e:
            logger.error("%s API error: %s", self.provider, e)
            kind = classify_vendor_error(e)
            if kind == "auth":
                return self.invalid_key_reply()
            if kind == "rate_limit":
                return RATE_LIMIT_REPLY
            raise
        return (text or "").strip() or FALLBACK_REPLY

    def _complete(self, system_instruction: str, turns: List[Turn], user_prompt: str) -> str:
        raise NotImplementedError


# ================= Gemini =================
class GeminiGateway(LLMGateway):
    """
    `model_factory(model_name, system_instruction)` returns an object with
    `generate_content`; `genai.GenerativeModel` in production.
    """

    provider = "gemini"
    key_env = "GEMINI_API_KEY"
    key_url = "https://aistudio.google.com/app/apikey"

    def __init__(self, model_factory=None, api_key: str = "", model: str = GEMINI_MODEL):
        super().__init__(api_key, model)
        self.model_factory = model_factory
        self._models = {}

    @classmethod
    def from_env(cls) -> "GeminiGateway":
        api_key = get_env("GEMINI_API_KEY", "")
        factory = None
        if api_key:
            import google.generativeai as genai
            genai.configure(api_key=api_key)
            factory = genai.GenerativeModel
        return cls(factory, api_key, GEMINI_MODEL)

    @property
    def configured(self) -> bool:
        return self.model_factory is not None and bool(self.api_key)

    def _model_for(self, system_instruction: str):
        # one model per system prompt; there are only three modes
        if system_instruction not in self._models:
            self._models[system_instruction] = self.model_factory(
                self.model, system_instruction=system_instruction
            )
        return self._models[system_instruction]

    def _complete(self, system_instruction, turns, user_prompt):
        contents = [
            {"role": "model" if role == "assistant" else "user", "parts": [text]}
            for role, text in turns
        ]
        contents.append({"role": "user", "parts": [user_prompt]})
        resp = self._model_for(system_instruction).generate_content(
            contents,
            generation_config={
                "temperature": TEMPERATURE,
                "top_p": TOP_P,
                "max_output_tokens": MAX_OUTPUT_TOKENS,
            },
            stream=False,
        )
        try:
            return resp.text
        except ValueError:
            # blocked or empty candidate list
            return ""


# ================= Groq =================
class GroqGateway(LLMGateway):
    provider = "groq"
    key_env = "GROQ_API_KEY"
    key_url = "https://console.groq.com/keys"

    def __init__(self, client=None, api_key: str = "", model: str = GROQ_MODEL):
        super().__init__(api_key, model)
        self.client = client

    @classmethod
    def from_env(cls) -> "GroqGateway":
        api_key = get_env("GROQ_API_KEY", "")
        client = None
        if api_key:
            from groq import Groq
            client = Groq(api_key=api_key)
        return cls(client, api_key, GROQ_MODEL)

    @property
    def configured(self) -> bool:
        return self.client is not None and bool(self.api_key)

    def _complete(self, system_instruction, turns, user_prompt):
        messages = [{"role": "system", "content": system_instruction}]
        messages += [{"role": role, "content": text} for role, text in turns]
        messages.append({"role": "user", "content": user_prompt})
        completion = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=TEMPERATURE,
            max_tokens=MAX_OUTPUT_TOKENS,
            top_p=TOP_P,
            stream=False,
        )
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""


# ================= Dummy =================
class DummyGateway(LLMGateway):
    """Canned replies for local runs without a vendor key."""

    provider = "dummy"

    def __init__(self, reply: str = "Hello! How can I help you today?"):
        super().__init__("dummy", "dummy")
        self.reply = reply

    def _complete(self, system_instruction, turns, user_prompt):
        return self.reply


def build_gateway(provider: Optional[str] = None) -> LLMGateway:
    if env_flag("DUMMY_MODE"):
        return DummyGateway()
    provider = (provider or PROVIDER).lower()
    if provider in {"gemini", "google"}:
        return GeminiGateway.from_env()
    if provider == "groq":
        return GroqGateway.from_env()
    raise ValueError(f"Unsupported PROVIDER={provider!r}; expected 'gemini' or 'groq'.")
