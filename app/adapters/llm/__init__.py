"""Generation adapters: one interface, OpenAI-protocol clients behind it."""

from app.adapters.llm.base import AbstractLLMClient
from app.adapters.llm.factory import GEMINI_OPENAI_BASE_URL, create_llm_client
from app.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "GEMINI_OPENAI_BASE_URL",
    "OpenAIClient",
    "create_llm_client",
]
