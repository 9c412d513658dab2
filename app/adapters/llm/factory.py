"""Factory pattern for creating LLM client instances."""

from app.adapters.llm.base import AbstractLLMClient
from app.adapters.llm.openai_client import OpenAIClient
from app.core.config import LLMSettings
from app.core.errors import ValidationAppError

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"

# Providers reachable through the OpenAI SDK, with their default endpoint
_OPENAI_COMPATIBLE_PROVIDERS: dict[str, str | None] = {
    "gemini": GEMINI_OPENAI_BASE_URL,
    "openai": None,
}


def create_llm_client(llm_settings: LLMSettings) -> AbstractLLMClient:
    """Factory function to instantiate LLM clients based on provider.

    Validates provider-specific requirements and routes to the appropriate
    client.

    Args:
        llm_settings: Resolved LLM configuration.

    Returns:
        AbstractLLMClient: Configured LLM client instance.

    Raises:
        ValidationAppError: If provider-specific requirements are not met.
    """
    provider = llm_settings.provider.lower()

    if provider not in _OPENAI_COMPATIBLE_PROVIDERS:
        supported = ", ".join(sorted(_OPENAI_COMPATIBLE_PROVIDERS))
        raise ValidationAppError(
            code="llm_unknown_provider",
            message=(
                f"Unknown LLM provider: '{provider}'. Supported providers: {supported}"
            ),
        )

    if not llm_settings.api_key:
        raise ValidationAppError(
            code="llm_missing_api_key",
            message="LLM_API_KEY is required",
            details={"provider": provider},
        )

    return OpenAIClient(
        api_key=llm_settings.api_key,
        model=llm_settings.model,
        base_url=llm_settings.base_url or _OPENAI_COMPATIBLE_PROVIDERS[provider],
        timeout_seconds=llm_settings.timeout_seconds,
    )
