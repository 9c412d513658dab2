"""OpenAI-compatible LLM client adapter."""

from typing import Any

from openai import AsyncOpenAI

from app.adapters.llm.base import AbstractLLMClient


class OpenAIClient(AbstractLLMClient):
    """Client for calling chat completions and returning the reply text.

    Uses the official OpenAI Python SDK with async support. Any endpoint that
    speaks the OpenAI protocol works (OpenAI itself, Gemini's compatibility
    endpoint).
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        """Initialize async client.

        Args:
            api_key: Provider API key for authentication.
            model: Model name (e.g., "gemini-2.0-flash", "gpt-4o-mini").
            base_url: Optional custom base URL for the API.
            timeout_seconds: Timeout for requests in seconds.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.model = model

    async def generate_text(self, prompt: str, **kwargs: Any) -> str:
        """Generate a reply using chat completions.

        Args:
            prompt: Full prompt, sent as a single user message.
            **kwargs: Provider options (temperature, max_tokens, top_p, etc.).

        Returns:
            str: Reply text from the first choice.

        Raises:
            RuntimeError: If the API call fails or the response has no content.
        """
        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }

        # Pass through additional parameters if provided
        allowed_params = {
            "temperature",
            "max_tokens",
            "top_p",
            "frequency_penalty",
            "presence_penalty",
            "seed",
        }
        for param in allowed_params:
            if param in kwargs:
                request_params[param] = kwargs[param]

        try:
            response = await self.client.chat.completions.create(**request_params)
        except Exception as exc:
            raise RuntimeError(f"LLM API error: {str(exc)}") from exc

        if not response.choices:
            raise RuntimeError("LLM returned no choices")

        content = response.choices[0].message.content
        if content is None or not content.strip():
            raise RuntimeError("LLM returned empty response")

        return content
