from abc import ABC, abstractmethod
from typing import Any


class AbstractLLMClient(ABC):
	"""Interface for LLM clients that turn a prompt into generated text."""

	@abstractmethod
	async def generate_text(self, prompt: str, **kwargs: Any) -> str:
		"""Generate a free-text completion for the prompt.

		Args:
			prompt: Complete prompt to send to the model.
			**kwargs: Provider-specific options (e.g., temperature, max_tokens).

		Returns:
			str: Text produced by the model.

		Raises:
			RuntimeError: If the provider call fails or returns no content.
		"""
		...
