"""Chat service turning a validated user message into a model reply.

Handles the business half of a /chat request once the rate limiter has
admitted it:
- Guarding against blank messages
- Building the domain prompt
- A single generation call (no retries, no fallback model)
- Converting provider failures into a client-safe LLMAppError
"""

import logging
import time

from app.adapters.llm.base import AbstractLLMClient
from app.core.errors import LLMAppError, ValidationAppError
from app.schemas.chat import MESSAGE_REQUIRED, ChatResponse
from app.services.prompt_builder import build_prompt

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "I couldn't process your query at the moment. Please try again."


class ChatService:
    """Service answering Dominican gastronomy questions through an LLM.

    Attributes:
        llm: LLM client adapter used to generate replies.
    """

    def __init__(self, llm: AbstractLLMClient) -> None:
        self.llm = llm

    async def reply(self, message: str) -> ChatResponse:
        """Generate the reply envelope for one chat message.

        Args:
            message: User message, already trimmed by request validation.

        Returns:
            ChatResponse with success=True and the generated reply.

        Raises:
            ValidationAppError: If the message is blank.
            LLMAppError: If the generation call fails for any reason.
        """
        message = message.strip() if isinstance(message, str) else ""
        if not message:
            raise ValidationAppError(code="message_required", message=MESSAGE_REQUIRED)

        prompt = build_prompt(message)
        start = time.perf_counter()

        try:
            reply = await self.llm.generate_text(prompt)
        except Exception as exc:
            logger.error(
                "chat.generation_failed",
                extra={
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                    "message_chars": len(message),
                },
            )
            raise LLMAppError(
                code="generation_failed",
                message=GENERATION_FAILED_MESSAGE,
                details={"error_type": type(exc).__name__},
            ) from exc

        logger.info(
            "chat.reply_generated",
            extra={
                "message_chars": len(message),
                "reply_chars": len(reply),
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return ChatResponse.ok(reply)
