from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.core.rate_limit import check_rate_limit, get_rate_limiter
from app.schemas.chat import ChatRequest, ChatResponse
from app.services.chat_service import ChatService

router = APIRouter(tags=["Chat"])


def get_chat_service(request: Request) -> ChatService:
    """Return the chat service built by the app factory."""
    return request.app.state.chat_service


async def admit_chat_request(
    request: Request,
    payload: ChatRequest,
    limiter: Annotated[AbstractRateLimiter | None, Depends(get_rate_limiter)],
) -> ChatRequest:
    """Guard in front of the chat handler.

    FastAPI only calls this once ``payload`` has validated, so malformed or
    blank messages never consume rate limit budget. A rejected request raises
    before the handler body runs.

    Raises:
        RateLimitAppError: When the client exceeded its minute or day ceiling.
    """
    check_rate_limit(request, limiter)
    return payload


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        400: {
            "model": ChatResponse,
            "description": "Invalid message, rate limit exceeded, or generation failure.",
        },
    },
)
async def chat(
    payload: Annotated[ChatRequest, Depends(admit_chat_request)],
    service: Annotated[ChatService, Depends(get_chat_service)],
) -> ChatResponse:
    """Answer a Dominican gastronomy question.

    Args:
        payload: Validated, rate-limited chat request.
        service: Chat service from application state.

    Returns:
        ChatResponse: ``{"success": true, "reply": ..., "reason": ""}``.

    Raises:
        LLMAppError: If generation fails; rendered as a 400 envelope by the
            global exception handlers.
    """
    return await service.reply(payload.message)
