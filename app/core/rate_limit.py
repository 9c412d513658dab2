"""Rate limiting glue between FastAPI requests and the limiter adapter.

This module wires the rate limiting adapter into the HTTP layer.

Design goals:
- No module-level limiter: the app factory builds the limiter and its state
  once and stores them on ``app.state``; requests reach them through
  ``get_rate_limiter``.
- Swap-friendly: storage backend can be replaced behind an abstract
  interface.

Rate limiting strategy:
- Sliding minute and day windows per client IP.
- If the client address is unavailable, all such requests share the
  ``"unknown"`` bucket.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import Request

from app.adapters.rate_limit.base import AbstractRateLimiter, LimitWindow
from app.core.config import Settings
from app.core.errors import RateLimitAppError

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"

REJECTION_MESSAGES: dict[LimitWindow, str] = {
    LimitWindow.MINUTE: "Rate limit exceeded, please try again later",
    LimitWindow.DAY: "Daily limit exceeded, please try again tomorrow",
}


def get_rate_limiter(request: Request) -> AbstractRateLimiter | None:
    """Return the limiter built at startup, or None when limiting is disabled."""
    return getattr(request.app.state, "rate_limiter", None)


def resolve_client_id(request: Request, settings: Settings) -> str:
    """Build the limiter key for the current request.

    Args:
        request: FastAPI request.
        settings: Settings the app was created with.

    Returns:
        str: Client identity, ``"unknown"`` when it cannot be determined.
    """
    if settings.app.trust_forwarded_for:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


def _hash_client_id(client_id: str) -> str:
    """Hash the client identity for logging without exposing addresses."""
    return hashlib.sha256(client_id.encode()).hexdigest()[:16]


def check_rate_limit(request: Request, limiter: AbstractRateLimiter | None) -> None:
    """Count the request against its client's budget.

    Args:
        request: FastAPI request.
        limiter: Limiter from ``get_rate_limiter``; None skips the check.

    Raises:
        RateLimitAppError: When the minute or day ceiling is exceeded.
    """
    if limiter is None:
        return

    settings: Settings = request.app.state.settings
    client_id = resolve_client_id(request, settings)
    client_hash = _hash_client_id(client_id)

    decision = limiter.admit(client_id)
    if decision.allowed:
        logger.info(
            "rate_limit.allowed",
            extra={
                "client_hash": client_hash,
                "minute_remaining": decision.minute_remaining,
                "day_remaining": decision.day_remaining,
            },
        )
        return

    window = decision.window or LimitWindow.MINUTE
    retry_after = decision.retry_after_seconds or 0
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "client_hash": client_hash,
            "window": window.value,
            "minute_remaining": decision.minute_remaining,
            "day_remaining": decision.day_remaining,
            "retry_after_s": retry_after,
        },
    )

    raise RateLimitAppError(
        code=f"rate_limit_{window.value}",
        message=REJECTION_MESSAGES[window],
        details={"window": window.value, "retry_after": retry_after},
    )
