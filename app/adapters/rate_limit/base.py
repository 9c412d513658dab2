"""Rate limiter interfaces.

The API depends on this abstraction (not the concrete implementation) so the
storage backend can be swapped later with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class LimitWindow(str, Enum):
    """Window whose ceiling caused a rejection."""

    MINUTE = "minute"
    DAY = "day"


@dataclass(frozen=True)
class RateLimitDecision:
    """Result of an admit() call.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        window: Window that rejected the request (None when allowed).
        minute_remaining: Requests left in the minute window (0 when exhausted).
        day_remaining: Requests left in the day window (0 when exhausted).
        retry_after_seconds: Wait until the rejecting window admits again,
            assuming no further attempts. None when allowed.
    """

    allowed: bool
    window: LimitWindow | None
    minute_remaining: int
    day_remaining: int
    retry_after_seconds: int | None = None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def admit(self, client_id: str, now: float | None = None) -> RateLimitDecision:
        """Record an attempt for client_id and decide whether to admit it.

        Args:
            client_id: Client identity (e.g., IP address).
            now: Timestamp of the attempt; defaults to the limiter's clock.

        Returns:
            RateLimitDecision describing whether it was allowed.
        """
        raise NotImplementedError
