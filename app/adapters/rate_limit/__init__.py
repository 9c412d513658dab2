"""Rate limiting adapters.

This package provides a small abstraction layer so the service can start with
an in-memory limiter and later migrate to a shared store without changing the
API layer.
"""

from app.adapters.rate_limit.base import AbstractRateLimiter, LimitWindow, RateLimitDecision
from app.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter, RateLimiterState

__all__ = [
    "AbstractRateLimiter",
    "InMemorySlidingWindowRateLimiter",
    "LimitWindow",
    "RateLimitDecision",
    "RateLimiterState",
]
