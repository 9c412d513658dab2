"""In-memory sliding-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: the state object owns a lock around the whole client map.
- Stale timestamps are pruned lazily when their key is accessed; client
  entries are never removed.
"""

from __future__ import annotations

import math
import threading
import time
from bisect import insort
from dataclasses import dataclass, field
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimiter, LimitWindow, RateLimitDecision

MINUTE_SECONDS = 60
DAY_SECONDS = 24 * 60 * 60


@dataclass
class ClientWindow:
    """Request timestamps for one client, oldest first."""

    minute: list[float] = field(default_factory=list)
    day: list[float] = field(default_factory=list)


class RateLimiterState:
    """Process-lifetime map of client identity to ClientWindow.

    Created once at startup and handed to the limiter, so tests and the app
    factory decide who owns it.
    """

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.windows: dict[str, ClientWindow] = {}

    def __len__(self) -> int:
        return len(self.windows)

    def window_for(self, client_id: str) -> ClientWindow:
        """Return the window for client_id, creating it on first use.

        Callers must hold ``lock``.
        """
        window = self.windows.get(client_id)
        if window is None:
            window = ClientWindow()
            self.windows[client_id] = window
        return window


def _slide(timestamps: list[float], now: float, window_seconds: int) -> list[float]:
    """Drop entries outside the window and record ``now``, keeping order."""
    cutoff = now - window_seconds
    kept = [t for t in timestamps if t > cutoff]
    insort(kept, now)
    return kept


def _retry_after(timestamps: list[float], limit: int, now: float, window_seconds: int) -> int:
    """Seconds until enough entries expire for one more attempt to be admitted.

    An attempt is admitted when, after appending it, at most ``limit`` entries
    remain, so all but ``limit - 1`` of the current entries must expire.
    """
    blocking = timestamps[len(timestamps) - limit]
    return max(0, int(math.ceil(blocking + window_seconds - now)))


class InMemorySlidingWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter enforcing a minute ceiling and a day ceiling per client.

    Every attempt is appended to both windows before the ceilings are
    checked, so rejected attempts also consume budget. A request is rejected
    when the count exceeds the ceiling: with ``minute_limit=5`` the sixth
    request inside any 60 second span is the first one refused.

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        (e.g., multiple Uvicorn/Gunicorn workers), each worker will enforce its
        own independent limits.
    """

    def __init__(
        self,
        *,
        minute_limit: int,
        day_limit: int,
        minute_window_seconds: int = MINUTE_SECONDS,
        day_window_seconds: int = DAY_SECONDS,
        state: RateLimiterState | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            minute_limit: Maximum attempts per client in the short window.
            day_limit: Maximum attempts per client in the long window.
            minute_window_seconds: Size of the short window in seconds.
            day_window_seconds: Size of the long window in seconds.
            state: Shared client state; a fresh empty one when omitted.
            clock: Time source function returning seconds.

        Raises:
            ValueError: If a limit or window size is invalid.
        """
        if minute_limit < 1:
            raise ValueError("minute_limit must be >= 1")
        if day_limit < 1:
            raise ValueError("day_limit must be >= 1")
        if minute_window_seconds < 1:
            raise ValueError("minute_window_seconds must be >= 1")
        if day_window_seconds < 1:
            raise ValueError("day_window_seconds must be >= 1")

        self._minute_limit = minute_limit
        self._day_limit = day_limit
        self._minute_window_seconds = minute_window_seconds
        self._day_window_seconds = day_window_seconds
        self._state = state if state is not None else RateLimiterState()
        self._clock = clock

    @property
    def state(self) -> RateLimiterState:
        return self._state

    def admit(self, client_id: str, now: float | None = None) -> RateLimitDecision:
        """Record an attempt for client_id and decide whether to admit it.

        Both windows are updated on every call, whatever the outcome. When
        both ceilings are exceeded the minute window is reported.

        Args:
            client_id: Client identity (e.g., IP address or "unknown").
            now: Timestamp of the attempt; read from the clock when omitted.

        Returns:
            RateLimitDecision with the allowance decision and remaining budget.

        Raises:
            ValueError: If client_id is empty.
        """
        if not client_id:
            raise ValueError("client_id must be a non-empty string")

        with self._state.lock:
            if now is None:
                now = self._clock()

            window = self._state.window_for(client_id)
            window.minute = _slide(window.minute, now, self._minute_window_seconds)
            window.day = _slide(window.day, now, self._day_window_seconds)

            minute_count = len(window.minute)
            day_count = len(window.day)
            minute_remaining = max(0, self._minute_limit - minute_count)
            day_remaining = max(0, self._day_limit - day_count)

            if minute_count > self._minute_limit:
                return RateLimitDecision(
                    allowed=False,
                    window=LimitWindow.MINUTE,
                    minute_remaining=minute_remaining,
                    day_remaining=day_remaining,
                    retry_after_seconds=_retry_after(
                        window.minute, self._minute_limit, now, self._minute_window_seconds
                    ),
                )

            if day_count > self._day_limit:
                return RateLimitDecision(
                    allowed=False,
                    window=LimitWindow.DAY,
                    minute_remaining=minute_remaining,
                    day_remaining=day_remaining,
                    retry_after_seconds=_retry_after(
                        window.day, self._day_limit, now, self._day_window_seconds
                    ),
                )

            return RateLimitDecision(
                allowed=True,
                window=None,
                minute_remaining=minute_remaining,
                day_remaining=day_remaining,
            )
