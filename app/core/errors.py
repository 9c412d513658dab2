"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and the uniform chat response envelope.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability.

    Fields are optional to keep shapes flexible while encouraging
    consistent keys across the codebase.
    """

    window: str
    retry_after: int
    error_type: str
    provider: str


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message, safe to return to clients.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class RateLimitAppError(AppError):
    """Raised when a client exceeds its minute or day request ceiling."""


class LLMAppError(AppError):
    """Raised when the generation provider call fails."""
