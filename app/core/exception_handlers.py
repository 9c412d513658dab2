"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain, validation, HTTP and unexpected) and return the chat envelope
``{"success": false, "reply": "", "reason": ...}`` so clients only ever parse
one shape.

Design:
- AppError subclasses → 400 Bad Request with the error's client-safe message
- RequestValidationError → 400 with the first validation problem
- Starlette HTTPException (404, 405, ...) → same status, envelope body
- Unexpected Exception → generic 500 (safety net)
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Settings, settings as default_settings
from app.core.errors import AppError, RateLimitAppError
from app.schemas.chat import MESSAGE_REQUIRED, ChatResponse

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."
INVALID_JSON_MESSAGE = "Invalid JSON body"
_VALUE_ERROR_PREFIX = "Value error, "


def _envelope(status_code: int, reason: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ChatResponse.failure(reason).model_dump(),
        headers=headers,
    )


def _settings_for(request: Request) -> Settings:
    return getattr(request.app.state, "settings", default_settings)


def describe_validation_error(exc: RequestValidationError) -> str:
    """Reduce FastAPI's validation error list to one human-readable reason.

    Only the first error is reported, matching what a client can fix first.

    Args:
        exc: Validation error raised while parsing the request.

    Returns:
        Reason string for the response envelope.
    """
    errors = exc.errors()
    if not errors:
        return "Validation error"

    first = errors[0]
    error_type = first.get("type", "")
    loc = first.get("loc") or ()

    if error_type == "missing":
        return MESSAGE_REQUIRED
    if error_type == "json_invalid":
        return INVALID_JSON_MESSAGE
    if error_type == "extra_forbidden" and loc:
        return f"property {loc[-1]} should not exist"

    message = str(first.get("msg") or "Validation error")
    if message.startswith(_VALUE_ERROR_PREFIX):
        message = message[len(_VALUE_ERROR_PREFIX):]
    return message


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with the chat envelope.

    Every AppError is a client-visible 400: validation failures, rate-limit
    rejections and generation failures alike. Rate-limit rejections also get
    Retry-After and X-RateLimit-Window headers when enabled.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with status 400 and the envelope.
    """
    status_code = 400

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
        },
    )

    headers: dict[str, str] = {}
    if isinstance(exc, RateLimitAppError) and _settings_for(request).app.rate_limit_include_headers:
        details = exc.details or {}
        headers["Retry-After"] = str(details.get("retry_after", 0))
        if "window" in details:
            headers["X-RateLimit-Window"] = str(details["window"])

    return _envelope(status_code, exc.message, headers or None)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request body validation errors as 400 envelopes."""
    reason = describe_validation_error(exc)
    logger.info(
        "request_validation_failed",
        extra={
            "reason": reason,
            "error_count": len(exc.errors()),
            "request_path": request.url.path,
        },
    )
    return _envelope(400, reason)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Keep the HTTP status of routing errors but use the envelope body."""
    return _envelope(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Catches any exception not handled by specific handlers.
    Logs detailed information for debugging while returning generic message.
    Prevents information leakage (no stack traces to client).

    Args:
        request: FastAPI request object.
        exc: Exception instance (unexpected).

    Returns:
        JSONResponse with generic error (no implementation details leaked).
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )
    return _envelope(500, UNEXPECTED_ERROR_MESSAGE)


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Order matters: specific handlers registered before general fallback.

    Args:
        app: FastAPI application instance.

    Example:
        >>> from fastapi import FastAPI
        >>> from app.core.exception_handlers import setup_exception_handlers
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
        >>> # Now all errors use the chat envelope
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(validation_error_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(Exception)(general_exception_handler)
