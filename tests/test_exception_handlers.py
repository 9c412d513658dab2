"""Tests for global exception handlers.

Validates that every error type ends up in the chat envelope with the right
HTTP status and without leaking internal details.
"""

import asyncio
import json
import logging
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient

from app.core.errors import AppError, LLMAppError, RateLimitAppError, ValidationAppError
from app.core.exception_handlers import (
    UNEXPECTED_ERROR_MESSAGE,
    describe_validation_error,
    general_exception_handler,
    setup_exception_handlers,
)


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    """Create test client with handlers enabled."""
    return TestClient(app_with_handlers)


def _decode(response) -> dict:
    body = response.body if isinstance(response.body, bytes) else bytes(response.body)
    return json.loads(body.decode())


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    def test_validation_error_returns_400_envelope(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-validation")
        async def test_endpoint():
            raise ValidationAppError(code="message_required", message="message is required")

        response = client.get("/test-validation")

        assert response.status_code == 400
        assert response.json() == {"success": False, "reply": "", "reason": "message is required"}

    def test_llm_error_returns_400_envelope(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-llm")
        async def test_endpoint():
            raise LLMAppError(
                code="generation_failed",
                message="I couldn't process your query at the moment. Please try again.",
                details={"error_type": "RuntimeError"},
            )

        response = client.get("/test-llm")

        assert response.status_code == 400
        data = response.json()
        assert data["reason"] == "I couldn't process your query at the moment. Please try again."
        assert "RuntimeError" not in response.text

    def test_rate_limit_error_sets_headers(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-rate-limit")
        async def test_endpoint():
            raise RateLimitAppError(
                code="rate_limit_day",
                message="Daily limit exceeded, please try again tomorrow",
                details={"window": "day", "retry_after": 3600},
            )

        response = client.get("/test-rate-limit")

        assert response.status_code == 400
        assert response.json()["reason"] == "Daily limit exceeded, please try again tomorrow"
        assert response.headers["Retry-After"] == "3600"
        assert response.headers["X-RateLimit-Window"] == "day"

    def test_empty_message_falls_back_to_error(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-empty")
        async def test_endpoint():
            raise AppError(code="unknown", message="")

        response = client.get("/test-empty")

        assert response.status_code == 400
        assert response.json()["reason"] == "Error"


class TestValidationErrorDescription:
    """First validation problem becomes the envelope reason."""

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            ({"type": "missing", "loc": ("body", "message"), "msg": "Field required"}, "message is required"),
            ({"type": "missing", "loc": ("body",), "msg": "Field required"}, "message is required"),
            ({"type": "json_invalid", "loc": ("body", 19), "msg": "JSON decode error"}, "Invalid JSON body"),
            ({"type": "extra_forbidden", "loc": ("body", "role"), "msg": "Extra inputs are not permitted"}, "property role should not exist"),
            ({"type": "value_error", "loc": ("body", "message"), "msg": "Value error, message must be string"}, "message must be string"),
            ({"type": "model_attributes_type", "loc": ("body",), "msg": "Input should be a valid dictionary"}, "Input should be a valid dictionary"),
        ],
    )
    def test_describe_validation_error(self, error: dict, expected: str):
        assert describe_validation_error(RequestValidationError([error])) == expected

    def test_only_first_error_is_reported(self):
        exc = RequestValidationError(
            [
                {"type": "extra_forbidden", "loc": ("body", "a"), "msg": "Extra inputs are not permitted"},
                {"type": "missing", "loc": ("body", "message"), "msg": "Field required"},
            ]
        )

        assert describe_validation_error(exc) == "property a should not exist"

    def test_empty_error_list(self):
        assert describe_validation_error(RequestValidationError([])) == "Validation error"


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_unexpected_exception_handler_registered(self, app_with_handlers: FastAPI):
        assert Exception in app_with_handlers.exception_handlers

    def test_general_exception_handler_logic(self):
        request = AsyncMock()
        request.url.path = "/chat"
        request.method = "POST"

        exc = RuntimeError("Unexpected error: event loop closed")
        response = asyncio.run(general_exception_handler(request, exc))

        data = _decode(response)
        assert response.status_code == 500
        assert data == {"success": False, "reply": "", "reason": UNEXPECTED_ERROR_MESSAGE}

    def test_general_exception_handler_never_leaks_stack_trace(self):
        request = AsyncMock()
        request.url.path = "/chat"
        request.method = "POST"

        response = asyncio.run(general_exception_handler(request, ValueError("Test error with details")))

        response_text = json.dumps(_decode(response))
        assert "Traceback" not in response_text
        assert "File \"" not in response_text
        assert "ValueError" not in response_text
        assert "details" not in response_text

    def test_log_outside_request_has_no_request_id_field(self, caplog: pytest.LogCaptureFixture):
        request = AsyncMock()
        request.url.path = "/chat"
        request.method = "POST"

        with caplog.at_level(logging.ERROR, logger="app.core.exception_handlers"):
            asyncio.run(general_exception_handler(request, RuntimeError("boom")))

        [record] = [r for r in caplog.records if r.getMessage() == "unhandled_exception"]
        assert not hasattr(record, "request_id")


class TestErrorHandlerIntegration:
    """Integration tests for exception handler setup."""

    def test_setup_exception_handlers_registers_handlers(self, app_with_handlers: FastAPI):
        assert AppError in app_with_handlers.exception_handlers
        assert RequestValidationError in app_with_handlers.exception_handlers
        assert Exception in app_with_handlers.exception_handlers

    def test_multiple_handler_setups_does_not_fail(self):
        app = FastAPI()

        setup_exception_handlers(app)
        setup_exception_handlers(app)

        assert AppError in app.exception_handlers
