from __future__ import annotations

import logging
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from app.core.app_factory import create_app
from app.core.config import AppSettings, LLMSettings, LogSettings, Settings
from app.core.exception_handlers import UNEXPECTED_ERROR_MESSAGE
from app.core.logging import RequestIdFilter


def _client(llm_client: AsyncMock, **log_overrides) -> TestClient:
    app_settings = Settings(
        llm=LLMSettings(api_key="test-key"),
        app=AppSettings(),
        log=LogSettings(**log_overrides),
    )
    return TestClient(create_app(app_settings, llm_client=llm_client))


def test_preserves_incoming_request_id_header(llm_client: AsyncMock):
    client = _client(llm_client)
    incoming_id = "test-request-id-123"

    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing(llm_client: AsyncMock):
    client = _client(llm_client)

    resp = client.get("/health")

    assert resp.status_code == 200
    generated = resp.headers.get("X-Request-ID")
    assert generated
    assert len(generated) == 36
    assert resp.headers.get("X-Request-Duration-ms") is not None


def test_request_id_on_error_envelopes(llm_client: AsyncMock):
    client = _client(llm_client)

    resp = client.post("/chat", json={"message": ""}, headers={"X-Request-ID": "req-empty"})

    assert resp.status_code == 400
    assert resp.headers.get("X-Request-ID") == "req-empty"


def test_custom_request_id_header(llm_client: AsyncMock):
    client = _client(llm_client, request_id_header="X-Correlation-ID")

    resp = client.get("/health", headers={"X-Correlation-ID": "corr-42"})

    assert resp.headers.get("X-Correlation-ID") == "corr-42"



def test_unexpected_fault_keeps_request_id(llm_client: AsyncMock, caplog: pytest.LogCaptureFixture):
    app = create_app(
        Settings(llm=LLMSettings(api_key="test-key"), app=AppSettings(), log=LogSettings()),
        llm_client=llm_client,
    )
    app.state.chat_service = None
    client = TestClient(app, raise_server_exceptions=False)
    # create_app replaces the root handlers
    logging.getLogger().addHandler(caplog.handler)
    caplog.handler.addFilter(RequestIdFilter())

    with caplog.at_level(logging.ERROR, logger="app.core.exception_handlers"):
        resp = client.post("/chat", json={"message": "Que es el mangu?"}, headers={"X-Request-ID": "rid-500"})

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "reply": "", "reason": UNEXPECTED_ERROR_MESSAGE}
    assert resp.headers.get("X-Request-ID") == "rid-500"
    assert resp.headers.get("X-Request-Duration-ms") is not None
    [record] = [r for r in caplog.records if r.getMessage() == "unhandled_exception"]
    assert record.request_id == "rid-500"
