"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
Environment defaults are set before anything imports app settings, so no
real provider key or .env file is needed.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"

# Set default env vars that all tests might need
os.environ.setdefault("LLM_PROVIDER", "gemini")
os.environ.setdefault("LLM_MODEL", "gemini-2.0-flash")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault("APP_RATE_LIMIT_PER_MINUTE", "5")
os.environ.setdefault("APP_RATE_LIMIT_PER_DAY", "200")

from unittest.mock import AsyncMock

import pytest

from app.adapters.llm.base import AbstractLLMClient

_SAMPLE_REPLY = (
    "¡Claro que sí! Mangu is the quintessential Dominican breakfast: boiled green "
    "plantains mashed with butter and some of the cooking water, topped with "
    "pickled red onions."
)


@pytest.fixture
def llm_client() -> AsyncMock:
    """Generation client double returning the sample reply."""
    client = AsyncMock(spec=AbstractLLMClient)
    client.generate_text.return_value = _SAMPLE_REPLY
    return client


@pytest.fixture
def sample_reply() -> str:
    return _SAMPLE_REPLY
