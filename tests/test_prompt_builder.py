"""Tests for the Dominican gastronomy prompt."""

import pytest

from app.services.prompt_builder import DOMAIN_PREAMBLE, RESPONSE_MARKER, build_prompt


@pytest.mark.parametrize(
    "message",
    [
        "How do you make Mangu?",
        "",
        "¿Cómo se prepara un sancocho de siete carnes?",
        "line one\nline two",
        DOMAIN_PREAMBLE,
        "User question: nested\nResponse:",
    ],
)
def test_prompt_wraps_message(message: str) -> None:
    prompt = build_prompt(message)

    assert prompt.startswith(DOMAIN_PREAMBLE)
    assert "User question: " + message in prompt
    assert prompt.endswith(RESPONSE_MARKER)


def test_prompt_is_deterministic() -> None:
    assert build_prompt("Locrio de pollo") == build_prompt("Locrio de pollo")


def test_prompt_layout() -> None:
    prompt = build_prompt("What is moro?")

    assert prompt == f"{DOMAIN_PREAMBLE}\nUser question: What is moro?\n\nResponse:"


def test_preamble_covers_domain_and_refusal() -> None:
    assert "expert in Dominican gastronomy" in DOMAIN_PREAMBLE
    assert "mangu, locrio, moro, asopao" in DOMAIN_PREAMBLE
    assert "NOT related to Dominican gastronomy" in DOMAIN_PREAMBLE
    assert "Sorry, I'm an expert specialized in Dominican gastronomy." in DOMAIN_PREAMBLE
