"""Pydantic schemas for the chat endpoint."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

MESSAGE_REQUIRED = "message is required"
MESSAGE_MUST_BE_STRING = "message must be string"


class ChatRequest(BaseModel):
    """Inbound chat message.

    The message is trimmed before validation; blank messages are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    message: str = Field(
        ...,
        description="Question about Dominican gastronomy (e.g., 'How do you make Mangu?').",
    )

    @field_validator("message", mode="before")
    @classmethod
    def _trim_message(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError(MESSAGE_MUST_BE_STRING)
        value = value.strip()
        if not value:
            raise ValueError(MESSAGE_REQUIRED)
        return value


class ChatResponse(BaseModel):
    """Uniform response envelope for /chat, used for successes and failures."""

    success: bool = Field(..., description="True when reply holds generated text.")
    reply: str = Field("", description="Generated answer; empty on failure.")
    reason: str = Field("", description="Failure reason; empty on success.")

    @classmethod
    def ok(cls, reply: str) -> "ChatResponse":
        return cls(success=True, reply=reply, reason="")

    @classmethod
    def failure(cls, reason: str) -> "ChatResponse":
        return cls(success=False, reply="", reason=reason or "Error")
