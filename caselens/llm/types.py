"""Typed request/response models for the LLM module (Pydantic v2)."""
from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


class LLMProvider(str, Enum):
    """Supported completion providers."""

    OPENAI = "openai"


class LLMMessage(BaseModel):
    """Single message in OpenAI-style format."""

    role: Literal["system", "user", "assistant"]
    content: str


class LLMRequest(BaseModel):
    """Request for a single chat completion."""

    messages: list[LLMMessage]
    temperature: float | None = None
    max_output_tokens: int | None = None
    response_format: dict[str, Any] | None = None
    metadata: dict[str, str] = Field(default_factory=dict)
    timeout_s: float | None = None


class LLMUsage(BaseModel):
    """Token usage."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


class LLMResponse(BaseModel):
    """Normalized response from the provider."""

    text: str
    raw: dict[str, Any] | None = None
    usage: LLMUsage | None = None
    provider: LLMProvider
    model: str
    latency_ms: int
    finish_reason: str | None = None
