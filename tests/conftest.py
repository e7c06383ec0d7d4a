"""Pytest fixtures: fake completion client (no network) and pipeline settings."""
from __future__ import annotations

import json
from typing import Any

import pytest

from caselens.analysis import ProcessingSettings
from caselens.llm import LLMResponse, LLMService, LLMSettings
from caselens.llm.types import LLMProvider, LLMRequest


def partial_json(
    summary: str = "Client called about a billing issue.",
    key_points: list[str] | None = None,
    next_steps: list[str] | None = None,
    confidence: float = 0.8,
    references: list[dict[str, Any]] | None = None,
) -> str:
    return json.dumps(
        {
            "summary": summary,
            "keyPoints": key_points if key_points is not None else ["Client called on Monday"],
            "references": references or [],
            "nextSteps": next_steps if next_steps is not None else ["Confirm resolution with client"],
            "confidence": confidence,
        }
    )


class FakeLLMClient:
    """Implements LLMClientPort. Replies are chosen by request metadata stage; every call is recorded."""

    def __init__(self, replies: dict[str, Any] | None = None) -> None:
        self.replies: dict[str, Any] = {
            "chunk_analysis": partial_json(),
            "final_summary": "Client reported an issue on Monday; the agent resolved it on Tuesday.",
            "next_steps": json.dumps(
                {"nextSteps": ["Call client", "Call client", "Close ticket"], "rationale": "Issue resolved.", "confidence": 0.7}
            ),
            "answer": json.dumps({"answer": "The issue was resolved.", "followUpQuestions": [], "confidence": 0.9}),
        }
        self.replies.update(replies or {})
        self.calls: list[LLMRequest] = []

    def calls_for(self, stage: str) -> list[LLMRequest]:
        return [r for r in self.calls if r.metadata.get("stage") == stage]

    async def acompletion(
        self,
        provider: LLMProvider,
        model: str,
        req: LLMRequest,
        *,
        timeout_s: float | None = None,
        api_base: str | None = None,
        api_key: str | None = None,
    ) -> LLMResponse:
        self.calls.append(req)
        reply = self.replies[req.metadata["stage"]]
        if isinstance(reply, Exception):
            raise reply
        text = reply(req) if callable(reply) else reply
        return LLMResponse(text=text, provider=provider, model=model, latency_ms=1)


@pytest.fixture
def fake_client() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def llm_settings() -> LLMSettings:
    return LLMSettings(openai_api_key="sk-test", model="gpt-4o")


@pytest.fixture
def processing_settings() -> ProcessingSettings:
    return ProcessingSettings(max_tokens_per_chunk=2000, overlap_tokens=200, chars_per_token=4, max_text_chars=1_000_000)


@pytest.fixture
def llm_service(llm_settings: LLMSettings, fake_client: FakeLLMClient) -> LLMService:
    return LLMService(llm_settings, client=fake_client)
