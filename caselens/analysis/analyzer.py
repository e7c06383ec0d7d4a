"""Per-chunk analysis: one structured completion call per chunk."""
from __future__ import annotations

import logging

from caselens.analysis.prompts import build_chunk_messages
from caselens.analysis.schemas import Chunk, PartialAnalysis
from caselens.llm import LLMError, LLMMessage, LLMRequest, LLMService

logger = logging.getLogger(__name__)


def to_llm_messages(messages: list[dict[str, str]]) -> list[LLMMessage]:
    return [LLMMessage(role=m["role"], content=m["content"]) for m in messages]


class ChunkAnalyzer:
    """Sends one chunk to the completion service and validates the reply as PartialAnalysis."""

    def __init__(self, llm: LLMService, *, max_output_tokens: int | None = None) -> None:
        self._llm = llm
        self._max_output_tokens = max_output_tokens

    async def analyze(self, chunk: Chunk, total: int) -> PartialAnalysis:
        """Analyze one chunk. Any LLMError propagates: there is no retry or partial credit."""
        req = LLMRequest(
            messages=to_llm_messages(build_chunk_messages(chunk.text, chunk.index + 1, total)),
            max_output_tokens=self._max_output_tokens,
            metadata={"stage": "chunk_analysis", "chunk_index": str(chunk.index)},
        )
        try:
            return await self._llm.chat_structured(req, PartialAnalysis)
        except LLMError as e:
            logger.error("Error analyzing chunk %d (%s): %s", chunk.index, e.code, e)
            raise
