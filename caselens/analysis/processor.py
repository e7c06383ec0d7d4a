"""CaseProcessor: validate -> chunk -> concurrent chunk analysis -> merge -> final summary."""
from __future__ import annotations

import asyncio
import logging
from typing import Any

from caselens.analysis.analyzer import ChunkAnalyzer, to_llm_messages
from caselens.analysis.chunking import estimate_tokens, split_into_chunks
from caselens.analysis.errors import InvalidInputError
from caselens.analysis.merger import CaseMerger, dedupe, merge_partials
from caselens.analysis.prompts import build_answer_messages, build_next_steps_messages
from caselens.analysis.schemas import (
    AnswerContext,
    CaseAnalysis,
    CaseAnswer,
    Chunk,
    NextStepsAnalysis,
    PartialAnalysis,
    ProcessingOptions,
)
from caselens.analysis.settings import ProcessingSettings
from caselens.llm import LLMRequest, LLMService

logger = logging.getLogger(__name__)


def validate_case_text(value: Any, max_chars: int) -> str:
    """Return value if it is a non-empty string within max_chars; raise InvalidInputError otherwise."""
    if value is None:
        raise InvalidInputError("Case text is required")
    if not isinstance(value, str):
        raise InvalidInputError(f"Case text must be a string, got {type(value).__name__}")
    if not value.strip():
        raise InvalidInputError("Case text must not be empty")
    if len(value) > max_chars:
        raise InvalidInputError(f"Case text is too long: {len(value)} characters (max {max_chars})")
    return value


class CaseProcessor:
    """
    One pipeline run per instance. The LLM service (with its credentials) and options are injected,
    so no client state is shared between requests.
    """

    def __init__(
        self,
        llm: LLMService,
        *,
        settings: ProcessingSettings | None = None,
        options: ProcessingOptions | None = None,
    ) -> None:
        self._llm = llm
        self._settings = settings or ProcessingSettings()
        self._options = options or ProcessingOptions.from_settings(self._settings)
        self._analyzer = ChunkAnalyzer(llm, max_output_tokens=self._settings.max_output_tokens)
        self._merger = CaseMerger(llm, max_output_tokens=self._settings.max_output_tokens)

    @property
    def options(self) -> ProcessingOptions:
        return self._options

    async def _analyze_all(self, text: str) -> list[tuple[Chunk, PartialAnalysis]]:
        chunks = split_into_chunks(text, self._options)
        logger.info(
            "Analyzing case: %d chars (~%d tokens) in %d chunk(s)",
            len(text),
            estimate_tokens(text),
            len(chunks),
        )
        # Fail-fast: the first chunk error propagates out of gather.
        partials = await asyncio.gather(*(self._analyzer.analyze(c, len(chunks)) for c in chunks))
        return list(zip(chunks, partials))

    async def process_case(self, case_text: Any) -> CaseAnalysis:
        """Full analysis of a case history. Invalid input fails before any external call."""
        text = validate_case_text(case_text, self._settings.max_text_chars)
        results = await self._analyze_all(text)
        return await self._merger.combine(text, results)

    async def process_next_steps(self, case_text: Any) -> NextStepsAnalysis:
        """Analyze the case, then ask once for an ordered next-steps plan."""
        text = validate_case_text(case_text, self._settings.max_text_chars)
        merged = merge_partials(text, await self._analyze_all(text))
        req = LLMRequest(
            messages=to_llm_messages(build_next_steps_messages(merged.summaries, merged.next_steps)),
            max_output_tokens=self._settings.max_output_tokens,
            metadata={"stage": "next_steps"},
        )
        result = await self._llm.chat_structured(req, NextStepsAnalysis)
        return result.model_copy(update={"next_steps": dedupe(result.next_steps)})

    async def answer_questions(self, context: AnswerContext) -> CaseAnswer:
        """Answer a question about an existing analysis with one structured call."""
        if not context.summary.strip():
            raise InvalidInputError("Context summary must not be empty")
        req = LLMRequest(
            messages=to_llm_messages(
                build_answer_messages(context.summary, context.next_steps, context.question)
            ),
            max_output_tokens=self._settings.max_output_tokens,
            metadata={"stage": "answer"},
        )
        return await self._llm.chat_structured(req, CaseAnswer)
