"""Merge per-chunk analyses and synthesize the final summary with one more completion call."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from caselens.analysis.analyzer import to_llm_messages
from caselens.analysis.chunking import line_number_at
from caselens.analysis.errors import MergeError
from caselens.analysis.prompts import build_final_summary_messages
from caselens.analysis.schemas import CaseAnalysis, CaseReference, Chunk, PartialAnalysis
from caselens.llm import LLMRequest, LLMResponseInvalid, LLMService

logger = logging.getLogger(__name__)


@dataclass
class MergedPartials:
    """Deduplicated content of all partial analyses, before the final summary call."""

    summaries: list[str]
    key_points: list[str] = field(default_factory=list)
    references: list[CaseReference] = field(default_factory=list)
    next_steps: list[str] = field(default_factory=list)
    confidence: float = 0.0


def dedupe(items: Iterable[str]) -> list[str]:
    """Drop blanks and exact duplicates (after trimming), keeping first-seen order."""
    return list(dict.fromkeys(s.strip() for s in items if s and s.strip()))


def mean_confidence(values: Sequence[float]) -> float:
    """Average clamped to [0, 1]. Raises MergeError on an empty sequence."""
    if not values:
        raise MergeError()
    avg = sum(values) / len(values)
    return min(1.0, max(0.0, avg))


def _rebase_references(text: str, chunk: Chunk, refs: list[CaseReference]) -> list[CaseReference]:
    first_line = line_number_at(text, chunk.start)
    return [ref.model_copy(update={"line_number": first_line + ref.line_number - 1}) for ref in refs]


def merge_partials(text: str, results: Sequence[tuple[Chunk, PartialAnalysis]]) -> MergedPartials:
    """Combine partial analyses in chunk order. References are rebased to lines of the full text."""
    if not results:
        raise MergeError()
    references: dict[tuple[int, str], CaseReference] = {}
    for chunk, partial in results:
        for ref in _rebase_references(text, chunk, partial.references):
            references.setdefault((ref.line_number, ref.content.strip()), ref)
    return MergedPartials(
        summaries=[p.summary.strip() for _, p in results if p.summary.strip()],
        key_points=dedupe(kp for _, p in results for kp in p.key_points),
        references=sorted(references.values(), key=lambda r: r.line_number),
        next_steps=dedupe(s for _, p in results for s in p.next_steps),
        confidence=mean_confidence([p.confidence for _, p in results]),
    )


class CaseMerger:
    """Final synthesis step of the pipeline."""

    def __init__(self, llm: LLMService, *, max_output_tokens: int | None = None) -> None:
        self._llm = llm
        self._max_output_tokens = max_output_tokens

    async def combine(self, text: str, results: Sequence[tuple[Chunk, PartialAnalysis]]) -> CaseAnalysis:
        merged = merge_partials(text, results)
        req = LLMRequest(
            messages=to_llm_messages(build_final_summary_messages(merged.summaries, merged.key_points)),
            max_output_tokens=self._max_output_tokens,
            metadata={"stage": "final_summary"},
        )
        resp = await self._llm.chat(req)
        summary = resp.text.strip()
        if not summary:
            raise LLMResponseInvalid("Final summary response was empty", provider=resp.provider)
        logger.info(
            "Merged %d partial analyses: %d key points, %d next steps, confidence=%.2f",
            len(results),
            len(merged.key_points),
            len(merged.next_steps),
            merged.confidence,
        )
        return CaseAnalysis(
            summary=summary,
            key_points=merged.key_points,
            references=merged.references,
            next_steps=merged.next_steps,
            confidence=merged.confidence,
            chunk_count=len(results),
        )
