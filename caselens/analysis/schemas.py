"""DTOs for the case pipeline. Serialized with camelCase aliases on the wire and in model replies."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from caselens.analysis.errors import ChunkingError
from caselens.analysis.settings import ProcessingSettings


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProcessingOptions(_CamelModel):
    """Chunk budget for one request, in characters."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    max_chunk_size: int = Field(default=8000, gt=0)
    overlap_size: int = Field(default=800, ge=0)

    @model_validator(mode="after")
    def overlap_smaller_than_chunk(self) -> "ProcessingOptions":
        if self.overlap_size >= self.max_chunk_size:
            raise ChunkingError(
                f"overlap_size ({self.overlap_size}) must be smaller than max_chunk_size ({self.max_chunk_size})"
            )
        return self

    @classmethod
    def from_settings(cls, settings: ProcessingSettings) -> "ProcessingOptions":
        return cls(
            max_chunk_size=settings.max_tokens_per_chunk * settings.chars_per_token,
            overlap_size=settings.overlap_tokens * settings.chars_per_token,
        )


class Chunk(BaseModel):
    """Contiguous slice of the case text starting at offset start."""

    model_config = ConfigDict(frozen=True)

    index: int
    start: int
    text: str

    @property
    def end(self) -> int:
        return self.start + len(self.text)


class CaseReference(_CamelModel):
    """A line the model cites as support for a key point."""

    line_number: int = Field(..., ge=1, description="1-based line number")
    content: str = Field(..., description="Quoted line content")
    context: str = Field(default="", description="Why the line matters")


class PartialAnalysis(_CamelModel):
    """Structured analysis of one chunk, as returned by the model."""

    summary: str = Field(..., description="Factual summary of this portion of the case")
    key_points: list[str] = Field(default_factory=list)
    references: list[CaseReference] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0, description="Completeness of the analysis")


class CaseAnalysis(_CamelModel):
    """Merged analysis returned to the caller."""

    summary: str
    key_points: list[str] = Field(default_factory=list)
    references: list[CaseReference] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)
    chunk_count: int = Field(default=1, ge=1)


class NextStepsAnalysis(_CamelModel):
    next_steps: list[str] = Field(default_factory=list, description="Ordered, actionable next steps")
    rationale: str = Field(default="", description="Short justification grounded in the case")
    confidence: float = Field(..., ge=0.0, le=1.0)


class AnswerContext(_CamelModel):
    """Prior analysis the caller wants questions answered about."""

    summary: str
    next_steps: list[str] = Field(default_factory=list)
    question: str | None = None


class CaseAnswer(_CamelModel):
    answer: str
    follow_up_questions: list[str] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)
