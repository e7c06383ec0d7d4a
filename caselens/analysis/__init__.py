"""Case analysis pipeline: chunk the case text, analyze chunks concurrently, merge."""
from caselens.analysis.errors import CaseAnalysisError, ChunkingError, InvalidInputError, MergeError
from caselens.analysis.processor import CaseProcessor, validate_case_text
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

__all__ = [
    "CaseProcessor",
    "ProcessingSettings",
    "ProcessingOptions",
    "Chunk",
    "PartialAnalysis",
    "CaseAnalysis",
    "NextStepsAnalysis",
    "AnswerContext",
    "CaseAnswer",
    "CaseAnalysisError",
    "InvalidInputError",
    "ChunkingError",
    "MergeError",
    "validate_case_text",
]
