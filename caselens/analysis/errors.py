"""Case analysis pipeline exceptions."""


class CaseAnalysisError(Exception):
    """Base exception for pipeline failures that are not upstream LLM errors."""

    def __init__(self, message: str, *, code: str = "CASE_ANALYSIS_ERROR") -> None:
        super().__init__(message)
        self.code = code


class InvalidInputError(CaseAnalysisError):
    """Case text missing, not a string, empty, or over the size ceiling."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="INVALID_INPUT")


class ChunkingError(CaseAnalysisError):
    """Chunking options would make the cursor stop advancing."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CHUNKING_CONFIG")


class MergeError(CaseAnalysisError):
    """Nothing to merge."""

    def __init__(self, message: str = "Cannot merge an empty list of partial analyses") -> None:
        super().__init__(message, code="MERGE_EMPTY")
