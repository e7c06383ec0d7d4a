"""
LLM module: single typed async interface for all completion calls.
Public API: LLMService, LLMRequest, LLMResponse, LLMMessage, LLMSettings.
Other modules must not call LiteLLM directly.
"""
from caselens.llm.errors import (
    LLMAuthError,
    LLMBadRequest,
    LLMError,
    LLMRateLimited,
    LLMResponseInvalid,
    LLMTimeout,
    LLMUnavailable,
)
from caselens.llm.service import LLMService
from caselens.llm.settings import LLMSettings
from caselens.llm.types import (
    LLMMessage,
    LLMProvider,
    LLMRequest,
    LLMResponse,
    LLMUsage,
)

__all__ = [
    "LLMService",
    "LLMSettings",
    "LLMRequest",
    "LLMResponse",
    "LLMMessage",
    "LLMProvider",
    "LLMUsage",
    "LLMError",
    "LLMTimeout",
    "LLMRateLimited",
    "LLMBadRequest",
    "LLMAuthError",
    "LLMUnavailable",
    "LLMResponseInvalid",
]
