"""Port interface for the LLM module. The service depends on this, not on LiteLLM."""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from caselens.llm.types import LLMProvider, LLMRequest, LLMResponse


@runtime_checkable
class LLMClientPort(Protocol):
    """Low-level completion. Implemented by LiteLLMClient and by test fakes."""

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
        """Execute one completion for the given provider/model. Raises LLMError on failure."""
        ...
