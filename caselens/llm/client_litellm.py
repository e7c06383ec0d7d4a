"""
LiteLLM client wrapper: normalize request/response, timeouts, exception mapping.
Exception mapping (LiteLLM -> LLMError):
  - APITimeoutError / Timeout -> LLMTimeout
  - RateLimitError -> LLMRateLimited
  - AuthenticationError / PermissionDeniedError -> LLMAuthError
  - BadRequestError / InvalidRequestError -> LLMBadRequest
  - APIError / ServiceUnavailableError / APIConnectionError -> LLMUnavailable
  - unknown -> LLMError(UNKNOWN)
One attempt per call: failures are raised to the caller as-is.
"""
from __future__ import annotations

import time
from typing import Any

from litellm import acompletion

from caselens.llm.errors import (
    LLMAuthError,
    LLMBadRequest,
    LLMError,
    LLMRateLimited,
    LLMTimeout,
    LLMUnavailable,
)
from caselens.llm.types import LLMProvider, LLMRequest, LLMResponse, LLMUsage


def _map_exception(e: Exception, provider: LLMProvider) -> LLMError:
    """Map LiteLLM/provider exceptions to LLMError. Uses class name so it works across import paths."""
    if isinstance(e, LLMError):
        return e
    exc_name = type(e).__name__
    if exc_name in ("APITimeoutError", "Timeout"):
        return LLMTimeout(str(e) or "LLM request timed out", details=exc_name, provider=provider)
    if exc_name == "RateLimitError":
        return LLMRateLimited(str(e) or "LLM rate limited", details=exc_name, provider=provider)
    if exc_name in ("AuthenticationError", "PermissionDeniedError"):
        return LLMAuthError(str(e) or "LLM auth error", details=exc_name, provider=provider)
    if exc_name in ("BadRequestError", "InvalidRequestError"):
        return LLMBadRequest(str(e) or "LLM bad request", details=exc_name, provider=provider)
    if exc_name in ("ServiceUnavailableError", "APIConnectionError", "APIError"):
        return LLMUnavailable(str(e), details=exc_name, provider=provider)
    if getattr(e, "status_code", None) in (500, 502, 503, 504):
        return LLMUnavailable(str(e), details=exc_name, provider=provider)
    return LLMError(
        str(e),
        code="UNKNOWN",
        retryable=False,
        provider=provider,
        details=exc_name,
    )


def _request_to_kwargs(req: LLMRequest, model: str, timeout_s: float) -> dict[str, Any]:
    """Build LiteLLM completion kwargs from LLMRequest."""
    kwargs: dict[str, Any] = {
        "model": model,
        "messages": [m.model_dump() for m in req.messages],
        "timeout": timeout_s,
    }
    if req.temperature is not None:
        kwargs["temperature"] = req.temperature
    if req.max_output_tokens is not None:
        kwargs["max_tokens"] = req.max_output_tokens
    if req.response_format is not None:
        kwargs["response_format"] = req.response_format
    return kwargs


def _response_from_completion(
    raw: Any,
    provider: LLMProvider,
    model: str,
    latency_ms: int,
) -> LLMResponse:
    """Build LLMResponse from LiteLLM response object."""
    text = ""
    usage = None
    finish_reason = None
    if getattr(raw, "choices", None):
        c0 = raw.choices[0]
        msg = getattr(c0, "message", None)
        if msg is not None:
            text = getattr(msg, "content", None) or ""
        else:
            text = getattr(c0, "text", None) or ""
        finish_reason = getattr(c0, "finish_reason", None)
    if getattr(raw, "usage", None):
        u = raw.usage
        usage = LLMUsage(
            input_tokens=getattr(u, "prompt_tokens", 0) or 0,
            output_tokens=getattr(u, "completion_tokens", 0) or 0,
            total_tokens=getattr(u, "total_tokens", 0) or 0,
        )
    raw_dict: dict[str, Any] = {}
    if hasattr(raw, "model_dump"):
        raw_dict = raw.model_dump()
    return LLMResponse(
        text=text,
        raw=raw_dict,
        usage=usage,
        provider=provider,
        model=model,
        latency_ms=latency_ms,
        finish_reason=finish_reason,
    )


class LiteLLMClient:
    """Async LiteLLM wrapper: timeout, request/response normalization, error mapping."""

    def __init__(self, *, drop_params: bool = True) -> None:
        self._drop_params = drop_params

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
        """Execute one completion. Raises LLMError on failure."""
        timeout = timeout_s if timeout_s is not None else req.timeout_s or 120.0
        kwargs = _request_to_kwargs(req, model, timeout)
        if self._drop_params:
            kwargs["drop_params"] = True
        if api_base is not None:
            kwargs["api_base"] = api_base
        if api_key is not None:
            kwargs["api_key"] = api_key

        t0 = time.perf_counter()
        try:
            raw = await acompletion(**kwargs)
        except Exception as e:  # noqa: BLE001
            raise _map_exception(e, provider) from e
        latency_ms = int((time.perf_counter() - t0) * 1000)
        return _response_from_completion(raw, provider, model, latency_ms)
