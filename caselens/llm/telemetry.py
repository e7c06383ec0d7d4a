"""Observability: redaction and structured call logging. No ad hoc logs in service/client."""
from __future__ import annotations

import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

# Redaction: patterns to mask (never log raw)
_SECRET_PATTERNS = [
    re.compile(r"\b(?:sk-[a-zA-Z0-9_-]{20,})\b", re.IGNORECASE),  # OpenAI-style
    re.compile(r"\bBearer\s+[a-zA-Z0-9_.-]+\b", re.IGNORECASE),
]
_PII_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b")  # email
_PREVIEW_MAX_CHARS = 200


def redact_preview(text: str) -> str:
    """Redact secrets and PII, then truncate."""
    if not text:
        return ""
    out = text
    for pat in _SECRET_PATTERNS:
        out = pat.sub("[REDACTED]", out)
    out = _PII_PATTERN.sub("[EMAIL]", out)
    if len(out) > _PREVIEW_MAX_CHARS:
        out = out[:_PREVIEW_MAX_CHARS] + "..."
    return out


def log_llm_call(
    *,
    provider: str,
    model: str,
    latency_ms: int,
    status: str,
    stage: str | None = None,
    chunk_index: str | None = None,
    error_code: str | None = None,
) -> None:
    """Emit structured log for one completion call. Never log prompt text or API keys."""
    extra: dict[str, Any] = {
        "provider": provider,
        "model": model,
        "latency_ms": latency_ms,
        "status": status,
    }
    if stage is not None:
        extra["stage"] = stage
    if chunk_index is not None:
        extra["chunk_index"] = chunk_index
    if error_code is not None:
        extra["error_code"] = error_code
        logger.warning(
            "llm_call stage=%s model=%s status=%s error_code=%s", stage, model, status, error_code, extra=extra
        )
        return
    logger.info("llm_call stage=%s model=%s latency_ms=%s", stage, model, latency_ms, extra=extra)
