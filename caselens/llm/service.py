"""
LLMService: single public entrypoint for completion calls.
Other modules import only LLMService (and types). Settings and client are injected per instance.
"""
from __future__ import annotations

import json
import logging
import re
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from caselens.llm.client_litellm import LiteLLMClient
from caselens.llm.errors import LLMAuthError, LLMError, LLMResponseInvalid
from caselens.llm.ports import LLMClientPort
from caselens.llm.settings import LLMSettings
from caselens.llm.telemetry import log_llm_call, redact_preview
from caselens.llm.types import LLMProvider, LLMRequest, LLMResponse

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def strip_json_block(raw: str) -> str:
    """Remove markdown code fence if present."""
    raw = raw.strip()
    if raw.startswith("```"):
        raw = re.sub(r"^```(?:json)?\s*", "", raw)
    if raw.endswith("```"):
        raw = raw.rsplit("```", 1)[0]
    return raw.strip()


def json_schema_format(schema: type[BaseModel]) -> dict:
    """OpenAI-style response_format for a pydantic model."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": schema.__name__,
            "schema": schema.model_json_schema(),
        },
    }


def parse_structured(raw: str, schema: type[SchemaT]) -> SchemaT:
    """Parse a JSON reply and validate it against schema. Raises LLMResponseInvalid."""
    try:
        data = json.loads(strip_json_block(raw))
    except json.JSONDecodeError as e:
        raise LLMResponseInvalid(f"Response is not valid JSON: {e.msg}", details=schema.__name__) from e
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise LLMResponseInvalid(
            f"Response does not match {schema.__name__}: {e.error_count()} error(s)",
            details=str(e),
        ) from e


class LLMService:
    """Executes completion calls with the injected settings and client."""

    def __init__(
        self,
        settings: LLMSettings,
        *,
        client: LLMClientPort | None = None,
    ) -> None:
        self._settings = settings
        self._client = client or LiteLLMClient(drop_params=settings.drop_unsupported_params)

    async def chat(self, req: LLMRequest) -> LLMResponse:
        """Execute one chat completion. No retries; LLMError propagates to the caller."""
        if not self._settings.openai_api_key:
            raise LLMAuthError("OPENAI_API_KEY is not set", provider=LLMProvider.OPENAI)
        if req.temperature is None:
            req = req.model_copy(update={"temperature": self._settings.temperature})
        stage = req.metadata.get("stage")
        chunk_index = req.metadata.get("chunk_index")
        model = self._settings.model
        try:
            resp = await self._client.acompletion(
                LLMProvider.OPENAI,
                model,
                req,
                timeout_s=req.timeout_s or self._settings.default_timeout_s,
                api_base=self._settings.api_base,
                api_key=self._settings.openai_api_key,
            )
        except LLMError as e:
            log_llm_call(
                provider=LLMProvider.OPENAI.value,
                model=model,
                latency_ms=0,
                status="FAILED",
                stage=stage,
                chunk_index=chunk_index,
                error_code=e.code,
            )
            raise
        log_llm_call(
            provider=resp.provider.value,
            model=resp.model,
            latency_ms=resp.latency_ms,
            status="SUCCEEDED",
            stage=stage,
            chunk_index=chunk_index,
        )
        return resp

    async def chat_structured(self, req: LLMRequest, schema: type[SchemaT]) -> SchemaT:
        """Request a JSON reply matching schema and return the validated model."""
        if req.response_format is None:
            req = req.model_copy(update={"response_format": json_schema_format(schema)})
        resp = await self.chat(req)
        try:
            return parse_structured(resp.text, schema)
        except LLMResponseInvalid:
            if self._settings.log_previews:
                logger.warning("Invalid %s response: %s", schema.__name__, redact_preview(resp.text))
            raise
