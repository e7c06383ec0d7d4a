"""LLM module configuration. Env prefix: LLM_. API key: OPENAI_API_KEY or LLM_OPENAI_API_KEY."""
from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """Settings for the completion client. All overridable via LLM_* env vars."""

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("LLM_OPENAI_API_KEY", "OPENAI_API_KEY"),
        description="API key for the completion service",
    )
    model: str = Field(default="gpt-4o", description="LiteLLM model string")
    api_base: str | None = Field(default=None, description="Optional override of the API base URL")
    default_timeout_s: float = Field(default=120.0, gt=0, description="Per-call timeout passed to the client")
    temperature: float = Field(default=0.3, ge=0.0, le=2.0, description="Sampling temperature for all calls")
    drop_unsupported_params: bool = Field(
        default=True,
        description="Drop params the selected model does not support (e.g. response_format)",
    )
    log_previews: bool = Field(default=False, description="Log redacted previews of invalid responses")
