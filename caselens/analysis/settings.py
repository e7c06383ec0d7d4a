"""Case processing configuration. Env prefix: CASE_."""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProcessingSettings(BaseSettings):
    """Chunking budget and input limits for the case pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="CASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_tokens_per_chunk: int = Field(default=2000, ge=1, description="Chunk budget in tokens")
    overlap_tokens: int = Field(default=200, ge=0, description="Overlap between consecutive chunks")
    chars_per_token: int = Field(default=4, ge=1, description="Approximate characters per token")
    max_text_chars: int = Field(default=1_000_000, ge=1, description="Hard ceiling on case text length")
    max_output_tokens: int | None = Field(default=None, description="Optional cap on completion length")
