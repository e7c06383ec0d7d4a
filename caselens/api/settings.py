"""HTTP server configuration. Env prefix: SERVER_."""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SERVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="127.0.0.1", description="Bind address")
    port: int = Field(default=3000, ge=1, le=65535, description="Bind port")
    debug: bool = Field(default=False, description="Flask debug mode")
    log_level: str = Field(default="INFO", description="Root log level")
    max_content_length: int | None = Field(
        default=None,
        description="Max request body in bytes (default: sized from CASE_MAX_TEXT_CHARS)",
    )
