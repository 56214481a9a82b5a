from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "transcript-proxy"
    app_env: str = Field(
        default="production",
        validation_alias=AliasChoices("APP_ENV", "NODE_ENV", "app_env"),
        description="Runtime environment: development|production.",
    )
    host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("HOST", "host"),
        description="Interface the HTTP server binds to.",
    )
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PORT", "port"),
        description="Port the HTTP server listens on.",
    )

    # Upstream LLM (Abacus AI evaluatePrompt)
    # IMPORTANT: the API key is supplied per request by the caller and is never configured here.
    upstream_url: str = Field(
        default="https://api.abacus.ai/api/v0/evaluatePrompt",
        validation_alias=AliasChoices("UPSTREAM_URL", "upstream_url"),
        description="Full URL of the upstream prompt evaluation endpoint.",
    )
    upstream_llm_name: str = Field(
        default="route-llm",
        validation_alias=AliasChoices("UPSTREAM_LLM_NAME", "upstream_llm_name"),
        description="Model identifier sent as `llm_name`.",
    )
    upstream_timeout_seconds: float = Field(
        default=120.0,
        ge=1.0,
        validation_alias=AliasChoices("UPSTREAM_TIMEOUT_SECONDS", "upstream_timeout_seconds"),
        description="Timeout for the single upstream request (seconds). No retries are made.",
    )

    # Ingress guard
    rate_limit_max_requests: int = Field(
        default=20,
        ge=1,
        validation_alias=AliasChoices("RATE_LIMIT_MAX_REQUESTS", "rate_limit_max_requests"),
        description="Requests allowed per client IP within one window on /api/ routes.",
    )
    rate_limit_window_seconds: int = Field(
        default=300,
        ge=1,
        validation_alias=AliasChoices("RATE_LIMIT_WINDOW_SECONDS", "rate_limit_window_seconds"),
        description="Length of the rolling rate-limit window (seconds).",
    )
    max_body_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        validation_alias=AliasChoices("MAX_BODY_BYTES", "max_body_bytes"),
        description="Maximum accepted request body size (bytes).",
    )
    trusted_origin_prefixes: list[str] = Field(
        default_factory=lambda: ["chrome-extension://"],
        validation_alias=AliasChoices("TRUSTED_ORIGIN_PREFIXES", "trusted_origin_prefixes"),
        description="Origin prefixes accepted outside development mode.",
    )

    @property
    def is_development(self) -> bool:
        return str(self.app_env).strip().lower() == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
