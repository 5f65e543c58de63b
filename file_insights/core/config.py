"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, the analysis services and
the operator scripts share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from file_insights.core.exceptions import UnconfiguredCredentialError


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class GeminiSettings(BaseSettings):
    """Configuration for Gemini model access."""

    model_config = SettingsConfigDict(extra="ignore", protected_namespaces=())

    api_key: Optional[str] = Field(None, validation_alias="GEMINI_API_KEY")
    model_name: str = Field("gemini-1.5-flash", validation_alias="GEMINI_MODEL_NAME")
    temperature: float = Field(0.7, validation_alias="GEMINI_TEMPERATURE")
    top_k: int = Field(40, validation_alias="GEMINI_TOP_K")
    top_p: float = Field(0.8, validation_alias="GEMINI_TOP_P")
    max_output_tokens: int = Field(
        1024,
        validation_alias="GEMINI_MAX_OUTPUT_TOKENS",
        description="Upper bound on generated tokens per metric request.",
    )
    request_timeout_seconds: float = Field(
        10.0,
        gt=0,
        validation_alias="GEMINI_REQUEST_TIMEOUT_SECONDS",
        description="Deadline the SDK enforces on each generate_content call.",
    )


class AnalysisSettings(BaseSettings):
    """Limits and budgets applied by the ingestion-and-analysis pipeline."""

    model_config = SettingsConfigDict(env_prefix="ANALYSIS_", extra="ignore")

    chunk_size: int = Field(
        25_000,
        gt=0,
        description="Maximum characters of serialized document sent to the model.",
    )
    generation_timeout_seconds: float = Field(10.0, gt=0)
    retry_backoff_seconds: float = Field(1.0, ge=0)
    primary_max_attempts: int = Field(2, ge=1)
    deep_max_attempts: int = Field(1, ge=1)
    deep_tier_timeout_seconds: float = Field(
        15.0,
        gt=0,
        description="Aggregate budget for all deep metrics of one file.",
    )
    batch_timeout_seconds: float = Field(
        58.0,
        gt=0,
        description="Outer deadline for a whole upload batch.",
    )
    max_file_size_bytes: int = Field(50 * 1024 * 1024, gt=0)


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)


def require_gemini_api_key(settings: AppSettings) -> str:
    """Return the Gemini API key or fail fast when it is not configured."""
    api_key = (settings.gemini.api_key or "").strip()
    if not api_key:
        raise UnconfiguredCredentialError("GEMINI_API_KEY is not configured")
    return api_key


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AnalysisSettings",
    "AppSettings",
    "GeminiSettings",
    "get_settings",
    "require_gemini_api_key",
]
