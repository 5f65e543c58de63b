"""
Factory functions to provide clients and services as FastAPI dependencies.
"""

from functools import lru_cache

from file_insights.clients import GeminiClient
from file_insights.core.config import AppSettings, get_settings
from file_insights.services import BatchProcessor, MetricAnalyzer, SectionAnalytics


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


def get_app_settings() -> AppSettings:
    """FastAPI dependency returning application settings."""
    return _settings()


def get_gemini_client() -> GeminiClient:
    """Provide a fresh Gemini client instance."""
    settings = _settings()
    return GeminiClient(settings.gemini)


def get_section_analytics() -> SectionAnalytics:
    """Build a section orchestrator around its own client and analyzer."""
    analysis = _settings().analysis
    analyzer = MetricAnalyzer(
        get_gemini_client(),
        chunk_size=analysis.chunk_size,
        generation_timeout=analysis.generation_timeout_seconds,
        retry_backoff=analysis.retry_backoff_seconds,
    )
    return SectionAnalytics(
        analyzer,
        chunk_size=analysis.chunk_size,
        primary_attempts=analysis.primary_max_attempts,
        deep_attempts=analysis.deep_max_attempts,
        deep_timeout=analysis.deep_tier_timeout_seconds,
    )


def get_batch_processor() -> BatchProcessor:
    """Build the batch orchestrator; each file gets its own analytics stack."""
    analysis = _settings().analysis
    return BatchProcessor(
        analytics_factory=get_section_analytics,
        max_file_size=analysis.max_file_size_bytes,
        batch_timeout=analysis.batch_timeout_seconds,
    )


__all__ = [
    "get_app_settings",
    "get_batch_processor",
    "get_gemini_client",
    "get_section_analytics",
]
