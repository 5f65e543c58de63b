"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_app_settings,
    get_batch_processor,
    get_gemini_client,
    get_section_analytics,
)

__all__ = [
    "get_app_settings",
    "get_batch_processor",
    "get_gemini_client",
    "get_section_analytics",
]
