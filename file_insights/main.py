"""
FastAPI application entrypoint for the file insights service.
"""

from __future__ import annotations

from fastapi import FastAPI

from file_insights.api.routes import router as api_router
from file_insights.core.config import get_settings, require_gemini_api_key
from file_insights.core.logging import configure_logging


def create_app() -> FastAPI:
    """Factory for the FastAPI application.

    Raises ``UnconfiguredCredentialError`` when no Gemini API key is set, so a
    misconfigured process never starts serving.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    require_gemini_api_key(settings)

    app = FastAPI(
        title="File Insights",
        version="0.1.0",
        description="Parse uploaded documents and return Gemini-generated insights.",
    )
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()

__all__ = ["app", "create_app"]
