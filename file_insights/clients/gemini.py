"""Client wrapper for interacting with Google Gemini models."""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any, Callable, Iterable

import google.generativeai as genai
from google.api_core.exceptions import GoogleAPICallError, NotFound

from file_insights.core.config import GeminiSettings


_TEXT_FALLBACKS: tuple[str, ...] = (
    "gemini-1.5-flash",
    "gemini-1.5-pro",
    "gemini-pro",
)

_CODE_FENCE = re.compile(r"\n?```(?:json)?[ \t]*\n?", re.IGNORECASE)

logger = logging.getLogger(__name__)


class GeminiModelError(RuntimeError):
    """Raised when Gemini cannot fulfill a request."""


class GeminiClient:
    """Submit analysis prompts to Gemini with a fixed generation configuration."""

    def __init__(self, settings: GeminiSettings) -> None:
        self._settings = settings
        genai.configure(api_key=settings.api_key)
        self._generation_config = genai.types.GenerationConfig(
            temperature=settings.temperature,
            top_k=settings.top_k,
            top_p=settings.top_p,
            max_output_tokens=settings.max_output_tokens,
        )

    async def generate_analysis(self, prompt: str) -> str:
        """Return the raw text Gemini produces for ``prompt``."""

        def _invoke() -> str:
            response = self._invoke_with_models(
                models=self._text_model_candidates(),
                env_var="GEMINI_MODEL_NAME",
                error_prefix="Gemini analysis generate_content failed",
                call=lambda model: model.generate_content(
                    [{"role": "user", "parts": [prompt]}],
                    generation_config=self._generation_config,
                    request_options={"timeout": self._settings.request_timeout_seconds},
                ),
            )
            try:
                return response.text or ""
            except ValueError as exc:
                # Raised by the SDK when the candidate was blocked or empty.
                raise GeminiModelError(f"Gemini returned no text: {exc}") from exc

        return await asyncio.to_thread(_invoke)

    def _invoke_with_models(
        self,
        *,
        models: Iterable[str],
        env_var: str,
        error_prefix: str,
        call: Callable[[genai.GenerativeModel], Any],
    ) -> Any:
        """Try the configured model followed by fallbacks when available."""

        model_sequence = list(models)
        last_not_found: NotFound | None = None
        for index, model_name in enumerate(model_sequence):
            generative_model = genai.GenerativeModel(model_name)
            try:
                return call(generative_model)
            except NotFound as exc:  # pragma: no cover - network call
                last_not_found = exc
                logger.warning(
                    "Gemini model '%s' not found (attempt %d/%d); trying fallback.",
                    model_name,
                    index + 1,
                    len(model_sequence),
                )
                continue
            except GoogleAPICallError as exc:  # pragma: no cover - network call
                raise GeminiModelError(f"{error_prefix}: {exc.message}") from exc

        if last_not_found is not None:
            primary = model_sequence[0] if model_sequence else "unknown"
            raise GeminiModelError(
                "Gemini model '"
                f"{primary}"
                "' is not available. Update "
                f"{env_var} to a supported value."
            ) from last_not_found

        raise GeminiModelError(f"{error_prefix}: Unknown error invoking Gemini.")

    def _text_model_candidates(self) -> list[str]:
        return self._collect_candidates(self._settings.model_name, _TEXT_FALLBACKS)

    @staticmethod
    def _collect_candidates(
        configured: str | None,
        fallbacks: tuple[str, ...],
    ) -> list[str]:
        """Return distinct model names prioritizing the configured value."""
        seen: set[str] = set()
        candidates: list[str] = []
        for name in (configured, *fallbacks):
            if not name:
                continue
            cleaned = name.strip()
            if not cleaned or cleaned in seen:
                continue
            seen.add(cleaned)
            candidates.append(cleaned)
        return candidates


def degraded_analysis_payload() -> dict[str, Any]:
    """Canned reply used when the model output cannot be decoded."""
    return {
        "analysis": {
            "default": {
                "summary": "Analysis pending",
                "key_points": [],
                "metrics": {},
                "recommendations": [],
            }
        },
        "overall_summary": "Analysis pending",
        "confidence_score": 0,
    }


def parse_analysis_response(payload: str) -> dict[str, Any]:
    """Decode a model reply into a JSON object.

    Markdown code fences (with or without a ``json`` tag) are removed wherever
    they appear, so an unterminated fence is tolerated, and surrounding
    whitespace is trimmed. What remains must be exactly one JSON object.
    Prose around the object, output cut off mid-object, or a JSON value that
    is not an object all produce ``degraded_analysis_payload()``; this
    function never raises.
    """
    cleaned = _CODE_FENCE.sub("", payload or "").strip()
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.warning(
            "Unparseable model response (%s); excerpt: %.200r", exc.msg, payload
        )
        return degraded_analysis_payload()
    if not isinstance(parsed, dict):
        logger.warning(
            "Model response is a JSON %s, expected an object", type(parsed).__name__
        )
        return degraded_analysis_payload()
    return parsed


__all__ = [
    "GeminiClient",
    "GeminiModelError",
    "degraded_analysis_payload",
    "parse_analysis_response",
]
