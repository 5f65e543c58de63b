"""Per-metric analysis driver backed by the Gemini client."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from pydantic import ValidationError

from file_insights.clients.gemini import parse_analysis_response
from file_insights.core.exceptions import (
    GenerationTimeoutError,
    MalformedModelResponseError,
)
from file_insights.schemas import MetricClass, MetricResult
from file_insights.services.serialization import DEFAULT_CHUNK_SIZE
from file_insights.utils.retry import RetryConfig, call_with_retry, run_with_timeout

logger = logging.getLogger(__name__)


class AnalysisModel(Protocol):
    async def generate_analysis(self, prompt: str) -> str:
        ...


def truncate_for_prompt(text: str, limit: int = DEFAULT_CHUNK_SIZE) -> str:
    """Cap ``text`` at ``limit`` characters, marking the cut with an ellipsis."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def build_metric_prompt(data: str, metric: str, metric_class: MetricClass) -> str:
    """Instruction asking the model for a single metric as a bare JSON object."""
    response_shape = {
        "analysis": {
            metric: {
                "summary": "detailed findings",
                "key_points": ["point 1", "point 2"],
                "metrics": {"metric1": "value1"},
                "recommendations": ["rec 1", "rec 2"],
            }
        },
        "overall_summary": "overview",
        "confidence_score": 0.95,
    }
    return (
        f"Analyze this {metric_class.value} data and provide insights. "
        "Return ONLY a JSON object without any markdown formatting or code blocks.\n\n"
        f"Data: {data}\n\n"
        f"Required Metrics: {metric}\n\n"
        "Response must be a valid JSON object with this exact structure "
        "(no additional formatting):\n"
        f"{json.dumps(response_shape, indent=2, ensure_ascii=False)}"
    )


def fallback_metric_result(metric: str) -> MetricResult:
    """Placeholder returned when a metric could not be analyzed."""
    return MetricResult(
        summary=f"Analysis pending for {metric}",
        key_points=[f"Unable to analyze {metric}"],
        metrics={},
        recommendations=[f"Retry analysis for {metric}"],
    )


class MetricAnalyzer:
    """Run one metric through the model with a timeout and retry budget."""

    def __init__(
        self,
        model: AnalysisModel,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        generation_timeout: float = 10.0,
        retry_backoff: float = 1.0,
    ) -> None:
        self._model = model
        self._chunk_size = chunk_size
        self._generation_timeout = generation_timeout
        self._retry_backoff = retry_backoff

    async def analyze(
        self,
        text: str,
        metric: str,
        metric_class: MetricClass,
        max_attempts: int,
    ) -> MetricResult:
        """Return the model's result for ``metric`` or a fallback placeholder."""
        retry_config = RetryConfig(
            attempts=max_attempts, backoff_seconds=self._retry_backoff
        )
        try:
            return await call_with_retry(
                self._attempt,
                text,
                metric,
                metric_class,
                retry_config=retry_config,
            )
        except Exception as exc:
            logger.warning(
                "Giving up on %s metric '%s' after %d attempt(s): %s",
                metric_class.value,
                metric,
                max_attempts,
                exc,
            )
            return fallback_metric_result(metric)

    async def _attempt(
        self, text: str, metric: str, metric_class: MetricClass
    ) -> MetricResult:
        prompt = build_metric_prompt(
            truncate_for_prompt(text, self._chunk_size), metric, metric_class
        )
        raw = await run_with_timeout(
            self._model.generate_analysis(prompt),
            self._generation_timeout,
            lambda: GenerationTimeoutError(
                f"Generation timeout after {self._generation_timeout:g}s"
            ),
        )
        payload = parse_analysis_response(raw)
        return _metric_entry(payload, metric)


def _metric_entry(payload: dict[str, Any], metric: str) -> MetricResult:
    analysis = payload.get("analysis")
    entry = analysis.get(metric) if isinstance(analysis, dict) else None
    if not entry:
        raise MalformedModelResponseError(f"Response has no analysis for '{metric}'")
    try:
        return MetricResult.model_validate(entry)
    except ValidationError as exc:
        raise MalformedModelResponseError(
            f"Invalid analysis for '{metric}': {exc.error_count()} error(s)"
        ) from exc


__all__ = [
    "AnalysisModel",
    "MetricAnalyzer",
    "build_metric_prompt",
    "fallback_metric_result",
    "truncate_for_prompt",
]
