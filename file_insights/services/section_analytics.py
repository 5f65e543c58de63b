"""Run the primary and deep metric tiers for one parsed document."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable

from file_insights.schemas import (
    AnalysisSection,
    AnalyticsOutcome,
    MetricClass,
    MetricResult,
    ParsedDocument,
)
from file_insights.services.metric_analysis import (
    MetricAnalyzer,
    fallback_metric_result,
)
from file_insights.services.serialization import (
    DEFAULT_CHUNK_SIZE,
    prepare_model_input,
)

logger = logging.getLogger(__name__)


def fallback_outcome(section: AnalysisSection) -> AnalyticsOutcome:
    """Outcome built from metric names alone, without calling the model."""
    return AnalyticsOutcome(
        primary={
            metric: MetricResult(summary=f"Analysis pending for {metric}")
            for metric in section.primary_metrics
        },
        deep={
            metric: MetricResult(summary=f"Deep analysis pending for {metric}")
            for metric in section.deep_metrics
        },
    )


class SectionAnalytics:
    """Fan metrics out to the analyzer and gather them per tier.

    Primary metrics are always awaited in full. Deep metrics share one
    aggregate deadline; when it expires every deep metric is replaced by its
    fallback, even those that already finished.
    """

    def __init__(
        self,
        analyzer: MetricAnalyzer,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        primary_attempts: int = 2,
        deep_attempts: int = 1,
        deep_timeout: float = 15.0,
    ) -> None:
        self._analyzer = analyzer
        self._chunk_size = chunk_size
        self._primary_attempts = primary_attempts
        self._deep_attempts = deep_attempts
        self._deep_timeout = deep_timeout

    async def run(
        self, document: ParsedDocument, section: AnalysisSection
    ) -> AnalyticsOutcome:
        try:
            text = prepare_model_input(document, self._chunk_size)
            primary, deep = await asyncio.gather(
                self._run_primary(text, section.primary_metrics),
                self._run_deep(text, section.deep_metrics),
            )
            return AnalyticsOutcome(primary=primary, deep=deep)
        except Exception:
            logger.exception(
                "Analytics generation failed for %s; using fallback outcome",
                document.filename,
            )
            return fallback_outcome(section)

    async def _run_primary(self, text: str, metrics: Iterable[str]) -> Dict[str, MetricResult]:
        return await self._run_tier(
            text, tuple(metrics), MetricClass.PRIMARY, self._primary_attempts
        )

    async def _run_deep(self, text: str, metrics: Iterable[str]) -> Dict[str, MetricResult]:
        names = tuple(metrics)
        if not names:
            return {}
        try:
            return await asyncio.wait_for(
                self._run_tier(text, names, MetricClass.DEEP, self._deep_attempts),
                timeout=self._deep_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Deep analysis exceeded %gs; using fallback for %d metric(s)",
                self._deep_timeout,
                len(names),
            )
            return {metric: fallback_metric_result(metric) for metric in names}

    async def _run_tier(
        self,
        text: str,
        metrics: tuple[str, ...],
        metric_class: MetricClass,
        attempts: int,
    ) -> Dict[str, MetricResult]:
        results = await asyncio.gather(
            *(
                self._analyzer.analyze(text, metric, metric_class, attempts)
                for metric in metrics
            )
        )
        return dict(zip(metrics, results))


__all__ = ["SectionAnalytics", "fallback_outcome"]
