"""
Pydantic models describing per-file analytics and the batch response.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator

from .documents import CamelModel, ParsedDocument


class MetricClass(str, Enum):
    """Tier a metric belongs to; decides its retry budget."""

    PRIMARY = "primary"
    DEEP = "deep"


@dataclass(frozen=True, slots=True)
class AnalysisSection:
    """Named set of primary and deep metrics computed for one file."""

    title: str
    primary_metrics: tuple[str, ...]
    deep_metrics: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.primary_metrics:
            raise ValueError("An analysis section needs at least one primary metric.")


class MetricResult(BaseModel):
    """Structured insight for a single metric."""

    summary: str
    key_points: List[str] = Field(default_factory=list)
    metrics: Dict[str, str] = Field(default_factory=dict)
    recommendations: List[str] = Field(default_factory=list)

    @field_validator("summary", mode="before")
    @classmethod
    def _stringify_summary(cls, value: Any) -> Any:
        # None stays invalid so the attempt is retried.
        if isinstance(value, (int, float, bool)):
            return str(value)
        return value

    @field_validator("key_points", "recommendations", mode="before")
    @classmethod
    def _stringify_items(cls, value: Any) -> Any:
        """Models occasionally answer with numbers or a single string."""
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return [item if isinstance(item, str) else str(item) for item in value]
        return value

    @field_validator("metrics", mode="before")
    @classmethod
    def _stringify_values(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                str(key): item if isinstance(item, str) else str(item)
                for key, item in value.items()
            }
        return value


class AnalyticsOutcome(BaseModel):
    primary: Dict[str, MetricResult] = Field(default_factory=dict)
    deep: Dict[str, MetricResult] = Field(default_factory=dict)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BatchResult(CamelModel):
    """A file that was parsed and analyzed."""

    filename: str
    processed_data: ParsedDocument
    analytics: AnalyticsOutcome
    timestamp: datetime = Field(default_factory=_utcnow)


class BatchError(CamelModel):
    """A file that could not be processed."""

    filename: str
    error: str


class BatchResponse(CamelModel):
    """Combined outcome of one upload batch."""

    success: bool = True
    results: List[BatchResult] = Field(default_factory=list)
    errors: List[BatchError] = Field(default_factory=list)
    total_files: int = 0
    successful_files: int = 0
    failed_files: int = 0
    timestamp: datetime = Field(default_factory=_utcnow)


class ErrorResponse(CamelModel):
    success: bool = False
    error: str
    timestamp: datetime = Field(default_factory=_utcnow)


__all__ = [
    "AnalysisSection",
    "AnalyticsOutcome",
    "BatchError",
    "BatchResponse",
    "BatchResult",
    "ErrorResponse",
    "MetricClass",
    "MetricResult",
]
