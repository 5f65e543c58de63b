"""Public schema exports."""

from .analytics import (
    AnalysisSection,
    AnalyticsOutcome,
    BatchError,
    BatchResponse,
    BatchResult,
    ErrorResponse,
    MetricClass,
    MetricResult,
)
from .documents import (
    ExtractionStatus,
    ParsedDocument,
    RawUpload,
    Row,
    TabularFlat,
    TabularWorkbook,
    TextDocument,
)

__all__ = [
    "AnalysisSection",
    "AnalyticsOutcome",
    "BatchError",
    "BatchResponse",
    "BatchResult",
    "ErrorResponse",
    "ExtractionStatus",
    "MetricClass",
    "MetricResult",
    "ParsedDocument",
    "RawUpload",
    "Row",
    "TabularFlat",
    "TabularWorkbook",
    "TextDocument",
]
