"""Service layer exports."""

from .batch_processor import FILE_SECTION, BatchProcessor
from .file_parser import SUPPORTED_EXTENSIONS, parse_document
from .metric_analysis import MetricAnalyzer, fallback_metric_result
from .section_analytics import SectionAnalytics, fallback_outcome
from .serialization import chunk_text, prepare_model_input, serialize_document

__all__ = [
    "BatchProcessor",
    "FILE_SECTION",
    "MetricAnalyzer",
    "SUPPORTED_EXTENSIONS",
    "SectionAnalytics",
    "chunk_text",
    "fallback_metric_result",
    "fallback_outcome",
    "parse_document",
    "prepare_model_input",
    "serialize_document",
]
