"""Turn parsed documents into size-bounded text for the model."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from file_insights.schemas import (
    ParsedDocument,
    TabularFlat,
    TabularWorkbook,
    TextDocument,
)

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 25_000


def strip_nulls(value: Any) -> Any:
    """Recursively drop ``None``-valued keys from mappings.

    Lists are cleaned element-wise and scalars pass through unchanged.
    """
    if isinstance(value, dict):
        return {
            key: strip_nulls(item) for key, item in value.items() if item is not None
        }
    if isinstance(value, list):
        return [strip_nulls(item) for item in value]
    return value


def serialize_document(document: ParsedDocument) -> str:
    """Render ``document`` as compact JSON with null fields removed."""
    return json.dumps(
        strip_nulls(_document_payload(document)),
        ensure_ascii=False,
        separators=(",", ":"),
    )


def chunk_text(text: str, size: int) -> List[str]:
    """Split ``text`` into consecutive slices of at most ``size`` characters."""
    if size <= 0:
        raise ValueError("Chunk size must be a positive integer.")
    return [text[start : start + size] for start in range(0, len(text), size)]


def prepare_model_input(
    document: ParsedDocument, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> str:
    """Return the first chunk of the serialized document.

    Content beyond the first chunk is never sent to the model.
    """
    try:
        chunks = chunk_text(serialize_document(document), chunk_size)
    except (TypeError, ValueError) as exc:
        logger.error("Failed to serialize %s: %s", document.filename, exc)
        return json.dumps(
            {
                "error": "Data processing failed",
                "type": document.type,
                "filename": document.filename,
            }
        )
    return chunks[0] if chunks else ""


def _document_payload(document: ParsedDocument) -> Dict[str, Any]:
    if isinstance(document, TabularWorkbook):
        return {
            "type": document.type,
            "filename": document.filename,
            "sheets": document.sheets,
            "sheetNames": document.sheet_names,
        }
    if isinstance(document, TabularFlat):
        return {
            "type": document.type,
            "filename": document.filename,
            "data": document.rows,
        }
    if isinstance(document, TextDocument):
        return {
            "type": document.type,
            "filename": document.filename,
            "content": document.extracted_text,
            "pageCount": document.page_count,
            "summary": document.summary,
        }
    raise TypeError(f"Unsupported document type: {type(document).__name__}")


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "chunk_text",
    "prepare_model_input",
    "serialize_document",
    "strip_nulls",
]
