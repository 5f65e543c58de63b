"""Decode uploaded files into ``ParsedDocument`` variants.

Dispatch is by lower-cased filename extension. Unknown extensions are
rejected with ``UnsupportedFormatError``; decoder failures surface as
``ParseFailureError`` and never yield a partially populated document.
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import date, datetime, time
from typing import Any, Callable, Dict, List, Optional

import pandas as pd
from pypdf import PageObject, PdfReader

from file_insights.core.exceptions import ParseFailureError, UnsupportedFormatError
from file_insights.schemas import (
    ExtractionStatus,
    ParsedDocument,
    Row,
    TabularFlat,
    TabularWorkbook,
    TextDocument,
)

logger = logging.getLogger(__name__)

_TEXT_SHOWING_OPERATORS = (b"Tj", b"TJ")


def file_extension(filename: str) -> str:
    """Return the lower-cased extension of ``filename`` without the dot."""
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].strip().lower()


def parse_document(filename: str, content: bytes) -> ParsedDocument:
    """Parse ``content`` according to the extension of ``filename``."""
    extension = file_extension(filename)
    parser = _PARSERS.get(extension)
    if parser is None:
        raise UnsupportedFormatError(extension)
    return parser(filename, content)


def parse_workbook(filename: str, content: bytes) -> TabularWorkbook:
    """Read every sheet of an Excel workbook, preserving sheet order."""
    engine = "xlrd" if file_extension(filename) == "xls" else "openpyxl"
    try:
        frames = pd.read_excel(
            io.BytesIO(content),
            sheet_name=None,
            header=0,
            dtype=object,
            engine=engine,
            keep_default_na=False,
        )
    except Exception as exc:
        logger.error("Failed to read workbook %s: %s", filename, exc)
        raise ParseFailureError("Excel", exc) from exc

    sheets: Dict[str, List[Row]] = {}
    for sheet_name, frame in frames.items():
        sheets[str(sheet_name)] = _frame_records(frame)

    return TabularWorkbook(
        filename=filename,
        sheet_names=list(sheets),
        sheets=sheets,
    )


def parse_delimited(filename: str, content: bytes) -> TabularFlat:
    """Read comma separated text using the first row as the header."""
    try:
        text = content.decode("utf-8-sig")
        rows = _read_delimited_rows(text)
    except (UnicodeDecodeError, csv.Error, ValueError) as exc:
        logger.error("Failed to read CSV %s: %s", filename, exc)
        raise ParseFailureError("CSV", exc) from exc
    return TabularFlat(filename=filename, rows=rows)


def parse_pdf(filename: str, content: bytes) -> TextDocument:
    """Collect the strings drawn by each page's text-showing operators."""
    try:
        reader = PdfReader(io.BytesIO(content))
        if reader.is_encrypted:
            raise ValueError("document is encrypted")
        pages = list(reader.pages)
    except Exception as exc:
        logger.error("Failed to load PDF %s: %s", filename, exc)
        raise ParseFailureError("PDF", exc) from exc

    page_texts: List[str] = []
    for page_number, page in enumerate(pages, start=1):
        text = _extract_page_text(page, page_number=page_number, filename=filename)
        if text.strip():
            page_texts.append(text)

    return TextDocument(
        filename=filename,
        extracted_text="\n".join(page_texts).strip(),
        page_count=len(pages),
        extraction_status=(
            ExtractionStatus.SUCCESS if page_texts else ExtractionStatus.EMPTY
        ),
    )


def _frame_records(frame: pd.DataFrame) -> List[Row]:
    columns = [
        _normalize_cell(column) or f"Unnamed: {index}"
        for index, column in enumerate(frame.columns)
    ]
    records: List[Row] = []
    for values in frame.itertuples(index=False, name=None):
        record = {
            column: _normalize_cell(value) for column, value in zip(columns, values)
        }
        if all(cell is None for cell in record.values()):
            continue
        records.append(record)
    return records


def _normalize_cell(value: Any) -> Optional[str]:
    """Reduce a spreadsheet cell to its display string, or ``None`` when blank."""
    if value is None:
        return None
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return None
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, time):
        return value.isoformat()
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    text = str(value)
    return text or None


def _read_delimited_rows(text: str) -> List[Row]:
    reader = csv.reader(io.StringIO(text, newline=""))
    header: Optional[List[str]] = None
    rows: List[Row] = []
    for fields in reader:
        cells = [field.strip() for field in fields]
        if not fields or (len(fields) == 1 and not cells[0]):
            continue
        if header is None:
            header = cells
            continue
        if len(cells) != len(header):
            raise ValueError(
                f"Invalid record length on line {reader.line_num}: "
                f"expected {len(header)} fields, found {len(cells)}"
            )
        rows.append(dict(zip(header, cells)))
    return rows


def _extract_page_text(page: PageObject, *, page_number: int, filename: str) -> str:
    """Return the page's shown strings joined by spaces; failures yield ''."""
    try:
        contents = page.get_contents()
        if contents is None:
            return ""
        fragments: List[str] = []
        for operands, operator in contents.operations:
            if operator not in _TEXT_SHOWING_OPERATORS or not operands:
                continue
            fragment = _shown_text(operands[0])
            if fragment:
                fragments.append(fragment)
        return " ".join(fragments)
    except Exception as exc:
        logger.warning(
            "Failed to extract text from page %d of %s: %s", page_number, filename, exc
        )
        return ""


def _shown_text(operand: Any) -> str:
    # TJ takes an array mixing strings with kerning offsets.
    if isinstance(operand, list):
        return "".join(item for item in operand if isinstance(item, str))
    if isinstance(operand, str):
        return operand
    return ""


_PARSERS: Dict[str, Callable[[str, bytes], ParsedDocument]] = {
    "xlsx": parse_workbook,
    "xls": parse_workbook,
    "csv": parse_delimited,
    "pdf": parse_pdf,
}

SUPPORTED_EXTENSIONS = tuple(_PARSERS)


__all__ = [
    "SUPPORTED_EXTENSIONS",
    "file_extension",
    "parse_delimited",
    "parse_document",
    "parse_pdf",
    "parse_workbook",
]
