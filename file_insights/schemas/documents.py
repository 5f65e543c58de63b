"""
Pydantic models for uploaded files and their parsed representations.

``ParsedDocument`` is a tagged union discriminated on ``type``; exactly one
variant is produced per successfully parsed upload.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

Row = Dict[str, Optional[str]]


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys in API responses."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


@dataclass(slots=True)
class RawUpload:
    """A single uploaded file as received from the HTTP layer."""

    filename: str
    content: bytes
    size: int

    @classmethod
    def from_bytes(cls, filename: str, content: bytes) -> "RawUpload":
        return cls(filename=filename, content=content, size=len(content))


class ExtractionStatus(str, Enum):
    SUCCESS = "success"
    EMPTY = "empty"


class TabularWorkbook(CamelModel):
    """Spreadsheet workbook with every sheet kept in workbook order."""

    type: Literal["excel"] = "excel"
    filename: str
    sheet_names: List[str] = Field(default_factory=list)
    sheets: Dict[str, List[Row]] = Field(
        default_factory=dict,
        description="Row records per sheet; cells are strings or null.",
    )


class TabularFlat(CamelModel):
    """Delimited text with the header row used as column names."""

    type: Literal["csv"] = "csv"
    filename: str
    rows: List[Row] = Field(default_factory=list)


class TextDocument(CamelModel):
    """Page document reduced to its visible text."""

    type: Literal["pdf"] = "pdf"
    filename: str
    extracted_text: str = ""
    page_count: int = Field(0, ge=0)
    extraction_status: ExtractionStatus = ExtractionStatus.EMPTY

    @computed_field  # type: ignore[misc]
    @property
    def summary(self) -> str:
        if self.extraction_status == ExtractionStatus.SUCCESS:
            return "Text extracted successfully"
        return "No text content found"


ParsedDocument = Annotated[
    Union[TabularWorkbook, TabularFlat, TextDocument],
    Field(discriminator="type"),
]


__all__ = [
    "CamelModel",
    "ExtractionStatus",
    "ParsedDocument",
    "RawUpload",
    "Row",
    "TabularFlat",
    "TabularWorkbook",
    "TextDocument",
]
