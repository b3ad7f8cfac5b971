"""
Data Models for Document Conversion.

This module defines the Structured Document Model (SDM), the format-agnostic
intermediate representation shared by every serializer, together with the
conversion options and result.

Architecture:
    bytes → [ContentExtractor] → StructuredDocument
                                      ↓
                        [serialize(target)] → bytes

Design Principles:
    - Pydantic v2 for validation and serialization (consistent with the
      assembly and protection packages)
    - Page order is source order; page numbers are 1-based and never reordered
    - A StructuredDocument lives for one request and is never persisted

Usage:
    document = ContentExtractor().extract(data, "pdf")
    for page in document.pages:
        print(page.page_number, page.orientation, len(page.paragraphs))
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from common.contract import OperationResult
from common.pdf_utils import PDF_MIME_TYPE


# =============================================================================
# ENUMS
# =============================================================================


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class PageMapping(str, Enum):
    """
    How extracted text was assigned to pages.

    MARKERS: split on explicit page-break markers from the text pass
    PROPORTIONAL: text length divided evenly across pages (approximation,
        paragraphs near page boundaries may land on a neighbouring page)
    PLACEHOLDER: text extraction failed; pages carry placeholder paragraphs
    """

    MARKERS = "markers"
    PROPORTIONAL = "proportional"
    PLACEHOLDER = "placeholder"


class TargetKind(str, Enum):
    """Output formats, one serializer each."""

    DOCX = "docx"
    XLSX = "xlsx"
    PPTX = "pptx"
    RTF = "rtf"
    TXT = "txt"


class SourceFormat(str, Enum):
    """Office and text inputs that can be laid out as PDF."""

    DOCX = "docx"
    XLSX = "xlsx"
    CSV = "csv"
    PPTX = "pptx"
    TXT = "txt"


# =============================================================================
# STRUCTURED DOCUMENT MODEL
# =============================================================================


class DocumentMetadata(BaseModel):
    title: str = ""
    author: str = ""
    subject: str = ""
    creator: str = ""


class ParagraphStyle(BaseModel):
    font_size: float = Field(12, gt=0, description="Font size in points")
    font_family: str = "Arial"
    bold: bool = False
    italic: bool = False
    color: str = Field("#000000", description="Hex RGB colour")

    @field_validator("color")
    @classmethod
    def validate_color(cls, value: str) -> str:
        digits = value.lstrip("#")
        if len(digits) != 6 or any(c not in "0123456789abcdefABCDEF" for c in digits):
            raise ValueError(f"color must be a #RRGGBB hex value, got {value!r}")
        return f"#{digits.upper()}"


class Paragraph(BaseModel):
    text: str
    style: ParagraphStyle = Field(default_factory=ParagraphStyle)


class Cell(BaseModel):
    text: str = ""


class Row(BaseModel):
    cells: list[Cell] = Field(default_factory=list)

    @property
    def texts(self) -> list[str]:
        return [cell.text for cell in self.cells]


class Table(BaseModel):
    rows: list[Row] = Field(..., min_length=1, description="Rows in source order")

    @property
    def column_count(self) -> int:
        """Width of the widest row."""
        return max((len(row.cells) for row in self.rows), default=0)

    @classmethod
    def from_texts(cls, rows: list[list[str]]) -> "Table":
        return cls(rows=[Row(cells=[Cell(text=t) for t in row]) for row in rows])


class Page(BaseModel):
    """
    One source page.

    Attributes:
        page_number: 1-based source page number
        width / height: Page size in points
        paragraphs: Prose blocks in reading order
        tables: Detected tables in reading order
        column_count: Best-effort text column estimate
    """

    page_number: int = Field(..., ge=1)
    width: float = Field(0.0, ge=0)
    height: float = Field(0.0, ge=0)
    paragraphs: list[Paragraph] = Field(default_factory=list)
    tables: list[Table] = Field(default_factory=list)
    column_count: int = Field(1, ge=1)

    @computed_field
    @property
    def orientation(self) -> Orientation:
        return Orientation.LANDSCAPE if self.width > self.height else Orientation.PORTRAIT

    @property
    def text(self) -> str:
        return "\n\n".join(p.text for p in self.paragraphs)


class StructuredDocument(BaseModel):
    """
    Format-agnostic content of one source document.

    ``degraded`` is set when the text pass failed and pages only carry
    placeholders; ``page_mapping`` tells callers how reliable the text-to-page
    assignment is.
    """

    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
    pages: list[Page] = Field(default_factory=list)
    degraded: bool = False
    page_mapping: PageMapping = PageMapping.MARKERS

    @model_validator(mode="after")
    def validate_page_order(self) -> "StructuredDocument":
        numbers = [page.page_number for page in self.pages]
        for previous, current in zip(numbers, numbers[1:]):
            if current <= previous:
                raise ValueError(
                    f"page numbers must be strictly increasing, got {previous} then {current}"
                )
        return self

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def table_count(self) -> int:
        return sum(len(page.tables) for page in self.pages)


# =============================================================================
# OPTIONS & RESULT
# =============================================================================


class ConversionOptions(BaseModel):
    """
    Options for one conversion request. Every default is declared here.
    """

    page_range: str = Field(
        "",
        description="Compact 1-based page selection, e.g. '1-3,5'. Empty = all pages",
    )
    preserve_formatting: bool = Field(
        True,
        description="Carry paragraph styles into the output; otherwise normalise to defaults",
    )
    detect_tables: bool = Field(True, description="Run the table classifier")
    detect_columns: bool = Field(True, description="Estimate text columns per page")
    include_title: bool = Field(True, description="Emit the metadata title when present")
    one_sheet_per_page: bool = Field(
        False,
        description="Spreadsheet output: one sheet per page instead of a single sheet",
    )
    column_gap_ratio: float = Field(
        0.25,
        gt=0,
        lt=1,
        description="Minimum block gap (fraction of page width) that separates two columns",
    )


class ConversionResult(OperationResult):
    format: TargetKind
    mime_type: str
    page_count: int = Field(0, ge=0)
    degraded: bool = False
    page_mapping: Optional[PageMapping] = None


class PdfConversionResult(OperationResult):
    """Result of laying out an Office or text document as PDF."""

    source_format: SourceFormat
    mime_type: str = PDF_MIME_TYPE
    page_count: int = Field(0, ge=0)
