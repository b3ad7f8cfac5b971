"""
Data Models for Page Assembly.

This module defines all data structures used by the assembly operations
(merge, split, compress, images-to-PDF, analysis). All models use Pydantic
v2 for validation; option models declare every default exactly once.

Architecture:
    bytes ──► merge_documents  ──► MergeResult
          ──► split_document   ──► SplitResult (fragments)
          ──► compress_document ─► CompressResult
    images ─► images_to_pdf    ──► ImagesToPdfResult
    bytes ──► analyze_document ──► PDFAnalysis

Page indices are 0-based everywhere except in caller-facing strings
(ranges such as ``"1-3"``, naming tokens and labels), which are 1-based.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from common.contract import OperationResult


# =============================================================================
# ENUMS
# =============================================================================


class BookmarkStyle(str, Enum):
    FILENAME = "filename"
    INDEX = "index"


class PageNumberPosition(str, Enum):
    TOP_LEFT = "top-left"
    TOP_CENTER = "top-center"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_CENTER = "bottom-center"
    BOTTOM_RIGHT = "bottom-right"


class SplitType(str, Enum):
    PAGES = "pages"
    RANGES = "ranges"
    BOOKMARKS = "bookmarks"
    SIZE = "size"


class CompressionLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    MAXIMUM = "maximum"


class PageSize(str, Enum):
    A4 = "A4"
    A3 = "A3"
    A5 = "A5"
    LETTER = "Letter"
    LEGAL = "Legal"
    CUSTOM = "Custom"


class PageOrientation(str, Enum):
    AUTO = "auto"
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


# =============================================================================
# CORE MODELS
# =============================================================================


class PageRange(BaseModel):
    """
    Inclusive 0-based page range.

    Attributes:
        start: First page index
        end: Last page index (>= start)
    """

    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)

    @model_validator(mode="after")
    def validate_order(self) -> "PageRange":
        if self.end < self.start:
            raise ValueError(f"end ({self.end}) must be >= start ({self.start})")
        return self

    @property
    def page_count(self) -> int:
        return self.end - self.start + 1

    @property
    def label(self) -> str:
        """1-based ``"start-end"`` label."""
        return f"{self.start + 1}-{self.end + 1}"

    def indices(self) -> list[int]:
        return list(range(self.start, self.end + 1))

    def within(self, total_pages: int) -> bool:
        return self.end < total_pages


class Bookmark(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    title: str
    page_index: int = Field(..., ge=0, description="0-based index of the first page")


class SourceDocument(BaseModel):
    """One merge input: a filename (used for bookmarks) and the PDF bytes."""

    filename: str = Field(..., min_length=1)
    data: bytes = Field(..., repr=False)


# =============================================================================
# OPTIONS
# =============================================================================


class MergeOptions(BaseModel):
    add_bookmarks: bool = True
    bookmark_style: BookmarkStyle = BookmarkStyle.FILENAME
    add_page_numbers: bool = False
    page_number_position: PageNumberPosition = PageNumberPosition.BOTTOM_CENTER
    add_title_page: bool = False
    title_page_content: str = Field("", description="Title page heading; empty = 'Merged Document'")
    output_name: str = "merged.pdf"


class SplitOptions(BaseModel):
    split_type: SplitType = SplitType.PAGES
    page_ranges: list[str] = Field(
        default_factory=list,
        description="Ranges mode: 1-based 'a-b' or 'a' entries",
    )
    pages_per_file: int = Field(1, ge=1)
    max_file_size: Optional[int] = Field(None, gt=0, description="Size mode: bytes per fragment")
    custom_naming: bool = True
    naming_pattern: str = "{filename}_part_{index}"
    preserve_metadata: bool = True
    preserve_bookmarks: bool = True

    @field_validator("page_ranges", mode="before")
    @classmethod
    def split_range_string(cls, value: Union[str, list[str], None]) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value


class CompressOptions(BaseModel):
    compression_level: CompressionLevel = CompressionLevel.MEDIUM
    remove_metadata: bool = False
    linearize: bool = True
    output_name: str = "compressed.pdf"


class ImagesToPdfOptions(BaseModel):
    page_size: PageSize = PageSize.A4
    custom_width: Optional[float] = Field(None, gt=0)
    custom_height: Optional[float] = Field(None, gt=0)
    orientation: PageOrientation = PageOrientation.AUTO
    margin: float = Field(20, ge=0)
    fit_to_page: bool = True
    center_images: bool = True
    add_page_numbers: bool = False
    add_timestamp: bool = False
    background_color: str = "#FFFFFF"
    output_name: str = "images.pdf"

    @model_validator(mode="after")
    def validate_custom_size(self) -> "ImagesToPdfOptions":
        if self.page_size == PageSize.CUSTOM and not (self.custom_width and self.custom_height):
            raise ValueError("custom_width and custom_height are required for a Custom page size")
        return self

    @field_validator("background_color")
    @classmethod
    def validate_color(cls, value: str) -> str:
        digits = value.lstrip("#")
        if len(digits) != 6 or any(c not in "0123456789abcdefABCDEF" for c in digits):
            raise ValueError(f"background_color must be #RRGGBB, got {value!r}")
        return f"#{digits.upper()}"


# =============================================================================
# RESULTS
# =============================================================================


class MergeResult(OperationResult):
    page_count: int = Field(0, ge=0)
    bookmarks: list[Bookmark] = Field(default_factory=list)


class SplitFragment(OperationResult):
    page_range: str = Field(..., description="1-based 'start-end' label")
    page_count: int = Field(0, ge=0)


class SplitResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    source: str
    total_pages: int = Field(0, ge=0)
    files: list[SplitFragment] = Field(default_factory=list)

    def to_contract(self) -> dict:
        return {
            "source": self.source,
            "totalPages": self.total_pages,
            "files": [fragment.to_contract() for fragment in self.files],
        }


class CompressResult(OperationResult):
    original_size: int = Field(0, ge=0)
    compression_ratio: float = Field(
        0.0,
        description="(original - result) / original; may be <= 0",
    )
    page_count: int = Field(0, ge=0)


class ImagesToPdfResult(OperationResult):
    page_count: int = Field(0, ge=0)
    skipped: list[str] = Field(default_factory=list, description="Images that could not be decoded")


# =============================================================================
# ANALYSIS
# =============================================================================


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BasicInfo(_CamelModel):
    page_count: int
    file_size: int
    title: str
    author: str
    subject: str
    creator: str
    producer: str
    creation_date: str = ""
    modification_date: str = ""


class PageInfo(_CamelModel):
    page_number: int
    width: float
    height: float
    orientation: str
    aspect_ratio: float


class SecurityInfo(_CamelModel):
    encrypted: bool = False
    printing: bool = True
    copying: bool = True
    editing: bool = True
    annotating: bool = True


class OptimizationInfo(_CamelModel):
    has_images: bool = False
    has_text: bool = False
    has_bookmarks: bool = False
    has_forms: bool = False
    image_count: int = 0


class Recommendation(_CamelModel):
    type: str
    message: str
    action: str


class PDFAnalysis(_CamelModel):
    basic_info: BasicInfo
    pages: list[PageInfo] = Field(default_factory=list)
    security: SecurityInfo = Field(default_factory=SecurityInfo)
    optimization: OptimizationInfo = Field(default_factory=OptimizationInfo)
    recommendations: list[Recommendation] = Field(default_factory=list)

    def to_contract(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
