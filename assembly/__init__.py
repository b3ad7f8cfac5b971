"""
Assembly - Native page-level PDF operations.

Operates on raw PDF bytes with PyMuPDF, bypassing the Structured Document
Model used by ``conversion``.

Features:
- Merge with optional title page, outline bookmarks and page numbers
- Split by fixed page count, caller ranges, top-level bookmarks or size
- Best-effort compression with reported compression ratio
- Images to PDF with page size, orientation and layout options
- Document analysis with handling recommendations

Quick Start:
    from assembly import AssemblyService, SourceDocument

    service = AssemblyService()
    merged = service.merge(
        [SourceDocument(filename="a.pdf", data=a), SourceDocument(filename="b.pdf", data=b)],
        {"add_title_page": True, "add_page_numbers": True},
    )
    parts = service.split(merged.data, "merged.pdf", {"split_type": "ranges", "page_ranges": "1-3,5"})
"""

__version__ = "1.0.0"

from .models import (
    BookmarkStyle,
    PageNumberPosition,
    SplitType,
    CompressionLevel,
    PageSize,
    PageOrientation,
    PageRange,
    Bookmark,
    SourceDocument,
    MergeOptions,
    SplitOptions,
    CompressOptions,
    ImagesToPdfOptions,
    MergeResult,
    SplitFragment,
    SplitResult,
    CompressResult,
    ImagesToPdfResult,
    PDFAnalysis,
)
from .page_ranges import (
    plan_fixed_chunks,
    plan_caller_ranges,
    plan_bookmark_ranges,
    plan_size_chunks,
    is_cover,
)
from .merger import merge_documents
from .splitter import split_document
from .compressor import compress_document
from .images import images_to_pdf
from .analyzer import analyze_document
from .config import AssemblyServiceConfig
from .service import AssemblyService

__all__ = [
    "BookmarkStyle",
    "PageNumberPosition",
    "SplitType",
    "CompressionLevel",
    "PageSize",
    "PageOrientation",
    "PageRange",
    "Bookmark",
    "SourceDocument",
    "MergeOptions",
    "SplitOptions",
    "CompressOptions",
    "ImagesToPdfOptions",
    "MergeResult",
    "SplitFragment",
    "SplitResult",
    "CompressResult",
    "ImagesToPdfResult",
    "PDFAnalysis",
    "plan_fixed_chunks",
    "plan_caller_ranges",
    "plan_bookmark_ranges",
    "plan_size_chunks",
    "is_cover",
    "merge_documents",
    "split_document",
    "compress_document",
    "images_to_pdf",
    "analyze_document",
    "AssemblyServiceConfig",
    "AssemblyService",
]
