"""
Conversion - Document to Structured Document Model to target format.

Extracts a format-agnostic Structured Document Model (pages, paragraphs,
tables) from source bytes with PyMuPDF and re-serializes it as DOCX, XLSX,
PPTX, RTF or plain text. In the other direction, DOCX, XLSX, CSV, PPTX and
plain-text sources are read into the same model and laid out as PDF.

Features:
- Page-boundary inference (explicit page breaks or proportional allocation)
- Pluggable table classifier (whitespace/tab heuristic by default)
- Best-effort column estimation from text block positions
- Degraded output with placeholder paragraphs when no text can be extracted
- One serializer per target kind behind a single dispatch point
- Office-to-PDF layout with PyMuPDF Story (one flow per source page, sheet
  or slide)

Quick Start:
    from conversion import ConversionService

    service = ConversionService()
    result = service.convert(pdf_bytes, "pdf", "docx", filename="report.pdf")
    print(result.to_contract())
"""

__version__ = "1.0.0"

from .models import (
    Orientation,
    PageMapping,
    TargetKind,
    SourceFormat,
    DocumentMetadata,
    ParagraphStyle,
    Paragraph,
    Cell,
    Row,
    Table,
    Page,
    StructuredDocument,
    ConversionOptions,
    ConversionResult,
    PdfConversionResult,
)
from .extractor import ContentExtractor, resolve_input_format, parse_page_selection
from .table_detector import TableClassifier, WhitespaceTableClassifier
from .text_extractor import TextSource, PyMuPDFTextSource, infer_page_texts, split_paragraphs
from .serializers import serialize, get_serializer, mime_type_for, extension_for
from .rtf_writer import escape_rtf
from .office_reader import read_source, resolve_source_format
from .pdf_writer import render_pdf
from .config import ConversionServiceConfig
from .service import ConversionService

__all__ = [
    "Orientation",
    "PageMapping",
    "TargetKind",
    "SourceFormat",
    "DocumentMetadata",
    "ParagraphStyle",
    "Paragraph",
    "Cell",
    "Row",
    "Table",
    "Page",
    "StructuredDocument",
    "ConversionOptions",
    "ConversionResult",
    "PdfConversionResult",
    "ContentExtractor",
    "resolve_input_format",
    "parse_page_selection",
    "TableClassifier",
    "WhitespaceTableClassifier",
    "TextSource",
    "PyMuPDFTextSource",
    "infer_page_texts",
    "split_paragraphs",
    "serialize",
    "get_serializer",
    "mime_type_for",
    "extension_for",
    "escape_rtf",
    "read_source",
    "resolve_source_format",
    "render_pdf",
    "ConversionServiceConfig",
    "ConversionService",
]
