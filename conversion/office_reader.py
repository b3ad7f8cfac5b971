"""
Office and text readers - source bytes to Structured Document Model.

The reverse direction of the format writers, used to lay Office documents
out as PDF:
    - DOCX (python-docx): one page holding every paragraph and table
    - XLSX (openpyxl): one landscape page per worksheet, the used cells as a table
    - CSV: one landscape page with the rows as a table
    - PPTX (python-pptx): one page per slide at the presentation's slide size
    - TXT: one page of blank-line separated paragraphs

Usage:
    from conversion.office_reader import read_source

    document = read_source(docx_bytes, "report.docx")
    print(document.page_count, document.metadata.title)
"""

from __future__ import annotations

import csv
import io
from typing import Any, Optional

from docx import Document
from openpyxl import load_workbook
from pptx import Presentation

from common.exceptions import InputError
from common.logging_config import get_logger
from common.pdf_utils import A4_SIZE, strip_extension

from .models import (
    DocumentMetadata,
    Page,
    Paragraph,
    ParagraphStyle,
    SourceFormat,
    StructuredDocument,
    Table,
)
from .text_extractor import split_paragraphs, strip_control_chars

logger = get_logger(__name__)


# =============================================================================
# SOURCE FORMATS
# =============================================================================

SOURCE_FORMATS = {
    "docx": SourceFormat.DOCX,
    "xlsx": SourceFormat.XLSX,
    "xlsm": SourceFormat.XLSX,
    "csv": SourceFormat.CSV,
    "pptx": SourceFormat.PPTX,
    "txt": SourceFormat.TXT,
}

SOURCE_CONTENT_TYPES = {
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": SourceFormat.DOCX,
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": SourceFormat.XLSX,
    "text/csv": SourceFormat.CSV,
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": SourceFormat.PPTX,
    "text/plain": SourceFormat.TXT,
}

LANDSCAPE_A4 = (A4_SIZE[1], A4_SIZE[0])

HEADING_SIZES = {"Title": 24, "Heading 1": 20, "Heading 2": 16, "Heading 3": 14}
SECTION_STYLE = ParagraphStyle(font_size=14, bold=True)
EMPTY_SHEET = "(Empty sheet)"


def resolve_source_format(format_hint: str) -> SourceFormat:
    """
    Map an extension, filename or content type to a source format.

    Raises:
        InputError: If the hint names no supported Office or text format
    """
    hint = (format_hint or "").strip().lower()
    if "/" in hint:
        source_format = SOURCE_CONTENT_TYPES.get(hint.split(";", 1)[0].strip())
    else:
        source_format = SOURCE_FORMATS.get(hint.rsplit(".", 1)[-1])
    if source_format is None:
        raise InputError(
            f"Unsupported format for PDF conversion: {format_hint!r}",
            details=f"Supported: {', '.join(sorted(SOURCE_FORMATS))}",
        )
    return source_format


def read_source(data: bytes, format_hint: str, filename: str = "document") -> StructuredDocument:
    """
    Read Office or text bytes into a StructuredDocument.

    The metadata title falls back to ``filename`` without its extension.

    Raises:
        InputError: Unsupported format, empty input, or unreadable bytes
    """
    source_format = resolve_source_format(format_hint)
    if not data:
        raise InputError(f"Empty input: {filename}")

    reader = READERS[source_format]
    try:
        document = reader(data)
    except Exception as exc:
        raise InputError(
            f"File is corrupted or unreadable: {filename}",
            details=str(exc),
        ) from exc

    if not document.metadata.title:
        document.metadata.title = strip_extension(filename)
    logger.debug(f"Read {filename} as {source_format.value}: {document.page_count} pages")
    return document


# =============================================================================
# WORD
# =============================================================================


def read_docx(data: bytes) -> StructuredDocument:
    doc = Document(io.BytesIO(data))

    paragraphs = []
    for paragraph in doc.paragraphs:
        text = strip_control_chars(paragraph.text).strip()
        if text:
            paragraphs.append(Paragraph(text=text, style=_docx_style(paragraph)))

    tables = []
    for table in doc.tables:
        rows = [[strip_control_chars(cell.text) for cell in row.cells] for row in table.rows]
        if rows:
            tables.append(Table.from_texts(rows))

    width, height = A4_SIZE
    if doc.sections and doc.sections[0].page_width and doc.sections[0].page_height:
        width, height = doc.sections[0].page_width.pt, doc.sections[0].page_height.pt

    properties = doc.core_properties
    return StructuredDocument(
        metadata=DocumentMetadata(
            title=properties.title or "",
            author=properties.author or "",
            subject=properties.subject or "",
        ),
        pages=[Page(page_number=1, width=width, height=height, paragraphs=paragraphs, tables=tables)],
    )


def _docx_style(paragraph) -> ParagraphStyle:
    runs = [run for run in paragraph.runs if run.text.strip()]
    style_name = paragraph.style.name if paragraph.style is not None else ""

    heading_size = HEADING_SIZES.get(style_name)
    run_size = next((run.font.size.pt for run in runs if run.font.size is not None), None)
    color = next((str(run.font.color.rgb) for run in runs if run.font.color.rgb is not None), None)

    return ParagraphStyle(
        font_size=run_size or heading_size or 12,
        bold=heading_size is not None or (bool(runs) and all(run.bold for run in runs)),
        italic=bool(runs) and all(run.italic for run in runs),
        color=f"#{color}" if color else "#000000",
    )


# =============================================================================
# SPREADSHEETS
# =============================================================================


def read_xlsx(data: bytes) -> StructuredDocument:
    workbook = load_workbook(io.BytesIO(data), data_only=True)

    pages = []
    for number, sheet in enumerate(workbook.worksheets, start=1):
        rows = _used_rows(sheet.iter_rows(values_only=True))
        pages.append(_sheet_page(number, f"Sheet: {sheet.title}", rows))

    properties = workbook.properties
    return StructuredDocument(
        metadata=DocumentMetadata(
            title=properties.title or "",
            author=properties.creator or "",
            subject=properties.subject or "",
        ),
        pages=pages,
    )


def read_csv(data: bytes) -> StructuredDocument:
    text = data.decode("utf-8-sig", errors="replace")
    rows = _used_rows(csv.reader(io.StringIO(text)))
    return StructuredDocument(pages=[_sheet_page(1, "", rows)])


def _used_rows(rows) -> list[list[str]]:
    """Cell texts without empty rows or trailing empty columns."""
    texts = [[_cell_text(value) for value in row] for row in rows]
    texts = [row for row in texts if any(row)]
    width = max((max(i for i, text in enumerate(row) if text) + 1 for row in texts), default=0)
    return [row[:width] for row in texts]


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    return strip_control_chars(str(value))


def _sheet_page(number: int, heading: str, rows: list[list[str]]) -> Page:
    paragraphs = [Paragraph(text=heading, style=SECTION_STYLE)] if heading else []
    tables = []
    if rows:
        tables.append(Table.from_texts(rows))
    else:
        paragraphs.append(Paragraph(text=EMPTY_SHEET, style=ParagraphStyle(italic=True)))
    width, height = LANDSCAPE_A4
    return Page(page_number=number, width=width, height=height, paragraphs=paragraphs, tables=tables)


# =============================================================================
# PRESENTATIONS
# =============================================================================


def read_pptx(data: bytes) -> StructuredDocument:
    presentation = Presentation(io.BytesIO(data))
    width, height = LANDSCAPE_A4
    if presentation.slide_width and presentation.slide_height:
        width, height = presentation.slide_width.pt, presentation.slide_height.pt

    pages = []
    for number, slide in enumerate(presentation.slides, start=1):
        title_id = _title_shape_id(slide)
        paragraphs = []
        tables = []
        for shape in slide.shapes:
            if shape.has_text_frame:
                is_title = shape.shape_id == title_id
                for paragraph in shape.text_frame.paragraphs:
                    text = strip_control_chars(paragraph.text).strip()
                    if text:
                        paragraphs.append(Paragraph(text=text, style=_pptx_style(paragraph, is_title)))
            elif shape.has_table:
                rows = [[strip_control_chars(cell.text) for cell in row.cells] for row in shape.table.rows]
                if rows:
                    tables.append(Table.from_texts(rows))
        pages.append(
            Page(page_number=number, width=width, height=height, paragraphs=paragraphs, tables=tables)
        )

    properties = presentation.core_properties
    return StructuredDocument(
        metadata=DocumentMetadata(
            title=properties.title or "",
            author=properties.author or "",
            subject=properties.subject or "",
        ),
        pages=pages,
    )


def _title_shape_id(slide) -> Optional[int]:
    title = slide.shapes.title
    return title.shape_id if title is not None else None


def _pptx_style(paragraph, is_title: bool) -> ParagraphStyle:
    runs = [run for run in paragraph.runs if run.text.strip()]
    size = next((run.font.size.pt for run in runs if run.font.size is not None), None)
    return ParagraphStyle(
        font_size=size or (24 if is_title else 14),
        bold=is_title or (bool(runs) and all(run.font.bold for run in runs)),
        italic=bool(runs) and all(run.font.italic for run in runs),
    )


# =============================================================================
# PLAIN TEXT
# =============================================================================


def read_txt(data: bytes) -> StructuredDocument:
    text = strip_control_chars(data.decode("utf-8-sig", errors="replace").replace("\r\n", "\n"))
    width, height = A4_SIZE
    paragraphs = [Paragraph(text=part) for part in split_paragraphs(text)]
    return StructuredDocument(
        pages=[Page(page_number=1, width=width, height=height, paragraphs=paragraphs)]
    )


READERS = {
    SourceFormat.DOCX: read_docx,
    SourceFormat.XLSX: read_xlsx,
    SourceFormat.CSV: read_csv,
    SourceFormat.PPTX: read_pptx,
    SourceFormat.TXT: read_txt,
}
