"""
Flow-document (DOCX) writer built on python-docx.

Layout: optional centred title, then per page a ``Page N`` heading, the
page's paragraphs, its tables as bordered grids and an empty separator
paragraph.
"""

from __future__ import annotations

import io

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt, RGBColor

from .models import ConversionOptions, Paragraph, ParagraphStyle, StructuredDocument, Table

TABLE_STYLE = "Table Grid"


def write_docx(document: StructuredDocument, options: ConversionOptions) -> bytes:
    doc = Document()

    properties = doc.core_properties
    properties.title = document.metadata.title
    properties.author = document.metadata.author
    properties.subject = document.metadata.subject

    if options.include_title and document.metadata.title:
        heading = doc.add_heading(document.metadata.title, level=1)
        heading.alignment = WD_ALIGN_PARAGRAPH.CENTER

    for page in document.pages:
        doc.add_heading(f"Page {page.page_number}", level=2)
        for paragraph in page.paragraphs:
            _add_paragraph(doc, paragraph, options.preserve_formatting)
        for table in page.tables:
            _add_table(doc, table)
        doc.add_paragraph()

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def _add_paragraph(doc, paragraph: Paragraph, preserve_formatting: bool) -> None:
    style = paragraph.style if preserve_formatting else ParagraphStyle()
    run = doc.add_paragraph().add_run(paragraph.text)
    run.bold = style.bold
    run.italic = style.italic
    run.font.size = Pt(style.font_size)
    run.font.name = style.font_family
    run.font.color.rgb = RGBColor.from_string(style.color.lstrip("#"))


def _add_table(doc, table: Table) -> None:
    columns = max(1, table.column_count)
    grid = doc.add_table(rows=len(table.rows), cols=columns)
    grid.style = TABLE_STYLE
    for r, row in enumerate(table.rows):
        for c, cell in enumerate(row.cells):
            grid.cell(r, c).text = cell.text
