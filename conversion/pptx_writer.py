"""
Slide-deck (PPTX) writer built on python-pptx.

One blank-layout slide per page: a ``Page N`` title, the paragraphs top to
bottom in fixed 0.6" steps, then each table as a slide grid below them.
"""

from __future__ import annotations

import io

from pptx import Presentation
from pptx.util import Inches, Pt

from .models import ConversionOptions, ParagraphStyle, StructuredDocument

BLANK_LAYOUT = 6

LEFT = 0.5
CONTENT_WIDTH = 9.0
TITLE_TOP = 0.5
TITLE_SIZE = 24
BODY_TOP = 1.5
PARAGRAPH_STEP = 0.6
PARAGRAPH_HEIGHT = 0.5
TABLE_STEP = 2.0
TABLE_ROW_HEIGHT = 0.3
TABLE_FONT_SIZE = 10


def write_pptx(document: StructuredDocument, options: ConversionOptions) -> bytes:
    presentation = Presentation()
    presentation.core_properties.title = document.metadata.title
    presentation.core_properties.author = document.metadata.author
    presentation.core_properties.subject = document.metadata.subject
    layout = presentation.slide_layouts[BLANK_LAYOUT]

    for page in document.pages:
        slide = presentation.slides.add_slide(layout)

        title = slide.shapes.add_textbox(
            Inches(LEFT), Inches(TITLE_TOP), Inches(CONTENT_WIDTH), Inches(0.8)
        )
        title.text_frame.text = f"Page {page.page_number}"
        _style_text(title.text_frame, TITLE_SIZE, bold=True)

        y = BODY_TOP
        for paragraph in page.paragraphs:
            style = paragraph.style if options.preserve_formatting else ParagraphStyle()
            box = slide.shapes.add_textbox(
                Inches(LEFT), Inches(y), Inches(CONTENT_WIDTH), Inches(PARAGRAPH_HEIGHT)
            )
            box.text_frame.word_wrap = True
            box.text_frame.text = paragraph.text
            _style_text(box.text_frame, style.font_size, style.bold, style.italic)
            y += PARAGRAPH_STEP

        for table in page.tables:
            rows, columns = len(table.rows), max(1, table.column_count)
            shape = slide.shapes.add_table(
                rows,
                columns,
                Inches(LEFT),
                Inches(y),
                Inches(CONTENT_WIDTH),
                Inches(TABLE_ROW_HEIGHT * rows),
            )
            grid = shape.table
            for r, row in enumerate(table.rows):
                for c, cell in enumerate(row.cells):
                    target = grid.cell(r, c)
                    target.text = cell.text
                    _style_text(target.text_frame, TABLE_FONT_SIZE)
            y += TABLE_STEP

    buffer = io.BytesIO()
    presentation.save(buffer)
    return buffer.getvalue()


def _style_text(text_frame, size: float, bold: bool = False, italic: bool = False) -> None:
    for paragraph in text_frame.paragraphs:
        for run in paragraph.runs:
            run.font.size = Pt(size)
            run.font.bold = bold
            run.font.italic = italic
