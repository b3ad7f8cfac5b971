"""
Pytest fixtures for the document engine tests.

All PDFs are synthesised in memory with PyMuPDF, Office sources with
python-docx, openpyxl and python-pptx.
"""

import io
from typing import Optional

import fitz  # PyMuPDF
import pytest
from docx import Document
from openpyxl import Workbook
from pptx import Presentation
from pptx.util import Inches

from conversion.models import (
    DocumentMetadata,
    Page,
    Paragraph,
    ParagraphStyle,
    StructuredDocument,
    Table,
)


def make_pdf(
    pages: list[str],
    size: tuple[float, float] = (595, 842),
    metadata: Optional[dict] = None,
    toc: Optional[list] = None,
) -> bytes:
    """Build a PDF with one page per entry in ``pages`` (empty string = blank page)."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page(width=size[0], height=size[1])
        if text:
            page.insert_text((72, 72), text, fontsize=12)
    if metadata:
        doc.set_metadata(metadata)
    if toc:
        doc.set_toc(toc)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def plain_pdf() -> bytes:
    """One page with a single line of text and a title."""
    return make_pdf(["Hello world"], metadata={"title": "Sample", "author": "Tester"})


@pytest.fixture
def ten_page_pdf() -> bytes:
    return make_pdf([f"Page body {i}" for i in range(1, 11)])


@pytest.fixture
def blank_pdf() -> bytes:
    """Two pages without any text."""
    return make_pdf(["", ""])


@pytest.fixture
def landscape_pdf() -> bytes:
    return make_pdf(["Wide page"], size=(842, 595))


@pytest.fixture
def one_page_pdfs() -> list[bytes]:
    return [make_pdf([f"Document {name}"]) for name in ("A", "B", "C")]


@pytest.fixture
def outline_pdf() -> bytes:
    """Six pages with top-level bookmarks on pages 1, 3 and 6 and a child on page 4."""
    return make_pdf(
        [f"Section page {i}" for i in range(1, 7)],
        metadata={"title": "Outlined", "author": "Tester", "subject": "Testing", "creator": "pytest"},
        toc=[[1, "Intro", 1], [1, "Body", 3], [2, "Detail", 4], [1, "End", 6]],
    )


@pytest.fixture
def encrypted_pdf() -> bytes:
    """AES-256 encrypted with user password ``secret``."""
    doc = fitz.open()
    doc.new_page().insert_text((72, 72), "Top secret", fontsize=12)
    data = doc.tobytes(
        encryption=fitz.PDF_ENCRYPT_AES_256,
        user_pw="secret",
        owner_pw="owner-secret",
    )
    doc.close()
    return data


@pytest.fixture
def png_image() -> bytes:
    """A 40x20 (landscape) grey PNG."""
    pixmap = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, 40, 20), False)
    pixmap.clear_with(200)
    return pixmap.tobytes("png")


@pytest.fixture
def sample_document() -> StructuredDocument:
    """Two-page SDM with styled paragraphs and one table."""
    return StructuredDocument(
        metadata=DocumentMetadata(title="Quarterly Report", author="Finance"),
        pages=[
            Page(
                page_number=1,
                width=595,
                height=842,
                paragraphs=[
                    Paragraph(text="Introduction"),
                    Paragraph(
                        text="Revenue grew {strongly}",
                        style=ParagraphStyle(font_size=14, bold=True, color="#FF0000"),
                    ),
                ],
                tables=[Table.from_texts([["Name", "Age"], ["Bob", "30"]])],
            ),
            Page(
                page_number=2,
                width=842,
                height=595,
                paragraphs=[Paragraph(text="Closing remarks", style=ParagraphStyle(italic=True))],
            ),
        ],
    )


@pytest.fixture
def empty_document() -> StructuredDocument:
    return StructuredDocument(pages=[Page(page_number=1, width=595, height=842)])


@pytest.fixture
def pdf_factory():
    """The ``make_pdf`` builder, for tests that need custom documents."""
    return make_pdf


# =============================================================================
# OFFICE SOURCES
# =============================================================================


@pytest.fixture
def docx_bytes() -> bytes:
    """A heading, a bold paragraph, a plain paragraph and a 2x2 table."""
    doc = Document()
    doc.core_properties.title = "Annual Plan"
    doc.add_heading("Goals", level=1)
    doc.add_paragraph().add_run("Grow revenue").bold = True
    doc.add_paragraph("Plain line")
    table = doc.add_table(rows=2, cols=2)
    for r, texts in enumerate([["Name", "Age"], ["Bob", "30"]]):
        for c, text in enumerate(texts):
            table.cell(r, c).text = text
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def xlsx_bytes() -> bytes:
    """A ``Budget`` sheet with two rows and an empty second sheet."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Budget"
    sheet.append(["Item", "Cost"])
    sheet.append(["Rent", 1200])
    workbook.create_sheet("Notes")
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def pptx_bytes() -> bytes:
    """A title-and-content slide followed by a blank slide with a table."""
    presentation = Presentation()
    presentation.core_properties.title = "Roadmap 2026"

    first = presentation.slides.add_slide(presentation.slide_layouts[1])
    first.shapes.title.text = "Roadmap"
    first.placeholders[1].text = "Ship v2"

    second = presentation.slides.add_slide(presentation.slide_layouts[6])
    table = second.shapes.add_table(2, 2, Inches(1), Inches(1), Inches(4), Inches(1)).table
    for r, texts in enumerate([["Phase", "Quarter"], ["Beta", "Q3"]]):
        for c, text in enumerate(texts):
            table.cell(r, c).text = text

    buffer = io.BytesIO()
    presentation.save(buffer)
    return buffer.getvalue()
