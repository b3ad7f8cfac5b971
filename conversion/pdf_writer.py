"""
PDF writer built on PyMuPDF's Story layout engine.

Each page of the Structured Document Model starts a new PDF page of the same
size (A4 when the page carries no size) and flows onto further pages when its
content does not fit. Paragraphs become HTML paragraphs carrying their style,
tables become bordered grids padded to their widest row. The metadata title
is set as a heading on the first page when ``include_title`` is on.
"""

from __future__ import annotations

import html
import io

import fitz  # PyMuPDF

from common.exceptions import SerializationError
from common.logging_config import get_logger
from common.pdf_utils import A4_SIZE

from .models import ConversionOptions, Page, Paragraph, StructuredDocument, Table

logger = get_logger(__name__)

MARGIN = 50

CSS = """
body { font-family: sans-serif; font-size: 11pt; }
h1 { font-size: 16pt; text-align: center; margin-bottom: 12pt; }
p { margin: 0 0 6pt 0; }
table { border-collapse: collapse; margin: 6pt 0; }
td { border: 1px solid #808080; padding: 2pt 4pt; font-size: 9pt; }
"""


def write_pdf(document: StructuredDocument, options: ConversionOptions) -> bytes:
    pages = document.pages or [Page(page_number=1, width=A4_SIZE[0], height=A4_SIZE[1])]
    title = document.metadata.title if options.include_title else ""

    buffer = io.BytesIO()
    writer = fitz.DocumentWriter(buffer)
    for index, page in enumerate(pages):
        story = fitz.Story(html=page_html(page, options, title if index == 0 else ""), user_css=CSS)
        _flow(story, writer, _mediabox(page))
    writer.close()

    with fitz.open(stream=buffer.getvalue(), filetype="pdf") as doc:
        doc.set_metadata(
            {
                "title": document.metadata.title,
                "author": document.metadata.author,
                "subject": document.metadata.subject,
                "creator": "doc-engine",
            }
        )
        return doc.tobytes(garbage=3, deflate=True)


def render_pdf(document: StructuredDocument, options: ConversionOptions | None = None) -> bytes:
    """
    Lay ``document`` out as PDF.

    Raises:
        SerializationError: If layout or writing failed
    """
    options = options or ConversionOptions()
    try:
        return write_pdf(document, options)
    except Exception as exc:
        logger.error(f"pdf writer failed: {exc}")
        raise SerializationError("Failed to write document", target="pdf", original_error=exc) from exc


def page_html(page: Page, options: ConversionOptions, title: str = "") -> str:
    parts = [f"<h1>{_escape(title)}</h1>"] if title else []
    parts.extend(_paragraph_html(p, options.preserve_formatting) for p in page.paragraphs)
    parts.extend(_table_html(t) for t in page.tables)
    return "<body>" + "".join(parts) + "</body>"


def _paragraph_html(paragraph: Paragraph, preserve_formatting: bool) -> str:
    if not preserve_formatting:
        return f"<p>{_escape(paragraph.text)}</p>"

    style = paragraph.style
    declarations = [f"font-size: {style.font_size:g}pt", f"color: {style.color}"]
    if style.bold:
        declarations.append("font-weight: bold")
    if style.italic:
        declarations.append("font-style: italic")
    return f'<p style="{"; ".join(declarations)}">{_escape(paragraph.text)}</p>'


def _table_html(table: Table) -> str:
    columns = max(1, table.column_count)
    rows = []
    for row in table.rows:
        texts = row.texts + [""] * (columns - len(row.cells))
        rows.append("<tr>" + "".join(f"<td>{_escape(text)}</td>" for text in texts) + "</tr>")
    return "<table>" + "".join(rows) + "</table>"


def _escape(text: str) -> str:
    return html.escape(text).replace("\n", "<br/>")


def _mediabox(page: Page) -> fitz.Rect:
    if page.width > 0 and page.height > 0:
        return fitz.Rect(0, 0, page.width, page.height)
    return fitz.Rect(0, 0, *A4_SIZE)


def _flow(story: fitz.Story, writer: fitz.DocumentWriter, mediabox: fitz.Rect) -> None:
    """Place ``story`` page by page until all of it is drawn."""
    where = fitz.Rect(
        mediabox.x0 + MARGIN, mediabox.y0 + MARGIN, mediabox.x1 - MARGIN, mediabox.y1 - MARGIN
    )
    more = True
    while more:
        device = writer.begin_page(mediabox)
        more, _ = story.place(where)
        story.draw(device)
        writer.end_page()
