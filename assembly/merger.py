"""
PDF merge with title page, outline bookmarks and page numbering.

Order of work on the output document:
    1. Optional A4 title page
    2. Every source's pages in order, recording one bookmark per source
    3. Optional page-number stamping (title page skipped, numbering starts
       at 1 on the first content page)
    4. Outline and metadata
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import fitz  # PyMuPDF

from common.exceptions import InputError
from common.logging_config import get_logger
from common.pdf_utils import A4_SIZE, open_pdf, strip_extension

from .models import (
    Bookmark,
    BookmarkStyle,
    MergeOptions,
    MergeResult,
    PageNumberPosition,
    SourceDocument,
)

logger = get_logger(__name__)

DEFAULT_TITLE = "Merged Document"
GREY = (0.5, 0.5, 0.5)
BLACK = (0, 0, 0)

NUMBER_FONT_SIZE = 10
NUMBER_EDGE_X = 50
NUMBER_EDGE_Y = 30


def merge_documents(
    sources: Sequence[SourceDocument],
    options: Optional[MergeOptions] = None,
) -> MergeResult:
    """
    Merge ``sources`` into one PDF.

    Raises:
        InputError: No sources, or a source is not a readable PDF
        PasswordError: A source is password-protected
    """
    options = options or MergeOptions()
    if not sources:
        raise InputError("At least one document is required to merge")

    logger.info(f"Merging {len(sources)} documents into {options.output_name}")
    bookmarks: list[Bookmark] = []

    with fitz.open() as merged:
        if options.add_title_page:
            draw_title_page(merged, options.title_page_content or DEFAULT_TITLE)

        for number, source in enumerate(sources, start=1):
            with open_pdf(source.data, name=source.filename) as src:
                if options.add_bookmarks:
                    bookmarks.append(
                        Bookmark(
                            title=bookmark_title(source.filename, number, options.bookmark_style),
                            page_index=merged.page_count,
                        )
                    )
                merged.insert_pdf(src)
            logger.debug(f"Appended {source.filename}; output now has {merged.page_count} pages")

        if options.add_page_numbers:
            stamp_page_numbers(
                merged,
                options.page_number_position,
                skip_first=options.add_title_page,
            )

        if bookmarks:
            merged.set_toc([[1, b.title, b.page_index + 1] for b in bookmarks])

        merged.set_metadata(
            {
                "title": options.title_page_content or DEFAULT_TITLE,
                "subject": f"Contains {len(sources)} sections",
                "creator": "doc-engine",
            }
        )
        page_count = merged.page_count
        data = merged.tobytes(garbage=3, deflate=True)

    logger.info(f"Merged {len(sources)} documents: {page_count} pages, {len(data)} bytes")
    return MergeResult(
        filename=options.output_name,
        size=len(data),
        data=data,
        page_count=page_count,
        bookmarks=bookmarks,
    )


def bookmark_title(filename: str, number: int, style: BookmarkStyle) -> str:
    if style == BookmarkStyle.FILENAME:
        return strip_extension(filename)
    return f"Document {number}"


def draw_title_page(doc: fitz.Document, title: str) -> None:
    width, height = A4_SIZE
    page = doc.new_page(width=width, height=height)
    # Baselines sit 750pt and 700pt above the bottom edge
    page.insert_text((50, height - 750), title, fontsize=24, fontname="hebo", color=BLACK)
    page.insert_text(
        (50, height - 700),
        f"Created: {datetime.now().strftime('%Y-%m-%d')}",
        fontsize=12,
        fontname="hebo",
        color=GREY,
    )


def number_anchor(position: PageNumberPosition, width: float, height: float) -> fitz.Point:
    """Baseline origin of the page-number label in top-left page coordinates."""
    vertical, _, horizontal = position.value.partition("-")
    if horizontal == "left":
        x = NUMBER_EDGE_X
    elif horizontal == "right":
        x = width - NUMBER_EDGE_X
    else:
        x = width / 2 - 10
    y = NUMBER_EDGE_Y if vertical == "top" else height - NUMBER_EDGE_Y
    return fitz.Point(x, y)


def stamp_page_numbers(
    doc: fitz.Document,
    position: PageNumberPosition,
    skip_first: bool = False,
) -> None:
    offset = 1 if skip_first else 0
    for index in range(offset, doc.page_count):
        page = doc[index]
        anchor = number_anchor(position, page.rect.width, page.rect.height)
        page.insert_text(
            anchor,
            str(index - offset + 1),
            fontsize=NUMBER_FONT_SIZE,
            fontname="helv",
            color=GREY,
        )
