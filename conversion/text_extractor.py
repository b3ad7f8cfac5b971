"""
Text pass and page-boundary inference.

This module runs the general text-extraction pass over an opened document
(via PyMuPDF), assigns the resulting text to pages and performs the
lightweight layout analysis the extractor needs (paragraph splitting and a
block-gap column estimate).
"""

from __future__ import annotations

import math
import re
from typing import Protocol

import fitz  # PyMuPDF

from common.logging_config import get_logger

from .models import PageMapping

logger = get_logger(__name__)

PAGE_BREAK = "\f"
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f]")


class TextSource(Protocol):
    """Produces the full text of a document, pages separated by ``\\f`` where known."""

    def extract_text(self, doc: fitz.Document) -> str:
        ...


class PyMuPDFTextSource:
    def __init__(self, sort_blocks: bool = True) -> None:
        self.sort_blocks = sort_blocks

    def extract_text(self, doc: fitz.Document) -> str:
        return PAGE_BREAK.join(page.get_text("text", sort=self.sort_blocks) for page in doc)


def clean_text(text: str) -> str:
    if not text:
        return ""
    cleaned = text.replace("\r\n", "\n").replace("\r", "\n")
    # De-hyphenate line breaks: "conver-\nsion" -> "conversion"
    cleaned = re.sub(r"(?<=\w)-\n(?=\w)", "", cleaned)
    return cleaned


def infer_page_texts(text: str, total_pages: int) -> tuple[list[str], PageMapping]:
    """
    Assign ``text`` to ``total_pages`` pages.

    Explicit page-break markers are used when their count matches the page
    count. Otherwise the text is sliced into equal chunks of
    ``ceil(len(text) / total_pages)`` characters, which only approximates the
    real page boundaries.
    """
    if total_pages < 1:
        return [], PageMapping.MARKERS

    segments = text.split(PAGE_BREAK)
    if len(segments) > 1 and segments[-1] == "":
        segments.pop()

    if len(segments) == total_pages:
        return segments, PageMapping.MARKERS

    logger.warning(
        f"Text pass produced {len(segments)} page segments for {total_pages} pages; "
        "using proportional allocation"
    )
    flat = text.replace(PAGE_BREAK, "\n")
    chunk = max(1, math.ceil(len(flat) / total_pages))
    pages = [flat[i * chunk:(i + 1) * chunk] for i in range(total_pages)]
    return pages, PageMapping.PROPORTIONAL


def split_paragraphs(text: str) -> list[str]:
    """Blank-line paragraphs when the text has any, otherwise one per line."""
    if re.search(r"\n\s*\n", text):
        parts = re.split(r"\n\s*\n+", text)
    else:
        parts = text.split("\n")
    return [part.strip() for part in parts if part.strip()]


class ColumnEstimator:
    """
    Best-effort text column count from block positions.

    Sorted block left edges are scanned for the widest gap; a gap wider than
    ``column_gap_ratio`` of the page width splits the page into two columns.
    """

    def __init__(self, column_gap_ratio: float = 0.25, min_blocks: int = 6) -> None:
        self.column_gap_ratio = column_gap_ratio
        self.min_blocks = min_blocks

    def count_columns(self, page: fitz.Page) -> int:
        blocks = page.get_text("blocks", sort=False)
        return self.count_from_blocks(blocks, page.rect.width)

    def count_from_blocks(self, blocks: list, page_width: float) -> int:
        text_blocks = [
            b for b in blocks
            if len(b) >= 5 and (b[-1] if isinstance(b[-1], int) else 0) == 0
        ]
        x0s = sorted(b[0] for b in text_blocks if b[4] and str(b[4]).strip())
        if len(x0s) < self.min_blocks:
            return 1

        max_gap = max(x0s[i + 1] - x0s[i] for i in range(len(x0s) - 1))
        if max_gap < page_width * self.column_gap_ratio:
            return 1
        return 2


def strip_control_chars(text: str) -> str:
    """Drop C0 control characters other than tab and newline (not valid in XML output)."""
    return CONTROL_CHARS.sub("", text)
