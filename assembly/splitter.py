"""
PDF split into fragments.

The split mode picks a planner from ``page_ranges``; each planned range is
copied into its own document, optionally carrying the source metadata and
the bookmarks that fall inside the range (rebased to the fragment).
"""

from __future__ import annotations

from typing import Optional

import fitz  # PyMuPDF

from common.exceptions import InputError
from common.logging_config import get_logger
from common.pdf_utils import open_pdf, read_metadata, strip_extension

from .models import PageRange, SplitFragment, SplitOptions, SplitResult, SplitType
from .page_ranges import (
    plan_bookmark_ranges,
    plan_caller_ranges,
    plan_fixed_chunks,
    plan_size_chunks,
)

logger = get_logger(__name__)


def split_document(
    data: bytes,
    filename: str = "document.pdf",
    options: Optional[SplitOptions] = None,
) -> SplitResult:
    """
    Split ``data`` into fragments according to ``options.split_type``.

    Raises:
        InputError: Unreadable PDF, or size mode without ``max_file_size``
        PasswordError: The document is password-protected
        RangeError: Ranges mode with an invalid or out-of-bounds range
    """
    options = options or SplitOptions()

    with open_pdf(data, name=filename) as src:
        total_pages = src.page_count
        needs_toc = options.preserve_bookmarks or options.split_type == SplitType.BOOKMARKS
        toc = read_toc(src) if needs_toc else []
        ranges = plan_ranges(options, total_pages, len(data), toc)
        metadata = read_metadata(src)

        logger.info(f"Splitting {filename} ({total_pages} pages) into {len(ranges)} fragments")
        fragments = []
        for index, page_range in enumerate(ranges, start=1):
            with fitz.open() as part:
                part.insert_pdf(src, from_page=page_range.start, to_page=page_range.end)
                if options.preserve_metadata:
                    part.set_metadata(dict(metadata))
                if options.preserve_bookmarks:
                    part.set_toc(rebase_toc(toc, page_range))
                output = part.tobytes(garbage=3, deflate=True)

            fragments.append(
                SplitFragment(
                    filename=fragment_name(filename, index, page_range, options),
                    size=len(output),
                    data=output,
                    page_range=page_range.label,
                    page_count=page_range.page_count,
                )
            )

    return SplitResult(source=filename, total_pages=total_pages, files=fragments)


def plan_ranges(
    options: SplitOptions,
    total_pages: int,
    total_bytes: int,
    toc: list,
) -> list[PageRange]:
    if options.split_type == SplitType.PAGES:
        return plan_fixed_chunks(total_pages, options.pages_per_file)
    if options.split_type == SplitType.RANGES:
        return plan_caller_ranges(options.page_ranges, total_pages)
    if options.split_type == SplitType.BOOKMARKS:
        return plan_bookmark_ranges(toc, total_pages)
    if options.max_file_size is None:
        raise InputError("max_file_size is required for size-based splitting")
    return plan_size_chunks(total_bytes, total_pages, options.max_file_size)


def read_toc(doc: fitz.Document) -> list:
    """Outline as ``[level, title, page]`` rows; empty when it cannot be read."""
    try:
        return doc.get_toc(simple=True)
    except Exception as exc:
        logger.warning(f"Could not read bookmarks, continuing without them: {exc}")
        return []


def rebase_toc(toc: list, page_range: PageRange) -> list:
    """
    Entries pointing into ``page_range``, renumbered for the fragment.

    Levels are flattened where a parent fell outside the range so the
    outline stays well-formed (first entry level 1, no level jumps).
    """
    rebased = []
    previous_level = 0
    for level, title, page, *_ in toc:
        if not page_range.start + 1 <= page <= page_range.end + 1:
            continue
        level = min(level, previous_level + 1)
        rebased.append([level, title, page - page_range.start])
        previous_level = level
    return rebased


def fragment_name(
    filename: str,
    index: int,
    page_range: PageRange,
    options: SplitOptions,
) -> str:
    base = strip_extension(filename)
    if not options.custom_naming:
        return f"{base}_{index}.pdf"
    name = (
        options.naming_pattern
        .replace("{filename}", base)
        .replace("{index}", f"{index:02d}")
        .replace("{start}", str(page_range.start + 1))
        .replace("{end}", str(page_range.end + 1))
    )
    return f"{name}.pdf"
