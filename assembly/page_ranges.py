"""
Page range planning for split operations.

Each planner turns one split mode into an immutable list of 0-based
``PageRange`` objects:

- ``plan_fixed_chunks``: fixed-size chunks, a gap-free disjoint cover of
  ``[0, total_pages)``
- ``plan_caller_ranges``: caller-supplied 1-based ranges, clamped into bounds
- ``plan_bookmark_ranges``: one range per top-level outline entry
- ``plan_size_chunks``: chunk length estimated from the average page size
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from common.exceptions import RangeError
from common.logging_config import get_logger

from .models import PageRange

logger = get_logger(__name__)


def _require_pages(total_pages: int) -> None:
    if total_pages < 1:
        raise RangeError("Document has no pages", total_pages=total_pages)


def plan_fixed_chunks(total_pages: int, pages_per_file: int = 1) -> list[PageRange]:
    _require_pages(total_pages)
    if pages_per_file < 1:
        raise RangeError(f"pages_per_file must be >= 1, got {pages_per_file}")
    return [
        PageRange(start=start, end=min(start + pages_per_file, total_pages) - 1)
        for start in range(0, total_pages, pages_per_file)
    ]


def parse_range(spec: str, total_pages: int) -> PageRange:
    """
    Parse one 1-based ``"a-b"`` or ``"a"`` entry and clamp it into
    ``[0, total_pages)``.

    Raises:
        RangeError: Non-numeric, inverted, or entirely outside the document
    """
    text = spec.strip()
    first, sep, last = text.partition("-")
    try:
        start = int(first)
        end = int(last) if sep else start
    except ValueError:
        raise RangeError(f"Invalid page range {spec!r}", total_pages=total_pages) from None

    if end < start:
        raise RangeError(f"Inverted page range {spec!r}", total_pages=total_pages)

    start, end = max(1, start), min(total_pages, end)
    if start > end:
        raise RangeError(f"Page range {spec!r} is out of bounds", total_pages=total_pages)
    return PageRange(start=start - 1, end=end - 1)


def plan_caller_ranges(specs: Sequence[str], total_pages: int) -> list[PageRange]:
    """Ranges may be sparse or overlapping; their order is kept."""
    _require_pages(total_pages)
    if not specs:
        raise RangeError("No page ranges given", total_pages=total_pages)
    return [parse_range(spec, total_pages) for spec in specs]


def plan_bookmark_ranges(toc: Iterable[Sequence], total_pages: int) -> list[PageRange]:
    """
    One range per top-level outline entry, from its page to the page before
    the next entry. Pages before the first entry join the first range.

    Args:
        toc: Outline rows as returned by ``fitz.Document.get_toc()``
            (``[level, title, page, ...]``, pages 1-based)
        total_pages: Document page count
    """
    _require_pages(total_pages)
    starts = sorted(
        {
            int(entry[2]) - 1
            for entry in toc
            if len(entry) >= 3 and entry[0] == 1 and 1 <= int(entry[2]) <= total_pages
        }
    )
    if not starts:
        logger.info("No usable top-level bookmarks, keeping the whole document")
        return [PageRange(start=0, end=total_pages - 1)]

    starts[0] = 0
    bounds = starts + [total_pages]
    return [PageRange(start=bounds[i], end=bounds[i + 1] - 1) for i in range(len(starts))]


def plan_size_chunks(total_bytes: int, total_pages: int, max_file_size: int) -> list[PageRange]:
    """
    Chunks of ``ceil(max_file_size / (total_bytes / total_pages))`` pages.
    Page sizes vary, so fragments only approximate ``max_file_size``.
    """
    _require_pages(total_pages)
    if max_file_size < 1:
        raise RangeError(f"max_file_size must be positive, got {max_file_size}")
    average = max(total_bytes, 1) / total_pages
    pages_per_chunk = max(1, math.ceil(max_file_size / average))
    return plan_fixed_chunks(total_pages, pages_per_chunk)


def is_cover(ranges: Sequence[PageRange], total_pages: int) -> bool:
    """True when ``ranges`` are disjoint, gap-free and span ``[0, total_pages)`` in order."""
    expected = 0
    for page_range in ranges:
        if page_range.start != expected:
            return False
        expected = page_range.end + 1
    return expected == total_pages
