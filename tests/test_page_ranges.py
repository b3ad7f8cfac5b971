"""
Tests for split range planning.
"""

import pytest

from assembly.models import PageRange
from assembly.page_ranges import (
    is_cover,
    parse_range,
    plan_bookmark_ranges,
    plan_caller_ranges,
    plan_fixed_chunks,
    plan_size_chunks,
)
from common.exceptions import RangeError


def labels(ranges):
    return [r.label for r in ranges]


class TestFixedChunks:
    """Tests for fixed-size chunking."""

    def test_one_page_each(self):
        assert labels(plan_fixed_chunks(3)) == ["1-1", "2-2", "3-3"]

    def test_uneven_last_chunk(self):
        assert labels(plan_fixed_chunks(10, 3)) == ["1-3", "4-6", "7-9", "10-10"]

    def test_chunk_larger_than_document(self):
        assert labels(plan_fixed_chunks(4, 10)) == ["1-4"]

    @pytest.mark.parametrize("total, per_file", [(1, 1), (7, 2), (10, 3), (12, 4), (5, 9)])
    def test_always_a_cover(self, total, per_file):
        ranges = plan_fixed_chunks(total, per_file)
        assert is_cover(ranges, total)
        assert sum(r.page_count for r in ranges) == total

    def test_empty_document(self):
        with pytest.raises(RangeError):
            plan_fixed_chunks(0)

    def test_invalid_chunk(self):
        with pytest.raises(RangeError):
            plan_fixed_chunks(5, 0)


class TestCallerRanges:
    """Tests for caller-supplied ranges."""

    def test_order_and_duplicates_kept(self):
        ranges = plan_caller_ranges(["3", "1", "3"], 5)
        assert ranges == [PageRange(start=2, end=2), PageRange(start=0, end=0), PageRange(start=2, end=2)]

    def test_sparse(self):
        ranges = plan_caller_ranges(["1-3", "5", "7-9"], 10)
        assert [r.page_count for r in ranges] == [3, 1, 3]

    def test_overlapping(self):
        assert labels(plan_caller_ranges(["1-3", "2-4"], 5)) == ["1-3", "2-4"]

    def test_clamped(self):
        assert parse_range("8-20", 10) == PageRange(start=7, end=9)
        assert parse_range("0-2", 10) == PageRange(start=0, end=1)

    def test_whitespace(self):
        assert parse_range(" 2 - 4 ", 10) == PageRange(start=1, end=3)

    @pytest.mark.parametrize("spec", ["12-14", "11", "abc", "2-x", "5-3", ""])
    def test_invalid(self, spec):
        with pytest.raises(RangeError) as exc_info:
            parse_range(spec, 10)
        assert exc_info.value.total_pages == 10

    def test_no_ranges(self):
        with pytest.raises(RangeError):
            plan_caller_ranges([], 5)


class TestBookmarkRanges:
    """Tests for outline-driven ranges."""

    def test_top_level_entries(self):
        toc = [[1, "Intro", 1], [1, "Body", 3], [2, "Detail", 4], [1, "End", 6]]
        assert labels(plan_bookmark_ranges(toc, 6)) == ["1-2", "3-5", "6-6"]

    def test_leading_pages_join_first_range(self):
        toc = [[1, "A", 3], [1, "B", 5]]
        ranges = plan_bookmark_ranges(toc, 6)
        assert labels(ranges) == ["1-4", "5-6"]
        assert is_cover(ranges, 6)

    def test_no_bookmarks_keeps_document(self):
        assert labels(plan_bookmark_ranges([], 4)) == ["1-4"]

    def test_only_nested_bookmarks(self):
        assert labels(plan_bookmark_ranges([[2, "Deep", 2]], 4)) == ["1-4"]

    def test_invalid_targets_ignored(self):
        toc = [[1, "A", 1], [1, "Dangling", -1], [1, "Beyond", 99], [1, "B", 3]]
        assert labels(plan_bookmark_ranges(toc, 4)) == ["1-2", "3-4"]

    def test_duplicate_targets_collapse(self):
        toc = [[1, "A", 1], [1, "Same page", 1], [1, "B", 2]]
        assert labels(plan_bookmark_ranges(toc, 2)) == ["1-1", "2-2"]


class TestSizeChunks:
    def test_average_page_size(self):
        # 100 bytes per page, 250 per file -> 3 pages per fragment
        assert labels(plan_size_chunks(1000, 10, 250)) == ["1-3", "4-6", "7-9", "10-10"]

    def test_tiny_limit_gives_single_pages(self):
        assert len(plan_size_chunks(1000, 10, 1)) == 10

    def test_invalid_limit(self):
        with pytest.raises(RangeError):
            plan_size_chunks(1000, 10, 0)


class TestIsCover:
    def test_gap(self):
        assert not is_cover([PageRange(start=0, end=1), PageRange(start=3, end=4)], 5)

    def test_overlap(self):
        assert not is_cover([PageRange(start=0, end=2), PageRange(start=2, end=4)], 5)

    def test_short(self):
        assert not is_cover([PageRange(start=0, end=2)], 5)
