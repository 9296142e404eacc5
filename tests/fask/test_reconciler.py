"""Tests for deduplicating, ordering and merging matches."""

from datetime import date

import pytest

from fask.models import ResolvedMatch, SearchMode
from fask.reconciler import (
    build_render_units,
    context_window,
    deduplicate,
    group_by_file,
    merge_windows,
)


def make_match(
    file: str,
    line_number: int,
    commit_date: date = date(2025, 1, 10),
    commit_hash: str = "a" * 40,
    file_line_count: int = 100,
) -> ResolvedMatch:
    return ResolvedMatch(
        file=file,
        line_number=line_number,
        line_content=f"# TODO {file}:{line_number}",
        commit_date=commit_date,
        commit_hash=commit_hash,
        file_line_count=file_line_count,
    )


class TestDeduplicate:
    """Tests for deduplicate."""

    def test_first_seen_wins(self):
        first = make_match("a.py", 3, commit_hash="1" * 40)
        second = make_match("a.py", 3, commit_hash="2" * 40)
        other = make_match("b.py", 3)

        assert deduplicate([first, other, second]) == [first, other]

    def test_same_line_different_files_kept(self):
        matches = [make_match("a.py", 1), make_match("b.py", 1)]
        assert deduplicate(matches) == matches


def test_group_by_file_sorts_files_and_lines():
    """Test grouping orders files by path and lines ascending."""
    matches = [make_match("b.py", 9), make_match("a.py", 7), make_match("b.py", 2)]

    groups = group_by_file(matches)

    assert list(groups) == ["a.py", "b.py"]
    assert [m.line_number for m in groups["b.py"]] == [2, 9]


class TestContextWindow:
    """Tests for context_window clamping."""

    def test_middle_of_file(self):
        window = context_window(make_match("a.py", 10, file_line_count=20), 2)
        assert (window.start, window.end) == (8, 12)

    def test_clamped_at_start(self):
        window = context_window(make_match("a.py", 1, file_line_count=20), 3)
        assert (window.start, window.end) == (1, 4)

    def test_clamped_at_end(self):
        window = context_window(make_match("a.py", 20, file_line_count=20), 3)
        assert (window.start, window.end) == (17, 20)

    def test_zero_context(self):
        window = context_window(make_match("a.py", 5, file_line_count=20), 0)
        assert (window.start, window.end) == (5, 5)

    @pytest.mark.parametrize("context", [0, 1, 2, 5, 50])
    def test_bounds_hold_for_every_line(self, context):
        """Test 1 <= start <= line <= end <= file length everywhere in a file."""
        length = 7
        for line in range(1, length + 1):
            window = context_window(make_match("a.py", line, file_line_count=length), context)
            assert 1 <= window.start <= line <= window.end <= length


class TestMergeWindows:
    """Tests for merge_windows."""

    def test_overlapping_windows_merge(self):
        windows = [
            context_window(make_match("a.py", 3), 2),
            context_window(make_match("a.py", 5), 2),
        ]

        units = merge_windows(windows)

        assert len(units) == 1
        assert (units[0].start, units[0].end) == (1, 7)
        assert units[0].matched_lines == {3, 5}

    def test_adjacent_windows_merge(self):
        windows = [
            context_window(make_match("a.py", 3), 1),
            context_window(make_match("a.py", 6), 1),
        ]

        units = merge_windows(windows)

        assert [(u.start, u.end) for u in units] == [(2, 7)]

    def test_separate_windows_stay_apart(self):
        windows = [
            context_window(make_match("a.py", 3), 1),
            context_window(make_match("a.py", 7), 1),
        ]

        units = merge_windows(windows)

        assert [(u.start, u.end) for u in units] == [(2, 4), (6, 8)]

    def test_windows_of_different_files_never_merge(self):
        windows = [
            context_window(make_match("a.py", 3), 2),
            context_window(make_match("b.py", 3), 2),
        ]

        assert len(merge_windows(windows)) == 2


class TestBuildRenderUnits:
    """Tests for build_render_units."""

    def test_since_mode_merges_overlapping_windows_in_a_file(self):
        """Test nearby matches from different dates share one block."""
        newer = make_match("a.rs", 8, commit_date=date(2025, 3, 1), commit_hash="2" * 40)
        older = make_match("a.rs", 5, commit_date=date(2025, 2, 1), commit_hash="1" * 40)

        units = build_render_units([newer, older], 2, SearchMode.SINCE)

        assert len(units) == 1
        assert (units[0].start, units[0].end) == (3, 10)
        assert units[0].matched_lines == {5, 8}

    def test_since_mode_orders_blocks_by_oldest_match(self):
        """Test blocks are placed at the date of their oldest match."""
        b_new = make_match("b.py", 50, commit_date=date(2025, 4, 1))
        a_far = make_match("a.py", 90, commit_date=date(2025, 3, 1))
        b_old = make_match("b.py", 51, commit_date=date(2025, 1, 1))
        a_near = make_match("a.py", 2, commit_date=date(2025, 2, 1))

        units = build_render_units([b_new, a_far, b_old, a_near], 2, SearchMode.SINCE)

        assert [(u.file, u.start) for u in units] == [("b.py", 48), ("a.py", 1), ("a.py", 88)]

    def test_since_mode_same_date_keeps_discovery_order(self):
        first = make_match("z.py", 10)
        second = make_match("a.py", 10)

        units = build_render_units([first, second], 2, SearchMode.SINCE)

        assert [u.file for u in units] == ["z.py", "a.py"]

    def test_range_mode_groups_and_merges_per_file(self):
        matches = [
            make_match("b.py", 10),
            make_match("a.py", 5),
            make_match("a.py", 3),
            make_match("b.py", 40),
        ]

        units = build_render_units(matches, 2, SearchMode.RANGE)

        assert [(u.file, u.start, u.end) for u in units] == [
            ("a.py", 1, 7),
            ("b.py", 8, 12),
            ("b.py", 38, 42),
        ]
        assert [m.line_number for m in units[0].matches] == [3, 5]

    def test_duplicates_removed_before_rendering(self):
        first = make_match("a.py", 3, commit_hash="1" * 40)
        duplicate = make_match("a.py", 3, commit_hash="2" * 40)

        units = build_render_units([first, duplicate], 2, SearchMode.RANGE)

        assert len(units) == 1
        assert units[0].matches == [first]

    def test_empty(self):
        assert build_render_units([], 2, SearchMode.SINCE) == []
        assert build_render_units([], 2, SearchMode.RANGE) == []
