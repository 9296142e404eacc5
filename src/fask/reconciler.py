"""Deduplicate, order and merge resolved matches into output blocks."""

from typing import Iterable

from .models import ContextWindow, RenderUnit, ResolvedMatch, SearchMode


def deduplicate(matches: Iterable[ResolvedMatch]) -> list[ResolvedMatch]:
    """Drop matches pointing at an already-seen (file, line); first wins."""
    seen: set[tuple[str, int]] = set()
    unique = []
    for match in matches:
        key = (match.file, match.line_number)
        if key in seen:
            continue
        seen.add(key)
        unique.append(match)
    return unique


def group_by_file(matches: Iterable[ResolvedMatch]) -> dict[str, list[ResolvedMatch]]:
    """
    Group matches by file path.

    Files are ordered by path and matches within a file by line number.
    """
    groups: dict[str, list[ResolvedMatch]] = {}
    for match in matches:
        groups.setdefault(match.file, []).append(match)

    return {
        file: sorted(groups[file], key=lambda m: m.line_number) for file in sorted(groups)
    }


def context_window(match: ResolvedMatch, context: int) -> ContextWindow:
    """
    Compute the lines shown around a match.

    The window is clamped to [1, file length]. It always contains the
    matched line.
    """
    start = max(1, match.line_number - context)
    end = max(match.line_number, min(match.line_number + context, match.file_line_count))
    return ContextWindow(file=match.file, start=start, end=end, match=match)


def merge_windows(windows: Iterable[ContextWindow]) -> list[RenderUnit]:
    """
    Merge overlapping or adjacent windows of the same file.

    Args:
        windows: Windows of one file sorted by start line

    Returns:
        Render units covering the union of the windows, each keeping every
        match whose window it absorbed
    """
    units: list[RenderUnit] = []
    for window in windows:
        current = units[-1] if units else None
        if current is not None and current.file == window.file and window.start <= current.end + 1:
            current.end = max(current.end, window.end)
            current.matches.append(window.match)
        else:
            units.append(
                RenderUnit(
                    file=window.file,
                    start=window.start,
                    end=window.end,
                    matches=[window.match],
                )
            )
    return units


def build_render_units(
    matches: Iterable[ResolvedMatch], context: int, mode: SearchMode
) -> list[RenderUnit]:
    """
    Turn resolved matches into ordered output blocks.

    Both modes merge overlapping or adjacent context within a file, so no line
    is printed twice. RANGE mode orders blocks by file path and line. SINCE
    mode orders blocks by the oldest commit among their matches; blocks with
    the same date keep the order in which their matches were discovered.

    Args:
        matches: Resolved matches in discovery order
        context: Lines of context on each side
        mode: Output ordering

    Returns:
        Render units in display order
    """
    unique = deduplicate(matches)

    units = []
    for file_matches in group_by_file(unique).values():
        units.extend(merge_windows(context_window(m, context) for m in file_matches))

    if mode == SearchMode.SINCE:
        position = {(m.file, m.line_number): index for index, m in enumerate(unique)}
        units.sort(
            key=lambda unit: min(
                (m.commit_date, position[(m.file, m.line_number)]) for m in unit.matches
            )
        )

    return units
