"""Locate historical lines in the current version of their files."""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Sequence

from common.constants import MAX_RESOLVE_WORKERS
from common.logger import get_logger

from .file_utils import read_file_lines
from .models import CandidateLine, ResolvedMatch

logger = get_logger(__name__)


def line_matches(line: str, content: str, pattern: str) -> bool:
    """
    Check whether a current line is the same line as an added one.

    The line must contain the search pattern, and its trimmed text must equal
    or contain the trimmed added content. Containment tolerates small edits
    around the original text (indentation, trailing punctuation, appended
    words) while rejecting unrelated lines.

    Args:
        line: Line from the current file
        content: Line content as it was added in history
        pattern: Original search pattern

    Returns:
        True if line is considered a match
    """
    if pattern not in line:
        return False

    line_trimmed = line.strip()
    content_trimmed = content.strip()
    return line_trimmed == content_trimmed or content_trimmed in line_trimmed


def find_line_in_lines(
    lines: Sequence[str], content: str, pattern: str
) -> tuple[int, str] | None:
    """
    Find the first line matching an added line.

    Returns:
        (1-based line number, current line) or None if no line matches
    """
    for idx, line in enumerate(lines):
        if line_matches(line, content, pattern):
            return idx + 1, line
    return None


def resolve_candidate(
    candidate: CandidateLine, pattern: str, repo_root: Path
) -> ResolvedMatch | None:
    """
    Find where a candidate line is now, if it still exists.

    A file that was deleted, is unreadable, or is not UTF-8 text yields None.

    Args:
        candidate: Line added in some commit
        pattern: Original search pattern
        repo_root: Repository root that candidate.file is relative to

    Returns:
        ResolvedMatch or None
    """
    file_path = repo_root / candidate.file
    if not file_path.is_file():
        logger.debug(f"Skipping {candidate.file}: no longer exists")
        return None

    try:
        lines = read_file_lines(file_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Skipping {candidate.file}: {e}")
        return None

    found = find_line_in_lines(lines, candidate.content, pattern)
    if found is None:
        return None

    line_number, current_line = found
    return ResolvedMatch(
        file=candidate.file,
        line_number=line_number,
        line_content=current_line,
        commit_date=candidate.commit_date,
        commit_hash=candidate.commit_hash,
        file_line_count=len(lines),
    )


def resolve_candidates(
    candidates: Sequence[CandidateLine],
    pattern: str,
    repo_root: Path,
    max_workers: int = MAX_RESOLVE_WORKERS,
) -> list[ResolvedMatch]:
    """
    Resolve candidates concurrently.

    Each resolution only reads one file, so workers share no mutable state.
    Results keep the order of candidates.

    Args:
        candidates: Lines extracted from history
        pattern: Original search pattern
        repo_root: Repository root for candidate paths
        max_workers: Thread pool size

    Returns:
        Matches for the candidates that still exist
    """
    if not candidates:
        return []

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = executor.map(
            lambda candidate: resolve_candidate(candidate, pattern, repo_root),
            candidates,
        )
        matches = [match for match in results if match is not None]

    logger.debug(f"Resolved {len(matches)} of {len(candidates)} candidate line(s)")
    return matches
