"""Data models for history search results."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from common.constants import SHORT_HASH_LENGTH


class SearchMode(Enum):
    """How history results are ordered for display."""

    SINCE = "since"  # One block per match, oldest commit first
    RANGE = "range"  # Grouped by file, overlapping context merged


def short_hash(commit_hash: str) -> str:
    """Abbreviate a commit hash for display."""
    return commit_hash[:SHORT_HASH_LENGTH]


@dataclass(frozen=True)
class CandidateLine:
    """A line added in some commit that contains the search pattern."""

    file: str  # Repository-relative path as printed by git
    content: str  # Line text without the leading "+"
    commit_date: date
    commit_hash: str


@dataclass(frozen=True)
class ResolvedMatch:
    """A historical line located in the current version of its file."""

    file: str
    line_number: int  # 1-based
    line_content: str
    commit_date: date
    commit_hash: str
    file_line_count: int

    @property
    def short_hash(self) -> str:
        return short_hash(self.commit_hash)


@dataclass(frozen=True)
class ContextWindow:
    """Lines shown around a single match, inclusive on both ends."""

    file: str
    start: int
    end: int
    match: ResolvedMatch


@dataclass
class RenderUnit:
    """One block of output: merged context windows of a single file."""

    file: str
    start: int
    end: int
    matches: list[ResolvedMatch] = field(default_factory=list)

    @property
    def matched_lines(self) -> set[int]:
        """Line numbers to highlight in this block."""
        return {m.line_number for m in self.matches}
