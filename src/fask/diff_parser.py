"""
Parse `git log -p` output into lines that were added containing a pattern.

The parser is a small state machine driven by line prefixes:

    START --commit--> COMMIT_HEADER --diff--> FILE_HEADER --@@--> HUNK
                            ^                     ^                 |
                            |                     +------diff-------+
                            +----------------commit-----------------+

A single context (hash, date, file) is reset at every commit boundary.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Iterable, Iterator

from common.constants import DATE_FORMAT
from common.logger import get_logger

from .models import CandidateLine, short_hash

logger = get_logger(__name__)

COMMIT_PREFIX = "commit "
DATE_PREFIX = "Date:"
DIFF_PREFIX = "diff --git "
NEW_FILE_PREFIX = "+++ "
HUNK_PREFIX = "@@"
BINARY_PREFIX = "Binary files "
DEV_NULL = "/dev/null"


class ParserState(Enum):
    """Where the parser is within the log output."""

    START = "start"
    COMMIT_HEADER = "commit_header"
    FILE_HEADER = "file_header"
    HUNK = "hunk"


@dataclass
class CommitContext:
    """What is known about the commit and file currently being read."""

    commit_hash: str = ""
    commit_date: date | None = None
    file: str | None = None


def parse_commit_date(value: str) -> date | None:
    """Parse a --date=short value, returning None when malformed."""
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def parse_new_file_path(header: str) -> str | None:
    """
    Extract the repository-relative path from a "+++ " header value.

    Handles the destination prefix, git's trailing tab for paths containing
    spaces, and C-style quoting.

    Args:
        header: Text after "+++ " (e.g. "b/src/main.rs")

    Returns:
        Path string, or None for /dev/null and unrecognized headers
    """
    value = header.rstrip("\t")

    if value.startswith('"') and value.endswith('"') and len(value) >= 2:
        value = _unquote_c_style(value[1:-1])

    if value == DEV_NULL or not value.startswith("b/"):
        return None

    return value[2:]


_C_ESCAPES = {
    "a": b"\a",
    "b": b"\b",
    "f": b"\f",
    "n": b"\n",
    "r": b"\r",
    "t": b"\t",
    "v": b"\v",
    '"': b'"',
    "\\": b"\\",
}


def _unquote_c_style(value: str) -> str:
    """
    Decode the body of a path git quoted C-style.

    Non-ASCII bytes appear as octal escapes (\\303\\251 for "é"), so escapes
    are collected as bytes and the result is decoded as UTF-8.
    """
    result = bytearray()
    i = 0
    while i < len(value):
        char = value[i]
        if char != "\\" or i + 1 == len(value):
            result.extend(char.encode("utf-8"))
            i += 1
            continue

        following = value[i + 1]
        octal = value[i + 1 : i + 4]
        if len(octal) == 3 and all(c in "01234567" for c in octal) and int(octal, 8) <= 0o377:
            result.append(int(octal, 8))
            i += 4
        elif following in _C_ESCAPES:
            result.extend(_C_ESCAPES[following])
            i += 2
        else:
            result.extend(char.encode("utf-8"))
            i += 1

    return result.decode("utf-8", errors="replace")


class DiffLogParser:
    """Incremental parser for one `git log -p` stream."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        self.state = ParserState.START
        self.context = CommitContext()
        self.skipped_commits: set[str] = set()

    def feed(self, line: str) -> CandidateLine | None:
        """
        Consume one line of log output.

        Args:
            line: A single line without its newline

        Returns:
            CandidateLine if the line is a matching addition, else None
        """
        if line.startswith(COMMIT_PREFIX):
            self._start_commit(line[len(COMMIT_PREFIX) :].strip())
            return None

        if self.state == ParserState.COMMIT_HEADER:
            if line.startswith(DATE_PREFIX):
                self._read_date(line[len(DATE_PREFIX) :])
            elif line.startswith(DIFF_PREFIX):
                self._start_file()
            return None

        if self.state == ParserState.FILE_HEADER:
            if line.startswith(NEW_FILE_PREFIX):
                self.context.file = parse_new_file_path(line[len(NEW_FILE_PREFIX) :])
            elif line.startswith(HUNK_PREFIX):
                self.state = ParserState.HUNK
            elif line.startswith(BINARY_PREFIX):
                logger.debug(f"Skipping binary file in {short_hash(self.context.commit_hash)}")
                self.context.file = None
            elif line.startswith(DIFF_PREFIX):
                self._start_file()
            return None

        if self.state == ParserState.HUNK:
            if line.startswith(DIFF_PREFIX):
                self._start_file()
            elif line.startswith("+"):
                return self._addition(line[1:])
            return None

        return None

    def parse(self, lines: Iterable[str]) -> Iterator[CandidateLine]:
        """Yield every matching addition in the given log lines."""
        for line in lines:
            candidate = self.feed(line)
            if candidate is not None:
                yield candidate

    def _start_commit(self, commit_hash: str) -> None:
        self.context = CommitContext(commit_hash=commit_hash)
        self.state = ParserState.COMMIT_HEADER

    def _start_file(self) -> None:
        self.context.file = None
        self.state = ParserState.FILE_HEADER

    def _read_date(self, value: str) -> None:
        self.context.commit_date = parse_commit_date(value)
        if self.context.commit_date is None:
            logger.debug(
                f"Skipping commit {short_hash(self.context.commit_hash)}: "
                f"unparseable date '{value.strip()}'"
            )
            self.skipped_commits.add(self.context.commit_hash)

    def _addition(self, content: str) -> CandidateLine | None:
        if self.pattern not in content:
            return None
        if self.context.commit_date is None or self.context.file is None:
            return None

        return CandidateLine(
            file=self.context.file,
            content=content,
            commit_date=self.context.commit_date,
            commit_hash=self.context.commit_hash,
        )


def parse_git_log_diff(output: str, pattern: str) -> list[CandidateLine]:
    """
    Find lines added in `git log -p` output that contain pattern.

    Args:
        output: Raw log text produced by GitClient.log_additions
        pattern: Literal substring to look for in added lines

    Returns:
        Candidate lines in the order git printed them
    """
    parser = DiffLogParser(pattern)
    return list(parser.parse(output.split("\n")))
