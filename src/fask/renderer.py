"""Print render units with surrounding context and commit provenance."""

from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.text import Text

from common.logger import console as default_console
from common.logger import get_logger

from .file_utils import read_file_lines
from .models import RenderUnit, ResolvedMatch

logger = get_logger(__name__)

LINE_NUMBER_WIDTH = 4


def _provenance(matches: Sequence[ResolvedMatch]) -> Text:
    """Build " (added <date> in <hash>, ...)" for distinct commits, in line order."""
    text = Text(" (added ")
    seen = set()
    for match in sorted(matches, key=lambda m: m.line_number):
        key = (match.commit_date, match.commit_hash)
        if key in seen:
            continue
        if seen:
            text.append(", ")
        seen.add(key)
        text.append(match.commit_date.isoformat(), style="cyan")
        text.append(" in ")
        text.append(match.short_hash, style="yellow")
    text.append(")")
    return text


def format_header(unit: RenderUnit) -> Text:
    """Header naming the file and the commits that added the unit's matches."""
    return Text.assemble((unit.file, "magenta"), _provenance(unit.matches))


def format_note(match: ResolvedMatch) -> Text:
    """One-line report of a match without context."""
    return Text.assemble(
        (match.file, "magenta"),
        ":",
        (str(match.line_number), "green"),
        f": {match.line_content.strip()}",
        _provenance([match]),
    )


def format_line(line_number: int, content: str, highlighted: bool) -> Text:
    """A numbered file line; matched lines are emphasized, context is dimmed."""
    number = f"{line_number:>{LINE_NUMBER_WIDTH}}"
    if highlighted:
        return Text.assemble((number, "green"), ": ", (content, "bold"))
    return Text(f"{number}: {content}", style="dim")


class ContextRenderer:
    """Writes render units to a rich console."""

    def __init__(self, repo_root: Path, console: Console | None = None):
        """
        Args:
            repo_root: Directory that unit file paths are relative to
            console: Destination console (default: shared stdout console)
        """
        self.repo_root = repo_root
        self.console = console or default_console
        self._lines: dict[str, list[str] | None] = {}
        self._shown: dict[str, list[tuple[int, int]]] = {}

    def render(self, units: Sequence[RenderUnit]) -> None:
        """
        Print every unit, separated by blank lines.

        A unit whose matched lines were all printed by an earlier unit is
        reduced to one note per match instead of repeating its context.
        """
        for index, unit in enumerate(units):
            if index > 0:
                self._print(Text(""))

            if all(self._already_shown(m) for m in unit.matches):
                for match in unit.matches:
                    self._print(format_note(match))
                continue

            lines = self._file_lines(unit.file)
            if lines is None:
                for match in unit.matches:
                    self._print(format_note(match))
                continue

            self._render_unit(unit, lines)

    def _render_unit(self, unit: RenderUnit, lines: list[str]) -> None:
        self._print(format_header(unit))

        matched = unit.matched_lines
        end = min(unit.end, len(lines))
        for line_number in range(unit.start, end + 1):
            self._print(format_line(line_number, lines[line_number - 1], line_number in matched))

        self._shown.setdefault(unit.file, []).append((unit.start, end))

    def _already_shown(self, match: ResolvedMatch) -> bool:
        return any(
            start <= match.line_number <= end for start, end in self._shown.get(match.file, [])
        )

    def _file_lines(self, file: str) -> list[str] | None:
        if file not in self._lines:
            try:
                self._lines[file] = read_file_lines(self.repo_root / file)
            except (OSError, UnicodeDecodeError) as e:
                logger.debug(f"Cannot read {file} for context: {e}")
                self._lines[file] = None
        return self._lines[file]

    def _print(self, text: Text) -> None:
        self.console.print(text, soft_wrap=True)
