"""
Search for marker comments in the working tree or in git history.

History searches run the pipeline:

    git log -S -p  ->  DiffLogParser  ->  resolve_candidates
        ->  build_render_units  ->  ContextRenderer

Everything is collected before rendering, so output order depends only on
the repository state, never on thread scheduling.
"""

from datetime import date, datetime
from pathlib import Path

from common.constants import DATE_FORMAT, DEFAULT_TO_REF
from common.logger import get_logger, progress

from .diff_parser import DiffLogParser
from .errors import InvalidDateError
from .git_utils import GitClient
from .matcher import resolve_candidates
from .models import ResolvedMatch, SearchMode
from .reconciler import build_render_units, deduplicate
from .renderer import ContextRenderer
from .ripgrep import run_ripgrep

logger = get_logger(__name__)


def parse_date(value: str) -> date:
    """
    Parse a user-supplied YYYY-MM-DD date.

    Raises:
        InvalidDateError: If the value is not a valid calendar date in that format
    """
    message = f"Invalid date format '{value}'. Use YYYY-MM-DD (e.g., 2025-12-01)"
    try:
        parsed = datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidDateError(message) from e

    # strptime also accepts unpadded fields such as 2025-1-5; %Y does not pad years below 1000
    if f"{parsed.year:04d}-{parsed.month:02d}-{parsed.day:02d}" != value:
        raise InvalidDateError(message)

    return parsed


def search_current_files(
    pattern: str,
    context: int,
    directory: Path,
    file_type: str | None = None,
    color: bool = False,
) -> bool:
    """
    Search current files with ripgrep and print its output verbatim.

    Returns:
        True if rg reported matches
    """
    progress(f"Searching for '{pattern}' in current files...\n")

    output = run_ripgrep(pattern, context, directory, file_type=file_type, color=color)
    if output is None:
        progress("No matches found.")
        return False

    print(output, end="")
    return True


def run_history_search(
    git: GitClient,
    pattern: str,
    context: int,
    mode: SearchMode,
    scope: str,
    *,
    since: date | None = None,
    revision_range: str | None = None,
) -> list[ResolvedMatch]:
    """
    Find lines added in history that still exist and print them with context.

    Args:
        git: Client for the repository being searched
        pattern: Literal string to search for
        context: Lines of context around each match
        mode: Output ordering
        scope: Human-readable description of the history searched
            (e.g. "since 2025-01-01")
        since: Only commits on or after this date
        revision_range: Only commits in this range

    Returns:
        Deduplicated matches that were printed

    Raises:
        GitError: If a git command fails
        ToolNotFoundError: If git is not installed
    """
    progress(f"Searching for '{pattern}' in lines added {scope}...\n")

    repo_root = git.repo_root()

    # git log fails on an unborn HEAD; a repository without commits added nothing
    if revision_range is None and not git.has_commits():
        progress(f"No '{pattern}' additions found {scope}.")
        return []

    log_output = git.log_additions(pattern, since=since, revision_range=revision_range)

    parser = DiffLogParser(pattern)
    candidates = list(parser.parse(log_output.split("\n")))
    if parser.skipped_commits:
        logger.debug(f"Ignored {len(parser.skipped_commits)} commit(s) with unparseable dates")

    if not candidates:
        progress(f"No '{pattern}' additions found {scope}.")
        return []

    logger.debug(f"Found {len(candidates)} added line(s) containing '{pattern}'")

    matches = deduplicate(resolve_candidates(candidates, pattern, repo_root))
    if not matches:
        progress(f"No '{pattern}' found in lines added {scope} (lines may have been removed).")
        return []

    progress(f"Found {len(matches)} match(es):\n")
    units = build_render_units(matches, context, mode)
    ContextRenderer(repo_root).render(units)

    return matches


def search_since_date(
    date_str: str,
    pattern: str,
    context: int,
    directory: Path,
    git: GitClient | None = None,
) -> list[ResolvedMatch]:
    """
    Show lines containing pattern that were added since a date.

    Matches are printed oldest commit first.

    Raises:
        InvalidDateError: If date_str is not YYYY-MM-DD (before git is run)
        GitError: If a git command fails
    """
    since = parse_date(date_str)
    git = git or GitClient(directory)

    return run_history_search(
        git,
        pattern,
        context,
        SearchMode.SINCE,
        f"since {since.isoformat()}",
        since=since,
    )


def search_commit_range(
    from_ref: str,
    pattern: str,
    context: int,
    directory: Path,
    to_ref: str = DEFAULT_TO_REF,
    git: GitClient | None = None,
) -> list[ResolvedMatch]:
    """
    Show lines containing pattern that were added in from_ref..to_ref.

    Matches are grouped by file with overlapping context merged.

    Raises:
        GitError: If a ref is unknown or a git command fails
    """
    revision_range = f"{from_ref}..{to_ref}"
    git = git or GitClient(directory)

    return run_history_search(
        git,
        pattern,
        context,
        SearchMode.RANGE,
        f"in {revision_range}",
        revision_range=revision_range,
    )
