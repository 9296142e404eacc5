"""Git utilities for history search."""

import subprocess
from datetime import date
from pathlib import Path
from typing import Iterable

from common.logger import get_logger

from .errors import GitError, ToolNotFoundError

logger = get_logger(__name__)

# Header lines emitted before each commit's patch; parsed by diff_parser
LOG_FORMAT = "--format=commit %H%nDate: %ad"


def _run_git(args: Iterable[str], *, cwd: Path, operation: str) -> str:
    """
    Run a git sub-command and return its stdout.

    Output is decoded as UTF-8 with replacement characters so that binary
    or mis-encoded content in a patch never aborts the run.

    Args:
        args: Arguments after "git"
        cwd: Working directory for the command
        operation: Human-readable name used in error messages

    Returns:
        Raw stdout text

    Raises:
        ToolNotFoundError: If git is not installed
        GitError: If git exits non-zero
    """
    command = ["git", *args]
    logger.debug(f"Running: {' '.join(command)}")

    try:
        completed = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except FileNotFoundError as e:
        raise ToolNotFoundError("Failed to execute git. Is 'git' installed?") from e

    if completed.returncode != 0:
        detail = completed.stderr.strip() or f"exit status {completed.returncode}"
        raise GitError(f"{operation} failed: {detail}")

    return completed.stdout


class GitClient:
    """Runs the git queries needed by the history search pipeline."""

    def __init__(self, directory: Path):
        """
        Args:
            directory: Directory to search; history is limited to this subtree
        """
        self.directory = directory

    def repo_root(self) -> Path:
        """
        Get the top-level directory of the repository containing self.directory.

        Paths in git's diff output are relative to this directory.

        Raises:
            GitError: If the directory is not inside a git work tree
        """
        output = _run_git(
            ["rev-parse", "--show-toplevel"],
            cwd=self.directory,
            operation="git rev-parse",
        )
        return Path(output.strip())

    def has_commits(self) -> bool:
        """
        Check whether HEAD points at a commit.

        A freshly initialized repository has an unborn HEAD, and git log
        fails on it.

        Raises:
            ToolNotFoundError: If git is not installed
        """
        try:
            _run_git(
                ["rev-parse", "--verify", "-q", "HEAD"],
                cwd=self.directory,
                operation="git rev-parse",
            )
        except GitError:
            return False
        return True

    def log_additions(
        self,
        pattern: str,
        *,
        since: date | None = None,
        revision_range: str | None = None,
    ) -> str:
        """
        Get patches of commits that changed the number of occurrences of pattern.

        Uses the pickaxe (git log -S) so only relevant commits are diffed.

        Args:
            pattern: Literal string to search for
            since: Only commits on or after this date
            revision_range: Only commits in this range (e.g. "v1..v2")

        Returns:
            Raw git log -p output, one "commit <hash>" / "Date: <YYYY-MM-DD>"
            header per commit

        Raises:
            GitError: If git log fails
        """
        args = [
            "-c",
            "core.quotePath=false",
            "log",
            "-S",
            pattern,
            "-p",
            LOG_FORMAT,
            "--date=short",
            "--diff-filter=AM",
            "--src-prefix=a/",
            "--dst-prefix=b/",
            "--no-color",
            "--no-ext-diff",
        ]

        if since is not None:
            # A bare date would be taken at the current time of day
            args.append(f"--since={since.isoformat()} 00:00:00")

        # Everything after --end-of-options is a revision, even if it starts with "-"
        args.append("--end-of-options")
        if revision_range is not None:
            args.append(revision_range)

        args.extend(["--", "."])

        return _run_git(args, cwd=self.directory, operation="git log")
