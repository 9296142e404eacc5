"""Exceptions that abort a fask run."""


class FaskError(Exception):
    """Base class for fatal errors reported by the CLI."""


class ToolNotFoundError(FaskError):
    """Raised when an external executable (git, rg) is not installed."""


class GitError(FaskError):
    """Raised when a git command fails."""


class InvalidDateError(FaskError, ValueError):
    """Raised when a user-supplied date is not in YYYY-MM-DD format."""
