"""Logging utilities with rich output for a readable CLI experience.

This module provides a centralized logging configuration that combines
Python's standard logging with rich's console output. Diagnostic logs are
written to stderr so they never interleave with search results on stdout.

Usage:
    from common.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Scanning history...")
    logger.debug("Skipping unreadable file")
    logger.error("git log failed", exc_info=True)
"""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from common.env import env

# Console for results and user-facing messages
console = Console()

# Console for diagnostics and errors
err_console = Console(stderr=True)


def _make_handler(show_time: bool = False, show_path: bool = False) -> RichHandler:
    handler = RichHandler(
        console=err_console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=True,
        tracebacks_show_locals=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    return handler


def get_logger(
    name: str,
    level: str | None = None,
    show_time: bool = False,
    show_path: bool = False,
) -> logging.Logger:
    """Get a configured logger with rich output.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If None, uses environment variable LOG_LEVEL or defaults to INFO.
        show_time: Show timestamp in log output (default: False for clean CLI)
        show_path: Show file path in log output (default: False for clean CLI)

    Returns:
        Configured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Resolution complete")
        Resolution complete
    """
    logger = logging.getLogger(name)

    # Avoid adding multiple handlers if logger already configured
    if logger.handlers:
        return logger

    if level is None:
        level = env.log_level()

    logger.setLevel(level.upper())
    logger.addHandler(_make_handler(show_time=show_time, show_path=show_path))

    # Allow propagation for test frameworks (pytest caplog)
    logger.propagate = True

    return logger


def setup_logging(level: str | None = None) -> None:
    """Apply a logging level to every logger created through get_logger.

    Called once at the CLI entry point so that a ``--verbose`` flag (or
    LOG_LEVEL) takes effect for modules imported before argument parsing.

    Args:
        level: Logging level name; falls back to LOG_LEVEL / INFO
    """
    level = (level or env.log_level()).upper()

    for candidate in logging.root.manager.loggerDict.values():
        if not isinstance(candidate, logging.Logger):
            continue
        if any(isinstance(h, RichHandler) for h in candidate.handlers):
            candidate.setLevel(level)


def progress(message: str) -> None:
    """Print a plain progress message to stdout.

    Example:
        >>> progress("Searching for 'TODO' in current files...")
        Searching for 'TODO' in current files...
    """
    console.print(message, markup=False, highlight=False, soft_wrap=True)


def error(message: str) -> None:
    """Print an error message with red X icon to stderr.

    Example:
        >>> error("git log failed")
        ✗ git log failed
    """
    err_console.print(f"[red]✗[/red] {escape(message)}", highlight=False, soft_wrap=True)
