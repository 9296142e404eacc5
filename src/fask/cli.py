#!/usr/bin/env python3
"""CLI interface for fask."""

import argparse
import sys
from pathlib import Path

from common.constants import (
    DEFAULT_CONTEXT_LINES,
    DEFAULT_DIRECTORY,
    DEFAULT_PATTERN,
    DEFAULT_TO_REF,
)
from common.logger import error, setup_logging

from .errors import FaskError
from .main import parse_date, search_commit_range, search_current_files, search_since_date


def _check_common_args(args) -> str | None:
    """Validate arguments shared by all commands; return an error message or None."""
    if not args.pattern:
        return "Pattern must not be empty"
    if args.context < 0:
        return "Context must be zero or more lines"
    if not args.directory.is_dir():
        return f"{args.directory} is not a directory"
    return None


def cmd_current(args):
    """Search current files with ripgrep.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    problem = _check_common_args(args)
    if problem:
        error(problem)
        return 1

    try:
        search_current_files(
            args.pattern,
            args.context,
            args.directory,
            file_type=args.file_type,
            color=sys.stdout.isatty(),
        )
        return 0
    except FaskError as e:
        error(str(e))
        return 1


def cmd_since(args):
    """Search lines added to git history since a date.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    try:
        # Reject a bad date before anything else runs
        parse_date(args.date)
    except FaskError as e:
        error(str(e))
        return 1

    problem = _check_common_args(args)
    if problem:
        error(problem)
        return 1

    try:
        search_since_date(args.date, args.pattern, args.context, args.directory)
        return 0
    except FaskError as e:
        error(str(e))
        return 1


def cmd_range(args):
    """Search lines added to git history in a commit range.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    problem = _check_common_args(args)
    if problem:
        error(problem)
        return 1

    try:
        search_commit_range(
            args.from_ref,
            args.pattern,
            args.context,
            args.directory,
            to_ref=args.to_ref,
        )
        return 0
    except FaskError as e:
        error(str(e))
        return 1


def _add_search_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-p",
        "--pattern",
        default=DEFAULT_PATTERN,
        help=f"Pattern to search for (default: {DEFAULT_PATTERN})",
    )
    parser.add_argument(
        "-C",
        "--context",
        type=int,
        default=DEFAULT_CONTEXT_LINES,
        help=f"Number of context lines to show (default: {DEFAULT_CONTEXT_LINES})",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all subcommands."""
    parser = argparse.ArgumentParser(
        prog="fask", description="Find and search for TODOs in your codebase"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging on stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Current command
    current_parser = subparsers.add_parser(
        "current", help="Search for TODOs in current files (like ripgrep)"
    )
    _add_search_arguments(current_parser)
    current_parser.add_argument(
        "-t",
        "--file-type",
        default=None,
        help='File pattern to include (e.g., "*.rs", "*.js")',
    )
    current_parser.add_argument(
        "-d",
        "--directory",
        type=Path,
        default=Path(DEFAULT_DIRECTORY),
        help="Directory to search in (default: current directory)",
    )
    current_parser.set_defaults(func=cmd_current)

    # Since command
    since_parser = subparsers.add_parser(
        "since", help="Search for TODOs added after a specific date in git history"
    )
    since_parser.add_argument(
        "-d",
        "--date",
        required=True,
        help='Date in YYYY-MM-DD format (e.g., "2025-12-01")',
    )
    _add_search_arguments(since_parser)
    since_parser.add_argument(
        "-D",
        "--directory",
        type=Path,
        default=Path(DEFAULT_DIRECTORY),
        help="Directory to search in (default: current directory)",
    )
    since_parser.set_defaults(func=cmd_since)

    # Range command
    range_parser = subparsers.add_parser(
        "range", help="Search for TODOs added in a commit range (FROM..TO)"
    )
    range_parser.add_argument("from_ref", metavar="FROM", help="Start of the range (exclusive)")
    range_parser.add_argument(
        "to_ref",
        metavar="TO",
        nargs="?",
        default=DEFAULT_TO_REF,
        help=f"End of the range (default: {DEFAULT_TO_REF})",
    )
    _add_search_arguments(range_parser)
    range_parser.add_argument(
        "-D",
        "--directory",
        type=Path,
        default=Path(DEFAULT_DIRECTORY),
        help="Directory to search in (default: current directory)",
    )
    range_parser.set_defaults(func=cmd_range)

    return parser


def main(argv: list[str] | None = None):
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        setup_logging("DEBUG")

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
