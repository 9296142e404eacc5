"""Search the working tree with ripgrep."""

import subprocess
from pathlib import Path

from common.logger import get_logger

from .errors import ToolNotFoundError

logger = get_logger(__name__)


def build_ripgrep_command(
    pattern: str,
    context: int,
    directory: Path,
    file_type: str | None = None,
    color: bool = False,
) -> list[str]:
    """
    Build the rg invocation for a current-files search.

    Args:
        pattern: Pattern passed to rg
        context: Lines of context around each match
        directory: Directory to search
        file_type: Optional glob such as "*.py"
        color: Whether rg should emit ANSI colors

    Returns:
        Command as an argument list
    """
    command = [
        "rg",
        "-e",
        pattern,
        f"-C{context}",
        f"--color={'always' if color else 'never'}",
        "--line-number",
        "--column",
    ]
    if file_type:
        command.extend(["-g", file_type])
    command.append(str(directory))
    return command


def run_ripgrep(
    pattern: str,
    context: int,
    directory: Path,
    file_type: str | None = None,
    color: bool = False,
) -> str | None:
    """
    Run rg and return its formatted output.

    Args:
        pattern: Pattern passed to rg
        context: Lines of context around each match
        directory: Directory to search
        file_type: Optional glob such as "*.py"
        color: Whether rg should emit ANSI colors

    Returns:
        rg's stdout, or None when rg found nothing or failed

    Raises:
        ToolNotFoundError: If rg is not installed
    """
    command = build_ripgrep_command(pattern, context, directory, file_type, color)
    logger.debug(f"Running: {' '.join(command)}")

    try:
        completed = subprocess.run(
            command,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except FileNotFoundError as e:
        raise ToolNotFoundError("Failed to execute ripgrep. Is 'rg' installed?") from e

    if completed.returncode != 0 or not completed.stdout:
        if completed.returncode not in (0, 1):
            logger.debug(f"rg exited with {completed.returncode}: {completed.stderr.strip()}")
        return None

    return completed.stdout
