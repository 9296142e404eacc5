"""Helpers for reading current file contents."""

from pathlib import Path


def split_lines(text: str) -> list[str]:
    """
    Split file text into lines.

    Lines end at "\\n"; a "\\r" before it is dropped. A trailing newline does
    not start an extra empty line. Other characters that str.splitlines()
    treats as breaks (form feed, U+2028, ...) stay inside their line so that
    numbering agrees with git and ripgrep.

    Args:
        text: Full file content

    Returns:
        List of lines without terminators
    """
    if not text:
        return []

    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()

    return [line[:-1] if line.endswith("\r") else line for line in lines]


def read_file_lines(path: Path) -> list[str]:
    """
    Read a UTF-8 text file as a list of lines.

    Args:
        path: File to read

    Returns:
        Lines of the file (see split_lines)

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not valid UTF-8
    """
    return split_lines(path.read_bytes().decode("utf-8"))
