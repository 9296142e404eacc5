"""Shared constants for fask.

For environment-based settings (log level), use the env module:
    from common.env import env
    level = env.log_level()
"""

import os

# Command defaults
DEFAULT_PATTERN = "TODO"
DEFAULT_CONTEXT_LINES = 2
DEFAULT_DIRECTORY = "."
DEFAULT_TO_REF = "HEAD"

# User-supplied dates and git's --date=short output share this format
DATE_FORMAT = "%Y-%m-%d"

# Commit identifiers are shown abbreviated in headers and notes
SHORT_HASH_LENGTH = 8

# Upper bound for the thread pool that locates historical lines in current files
MAX_RESOLVE_WORKERS: int = min(32, (os.cpu_count() or 1) + 4)
