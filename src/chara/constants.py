"""Shared constants for the chara package.

This module contains constants that are used across multiple modules
to avoid circular imports. It does not import anything from the internal
codebase.
"""

import os
from pathlib import Path

# Configuration file, overridable per process
CONFIG_PATH = Path(os.getenv("CHARA_CONFIG_PATH", "chara.yaml"))

# Response contract
NO_MATCHES_MESSAGE = "No matches found"
DEFAULT_DISPLAY_LIMIT = 50

# Engine defaults
DEFAULT_MAX_WORKERS = 4
DEFAULT_FILE_TIME_BUDGET_SECONDS = 10.0

# Directories never descended into during directory or glob expansion
ALWAYS_IGNORED_DIRS = frozenset(
    {
        ".chara",
        ".git",
        "node_modules",
        ".turbo",
        ".cache",
        "dist",
        "build",
        ".next",
        ".nuxt",
        "coverage",
        ".nyc_output",
        "tmp",
        "temp",
        # Python build and tool caches
        "__pycache__",
        ".venv",
        ".tox",
        ".mypy_cache",
        ".pytest_cache",
        ".ruff_cache",
    },
)
