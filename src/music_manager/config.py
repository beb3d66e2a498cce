# music_manager/config.py

"""Shared configuration and environment setup."""

from __future__ import annotations

import logging
from os import getenv
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(override=True)

DEFAULT_LIBRARY_PATH = Path("data/library.jsonl")


def get_project_root() -> Path:
    """Return the project root directory.

    Prefers MUSIC_MANAGER_PROJECT_ROOT env var. Falls back to current working directory.
    """
    if root := getenv("MUSIC_MANAGER_PROJECT_ROOT"):
        return Path(root).resolve()
    return Path.cwd()


def get_library_path() -> Path:
    """Return the library JSONL path (MUSIC_MANAGER_LIBRARY or data/library.jsonl)."""
    if path := getenv("MUSIC_MANAGER_LIBRARY"):
        return Path(path)
    return get_project_root() / DEFAULT_LIBRARY_PATH


def get_log_level() -> int:
    """Return the logging level named by MUSIC_MANAGER_LOG_LEVEL (default INFO)."""
    name = getenv("MUSIC_MANAGER_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    return logging.INFO
