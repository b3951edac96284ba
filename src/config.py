"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
project-level configuration constants used across the codebase (e.g.
PROJECT_ROOT, WORKSPACE_DIRS, ignore-file names, read budgets).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_list(name: str) -> List[str]:
    raw = os.environ.get(name)
    if not raw:
        return []
    return [item.strip() for item in raw.split(os.pathsep) if item.strip()]


# Target directory: display/provenance root and the first workspace root
PROJECT_ROOT = Path(os.environ.get("PROJECT_ROOT", ".")).resolve()

# Additional workspace roots (os.pathsep separated)
WORKSPACE_DIRS = [Path(p).resolve() for p in _env_list("WORKSPACE_DIRS")]

# Ignore layers
RESPECT_GIT_IGNORE = _env_bool("RESPECT_GIT_IGNORE", True)
RESPECT_TOOL_IGNORE = _env_bool("RESPECT_TOOL_IGNORE", True)
TOOL_IGNORE_FILENAME = os.environ.get("TOOL_IGNORE_FILENAME", ".mcpignore").strip() or ".mcpignore"

# Project memory file, always excluded by the default excludes
CONTEXT_FILENAME = os.environ.get("CONTEXT_FILENAME", "CONTEXT.md").strip() or "CONTEXT.md"

# Limits
MAX_LINES_PER_FILE = _env_int("MAX_LINES_PER_FILE", 2000)
MAX_TEXT_FILE_BYTES = _env_int("MAX_TEXT_FILE_BYTES", 1024 * 1024)
MAX_ASSET_FILE_BYTES = _env_int("MAX_ASSET_FILE_BYTES", 20 * 1024 * 1024)
MAX_CONCURRENT_READS = _env_int("MAX_CONCURRENT_READS", 16)
MAX_FILES = _env_int("MAX_FILES", 50)
FILE_ENCODING = os.environ.get("FILE_ENCODING", "utf-8").strip() or "utf-8"

# Logging (stderr; stdout is the stdio transport)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
