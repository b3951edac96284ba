"""Default exclusion patterns for multi-file reads.

Static patterns cover dependency and VCS directories, build output,
lockfiles and opaque binary formats. The project memory file name is
dynamic and comes from configuration, so the list is rebuilt per call.
"""

from __future__ import annotations

from typing import Callable, List, Sequence


STATIC_EXCLUDES: tuple = (
    # dependency / VCS / tooling directories
    "**/node_modules/**",
    "**/bower_components/**",
    "**/.git/**",
    "**/.svn/**",
    "**/.hg/**",
    "**/__pycache__/**",
    "**/.venv/**",
    "**/venv/**",
    "**/.tox/**",
    "**/.mypy_cache/**",
    "**/.pytest_cache/**",
    "**/.vscode/**",
    "**/.idea/**",
    # build output
    "**/dist/**",
    "**/build/**",
    "**/coverage/**",
    "**/.nyc_output/**",
    # lockfiles
    "**/package-lock.json",
    "**/yarn.lock",
    "**/pnpm-lock.yaml",
    "**/poetry.lock",
    "**/Cargo.lock",
    # binaries and archives
    "**/*.pyc",
    "**/*.pyo",
    "**/*.bin",
    "**/*.exe",
    "**/*.dll",
    "**/*.so",
    "**/*.dylib",
    "**/*.class",
    "**/*.jar",
    "**/*.war",
    "**/*.zip",
    "**/*.tar",
    "**/*.gz",
    "**/*.bz2",
    "**/*.rar",
    "**/*.7z",
    "**/*.doc",
    "**/*.docx",
    "**/*.xls",
    "**/*.xlsx",
    "**/*.ppt",
    "**/*.pptx",
    "**/*.odt",
    "**/*.ods",
    "**/*.odp",
    # OS noise and secrets
    "**/.DS_Store",
    "**/Thumbs.db",
    "**/.env",
)


class FileExclusions:
    # Builds the default exclude list; the sentinel name is looked up lazily.

    def __init__(
        self,
        *,
        context_filename: Callable[[], str],
        static_excludes: Sequence[str] = STATIC_EXCLUDES,
    ) -> None:
        self._context_filename = context_filename
        self._static = tuple(static_excludes)

    def get_read_many_files_excludes(self, extra: Sequence[str] = ()) -> List[str]:
        out = list(self._static)
        name = (self._context_filename() or "").strip()
        if name:
            out.append(f"**/{name}")
        out.extend(extra)
        return out
