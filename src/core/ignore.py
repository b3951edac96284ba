"""Ignore-file predicates and the layered filter chain.

FileDiscoveryService answers "keep or drop" for target-relative paths from
.gitignore files (inside a git work tree) and from the tool-specific ignore
file. IgnoreFilterChain composes such predicates: a path is kept only when
every enabled layer keeps it, and each dropped path is counted against the
first layer that dropped it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pathspec

from core.interfaces import FileFilter
from core.paths import normalize_posix_relpath


logger = logging.getLogger(__name__)

GIT_IGNORE_REASON = "git ignored"
TOOL_IGNORE_REASON = "tool ignored"


def _read_lines(path: Path) -> List[str]:
    try:
        return path.read_text(encoding="utf-8", errors="replace").splitlines()
    except FileNotFoundError:
        return []
    except OSError as e:
        logger.warning("Could not read ignore file %s: %s", path, e)
        return []


def find_git_root(start: Path) -> Optional[Path]:
    for d in (start, *start.parents):
        if (d / ".git").exists():
            return d
    return None


class FileDiscoveryService:
    # Keep/drop decisions for paths relative to the target directory.

    def __init__(self, *, project_root: Path, tool_ignore_filename: str = ".mcpignore") -> None:
        self._project_root = Path(project_root).resolve()
        self._git_root = find_git_root(self._project_root)
        self._git_specs: Dict[Path, Optional[pathspec.PathSpec]] = {}

        tool_lines = _read_lines(self._project_root / tool_ignore_filename)
        self._tool_spec = pathspec.PathSpec.from_lines("gitwildmatch", tool_lines) if tool_lines else None

    @property
    def is_git_repository(self) -> bool:
        return self._git_root is not None

    def _git_spec_for(self, directory: Path) -> Optional[pathspec.PathSpec]:
        if directory not in self._git_specs:
            lines = _read_lines(directory / ".gitignore")
            if directory == self._git_root:
                lines = _read_lines(directory / ".git" / "info" / "exclude") + lines
            self._git_specs[directory] = pathspec.GitIgnoreSpec.from_lines(lines) if lines else None
        return self._git_specs[directory]

    def _absolute(self, relative_path: str) -> Path:
        return Path(os.path.normpath(self._project_root / relative_path))

    def should_git_ignore_file(self, relative_path: str) -> bool:
        if self._git_root is None:
            return False

        abs_path = self._absolute(relative_path)
        try:
            rel_to_git = abs_path.relative_to(self._git_root)
        except ValueError:
            return False

        # Every .gitignore from the work tree root down to the file's directory
        directory = self._git_root
        parts = rel_to_git.parts
        for depth in range(len(parts)):
            spec = self._git_spec_for(directory)
            if spec is not None and spec.match_file("/".join(parts[depth:])):
                return True
            directory = directory / parts[depth]
        return False

    def should_tool_ignore_file(self, relative_path: str) -> bool:
        if self._tool_spec is None:
            return False
        rel = normalize_posix_relpath(relative_path)
        if rel.startswith("../"):
            return False
        return self._tool_spec.match_file(rel)

    def filter_files(
        self,
        relative_paths: Sequence[str],
        *,
        respect_git_ignore: bool = True,
        respect_tool_ignore: bool = True,
    ) -> List[str]:
        out: List[str] = []
        for rel in relative_paths:
            if respect_git_ignore and self.should_git_ignore_file(rel):
                continue
            if respect_tool_ignore and self.should_tool_ignore_file(rel):
                continue
            out.append(rel)
        return out


@dataclass(frozen=True)
class IgnoreLayer:
    name: str
    keep: Callable[[str], bool]
    enabled: bool = True


class IgnoreFilterChain:
    # Ordered AND of ignore layers over relative paths.

    def __init__(self, layers: Sequence[IgnoreLayer] = ()) -> None:
        self._layers = tuple(layers)

    @property
    def active_layers(self) -> Tuple[IgnoreLayer, ...]:
        return tuple(layer for layer in self._layers if layer.enabled)

    def keeps(self, relative_path: str) -> bool:
        return all(layer.keep(relative_path) for layer in self.active_layers)

    def first_rejecting_layer(self, relative_path: str) -> Optional[IgnoreLayer]:
        for layer in self.active_layers:
            if not layer.keep(relative_path):
                return layer
        return None

    def partition(self, relative_paths: Sequence[str]) -> Tuple[List[str], Dict[str, int]]:
        """Split paths into kept ones and per-layer drop counts (in layer order)."""
        kept: List[str] = []
        counts: Dict[str, int] = {layer.name: 0 for layer in self.active_layers}
        for rel in relative_paths:
            layer = self.first_rejecting_layer(rel)
            if layer is None:
                kept.append(rel)
            else:
                counts[layer.name] += 1
        return kept, counts


def build_ignore_chain(
    file_filter: FileFilter,
    *,
    respect_git_ignore: bool,
    respect_tool_ignore: bool,
) -> IgnoreFilterChain:
    def _git_keep(rel: str) -> bool:
        return bool(file_filter.filter_files([rel], respect_git_ignore=True, respect_tool_ignore=False))

    def _tool_keep(rel: str) -> bool:
        return bool(file_filter.filter_files([rel], respect_git_ignore=False, respect_tool_ignore=True))

    return IgnoreFilterChain(
        [
            IgnoreLayer(name=GIT_IGNORE_REASON, keep=_git_keep, enabled=respect_git_ignore),
            IgnoreLayer(name=TOOL_IGNORE_REASON, keep=_tool_keep, enabled=respect_tool_ignore),
        ]
    )
