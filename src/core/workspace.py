"""Workspace roots and the security boundary around them.

A path is in scope only when, after symlink resolution and normalization,
it equals or descends from at least one workspace root.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Sequence, Union

from core.errors import NotFoundError


PathLike = Union[str, Path]


def _canonical(path: PathLike) -> str:
    return os.path.normcase(os.path.realpath(os.path.abspath(os.fspath(path))))


def is_within_root(path: PathLike, root: PathLike) -> bool:
    """Separator-aware containment: '/a/bc' is not inside '/a/b'."""
    p = _canonical(path)
    r = _canonical(root)
    if p == r:
        return True
    prefix = r if r.endswith(os.sep) else r + os.sep
    return p.startswith(prefix)


def is_contained(path: PathLike, roots: Iterable[PathLike]) -> bool:
    return any(is_within_root(path, root) for root in roots)


class WorkspaceContext:
    # Ordered set of workspace roots; the first one is the target directory.

    def __init__(self, target_dir: PathLike, additional_dirs: Sequence[PathLike] = ()) -> None:
        self._target_dir = Path(target_dir).resolve()
        self._directories: List[str] = []
        self.add_directory(self._target_dir)
        for d in additional_dirs:
            self.add_directory(d)

    @property
    def target_dir(self) -> str:
        return str(self._target_dir)

    def add_directory(self, directory: PathLike) -> None:
        p = Path(directory).resolve()
        if not p.is_dir():
            raise NotFoundError(f"Workspace directory does not exist: {directory}")
        s = str(p)
        if s not in self._directories:
            self._directories.append(s)

    def get_directories(self) -> List[str]:
        return list(self._directories)

    def is_path_within_workspace(self, path: PathLike) -> bool:
        return is_contained(path, self._directories)
