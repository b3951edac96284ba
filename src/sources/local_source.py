from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Optional

from core.errors import AccessDeniedError, NotFoundError, ValidationError
from core.file_types import classify
from core.models import FileSlice, ReadPolicy
from core.workspace import WorkspaceContext
from discovery.fetcher import read_text_slice


"""Local filesystem access for single-file reads.

Provides sandboxed, paginated access to text files inside the workspace
roots with strong containment checks to prevent access outside them.
"""


class LocalSource:
    # Paginated single-file reader bound to the workspace roots.

    def __init__(self, *, workspace: WorkspaceContext, policy: ReadPolicy) -> None:
        self._workspace = workspace
        self._policy = policy

    def _resolve_in_workspace(self, path: str) -> Path:
        raw = (path or "").strip()
        if not raw:
            raise ValidationError("Path is empty")

        p = Path(raw)
        if not p.is_absolute():
            p = Path(self._workspace.target_dir) / p
        p = p.resolve()

        # Strong containment check to prevent directory traversal/outside access
        if not self._workspace.is_path_within_workspace(p):
            raise AccessDeniedError("Access outside the workspace directories is not allowed")

        return p

    async def read_file(self, *, path: str, offset: int = 0, limit: Optional[int] = None) -> FileSlice:
        if offset < 0:
            raise ValidationError("offset must be a non-negative number")
        if limit is not None and limit <= 0:
            raise ValidationError("limit must be a positive number")

        p = self._resolve_in_workspace(path)

        def _do() -> FileSlice:
            if not p.exists():
                raise NotFoundError(f"File not found: {path}")
            if not p.is_file():
                raise ValidationError(f"Not a file: {path}")
            if classify(os.fspath(p)) != "text":
                raise ValidationError(f"Cannot display content of non-text file: {path}")

            return read_text_slice(os.fspath(p), offset=offset, limit=limit, policy=self._policy)

        # Offload blocking filesystem IO to a thread to keep async loop responsive
        return await asyncio.to_thread(_do)
