"""Factory for the read-many-files pipeline.

Exposes get_read_many_files_service which assembles the workspace, the
local glob matcher, the ignore-file predicates, the default excludes and
the concurrent fetcher from configuration (or explicit overrides).
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Sequence

import config
from core.excludes import FileExclusions
from core.ignore import FileDiscoveryService
from core.interfaces import GlobMatcher
from core.models import ReadPolicy
from core.workspace import WorkspaceContext
from discovery.fetcher import ConcurrentContentFetcher
from discovery.glob_matcher import LocalGlobMatcher
from discovery.service import ReadManyFilesService


def default_read_policy() -> ReadPolicy:
    return ReadPolicy(
        max_lines=config.MAX_LINES_PER_FILE,
        max_text_bytes=config.MAX_TEXT_FILE_BYTES,
        max_asset_bytes=config.MAX_ASSET_FILE_BYTES,
        encoding=config.FILE_ENCODING,
    )


def get_read_many_files_service(
    *,
    project_root: Optional[Path] = None,
    workspace_dirs: Optional[Sequence[Path]] = None,
    workspace: Optional[WorkspaceContext] = None,
    matcher: Optional[GlobMatcher] = None,
    policy: Optional[ReadPolicy] = None,
    context_filename: Optional[Callable[[], str]] = None,
    tool_ignore_filename: Optional[str] = None,
    respect_git_ignore: Optional[bool] = None,
    respect_tool_ignore: Optional[bool] = None,
    max_concurrency: Optional[int] = None,
    max_files: Optional[int] = None,
) -> ReadManyFilesService:
    """
    Build a ReadManyFilesService.

    Anything not passed explicitly falls back to the config module.
    """
    ws = workspace or WorkspaceContext(
        project_root or config.PROJECT_ROOT,
        config.WORKSPACE_DIRS if workspace_dirs is None else workspace_dirs,
    )
    ignore_name = tool_ignore_filename or config.TOOL_IGNORE_FILENAME
    target = Path(ws.target_dir)

    def _file_filter() -> FileDiscoveryService:
        return FileDiscoveryService(project_root=target, tool_ignore_filename=ignore_name)

    return ReadManyFilesService(
        workspace=ws,
        matcher=matcher or LocalGlobMatcher(),
        file_filter_factory=_file_filter,
        exclusions=FileExclusions(context_filename=context_filename or (lambda: config.CONTEXT_FILENAME)),
        fetcher=ConcurrentContentFetcher(
            policy=policy or default_read_policy(),
            max_concurrency=config.MAX_CONCURRENT_READS if max_concurrency is None else max_concurrency,
        ),
        respect_git_ignore=config.RESPECT_GIT_IGNORE if respect_git_ignore is None else respect_git_ignore,
        respect_tool_ignore=config.RESPECT_TOOL_IGNORE if respect_tool_ignore is None else respect_tool_ignore,
        max_files=config.MAX_FILES if max_files is None else max_files,
    )
