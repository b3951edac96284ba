"""ReadManyFilesService: the single discovery-and-read call.

Wires PatternResolver -> ConcurrentContentFetcher -> ResultAssembler for
one request. Every entity it creates is request-scoped.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from core.errors import ValidationError
from core.excludes import FileExclusions
from core.ignore import build_ignore_chain
from core.interfaces import FileFilter, GlobMatcher
from core.models import ReadManyFilesRequest, ReadManyFilesResult, ResolvedCandidates, SkipRecord
from core.workspace import WorkspaceContext
from discovery.assembler import ResultAssembler
from discovery.fetcher import ConcurrentContentFetcher
from discovery.resolver import PatternResolver


logger = logging.getLogger(__name__)


def max_files_reason(limit: int) -> str:
    return f"exceeded max_files limit of {limit}"


def validate_request(request: ReadManyFilesRequest) -> None:
    if not request.paths:
        raise ValidationError("At least one path or glob pattern is required")
    for group, values in (("paths", request.paths), ("include", request.include), ("exclude", request.exclude)):
        for v in values:
            if not isinstance(v, str) or not v.strip():
                raise ValidationError(f"Empty pattern in '{group}'")
    if request.max_files is not None and request.max_files < 1:
        raise ValidationError("max_files must be a positive number")


class ReadManyFilesService:
    def __init__(
        self,
        *,
        workspace: WorkspaceContext,
        matcher: GlobMatcher,
        file_filter_factory: Callable[[], FileFilter],
        exclusions: FileExclusions,
        fetcher: ConcurrentContentFetcher,
        respect_git_ignore: bool = True,
        respect_tool_ignore: bool = True,
        max_files: int = 50,
    ) -> None:
        self._workspace = workspace
        self._file_filter_factory = file_filter_factory
        self._exclusions = exclusions
        self._fetcher = fetcher
        self._respect_git_ignore = respect_git_ignore
        self._respect_tool_ignore = respect_tool_ignore
        self._max_files = max_files
        self._resolver = PatternResolver(
            matcher=matcher,
            workspace=workspace,
            target_dir=workspace.target_dir,
        )
        self._assembler = ResultAssembler(target_dir=workspace.target_dir)

    @property
    def workspace(self) -> WorkspaceContext:
        return self._workspace

    def effective_excludes(self, request: ReadManyFilesRequest) -> List[str]:
        if request.use_default_excludes:
            return self._exclusions.get_read_many_files_excludes(request.exclude)
        return list(request.exclude)

    async def discover(
        self,
        request: ReadManyFilesRequest,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> ResolvedCandidates:
        validate_request(request)

        respect_git = self._respect_git_ignore if request.respect_git_ignore is None else request.respect_git_ignore
        respect_tool = self._respect_tool_ignore if request.respect_tool_ignore is None else request.respect_tool_ignore
        chain = build_ignore_chain(
            # Ignore files are re-read on every call
            self._file_filter_factory(),
            respect_git_ignore=respect_git,
            respect_tool_ignore=respect_tool,
        )

        return await self._resolver.resolve(
            request.search_patterns,
            excludes=self.effective_excludes(request),
            ignore_chain=chain,
            cancel_event=cancel_event,
        )

    async def read_many_files(
        self,
        request: ReadManyFilesRequest,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> ReadManyFilesResult:
        resolved = await self.discover(request, cancel_event=cancel_event)
        logger.debug(
            "Resolved %d candidate(s), %d discovery skip record(s)",
            len(resolved.candidates),
            len(resolved.skipped),
        )

        # Cap applies after sorting by absolute path
        limit = self._max_files if request.max_files is None else request.max_files
        ordered = sorted(resolved.candidates)
        selected = ordered[:limit]
        skipped = list(resolved.skipped)
        if len(ordered) > limit:
            logger.info("max_files cap: reading %d of %d file(s)", limit, len(ordered))
            skipped.append(SkipRecord(path=f"{len(ordered) - limit} file(s)", reason=max_files_reason(limit)))

        outcomes = await self._fetcher.fetch_all(
            selected,
            requested_patterns=list(request.paths),
            cancel_event=cancel_event,
        )

        parts, summary, processed, skipped = self._assembler.assemble(
            selected,
            outcomes,
            skipped,
        )
        return ReadManyFilesResult(
            combined_content=parts,
            display_summary=summary,
            processed=processed,
            skipped=skipped,
        )
