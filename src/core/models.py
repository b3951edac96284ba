"""Immutable dataclasses shared by the discovery and reading pipeline.

Includes the request model for the read_many_files tool, the per-file
records flowing between resolver, fetcher and assembler (CandidateFile,
SkipRecord, FetchSuccess, FetchFailure) and the final result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Literal, Optional, Tuple, Union


FileType = Literal["text", "image", "pdf", "binary"]


@dataclass(frozen=True)
class ReadManyFilesRequest:
    """Request model for reading many files at once.

    Field groups:
    - Patterns: paths (required), include (merged with paths)
    - Exclusions: exclude, use_default_excludes
    - Ignore layers: respect_git_ignore, respect_tool_ignore (None = config default)
    - Limits: max_files
    """

    paths: Tuple[str, ...]
    include: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ()

    use_default_excludes: bool = True

    respect_git_ignore: Optional[bool] = None
    respect_tool_ignore: Optional[bool] = None

    # Cap on files read per call (None = config default)
    max_files: Optional[int] = None

    @property
    def search_patterns(self) -> List[str]:
        return [*self.paths, *self.include]


@dataclass(frozen=True, order=True)
class CandidateFile:
    # Identity and ordering are the absolute path only
    absolute_path: str
    display_path: str = field(compare=False)


@dataclass(frozen=True)
class SkipRecord:
    path: str
    reason: str


@dataclass(frozen=True)
class ReadPolicy:
    max_lines: int = 2000
    max_text_bytes: int = 1024 * 1024
    max_asset_bytes: int = 20 * 1024 * 1024
    encoding: str = "utf-8"


@dataclass(frozen=True)
class BinaryPart:
    """Opaque payload for an explicitly requested image or PDF."""

    path: str
    mime_type: str
    data: bytes


@dataclass(frozen=True)
class FetchSuccess:
    content: Union[str, BinaryPart]
    mime_type: str
    truncated: bool = False
    # Set only when truncated
    truncation_note: Optional[str] = None


@dataclass(frozen=True)
class FetchFailure:
    reason: str


FetchOutcome = Union[FetchSuccess, FetchFailure]

ContentPart = Union[str, BinaryPart]


@dataclass(frozen=True)
class ResolvedCandidates:
    candidates: FrozenSet[CandidateFile]
    skipped: Tuple[SkipRecord, ...] = ()


@dataclass(frozen=True)
class ReadManyFilesResult:
    combined_content: List[ContentPart]
    display_summary: str
    processed: List[str]
    skipped: List[SkipRecord]


@dataclass(frozen=True)
class FileSlice:
    """One page of a text file returned by the read_file tool."""

    content: str
    start_line: int
    end_line: int
    total_lines: int

    @property
    def truncated(self) -> bool:
        return self.start_line > 1 or self.end_line < self.total_lines
