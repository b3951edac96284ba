"""Core protocol and interface definitions.

Defines the collaborators consumed by the discovery pipeline: the glob
matcher, the ignore-file predicates and the workspace root provider.
"""

from __future__ import annotations

import threading
from typing import List, Optional, Protocol, Sequence


class GlobMatcher(Protocol):
    """Contract for the glob matcher used by PatternResolver.

    Returns absolute file paths; raises DiscoveryError on traversal failure.
    """
    async def match(
        self,
        patterns: Sequence[str],
        *,
        cwd: str,
        ignore: Sequence[str] = (),
        files_only: bool = True,
        include_dotfiles: bool = True,
        case_insensitive: bool = True,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[str]:
        ...


class FileFilter(Protocol):
    """Contract for the VCS-ignore / tool-ignore predicates."""
    def filter_files(
        self,
        relative_paths: Sequence[str],
        *,
        respect_git_ignore: bool = True,
        respect_tool_ignore: bool = True,
    ) -> List[str]:
        ...


class WorkspaceRoots(Protocol):
    """Contract for the workspace root provider."""
    def get_directories(self) -> List[str]:
        ...

    def is_path_within_workspace(self, path: str) -> bool:
        ...
