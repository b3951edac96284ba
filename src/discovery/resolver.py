"""PatternResolver: patterns x workspace roots -> candidate files.

Per root, literal paths that exist are escaped so glob metacharacters in
real filenames stay literal; everything else is passed to the matcher as a
glob. The union of all roots' matches then goes through the security
boundary and the VCS / tool ignore layers.
"""

from __future__ import annotations

import logging
import os
import threading
from typing import List, Optional, Sequence, Set

from core.errors import DiscoveryError
from core.ignore import IgnoreFilterChain
from core.interfaces import GlobMatcher, WorkspaceRoots
from core.models import CandidateFile, ResolvedCandidates, SkipRecord
from core.paths import escape_glob, normalize_pattern, to_display_path


logger = logging.getLogger(__name__)


def security_reason(path: str) -> str:
    return f"Security: glob matcher returned a path outside the workspace. Path: {path}"


def prepare_patterns(patterns: Sequence[str], root: str) -> List[str]:
    """Escape patterns naming an existing entry under root; directories match everything below."""
    out: List[str] = []
    for p in patterns:
        normalized = normalize_pattern(p)
        if not normalized:
            continue

        if os.path.isabs(normalized):
            # Absolute patterns are matched root-relative or not at all
            rel = os.path.relpath(normalized, root).replace("\\", "/")
            if rel == ".." or rel.startswith("../"):
                continue
            normalized = rel

        full = os.path.join(root, normalized)
        if os.path.isdir(full):
            base = escape_glob(normalized.rstrip("/"))
            out.append("**" if base in ("", ".") else f"{base}/**")
        elif os.path.exists(full):
            out.append(escape_glob(normalized))
        else:
            out.append(normalized)
    return out


class PatternResolver:
    def __init__(
        self,
        *,
        matcher: GlobMatcher,
        workspace: WorkspaceRoots,
        target_dir: str,
    ) -> None:
        self._matcher = matcher
        self._workspace = workspace
        self._target_dir = target_dir

    async def resolve(
        self,
        patterns: Sequence[str],
        *,
        excludes: Sequence[str],
        ignore_chain: IgnoreFilterChain,
        cancel_event: Optional[threading.Event] = None,
    ) -> ResolvedCandidates:
        all_entries: Set[str] = set()

        # Roots are walked one at a time to bound matcher IO pressure
        for root in self._workspace.get_directories():
            root_patterns = prepare_patterns(patterns, root)
            if not root_patterns:
                continue
            try:
                entries = await self._matcher.match(
                    root_patterns,
                    cwd=root,
                    ignore=list(excludes),
                    files_only=True,
                    include_dotfiles=True,
                    case_insensitive=True,
                    cancel_event=cancel_event,
                )
            except DiscoveryError:
                raise
            except OSError as e:
                raise DiscoveryError(f"Error during file search in {root}: {e}") from e

            for entry in entries:
                all_entries.add(os.path.normpath(entry))

        skipped: List[SkipRecord] = []
        trusted: List[str] = []
        for entry in sorted(all_entries):
            if not self._workspace.is_path_within_workspace(entry):
                logger.warning("Rejected match outside workspace: %s", entry)
                skipped.append(SkipRecord(path=entry, reason=security_reason(entry)))
                continue
            trusted.append(entry)

        by_display = {to_display_path(p, self._target_dir): p for p in trusted}
        kept, counts = ignore_chain.partition(list(by_display))

        for reason, count in counts.items():
            if count > 0:
                logger.debug("%d file(s) dropped: %s", count, reason)
                skipped.append(SkipRecord(path=f"{count} file(s)", reason=reason))

        candidates = frozenset(
            CandidateFile(absolute_path=by_display[rel], display_path=rel) for rel in kept
        )
        return ResolvedCandidates(candidates=candidates, skipped=tuple(skipped))
