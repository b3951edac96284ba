"""Local filesystem glob matcher.

Walks one root directory and returns absolute paths of entries whose
root-relative POSIX path matches any pattern and no ignore pattern.
Ignore patterns ending in '/**' prune whole directories during the walk.
"""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from typing import List, Optional, Sequence

from core.errors import DiscoveryError
from core.paths import glob_match_any, normalize_pattern


logger = logging.getLogger(__name__)


def _has_dot_segment(rel_path: str) -> bool:
    return any(seg.startswith(".") for seg in rel_path.split("/"))


class LocalGlobMatcher:
    # os.walk based implementation of the GlobMatcher protocol.

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
        root = os.path.abspath(cwd)
        pats = [normalize_pattern(p) for p in patterns if p and p.strip()]
        ignores = [normalize_pattern(p) for p in ignore if p and p.strip()]
        dir_ignores = [p[:-3] for p in ignores if p.endswith("/**")]
        event = cancel_event if cancel_event is not None else threading.Event()

        def _do() -> List[str]:
            if not os.path.isdir(root):
                raise DiscoveryError(f"Not a directory: {cwd}")

            errors: List[OSError] = []
            out: List[str] = []

            for dirpath, dirnames, filenames in os.walk(root, onerror=errors.append):
                if event.is_set():
                    raise DiscoveryError("File search was cancelled")

                rel_dir = os.path.relpath(dirpath, root).replace("\\", "/")
                rel_dir = "" if rel_dir == "." else rel_dir + "/"

                kept_dirs = []
                for name in sorted(dirnames):
                    rel = rel_dir + name
                    if not include_dotfiles and name.startswith("."):
                        continue
                    if glob_match_any(rel, dir_ignores, case_insensitive=case_insensitive):
                        continue
                    kept_dirs.append(name)
                    if not files_only and glob_match_any(rel, pats, case_insensitive=case_insensitive):
                        out.append(os.path.join(dirpath, name))
                # Prune in place so os.walk skips ignored subtrees
                dirnames[:] = kept_dirs

                for name in sorted(filenames):
                    rel = rel_dir + name
                    if not include_dotfiles and _has_dot_segment(rel):
                        continue
                    if glob_match_any(rel, ignores, case_insensitive=case_insensitive):
                        continue
                    if glob_match_any(rel, pats, case_insensitive=case_insensitive):
                        out.append(os.path.join(dirpath, name))

            if errors:
                first = errors[0]
                raise DiscoveryError(f"Cannot read directory {first.filename}: {first.strerror or first}")

            logger.debug("Matched %d entries under %s", len(out), root)
            return out

        if event.is_set():
            raise DiscoveryError("File search was cancelled")

        try:
            # Offload blocking filesystem IO to a thread to keep async loop responsive
            return await asyncio.to_thread(_do)
        except asyncio.CancelledError:
            # Stop the walker thread at its next directory
            event.set()
            raise
