from __future__ import annotations

import fnmatch
import functools
import glob
import os
import re
from typing import List, Optional, Tuple

"""
Path utilities used across the project.

Provides consistent POSIX-style normalization, literal-path escaping and a
component-wise '**' supporting glob matcher used by discovery and tools.
"""


def normalize_posix_relpath(p: str) -> str:
    """Normalize a user path to a clean POSIX relative path.

    Converts backslashes to '/', trims whitespace, removes leading '/'
    and repeated './' markers.
    """
    s = (p or "").strip()
    s = s.replace("\\", "/")        # Unify path separators across OSes.
    s = s.lstrip("/")               # Prevent accidental absolute paths.
    while s.startswith("./"):       # Drop repeated "./" prefixes.
        s = s[2:]
    return s


def normalize_pattern(p: str) -> str:
    """Normalize a glob pattern: POSIX separators, no leading './'."""
    s = (p or "").strip().replace("\\", "/")
    while s.startswith("./"):
        s = s[2:]
    return s


def to_display_path(absolute_path: str, target_dir: str) -> str:
    """Path relative to target_dir, always with '/' separators."""
    return os.path.relpath(absolute_path, target_dir).replace("\\", "/")


def escape_glob(p: str) -> str:
    """Escape glob metacharacters so a literal filename matches only itself.

    Braces are wrapped in character classes so brace expansion leaves them alone.
    """
    return re.sub(r"([{}])", r"[\1]", glob.escape(p))


def _class_end(pattern: str, i: int) -> int:
    """Index of the ']' closing the character class opened at i, or -1."""
    j = i + 1
    if j < len(pattern) and pattern[j] == "!":
        j += 1
    if j < len(pattern) and pattern[j] == "]":
        j += 1
    return pattern.find("]", j)


def _brace_group(pattern: str, start: int) -> Optional[Tuple[int, List[int]]]:
    # (closing index, top-level comma indexes) for the '{' at start
    depth = 0
    commas: List[int] = []
    i = start
    while i < len(pattern):
        ch = pattern[i]
        if ch == "[":
            end = _class_end(pattern, i)
            if end != -1:
                i = end + 1
                continue
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i, commas
        elif ch == "," and depth == 1:
            commas.append(i)
        i += 1
    return None


def expand_braces(pattern: str) -> List[str]:
    """Expand '{a,b}' alternatives, nested groups included.

    A group without a top-level comma ('{a}') and an unclosed '{' stay
    literal; braces inside '[...]' classes are never expanded.
    """
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "[":
            end = _class_end(pattern, i)
            if end != -1:
                i = end + 1
                continue
        elif ch == "{":
            group = _brace_group(pattern, i)
            if group is not None and group[1]:
                close, commas = group
                bounds = [i, *commas, close]
                prefix, suffix = pattern[:i], pattern[close + 1:]
                out: List[str] = []
                for a, b in zip(bounds, bounds[1:]):
                    for expanded in expand_braces(prefix + pattern[a + 1:b] + suffix):
                        if expanded not in out:
                            out.append(expanded)
                return out
        i += 1
    return [pattern]


def split_posix(p: str) -> Tuple[str, ...]:
    """Split a POSIX path into non-empty segments."""
    s = (p or "").strip().replace("\\", "/").strip("/")
    if not s:
        return tuple()
    return tuple(seg for seg in s.split("/") if seg)


def glob_match(rel_path: str, pattern: str, *, case_insensitive: bool = False) -> bool:
    """Match a relative path against a glob pattern with '**' and '{a,b}' support."""
    if case_insensitive:
        rel_path = (rel_path or "").lower()
        pattern = (pattern or "").lower()

    parts = split_posix(rel_path)

    pat = (pattern or "").strip().replace("\\", "/").strip("/")
    if not pat:
        pat = "**/*"  # Default: match everything.

    return any(_match_segments(parts, split_posix(p)) for p in expand_braces(pat))


def _match_segments(parts: Tuple[str, ...], pats: Tuple[str, ...]) -> bool:
    @functools.lru_cache(maxsize=None)
    def rec(i: int, j: int) -> bool:
        if j == len(pats):
            return i == len(parts)

        token = pats[j]
        if token == "**":
            return rec(i, j + 1) or (i < len(parts) and rec(i + 1, j))

        return (
            i < len(parts)
            and fnmatch.fnmatchcase(parts[i], token)
            and rec(i + 1, j + 1)
        )

    return rec(0, 0)


def glob_match_any(rel_path: str, patterns, *, case_insensitive: bool = False) -> bool:
    return any(glob_match(rel_path, p, case_insensitive=case_insensitive) for p in patterns)
