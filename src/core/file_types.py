"""File classification: text, image, pdf or opaque binary.

Well-known extensions decide first; anything else is content-sniffed
from the first few kilobytes (NUL bytes or mostly non-printable data
means binary).
"""

from __future__ import annotations

import mimetypes
import os
from typing import Optional, Sequence

from core.models import FileType


SNIFF_BYTES = 4096

IMAGE_EXTENSIONS = frozenset(
    {".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp", ".tif", ".tiff", ".ico", ".heic", ".heif"}
)

# Extensions that are always text even when mimetypes says otherwise
TEXT_EXTENSIONS = frozenset({".svg", ".ts", ".tsx", ".mts", ".cts", ".json", ".xml", ".md"})

BINARY_EXTENSIONS = frozenset(
    {
        ".zip", ".tar", ".gz", ".tgz", ".bz2", ".xz", ".rar", ".7z",
        ".exe", ".dll", ".so", ".dylib", ".bin", ".o", ".a", ".class", ".jar", ".war",
        ".pyc", ".pyo", ".wasm", ".dat", ".obj",
        ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".odt", ".ods", ".odp",
        ".sqlite", ".db",
    }
)


def get_mime_type(path: str) -> str:
    mime, _ = mimetypes.guess_type(path)
    return mime or ""


def looks_binary(sample: bytes) -> bool:
    """Heuristic over a leading sample: NUL byte or >30% control bytes."""
    if not sample:
        return False
    if b"\x00" in sample:
        return True
    non_printable = sum(1 for b in sample if b < 9 or 13 < b < 32)
    return non_printable / len(sample) > 0.3


def classify_by_extension(path: str) -> Optional[FileType]:
    ext = os.path.splitext(path)[1].lower()
    if ext in TEXT_EXTENSIONS:
        return "text"
    if ext in IMAGE_EXTENSIONS:
        return "image"
    if ext == ".pdf":
        return "pdf"
    if ext in BINARY_EXTENSIONS:
        return "binary"

    mime = get_mime_type(path)
    if mime.startswith("image/") and ext != ".svg":
        return "image"
    if mime.startswith(("audio/", "video/")):
        return "binary"
    return None


def classify(path: str) -> FileType:
    """Classify a file; reads at most SNIFF_BYTES when the extension is ambiguous."""
    by_ext = classify_by_extension(path)
    if by_ext is not None:
        return by_ext

    with open(path, "rb") as f:
        sample = f.read(SNIFF_BYTES)
    return "binary" if looks_binary(sample) else "text"


def is_explicitly_requested(path: str, patterns: Sequence[str]) -> bool:
    """True if any pattern mentions the file's extension or its name stem.

    Plain substring containment: extension case-insensitively, stem as typed.
    """
    base = os.path.basename(path)
    stem, ext = os.path.splitext(base)
    ext = ext.lower()
    for pattern in patterns:
        if ext and ext in pattern.lower():
            return True
        if stem and stem in pattern:
            return True
    return False
