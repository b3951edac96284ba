"""Concurrent, failure-tolerant content fetching.

Every candidate is read in its own task; the parent waits for all of them
(settle-all), so one slow or broken file never voids the others. All reads
go through read_bounded, which never loads more than the budget plus one
byte.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import threading
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from core.file_types import classify, get_mime_type, is_explicitly_requested
from core.models import (
    BinaryPart,
    CandidateFile,
    FetchFailure,
    FetchOutcome,
    FetchSuccess,
    FileSlice,
    ReadPolicy,
)


logger = logging.getLogger(__name__)

ASSET_NOT_REQUESTED_REASON = "asset file (image/pdf) was not explicitly requested by name or extension"
CANCELLED_REASON = "read cancelled before it started"


def read_bounded(path: str, max_bytes: int) -> Tuple[bytes, bool, int]:
    """Read at most max_bytes from offset 0.

    Returns (data, exceeded, total_size); exceeded is True when the file
    holds more than max_bytes.
    """
    with open(path, "rb") as f:
        total = os.fstat(f.fileno()).st_size
        data = f.read(max_bytes + 1)
    exceeded = len(data) > max_bytes
    return data[:max_bytes], exceeded, max(total, len(data))


def decode_prefix(data: bytes, encoding: str, *, final: bool) -> str:
    # final=False holds back an incomplete trailing multi-byte sequence
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
    return decoder.decode(data, final=final)


def split_lines(text: str) -> List[str]:
    """Split on '\\n' only, keeping line ends; other separators stay inside lines."""
    if not text:
        return []
    pieces = text.split("\n")
    lines = [p + "\n" for p in pieces[:-1]]
    if pieces[-1]:
        lines.append(pieces[-1])
    return lines


def iter_text_lines(path: str, encoding: str, *, chunk_size: int = 64 * 1024) -> Iterator[str]:
    """Stream the whole file as '\\n'-terminated lines without loading it at once."""
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
    pending = ""
    with open(path, "rb") as f:
        while True:
            chunk = f.read(chunk_size)
            pending += decoder.decode(chunk, final=not chunk)
            pieces = pending.split("\n")
            pending = pieces.pop()
            for piece in pieces:
                yield piece + "\n"
            if not chunk:
                break
    if pending:
        yield pending


def limit_lines(text: str, max_lines: int) -> Tuple[str, int, int]:
    """Keep the first max_lines lines; returns (text, shown, total)."""
    lines = split_lines(text)
    total = len(lines)
    if total <= max_lines:
        return text, total, total
    return "".join(lines[:max_lines]), max_lines, total


def read_text_file(path: str, policy: ReadPolicy) -> FetchSuccess:
    data, exceeded, size = read_bounded(path, policy.max_text_bytes)
    text = decode_prefix(data, policy.encoding, final=not exceeded)
    text, shown, total = limit_lines(text, max(0, policy.max_lines))

    note: Optional[str] = None
    if exceeded:
        note = f"Showing lines 1-{shown} from the first {policy.max_text_bytes} bytes of {size} total bytes."
    elif shown < total:
        note = f"Showing lines 1-{shown} of {total} total lines."

    return FetchSuccess(
        content=text,
        mime_type=get_mime_type(path) or "text/plain",
        truncated=note is not None,
        truncation_note=note,
    )


def read_text_slice(path: str, *, offset: int, limit: Optional[int], policy: ReadPolicy) -> FileSlice:
    """One page of a text file, lines [offset, offset + limit).

    The whole file is streamed so total_lines and the window are exact even
    past the byte budget that applies to multi-file reads.
    """
    count = policy.max_lines if limit is None else limit
    start = max(0, offset)
    stop = start + max(0, count)

    page: List[str] = []
    total = 0
    for line in iter_text_lines(path, policy.encoding):
        if start <= total < stop:
            page.append(line)
        total += 1

    start = min(start, total)
    return FileSlice(
        content="".join(page),
        start_line=start + 1,
        end_line=start + len(page),
        total_lines=total,
    )


class ConcurrentContentFetcher:
    def __init__(self, *, policy: ReadPolicy, max_concurrency: int = 16) -> None:
        self._policy = policy
        self._max_concurrency = max(1, int(max_concurrency))

    def fetch_one(self, candidate: CandidateFile, requested_patterns: Sequence[str]) -> FetchOutcome:
        path = candidate.absolute_path
        try:
            file_type = classify(path)

            if file_type in ("image", "pdf"):
                if not is_explicitly_requested(path, requested_patterns):
                    return FetchFailure(reason=ASSET_NOT_REQUESTED_REASON)

                data, exceeded, size = read_bounded(path, self._policy.max_asset_bytes)
                if exceeded:
                    return FetchFailure(
                        reason=(
                            f"Read error: file size ({size} bytes) exceeds the "
                            f"{self._policy.max_asset_bytes} byte limit for image/PDF content"
                        )
                    )
                mime = get_mime_type(path) or ("application/pdf" if file_type == "pdf" else "application/octet-stream")
                return FetchSuccess(
                    content=BinaryPart(path=candidate.display_path, mime_type=mime, data=data),
                    mime_type=mime,
                )

            if file_type == "binary":
                return FetchFailure(reason=f"Read error: Cannot display content of binary file: {candidate.display_path}")

            return read_text_file(path, self._policy)
        except OSError as e:
            return FetchFailure(reason=f"Read error: {e.strerror or e}")

    async def fetch_all(
        self,
        candidates: Iterable[CandidateFile],
        *,
        requested_patterns: Sequence[str],
        cancel_event: Optional[threading.Event] = None,
    ) -> Dict[str, FetchOutcome]:
        """Fetch every candidate; the mapping is keyed by absolute path."""
        ordered = sorted(candidates)
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _one(candidate: CandidateFile) -> FetchOutcome:
            async with semaphore:
                if cancel_event is not None and cancel_event.is_set():
                    return FetchFailure(reason=CANCELLED_REASON)
                return await asyncio.to_thread(self.fetch_one, candidate, requested_patterns)

        results = await asyncio.gather(*(_one(c) for c in ordered), return_exceptions=True)

        outcomes: Dict[str, FetchOutcome] = {}
        for candidate, result in zip(ordered, results):
            if isinstance(result, asyncio.CancelledError):
                outcome: FetchOutcome = FetchFailure(reason="read cancelled")
            elif isinstance(result, Exception):
                outcome = FetchFailure(reason=f"Unexpected error: {result}")
            elif isinstance(result, BaseException):
                raise result
            else:
                outcome = result

            if isinstance(outcome, FetchFailure):
                logger.debug("Skipping %s: %s", candidate.display_path, outcome.reason)
            outcomes[candidate.absolute_path] = outcome
        return outcomes
