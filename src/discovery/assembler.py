"""ResultAssembler: per-file outcomes -> combined content + summary.

Output order is the sorted absolute path order, independent of the order
in which fetch tasks completed.
"""

from __future__ import annotations

from typing import Iterable, List, Mapping, Sequence, Tuple

from core.models import (
    BinaryPart,
    CandidateFile,
    ContentPart,
    FetchFailure,
    FetchOutcome,
    SkipRecord,
)


OUTPUT_SEPARATOR_FORMAT = "--- {filePath} ---"
OUTPUT_TERMINATOR = "\n--- End of content ---"
NOTHING_MATCHED = "No files matching the criteria were found or all were skipped."
TRUNCATION_BANNER_FORMAT = (
    "[WARNING: This file was truncated. {detail} "
    "To view the full content, use the 'read_file' tool on this specific file.]"
)

MAX_PROCESSED_SHOWN = 10
MAX_SKIPPED_SHOWN = 5


def truncation_banner(detail: str) -> str:
    return TRUNCATION_BANNER_FORMAT.format(detail=detail)


def _text_block(display_path: str, content: str, banner: str = "") -> str:
    separator = OUTPUT_SEPARATOR_FORMAT.replace("{filePath}", display_path)
    body = f"{banner}\n\n{content}" if banner else content
    return f"{separator}\n\n{body}\n\n"


class ResultAssembler:
    def __init__(self, *, target_dir: str) -> None:
        self._target_dir = target_dir

    def assemble(
        self,
        candidates: Iterable[CandidateFile],
        outcomes: Mapping[str, FetchOutcome],
        skipped: Sequence[SkipRecord] = (),
    ) -> Tuple[List[ContentPart], str, List[str], List[SkipRecord]]:
        """Returns (combined_content, display_summary, processed, skipped)."""
        parts: List[ContentPart] = []
        processed: List[str] = []
        all_skipped: List[SkipRecord] = list(skipped)

        for candidate in sorted(set(candidates)):
            outcome = outcomes.get(candidate.absolute_path)
            if outcome is None:
                all_skipped.append(SkipRecord(path=candidate.display_path, reason="Unexpected error: no read result"))
                continue
            if isinstance(outcome, FetchFailure):
                all_skipped.append(SkipRecord(path=candidate.display_path, reason=outcome.reason))
                continue

            if isinstance(outcome.content, BinaryPart):
                # Binary payloads are passed through without a text separator
                parts.append(outcome.content)
            else:
                banner = truncation_banner(outcome.truncation_note or "") if outcome.truncated else ""
                parts.append(_text_block(candidate.display_path, outcome.content, banner))
            processed.append(candidate.display_path)

        if parts:
            parts.append(OUTPUT_TERMINATOR)
        else:
            parts.append(NOTHING_MATCHED)

        summary = self.build_summary(processed, all_skipped)
        return parts, summary, processed, all_skipped

    def build_summary(self, processed: Sequence[str], skipped: Sequence[SkipRecord]) -> str:
        lines: List[str] = [f"### ReadManyFiles Result (Target Dir: `{self._target_dir}`)", ""]

        if processed:
            lines.append(f"Successfully read and concatenated content from **{len(processed)} file(s)**.")
            lines.append("")
            if len(processed) <= MAX_PROCESSED_SHOWN:
                lines.append("**Processed Files:**")
            else:
                lines.append(f"**Processed Files (first {MAX_PROCESSED_SHOWN} shown):**")
            lines.extend(f"- `{p}`" for p in processed[:MAX_PROCESSED_SHOWN])
            if len(processed) > MAX_PROCESSED_SHOWN:
                lines.append(f"- ...and {len(processed) - MAX_PROCESSED_SHOWN} more.")
        else:
            lines.append("No files were read and concatenated based on the criteria.")

        if skipped:
            lines.append("")
            if len(skipped) <= MAX_SKIPPED_SHOWN:
                lines.append(f"**Skipped {len(skipped)} item(s):**")
            else:
                lines.append(f"**Skipped {len(skipped)} item(s) (first {MAX_SKIPPED_SHOWN} shown):**")
            lines.extend(f"- `{s.path}` (Reason: {s.reason})" for s in skipped[:MAX_SKIPPED_SHOWN])
            if len(skipped) > MAX_SKIPPED_SHOWN:
                lines.append(f"- ...and {len(skipped) - MAX_SKIPPED_SHOWN} more.")

        lines.append("")
        lines.append(f"Processed: {len(processed)} file(s). Skipped: {len(skipped)} item(s).")
        return "\n".join(lines).strip()
