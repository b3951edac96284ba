"""MCP tool that reads and concatenates many files at once.

Registers the 'read_many_files' tool which resolves patterns across the
workspace roots, reads every match concurrently and returns the combined
content blocks (text plus explicitly requested images/PDFs).
"""

from __future__ import annotations

import asyncio
import base64
import logging
import threading
from pathlib import Path
from typing import List, Optional, Sequence, Union

from mcp.server.fastmcp import FastMCP
from mcp.types import BlobResourceContents, EmbeddedResource, ImageContent, TextContent

from core.models import BinaryPart, ContentPart, ReadManyFilesRequest
from discovery.service import ReadManyFilesService
from discovery.service_factory import get_read_many_files_service


logger = logging.getLogger(__name__)

ContentBlock = Union[TextContent, ImageContent, EmbeddedResource]


def to_mcp_content(parts: Sequence[ContentPart], *, target_dir: str) -> List[ContentBlock]:
    out: List[ContentBlock] = []
    for part in parts:
        if isinstance(part, BinaryPart):
            data = base64.b64encode(part.data).decode("ascii")
            if part.mime_type.startswith("image/"):
                out.append(ImageContent(type="image", mimeType=part.mime_type, data=data))
            else:
                uri = (Path(target_dir) / part.path).resolve().as_uri()
                out.append(
                    EmbeddedResource(
                        type="resource",
                        resource=BlobResourceContents(uri=uri, mimeType=part.mime_type, blob=data),
                    )
                )
        else:
            out.append(TextContent(type="text", text=part))
    return out


def register(mcp: FastMCP, *, service: Optional[ReadManyFilesService] = None) -> None:
    svc = service or get_read_many_files_service()

    @mcp.tool(name="read_many_files", structured_output=False)
    async def read_many_files(
        paths: List[str],
        include: Optional[List[str]] = None,
        exclude: Optional[List[str]] = None,
        use_default_excludes: bool = True,
        respect_git_ignore: Optional[bool] = None,
        respect_tool_ignore: Optional[bool] = None,
        max_files: Optional[int] = None,
        include_summary: bool = False,
    ) -> List[ContentBlock]:
        """Read content from multiple files given as paths or glob patterns.

        Patterns are relative to the target directory and are searched in
        every workspace directory. Text files are concatenated, each block
        introduced by a '--- {filePath} ---' separator, and the output ends
        with '--- End of content ---'. Images and PDFs are only returned when
        their file name or extension appears in 'paths'.

        Params:
          - paths: file paths or glob patterns (required), e.g. ["src/**/*.py", "README.md"].
          - include: extra glob patterns merged with paths.
          - exclude: glob patterns to exclude, added to the default excludes.
          - use_default_excludes: apply the default excludes (dependency/VCS dirs, binaries, ...).
          - respect_git_ignore: honour .gitignore files (default from config).
          - respect_tool_ignore: honour the tool ignore file (default from config).
          - max_files: maximum number of files to read, in sorted order (default from config).
          - include_summary: append the human-readable summary as a last text block.

        Returns:
          Content blocks in sorted path order.

        Raises:
          ValidationError for empty patterns; DiscoveryError when a workspace
          directory cannot be searched.
        """
        request = ReadManyFilesRequest(
            paths=tuple(paths or ()),
            include=tuple(include or ()),
            exclude=tuple(exclude or ()),
            use_default_excludes=use_default_excludes,
            respect_git_ignore=respect_git_ignore,
            respect_tool_ignore=respect_tool_ignore,
            max_files=max_files,
        )

        cancel_event = threading.Event()
        try:
            result = await svc.read_many_files(request, cancel_event=cancel_event)
        except asyncio.CancelledError:
            cancel_event.set()
            raise

        logger.info(
            "read_many_files: %d processed, %d skipped",
            len(result.processed),
            len(result.skipped),
        )

        blocks = to_mcp_content(result.combined_content, target_dir=svc.workspace.target_dir)
        if include_summary:
            blocks.append(TextContent(type="text", text=result.display_summary))
        return blocks
