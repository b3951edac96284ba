"""MCP tool that reads one text file, a page of lines at a time.

Registers the 'read_file' tool, the follow-up for files that
read_many_files truncated: 'offset' and 'limit' select a line window.
"""

from __future__ import annotations

from typing import Optional

from mcp.server.fastmcp import FastMCP

from config import PROJECT_ROOT, WORKSPACE_DIRS
from core.errors import ValidationError
from core.models import FileSlice
from core.workspace import WorkspaceContext
from discovery.service_factory import default_read_policy
from sources.local_source import LocalSource


def format_slice(s: FileSlice) -> str:
    if not s.truncated:
        return s.content

    return (
        "IMPORTANT: The file content has been truncated.\n"
        f"Status: Showing lines {s.start_line}-{s.end_line} of {s.total_lines} total lines.\n"
        "Action: To read more of the file, use the 'offset' and 'limit' parameters in a "
        f"subsequent 'read_file' call. For example, to read the next section of the file, "
        f"use offset: {s.end_line}.\n\n"
        "--- FILE CONTENT (truncated) ---\n"
        f"{s.content}"
    )


def register(mcp: FastMCP, *, source: Optional[LocalSource] = None) -> None:
    src = source or LocalSource(
        workspace=WorkspaceContext(PROJECT_ROOT, WORKSPACE_DIRS),
        policy=default_read_policy(),
    )

    @mcp.tool(name="read_file")
    async def read_file(
        path: str = "",
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> str:
        """Read a text file from the workspace and return its contents.

        Params:
          - path: file path relative to the target directory, or absolute
            inside a workspace directory (required).
          - offset: 0-based line to start from (default: 0).
          - limit: number of lines to return (default: configured line budget).

        Returns:
          The selected lines. When only part of the file is returned, a
          status header states the line range and the next offset.

        Raises:
          ValidationError for missing/invalid inputs or non-text files,
          AccessDeniedError outside the workspace, NotFoundError for
          missing files.
        """
        if not path or not path.strip():
            raise ValidationError("Missing file path")

        s = await src.read_file(path=path, offset=offset, limit=limit)
        return format_slice(s)
