"""MCP tool that lists the files a read_many_files call would consider.

Registers the 'list_files' tool which runs pattern resolution only
(workspace roots, excludes, ignore files, security boundary) and returns
the candidate paths without reading them.
"""

from __future__ import annotations

from typing import List, Optional

from mcp.server.fastmcp import FastMCP

from core.models import ReadManyFilesRequest
from discovery.service import ReadManyFilesService
from discovery.service_factory import get_read_many_files_service


def register(mcp: FastMCP, *, service: Optional[ReadManyFilesService] = None) -> None:
    svc = service or get_read_many_files_service()

    @mcp.tool(name="list_files")
    async def list_files(
        paths: List[str],
        exclude: Optional[List[str]] = None,
        use_default_excludes: bool = True,
        respect_git_ignore: Optional[bool] = None,
        respect_tool_ignore: Optional[bool] = None,
    ) -> List[str]:
        """List workspace files matching paths or glob patterns.

        Params:
          - paths: file paths or glob patterns (required).
          - exclude: glob patterns to exclude, added to the default excludes.
          - use_default_excludes: apply the default excludes (default: True).
          - respect_git_ignore / respect_tool_ignore: honour ignore files.

        Returns:
          Paths relative to the target directory, sorted by absolute path.

        Raises:
          ValidationError for empty patterns; DiscoveryError when a workspace
          directory cannot be searched.
        """
        request = ReadManyFilesRequest(
            paths=tuple(paths or ()),
            exclude=tuple(exclude or ()),
            use_default_excludes=use_default_excludes,
            respect_git_ignore=respect_git_ignore,
            respect_tool_ignore=respect_tool_ignore,
        )

        resolved = await svc.discover(request)
        return [c.display_path for c in sorted(resolved.candidates)]
