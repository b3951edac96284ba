"""Server bootstrap for the read-many-files MCP service.

Creates the FastMCP instance, wires the workspace, the discovery service
and the tools, and starts the MCP server (stdio transport).
"""

import logging
import sys

from mcp.server.fastmcp import FastMCP

from config import LOG_LEVEL, PROJECT_ROOT, WORKSPACE_DIRS
from core.workspace import WorkspaceContext
from discovery.service_factory import default_read_policy, get_read_many_files_service
from sources.local_source import LocalSource

from tools.list_files import register as register_list_files
from tools.read_file import register as register_read_file
from tools.read_many_files import register as register_read_many_files

mcp = FastMCP("read-many-files")


def register_tools() -> None:
    workspace = WorkspaceContext(PROJECT_ROOT, WORKSPACE_DIRS)
    service = get_read_many_files_service(workspace=workspace)
    source = LocalSource(workspace=workspace, policy=default_read_policy())

    register_read_many_files(mcp, service=service)
    register_list_files(mcp, service=service)
    register_read_file(mcp, source=source)


register_tools()


def main() -> None:
    # stdout carries the stdio transport; logs go to stderr
    logging.basicConfig(
        level=LOG_LEVEL,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
