"""MCP server implementation for Google Docs.

Tools cover document creation, reading and search, text edits, find and
replace, text and paragraph formatting, lists, tables, images, and
structural elements (table of contents, section breaks, bookmarks,
cross-references, headers, footers, footnotes).

Transport: Stdio (for Claude Desktop)
Authentication: OAuth 2.0 with automatic token refresh
"""

from gdocs_mcp.server.google_docs_server import GoogleDocsServer, main
from gdocs_mcp.server.tool_schemas import TOOLS

TOOL_COUNT = len(TOOLS)


def create_server() -> GoogleDocsServer:
    """Create and configure a Google Docs MCP server.

    Returns:
        GoogleDocsServer: Configured server instance ready to run.

    Example:
        >>> server = create_server()
        >>> asyncio.run(server.run())
    """
    return GoogleDocsServer()


__all__ = ["TOOL_COUNT", "TOOLS", "create_server", "GoogleDocsServer", "main"]
