"""Google Docs MCP server.

Exposes Google Docs and Drive operations as MCP tools, built around a
document text index that maps flat text back to document indexes for
search, replace and statistics.
"""

from gdocs_mcp.__version__ import __version__

__all__ = ["__version__"]
