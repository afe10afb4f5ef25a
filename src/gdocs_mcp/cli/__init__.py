"""Command-line interface for gdocs-mcp."""
