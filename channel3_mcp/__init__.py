"""MCP server exposing the Channel3 product search API as tools."""

__version__ = "1.0.0"
