"""FastMCP sub-servers exposing the relay as MCP tools."""
