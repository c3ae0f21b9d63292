"""Gemini video relay: HTTP route and MCP tool for URL-based video analysis."""
