"""Command-line interface.

Usage:
    instagram-mcp serve            # MCP server over stdio
    instagram-mcp auth-server      # HTTPS OAuth callback server
    instagram-mcp auth-url         # Print an authorization URL
"""

from .app import app, main

__all__ = ["app", "main"]
