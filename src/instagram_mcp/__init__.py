"""Instagram MCP server: publish images, carousels and Reels through the Graph API."""

__version__ = "1.0.0"
