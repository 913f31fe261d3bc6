"""MCP tool surface, health endpoint and OAuth callback server."""

from .app import create_server, run_server
from .auth_callback import create_auth_app, run_auth_server
from .tools import InstagramTools

__all__ = [
    "create_server",
    "run_server",
    "create_auth_app",
    "run_auth_server",
    "InstagramTools",
]
