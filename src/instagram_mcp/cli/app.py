"""Typer app configuration and logging setup."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer

from ..config import get_settings
from ..constants import LOG_INSTAGRAM_API

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

# Create Typer app
app = typer.Typer(
    name="instagram-mcp",
    help="MCP server publishing images, carousels and Reels to Instagram",
    add_completion=False,
)


def register_commands() -> None:
    """Register all commands."""
    from .commands import auth_server, auth_url, serve

    app.command(name="serve")(serve)
    app.command(name="auth-server")(auth_server)
    app.command(name="auth-url")(auth_url)


def setup_logging(log_dir: Path, level: str = "INFO") -> None:
    """Configure logging.

    - File logging for Graph API calls, OAuth and server events
    - Console output on stderr only (stdout carries the MCP protocol)
    - Suppresses noisy library loggers
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(logging.WARNING)

    # Suppress loggers that might print request URLs (with tokens) to console
    for logger_name in ["httpx", "httpcore", "asyncio"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    file_handler = logging.FileHandler(log_dir / LOG_INSTAGRAM_API, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    stderr_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    for logger_name in ["instagram_api", "instagram_auth", "instagram_mcp"]:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        logger.handlers = [file_handler, stderr_handler]


# Register all commands
register_commands()


def main() -> None:
    """CLI entry point."""
    settings = get_settings()
    setup_logging(settings.log_dir, settings.log_level)
    app()
