"""CLI commands: MCP server, OAuth callback server, auth URL."""

from __future__ import annotations

import asyncio
from typing import Optional

import typer

from ..config import get_settings
from ..instagram.errors import ConfigurationError
from ..instagram.oauth import build_auth_url
from .console import console, print_error, print_info, print_success


def serve(
    port: Optional[int] = typer.Option(
        None, "--port", "-p", help="Serve a health endpoint on this port (overrides PORT)"
    ),
) -> None:
    """Run the Instagram MCP server over stdio."""
    from ..server.app import run_server

    settings = get_settings()
    if port is not None:
        settings = settings.model_copy(update={"port": port})

    asyncio.run(run_server(settings))


def auth_server() -> None:
    """Run the HTTPS server receiving the Instagram OAuth callback."""
    from ..server.auth_callback import run_auth_server

    settings = get_settings()
    print_info(f"Instagram Auth HTTPS Server on https://localhost:{settings.auth_server_port}")
    print_info(f"Callback URL: {settings.redirect_uri}")
    print_info(f"Saving user data to: {settings.instagram_user_file}")

    try:
        run_auth_server(settings)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(1)


def auth_url(
    redirect_uri: Optional[str] = typer.Option(
        None, "--redirect-uri", "-r", help="OAuth redirect URI (defaults to the callback server)"
    ),
) -> None:
    """Print an Instagram OAuth authorization URL."""
    settings = get_settings()
    try:
        app_id = settings.require_app_id()
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(1)

    result = build_auth_url(app_id, redirect_uri or settings.redirect_uri)
    print_success("Open this URL to connect your Instagram account:")
    console.print(result.oauth_url, soft_wrap=True)
    console.print(f"[dim]State: {result.state}[/dim]")
