"""Tests for CLI commands."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

from typer.testing import CliRunner

from instagram_mcp.cli import app
from instagram_mcp.config import Settings

runner = CliRunner()


class TestAuthUrlCommand:
    """Tests for `instagram-mcp auth-url`."""

    def test_prints_url(self):
        """Test the URL is printed with the configured app id."""
        settings = Settings(instagram_app_id="app-123")
        with patch("instagram_mcp.cli.commands.get_settings", return_value=settings):
            result = runner.invoke(app, ["auth-url", "--redirect-uri", "https://example.com/cb"])

        assert result.exit_code == 0
        assert "client_id=app-123" in result.output
        assert "redirect_uri=https%3A%2F%2Fexample.com%2Fcb" in result.output

    def test_missing_app_id(self):
        """Test a missing app id exits with status 1."""
        settings = Settings(instagram_app_id=None)
        with patch("instagram_mcp.cli.commands.get_settings", return_value=settings):
            result = runner.invoke(app, ["auth-url"])

        assert result.exit_code == 1
        assert "INSTAGRAM_APP_ID" in result.output


class TestServeCommand:
    """Tests for `instagram-mcp serve`."""

    def test_port_option_overrides_settings(self):
        """Test --port is passed through to the server settings."""
        settings = Settings(port=None)
        run_server = AsyncMock()
        with patch("instagram_mcp.cli.commands.get_settings", return_value=settings), patch(
            "instagram_mcp.server.app.run_server", run_server
        ):
            result = runner.invoke(app, ["serve", "--port", "8081"])

        assert result.exit_code == 0
        run_server.assert_awaited_once()
        assert run_server.await_args.args[0].port == 8081


class TestAuthServerCommand:
    """Tests for `instagram-mcp auth-server`."""

    def test_configuration_error_exits(self):
        """Test configuration errors exit with status 1."""
        settings = Settings(instagram_app_id=None)
        with patch("instagram_mcp.cli.commands.get_settings", return_value=settings):
            result = runner.invoke(app, ["auth-server"])

        assert result.exit_code == 1
        assert "INSTAGRAM_APP_ID" in result.output
