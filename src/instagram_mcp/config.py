"""Process configuration loading and validation."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    GRAPH_API_VERSION,
    HTTP_TIMEOUT_SECONDS,
    LOGS_DIR_NAME,
    OAUTH_CALLBACK_PATH,
    POLL_INTERVAL_SECONDS,
    POLL_MAX_WAIT_SECONDS,
    USER_FILE_NAME,
)
from .instagram.errors import ConfigurationError


class Settings(BaseSettings):
    """Settings read from the environment (and .env files).

    Every field maps to the upper-cased environment variable of the same
    name, e.g. `instagram_app_id` <- INSTAGRAM_APP_ID.
    """

    model_config = SettingsConfigDict(extra="ignore")

    # Instagram app credentials
    instagram_app_id: str | None = None
    instagram_app_secret: str | None = None

    # Graph API
    instagram_graph_api_version: str = GRAPH_API_VERSION
    http_timeout_seconds: float = HTTP_TIMEOUT_SECONDS
    poll_max_wait_seconds: float = Field(default=POLL_MAX_WAIT_SECONDS, gt=0)
    poll_interval_seconds: float = Field(default=POLL_INTERVAL_SECONDS, gt=0)

    # Credential store
    instagram_user_file: Path = Path(USER_FILE_NAME)

    # Optional health endpoint next to the MCP stdio server
    port: int | None = None

    # OAuth callback server
    auth_server_host: str = "localhost"
    auth_server_port: int = 6001
    auth_redirect_uri: str | None = None
    ssl_keyfile: Path = Path("server.key")
    ssl_certfile: Path = Path("server.cert")

    # Logging
    log_dir: Path = Path(LOGS_DIR_NAME)
    log_level: str = "INFO"

    @property
    def redirect_uri(self) -> str:
        """Redirect URI registered for the callback server."""
        if self.auth_redirect_uri:
            return self.auth_redirect_uri
        return f"https://localhost:{self.auth_server_port}{OAUTH_CALLBACK_PATH}"

    def require_app_id(self) -> str:
        """Return the Instagram app id or fail with a configuration error."""
        if not self.instagram_app_id:
            raise ConfigurationError(
                "Instagram App ID (INSTAGRAM_APP_ID) is not configured in environment variables."
            )
        return self.instagram_app_id

    def require_app_secret(self) -> str:
        """Return the Instagram app secret or fail with a configuration error."""
        if not self.instagram_app_secret:
            raise ConfigurationError(
                "Instagram App Secret (INSTAGRAM_APP_SECRET) is not configured in environment variables."
            )
        return self.instagram_app_secret


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process.

    `.env.local` wins over `.env`; neither overrides variables already
    set in the environment.
    """
    load_dotenv(".env.local")
    load_dotenv()
    return Settings()
