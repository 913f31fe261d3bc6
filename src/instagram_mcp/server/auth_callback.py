"""HTTPS server receiving the Instagram OAuth callback.

Exchanges the authorization code for a long-lived token, fetches the
user profile and overwrites the single-user credential store.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from ..config import Settings
from ..constants import OAUTH_CALLBACK_PATH
from ..instagram.credentials import UserFileStore
from ..instagram.errors import ConfigurationError
from ..instagram.oauth import OAuthClient

_logger = logging.getLogger("instagram_auth")


def create_auth_app(oauth: OAuthClient, store: UserFileStore) -> FastAPI:
    """Build the callback app around an OAuth client and a store."""

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        await oauth.aclose()

    app = FastAPI(title="Instagram Auth Server", docs_url=None, redoc_url=None, lifespan=lifespan)

    @app.get(OAUTH_CALLBACK_PATH)
    async def instagram_callback(code: Optional[str] = None, state: Optional[str] = None):
        if not code:
            _logger.error("Authorization code not provided in callback")
            return JSONResponse(status_code=400, content={"error": "Authorization code not provided"})

        _logger.info(f"Received Instagram OAuth callback (state={state})")

        try:
            record = await oauth.authenticate(code)
        except Exception as e:
            _logger.error(f"Error during Instagram authentication: {e}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={"error": "Authentication failed", "details": str(e)},
            )

        # A failed write is logged; the user still sees the successful login.
        try:
            store.save(record)
        except OSError as e:
            _logger.error(f"Error writing to {store.path}: {e}")

        _logger.info(f"User authenticated successfully: id={record.id} username={record.username}")
        return {
            "success": True,
            "message": "Authentication successful and user data saved.",
            "user": record.public_profile(),
        }

    @app.get("/health")
    async def health():
        return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


def run_auth_server(settings: Settings) -> None:
    """Serve the callback app over HTTPS (blocking).

    Raises:
        ConfigurationError: If app credentials or TLS files are missing
    """
    app_id = settings.require_app_id()
    app_secret = settings.require_app_secret()

    missing = [p for p in (settings.ssl_keyfile, settings.ssl_certfile) if not p.exists()]
    if missing:
        raise ConfigurationError(
            f"SSL certificates not found: {', '.join(str(p) for p in missing)}. Generate them with:\n"
            f"  openssl req -x509 -newkey rsa:2048 -nodes -days 365 -subj /CN=localhost "
            f"-keyout {settings.ssl_keyfile} -out {settings.ssl_certfile}"
        )

    oauth = OAuthClient(app_id, app_secret, settings.redirect_uri)
    store = UserFileStore(settings.instagram_user_file)
    app = create_auth_app(oauth, store)

    _logger.info(f"Callback URL: {settings.redirect_uri}")
    _logger.info(f"Saving user data to: {store.path}")

    uvicorn.run(
        app,
        host=settings.auth_server_host,
        port=settings.auth_server_port,
        ssl_keyfile=str(settings.ssl_keyfile),
        ssl_certfile=str(settings.ssl_certfile),
    )
