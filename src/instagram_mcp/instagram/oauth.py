"""Instagram Business Login: authorization URL and token exchange.

Flow:
1. Send the user to the authorization URL (build_auth_url)
2. Instagram redirects back with `code`
3. Exchange the code for a short-lived token
4. Exchange the short-lived token for a long-lived token (~60 days)
5. Fetch the user profile and persist everything as a UserRecord
"""

from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from ..constants import (
    GRAPH_API_HOST,
    LONG_LIVED_TOKEN_FALLBACK_SECONDS,
    OAUTH_AUTHORIZE_URL,
    OAUTH_LONG_LIVED_TOKEN_URL,
    OAUTH_SCOPES,
    OAUTH_STATE_LENGTH,
    OAUTH_TOKEN_URL,
    PROFILE_API_VERSION,
)
from .models import UserRecord

_logger = logging.getLogger("instagram_auth")

_STATE_ALPHABET = string.ascii_letters + string.digits


class AuthenticationError(Exception):
    """The OAuth exchange with Instagram failed."""


@dataclass(frozen=True)
class AuthUrl:
    """Authorization URL and the state value embedded in it."""
    oauth_url: str
    state: str

    def to_dict(self) -> dict[str, str]:
        return {"oauthUrl": self.oauth_url, "state": self.state}


def generate_state(length: int = OAUTH_STATE_LENGTH) -> str:
    """Random alphanumeric state value."""
    return "".join(secrets.choice(_STATE_ALPHABET) for _ in range(length))


def build_auth_url(
    app_id: str,
    redirect_uri: str,
    state: str | None = None,
    scopes: tuple[str, ...] = OAUTH_SCOPES,
) -> AuthUrl:
    """Generate the Instagram Business Login authorization URL.

    Pure function apart from the random state when none is given.

    Args:
        app_id: Instagram app id (INSTAGRAM_APP_ID)
        redirect_uri: Callback URL registered for the app
        state: Anti-CSRF state value (random if omitted)
        scopes: Permissions to request

    Returns:
        AuthUrl with the URL and its state
    """
    state = state or generate_state()
    query = urlencode(
        {
            "enable_fb_login": "0",
            "client_id": app_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": ",".join(scopes),
            "state": state,
        },
        quote_via=quote,
        safe="",
    )
    return AuthUrl(oauth_url=f"{OAUTH_AUTHORIZE_URL}?{query}", state=state)


def _parse_json(response: httpx.Response, step: str) -> dict[str, Any]:
    _logger.info(f"{step} | HTTP {response.status_code}")
    try:
        data = response.json()
    except ValueError:
        raise AuthenticationError(f"Failed to parse JSON from {step} response: {response.text[:500]}")
    if not isinstance(data, dict):
        raise AuthenticationError(f"Unexpected {step} response: {response.text[:500]}")
    return data


def _error_message(data: dict[str, Any]) -> str:
    error = data.get("error")
    if isinstance(error, dict):
        return error.get("message") or str(error)
    return data.get("error_message") or data.get("error_description") or str(error or data)


class OAuthClient:
    """Exchanges authorization codes for long-lived Instagram tokens."""

    def __init__(
        self,
        app_id: str,
        app_secret: str,
        redirect_uri: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self.app_id = app_id
        self.app_secret = app_secret
        self.redirect_uri = redirect_uri
        self._http = http_client
        self._owns_http = http_client is None
        self._timeout = timeout

    @property
    def http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._timeout)
        return self._http

    async def aclose(self) -> None:
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None

    async def exchange_code(self, code: str) -> str:
        """Exchange an authorization code for a short-lived token."""
        _logger.info("STEP 1: Exchanging code for access token")
        response = await self.http.post(
            OAUTH_TOKEN_URL,
            data={
                "client_id": self.app_id,
                "client_secret": self.app_secret,
                "grant_type": "authorization_code",
                "redirect_uri": self.redirect_uri,
                "code": code,
            },
        )
        if not response.is_success:
            raise AuthenticationError(
                f"Instagram API Error during token exchange: {response.text[:500]}"
            )
        data = _parse_json(response, "token exchange")
        if data.get("error") or not data.get("access_token"):
            raise AuthenticationError(f"Instagram API Error: {_error_message(data)}")
        return data["access_token"]

    async def exchange_for_long_lived_token(self, short_lived_token: str) -> tuple[str, int]:
        """Exchange a short-lived token for a long-lived one.

        Returns:
            Tuple of (access_token, expires_in_seconds)
        """
        _logger.info("STEP 2: Exchanging short-lived token for long-lived token")
        response = await self.http.get(
            OAUTH_LONG_LIVED_TOKEN_URL,
            params={
                "grant_type": "ig_exchange_token",
                "client_id": self.app_id,
                "client_secret": self.app_secret,
                "access_token": short_lived_token,
            },
        )
        data = _parse_json(response, "long-lived token")
        if data.get("error"):
            raise AuthenticationError(
                f"Failed to exchange for long-lived token: {_error_message(data)}"
            )
        access_token = data.get("access_token")
        if not access_token:
            raise AuthenticationError("Failed to get long-lived access token")
        expires_in = data.get("expires_in") or LONG_LIVED_TOKEN_FALLBACK_SECONDS
        return access_token, int(expires_in)

    async def fetch_profile(self, access_token: str) -> dict[str, Any]:
        """Fetch the profile of the token's owner."""
        _logger.info("STEP 3: Fetching user profile")
        response = await self.http.get(
            f"{GRAPH_API_HOST}/{PROFILE_API_VERSION}/me",
            params={
                "fields": "user_id,username,name,profile_picture_url",
                "access_token": access_token,
            },
        )
        data = _parse_json(response, "user profile")
        if data.get("error"):
            raise AuthenticationError(f"Failed to fetch user profile: {_error_message(data)}")
        return data

    async def authenticate(self, code: str) -> UserRecord:
        """Run the full code -> long-lived token -> profile exchange."""
        short_lived = await self.exchange_code(code)
        access_token, expires_in = await self.exchange_for_long_lived_token(short_lived)
        profile = await self.fetch_profile(access_token)

        record = UserRecord(
            id=str(profile.get("user_id") or ""),
            access_token=access_token,
            refresh_token=access_token,
            expires_in=expires_in,
            username=profile.get("username"),
            name=profile.get("name"),
            picture=profile.get("profile_picture_url"),
        )
        if not record.id:
            raise AuthenticationError("User profile response did not include user_id")

        _logger.info(f"User profile fetched: id={record.id} username={record.username}")
        return record
