"""Instagram Graph API client.

Implements the container-based publishing primitives:
1. Create a media container (image, video, Reel, carousel child or parent)
2. Query a container's processing status
3. Publish a container

API Reference:
https://developers.facebook.com/docs/instagram-platform/content-publishing
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..constants import GRAPH_API_HOST, GRAPH_API_VERSION, HTTP_TIMEOUT_SECONDS
from .errors import ErrorKind, InstagramAPIError, classify_error
from .models import Credentials

_api_logger = logging.getLogger("instagram_api")

_REDACTED_KEYS = frozenset({"access_token", "client_secret"})


def _redact(values: dict[str, Any] | None) -> dict[str, Any]:
    """Copy of request values safe to log."""
    if not values:
        return {}
    return {k: ("***" if k in _REDACTED_KEYS else v) for k, v in values.items()}


class GraphAPIClient:
    """Thin executor for Instagram Graph API calls.

    Every failure (transport error, non-2xx status, error envelope) is
    raised as a classified InstagramAPIError.
    """

    def __init__(
        self,
        api_version: str = GRAPH_API_VERSION,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ):
        """Initialize the client.

        Args:
            api_version: Graph API version, e.g. "v19.0".
            http_client: Shared httpx client. One is created lazily if omitted.
            timeout: Request timeout used when creating the httpx client.
        """
        self.api_version = api_version
        self.base_url = f"{GRAPH_API_HOST}/{api_version}"
        self._timeout = timeout
        self._http = http_client
        self._owns_http = http_client is None

        # API call counter for logging
        self._api_call_count = 0

    @property
    def http(self) -> httpx.AsyncClient:
        """Underlying httpx client, created on first use."""
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._timeout)
        return self._http

    async def aclose(self) -> None:
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> "GraphAPIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def execute(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make a single request to the Graph API.

        Args:
            method: HTTP method (GET, POST)
            endpoint: API endpoint relative to the versioned base URL
            params: Query parameters
            data: Form-encoded body for POST

        Returns:
            Parsed JSON response

        Raises:
            InstagramAPIError: If the request fails for any reason
        """
        self._api_call_count += 1
        call_no = self._api_call_count
        method = method.upper()
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        _api_logger.info(
            f"API CALL #{call_no} | {method} {endpoint} | "
            f"params: {_redact(params)} | data: {_redact(data)}"
        )

        try:
            response = await self.http.request(method, url, params=params, data=data)
        except httpx.HTTPError as e:
            _api_logger.error(f"API CALL #{call_no} | TRANSPORT ERROR: {type(e).__name__}: {e}")
            raise classify_error(e) from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        has_error_envelope = isinstance(payload, dict) and "error" in payload
        if not response.is_success or has_error_envelope:
            _api_logger.error(
                f"API CALL #{call_no} | HTTP {response.status_code} | ERROR: "
                f"{payload if payload is not None else response.text[:500]}"
            )
            raise classify_error(payload, response)

        if not isinstance(payload, dict):
            _api_logger.error(f"API CALL #{call_no} | Non-JSON response: {response.text[:500]}")
            raise InstagramAPIError(
                "Instagram returned a response that is not a JSON object.",
                kind=ErrorKind.UNKNOWN_ERROR,
                http_status=response.status_code,
            )

        _api_logger.info(f"API CALL #{call_no} | SUCCESS: {list(payload.keys())}")
        return payload

    async def create_container(
        self,
        credentials: Credentials,
        params: dict[str, str],
        missing_id_message: str = "Media container ID not found in response.",
    ) -> str:
        """Create a media container.

        Args:
            credentials: Account owning the container
            params: Container parameters (image_url, video_url, media_type, ...)
            missing_id_message: Error message when the response has no id

        Returns:
            Container ID (creation_id)
        """
        data = dict(params)
        data["access_token"] = credentials.access_token
        result = await self.execute("POST", f"{credentials.user_id}/media", data=data)
        return _require_id(result, missing_id_message)

    async def get_container_status(self, access_token: str, container_id: str) -> dict[str, Any]:
        """Check a container's processing status.

        Returns:
            Dict with at least `status_code`
        """
        params = {"fields": "status_code", "access_token": access_token}
        return await self.execute("GET", container_id, params=params)

    async def publish_container(
        self,
        credentials: Credentials,
        creation_id: str,
        missing_id_message: str = "Post ID not found in publish response.",
    ) -> str:
        """Publish a container.

        Returns:
            Media ID of the published post
        """
        data = {"creation_id": creation_id, "access_token": credentials.access_token}
        result = await self.execute("POST", f"{credentials.user_id}/media_publish", data=data)
        return _require_id(result, missing_id_message)


def _require_id(result: dict[str, Any], message: str) -> str:
    media_id = result.get("id")
    if not media_id:
        raise InstagramAPIError(message, kind=ErrorKind.UNKNOWN_ERROR)
    return str(media_id)
