"""Pre-flight checks for image URLs.

Instagram only accepts JPEG images reachable over HTTPS. Checking this
before creating a container saves a wasted API call; Instagram still
validates the media on its side.
"""

from __future__ import annotations

import logging

import httpx

from ..constants import HEAD_TIMEOUT_SECONDS
from .errors import ErrorKind, InstagramAPIError, classify_error

_api_logger = logging.getLogger("instagram_api")

JPEG_CONTENT_TYPES = ("image/jpeg", "image/jpg")


class MediaValidator:
    """Validates image URLs before container creation."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        timeout: float = HEAD_TIMEOUT_SECONDS,
    ):
        self._http = http_client
        self._timeout = timeout

    async def validate(self, image_url: str) -> None:
        """Check an image URL, first failure wins.

        1. URL must start with "https://" (no request is made otherwise)
        2. HEAD request must succeed
        3. Content-Type must be JPEG

        Raises:
            InstagramAPIError: INVALID_REQUEST for a rejected URL, or the
                classified transport failure of the HEAD request
        """
        _api_logger.debug(f"Validating image URL: {image_url[:100]}")

        if not image_url.startswith("https://"):
            raise InstagramAPIError(
                "Image URL must use HTTPS",
                kind=ErrorKind.INVALID_REQUEST,
            )

        try:
            response = await self._http.head(
                image_url,
                follow_redirects=True,
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            _api_logger.error(f"Image HEAD request failed: {type(e).__name__}: {e}")
            raise classify_error(e) from e

        if not response.is_success:
            raise InstagramAPIError(
                f"Image URL not accessible: {response.status_code}",
                kind=ErrorKind.INVALID_REQUEST,
                http_status=response.status_code,
            )

        content_type = response.headers.get("content-type", "").lower()
        if not any(t in content_type for t in JPEG_CONTENT_TYPES):
            _api_logger.error(f"Invalid image content type: {content_type or '<missing>'}")
            raise InstagramAPIError(
                "Image must be in JPEG format",
                kind=ErrorKind.INVALID_REQUEST,
            )

        _api_logger.info("Image validation successful")
