"""Tool handlers behind the MCP tool surface.

Handlers never raise: every outcome is rendered as a tool result dict,
`{"content": [...], "output": {...}}` on success or
`{"isError": True, "content": [...]}` on failure.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from ..config import Settings
from ..constants import MediaKind
from ..instagram.credentials import CredentialProvider, resolve_credentials
from ..instagram.errors import ConfigurationError, ErrorKind, InstagramAPIError, classify_error
from ..instagram.models import (
    CarouselItem,
    CarouselPostRequest,
    ImagePostRequest,
    ReelPostRequest,
)
from ..instagram.oauth import build_auth_url
from ..instagram.publisher import InstagramPublisher

_logger = logging.getLogger("instagram_mcp")

ToolResult = dict[str, Any]


def text_result(text: str, output: dict[str, Any] | None = None) -> ToolResult:
    """Successful tool result."""
    result: ToolResult = {"content": [{"type": "text", "text": text}]}
    if output is not None:
        result["output"] = output
    return result


def error_result(text: str) -> ToolResult:
    """Failed tool result."""
    return {"isError": True, "content": [{"type": "text", "text": text}]}


def describe_error(error: BaseException) -> str:
    """Single-line rendering of any failure, without stack traces."""
    if isinstance(error, ConfigurationError):
        return str(error)
    return classify_error(error).describe()


def parse_carousel_items(media_items: Iterable[Any]) -> tuple[CarouselItem, ...]:
    """Convert raw `{type, url}` items into CarouselItems.

    Raises:
        InstagramAPIError: INVALID_REQUEST for an unknown item type
    """
    items = []
    for raw in media_items:
        if isinstance(raw, CarouselItem):
            items.append(raw)
            continue
        if isinstance(raw, dict):
            item_type, url = raw.get("type"), raw.get("url")
        else:
            item_type, url = getattr(raw, "type", None), getattr(raw, "url", None)
        try:
            kind = MediaKind(str(item_type).upper())
        except ValueError:
            kind = None
        if kind not in (MediaKind.IMAGE, MediaKind.VIDEO) or not url:
            raise InstagramAPIError(
                f"Invalid carousel item {raw!r}: type must be IMAGE or VIDEO and url is required.",
                kind=ErrorKind.INVALID_REQUEST,
            )
        items.append(CarouselItem(type=kind, url=str(url)))
    return tuple(items)


class InstagramTools:
    """The four Instagram tools, independent of the MCP transport."""

    def __init__(
        self,
        settings: Settings,
        publisher: InstagramPublisher,
        credentials: CredentialProvider,
    ):
        self._settings = settings
        self._publisher = publisher
        self._credentials = credentials

    def auth(self, redirect_uri: str) -> ToolResult:
        """instagram-auth: build an OAuth authorization URL."""
        try:
            app_id = self._settings.require_app_id()
            auth_url = build_auth_url(app_id, redirect_uri)
        except Exception as e:
            _logger.error(f"instagram-auth failed: {e}")
            return error_result(f"Error generating auth URL: {describe_error(e)}")

        return text_result(
            f"Instagram OAuth URL: {auth_url.oauth_url}. State: {auth_url.state}",
            auth_url.to_dict(),
        )

    async def post_image(
        self,
        image_url: str,
        caption: str | None = None,
        ig_user_id: str | None = None,
        user_access_token: str | None = None,
    ) -> ToolResult:
        """instagram-post-image: publish a single JPEG image."""
        try:
            credentials = resolve_credentials(self._credentials, ig_user_id, user_access_token)
            result = await self._publisher.publish_image(
                ImagePostRequest(image_url=image_url, caption=caption, credentials=credentials)
            )
        except Exception as e:
            _logger.error(f"instagram-post-image failed: {e!r}")
            return error_result(f"Error posting image: {describe_error(e)}")

        return text_result(
            f"Image posted successfully! Post ID: {result.post_id}",
            result.to_dict(),
        )

    async def post_carousel(
        self,
        media_items: Iterable[Any],
        caption: str | None = None,
        ig_user_id: str | None = None,
        user_access_token: str | None = None,
    ) -> ToolResult:
        """instagram-post-carousel: publish 2-10 images/videos as one post."""
        try:
            items = parse_carousel_items(media_items)
            credentials = resolve_credentials(self._credentials, ig_user_id, user_access_token)
            result = await self._publisher.publish_carousel(
                CarouselPostRequest(media_items=items, caption=caption, credentials=credentials)
            )
        except Exception as e:
            _logger.error(f"instagram-post-carousel failed: {e!r}")
            return error_result(f"Error posting carousel: {describe_error(e)}")

        return text_result(
            f"Carousel posted successfully! Post ID: {result.post_id}",
            result.to_dict(),
        )

    async def post_reel(
        self,
        video_url: str,
        caption: str | None = None,
        cover_url: str | None = None,
        share_to_feed: bool | None = None,
        ig_user_id: str | None = None,
        user_access_token: str | None = None,
    ) -> ToolResult:
        """instagram-post-reel: publish a Reel once Instagram has processed it."""
        try:
            credentials = resolve_credentials(self._credentials, ig_user_id, user_access_token)
            result = await self._publisher.publish_reel(
                ReelPostRequest(
                    video_url=video_url,
                    caption=caption,
                    cover_url=cover_url,
                    share_to_feed=share_to_feed,
                    credentials=credentials,
                )
            )
        except Exception as e:
            _logger.error(f"instagram-post-reel failed: {e!r}")
            return error_result(f"Error posting Reel: {describe_error(e)}")

        return text_result(
            f"Reel posted successfully! Post ID: {result.post_id}",
            result.to_dict(),
        )
