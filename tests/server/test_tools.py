"""Tests for the tool handlers behind the MCP surface."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from instagram_mcp.config import Settings
from instagram_mcp.constants import MediaKind
from instagram_mcp.instagram import (
    CarouselItem,
    Credentials,
    ErrorKind,
    InstagramAPIError,
    PublishResult,
    StaticCredentialProvider,
)
from instagram_mcp.server.tools import InstagramTools, parse_carousel_items

STORED = Credentials(user_id="stored-user", access_token="stored-token")


@pytest.fixture
def publisher():
    mock = MagicMock()
    mock.publish_image = AsyncMock(return_value=PublishResult("456", "Image posted successfully"))
    mock.publish_carousel = AsyncMock(return_value=PublishResult("789", "Carousel posted successfully."))
    mock.publish_reel = AsyncMock(return_value=PublishResult("321", "Reel posted successfully."))
    return mock


@pytest.fixture
def tools(publisher):
    settings = Settings(instagram_app_id="app-123", instagram_app_secret="secret")
    return InstagramTools(settings, publisher, StaticCredentialProvider(STORED))


def _text(result):
    return result["content"][0]["text"]


class TestAuthTool:
    """Tests for instagram-auth."""

    def test_returns_url_and_state(self, tools):
        """Test the URL and state appear in both text and output."""
        result = tools.auth("https://localhost:6001/auth/callback/instagram-standalone")

        assert "isError" not in result
        output = result["output"]
        assert output["oauthUrl"].startswith("https://www.instagram.com/oauth/authorize?")
        assert "client_id=app-123" in output["oauthUrl"]
        assert _text(result) == f"Instagram OAuth URL: {output['oauthUrl']}. State: {output['state']}"

    def test_missing_app_id(self, publisher):
        """Test a missing app id is reported as a tool error."""
        tools = InstagramTools(Settings(instagram_app_id=""), publisher, StaticCredentialProvider(STORED))

        result = tools.auth("https://example.com/cb")

        assert result["isError"] is True
        assert _text(result).startswith("Error generating auth URL:")
        assert "INSTAGRAM_APP_ID" in _text(result)


class TestPostImageTool:
    """Tests for instagram-post-image."""

    @pytest.mark.asyncio
    async def test_success(self, tools, publisher):
        """Test success text and structured output."""
        result = await tools.post_image("https://cdn.example.com/a.jpg", caption="Hi")

        assert _text(result) == "Image posted successfully! Post ID: 456"
        assert result["output"] == {"postId": "456", "status": "Image posted successfully"}
        request = publisher.publish_image.await_args.args[0]
        assert request.image_url == "https://cdn.example.com/a.jpg"
        assert request.caption == "Hi"
        assert request.credentials == STORED

    @pytest.mark.asyncio
    async def test_explicit_credentials(self, tools, publisher):
        """Test igUserId and userAccessToken override the stored user."""
        await tools.post_image("https://cdn.example.com/a.jpg", ig_user_id="42", user_access_token="tok")

        request = publisher.publish_image.await_args.args[0]
        assert request.credentials == Credentials("42", "tok")

    @pytest.mark.asyncio
    async def test_partial_credentials(self, tools, publisher):
        """Test a lone igUserId is rejected before publishing."""
        result = await tools.post_image("https://cdn.example.com/a.jpg", ig_user_id="42")

        assert result["isError"] is True
        assert "INVALID_REQUEST" in _text(result)
        publisher.publish_image.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_api_error_is_rendered(self, tools, publisher):
        """Test a classified failure becomes a one-line tool error."""
        publisher.publish_image.side_effect = InstagramAPIError(
            "token expired",
            kind=ErrorKind.EXPIRED_TOKEN,
            http_status=400,
            fbtrace_id="abc",
        )

        result = await tools.post_image("https://cdn.example.com/a.jpg")

        assert result == {
            "isError": True,
            "content": [
                {
                    "type": "text",
                    "text": "Error posting image: token expired (kind: EXPIRED_TOKEN, status: 400, trace id: abc)",
                }
            ],
        }

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_rendered(self, tools, publisher):
        """Test handlers never raise, even on unexpected exceptions."""
        publisher.publish_image.side_effect = RuntimeError("kaboom")

        result = await tools.post_image("https://cdn.example.com/a.jpg")

        assert result["isError"] is True
        assert _text(result) == "Error posting image: kaboom (kind: UNKNOWN_ERROR)"


class TestPostCarouselTool:
    """Tests for instagram-post-carousel."""

    @pytest.mark.asyncio
    async def test_success(self, tools, publisher):
        """Test raw items are converted in order."""
        result = await tools.post_carousel(
            [
                {"type": "IMAGE", "url": "https://cdn.example.com/a.jpg"},
                {"type": "VIDEO", "url": "https://cdn.example.com/b.mp4"},
            ],
            caption="Both",
        )

        assert _text(result) == "Carousel posted successfully! Post ID: 789"
        request = publisher.publish_carousel.await_args.args[0]
        assert request.media_items == (
            CarouselItem(MediaKind.IMAGE, "https://cdn.example.com/a.jpg"),
            CarouselItem(MediaKind.VIDEO, "https://cdn.example.com/b.mp4"),
        )
        assert request.caption == "Both"

    @pytest.mark.asyncio
    async def test_invalid_item(self, tools, publisher):
        """Test an unknown item type fails before publishing."""
        result = await tools.post_carousel([{"type": "GIF", "url": "https://cdn.example.com/a.gif"}])

        assert result["isError"] is True
        assert _text(result).startswith("Error posting carousel:")
        publisher.publish_carousel.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_size_error_from_publisher(self, tools, publisher):
        """Test orchestrator validation errors surface as tool errors."""
        publisher.publish_carousel.side_effect = InstagramAPIError(
            "Carousel must have between 2 and 10 media items.",
            kind=ErrorKind.INVALID_REQUEST,
        )

        result = await tools.post_carousel([{"type": "IMAGE", "url": "https://cdn.example.com/a.jpg"}])

        assert result["isError"] is True
        assert "between 2 and 10" in _text(result)


class TestPostReelTool:
    """Tests for instagram-post-reel."""

    @pytest.mark.asyncio
    async def test_success(self, tools, publisher):
        """Test optional fields reach the publisher."""
        result = await tools.post_reel(
            "https://cdn.example.com/v.mp4",
            caption="Reel",
            cover_url="https://cdn.example.com/c.jpg",
            share_to_feed=True,
        )

        assert _text(result) == "Reel posted successfully! Post ID: 321"
        assert result["output"] == {"postId": "321", "status": "Reel posted successfully."}
        request = publisher.publish_reel.await_args.args[0]
        assert request.cover_url == "https://cdn.example.com/c.jpg"
        assert request.share_to_feed is True

    @pytest.mark.asyncio
    async def test_error_prefix(self, tools, publisher):
        """Test Reel failures use their own prefix."""
        publisher.publish_reel.side_effect = InstagramAPIError(
            "Container processing timed out after 60s.",
            kind=ErrorKind.UNKNOWN_ERROR,
        )

        result = await tools.post_reel("https://cdn.example.com/v.mp4")

        assert _text(result) == (
            "Error posting Reel: Container processing timed out after 60s. (kind: UNKNOWN_ERROR)"
        )


class TestParseCarouselItems:
    """Tests for parse_carousel_items."""

    def test_accepts_objects_and_lowercase(self):
        """Test attribute objects and lowercase types are accepted."""
        raw = MagicMock(type="video", url="https://cdn.example.com/v.mp4")

        items = parse_carousel_items([raw, CarouselItem(MediaKind.IMAGE, "https://x/a.jpg")])

        assert items[0] == CarouselItem(MediaKind.VIDEO, "https://cdn.example.com/v.mp4")
        assert items[1].type == MediaKind.IMAGE

    @pytest.mark.parametrize(
        "raw",
        [{"type": "REELS", "url": "https://x/v.mp4"}, {"type": "IMAGE"}, {"url": "https://x/a.jpg"}],
    )
    def test_rejects_invalid(self, raw):
        """Test bad types and missing URLs are INVALID_REQUEST."""
        with pytest.raises(InstagramAPIError) as exc:
            parse_carousel_items([raw])

        assert exc.value.kind == ErrorKind.INVALID_REQUEST
