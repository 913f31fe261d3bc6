"""MCP server exposing the Instagram tools over stdio."""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated, Literal, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult, TextContent
from pydantic import BaseModel, Field

from ..config import Settings
from ..instagram.client import GraphAPIClient
from ..instagram.credentials import UserFileStore
from ..instagram.poller import ContainerPoller
from ..instagram.publisher import InstagramPublisher
from .health import serve_health
from .tools import InstagramTools, ToolResult

_logger = logging.getLogger("instagram_mcp")

SERVER_NAME = "instagram-server"

_IG_USER_ID = Field(
    description="The Instagram User ID of the account to post to. Read from the stored user when omitted.",
)
_ACCESS_TOKEN = Field(
    description="The access token of the Instagram user. Read from the stored user when omitted.",
)


class MediaItemInput(BaseModel):
    """One carousel item as received from the client."""

    type: Literal["IMAGE", "VIDEO"] = Field(description="Type of media: IMAGE or VIDEO.")
    url: str = Field(
        description="Public URL of the image or video (HTTPS required for images, must be JPEG)."
    )


def to_call_tool_result(result: ToolResult) -> CallToolResult:
    """Convert a tool result dict into the MCP wire type."""
    return CallToolResult(
        content=[TextContent(type="text", text=block["text"]) for block in result["content"]],
        structuredContent=result.get("output"),
        isError=result.get("isError", False),
    )


def create_server(tools: InstagramTools) -> FastMCP:
    """Register the four Instagram tools on a FastMCP server."""
    server = FastMCP(SERVER_NAME)

    @server.tool(
        name="instagram-auth",
        title="Instagram Authentication",
        description="Generates an Instagram OAuth URL for authentication.",
    )
    async def instagram_auth(
        redirectUri: Annotated[str, Field(description="The redirect URI for OAuth callback.")],
    ) -> CallToolResult:
        return to_call_tool_result(tools.auth(redirectUri))

    @server.tool(
        name="instagram-post-image",
        title="Post Image to Instagram",
        description="Posts an image to Instagram.",
    )
    async def instagram_post_image(
        imageUrl: Annotated[
            str, Field(description="The public URL of the image to post (must be JPEG and HTTPS).")
        ],
        caption: Annotated[Optional[str], Field(description="The caption for the image post.")] = None,
        igUserId: Annotated[Optional[str], _IG_USER_ID] = None,
        userAccessToken: Annotated[Optional[str], _ACCESS_TOKEN] = None,
    ) -> CallToolResult:
        result = await tools.post_image(imageUrl, caption, igUserId, userAccessToken)
        return to_call_tool_result(result)

    @server.tool(
        name="instagram-post-carousel",
        title="Post Carousel to Instagram",
        description="Posts a carousel of images/videos to Instagram.",
    )
    async def instagram_post_carousel(
        mediaItems: Annotated[
            list[MediaItemInput],
            Field(
                description=(
                    "Array of media items (2-10 items). IMPORTANT: For videos, ensure they "
                    "meet Instagram's specifications."
                )
            ),
        ],
        caption: Annotated[Optional[str], Field(description="The caption for the carousel post.")] = None,
        igUserId: Annotated[Optional[str], _IG_USER_ID] = None,
        userAccessToken: Annotated[Optional[str], _ACCESS_TOKEN] = None,
    ) -> CallToolResult:
        result = await tools.post_carousel(mediaItems, caption, igUserId, userAccessToken)
        return to_call_tool_result(result)

    @server.tool(
        name="instagram-post-reel",
        title="Post Reel to Instagram",
        description="Posts a Reel to Instagram.",
    )
    async def instagram_post_reel(
        videoUrl: Annotated[str, Field(description="Public URL of the video to post as a Reel.")],
        coverUrl: Annotated[
            Optional[str],
            Field(
                description=(
                    "Public URL of the cover image for the Reel. If not provided, "
                    "Instagram will use the first frame."
                )
            ),
        ] = None,
        caption: Annotated[Optional[str], Field(description="The caption for the Reel.")] = None,
        shareToFeed: Annotated[
            Optional[bool],
            Field(description="Whether to also share the Reel to the main feed."),
        ] = None,
        igUserId: Annotated[Optional[str], _IG_USER_ID] = None,
        userAccessToken: Annotated[Optional[str], _ACCESS_TOKEN] = None,
    ) -> CallToolResult:
        result = await tools.post_reel(
            videoUrl,
            caption=caption,
            cover_url=coverUrl,
            share_to_feed=shareToFeed,
            ig_user_id=igUserId,
            user_access_token=userAccessToken,
        )
        return to_call_tool_result(result)

    return server


def build_tools(settings: Settings, client: GraphAPIClient) -> InstagramTools:
    """Wire the publisher and credential store from settings."""
    store = UserFileStore(settings.instagram_user_file)
    poller = ContainerPoller(
        client,
        max_wait_seconds=settings.poll_max_wait_seconds,
        poll_interval=settings.poll_interval_seconds,
    )
    publisher = InstagramPublisher(client, store, poller=poller)
    return InstagramTools(settings, publisher, store)


async def run_server(settings: Settings) -> None:
    """Serve the tools over stdio until the client disconnects.

    When PORT is set, a health endpoint is served alongside.
    """
    async with GraphAPIClient(
        settings.instagram_graph_api_version,
        timeout=settings.http_timeout_seconds,
    ) as client:
        server = create_server(build_tools(settings, client))

        health_task = None
        if settings.port:
            health_task = asyncio.create_task(serve_health(settings.port))
            _logger.info(f"HTTP health endpoint listening on port {settings.port}")

        _logger.info("Instagram MCP Server running on stdio")
        try:
            await server.run_stdio_async()
        finally:
            if health_task is not None:
                health_task.cancel()
                try:
                    await health_task
                except asyncio.CancelledError:
                    pass
