"""Publish orchestrators for images, carousels and Reels.

Every publish follows the same shape:
1. Create a media container (carousels: one per child, then the parent)
2. Wait for video containers to finish processing
3. Publish the container

Containers left behind by a failed run are not cleaned up; Instagram
expires unpublished containers on its own.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, TypeVar

from ..constants import (
    INSTAGRAM_CAPTION_MAX_LENGTH,
    INSTAGRAM_CAROUSEL_MAX_ITEMS,
    INSTAGRAM_CAROUSEL_MIN_ITEMS,
    MediaKind,
)
from .client import GraphAPIClient
from .credentials import CredentialProvider
from .errors import ErrorKind, InstagramAPIError, classify_error
from .models import (
    CarouselPostRequest,
    Credentials,
    ImagePostRequest,
    PublishResult,
    ReelPostRequest,
)
from .poller import ContainerPoller
from .validator import MediaValidator

_api_logger = logging.getLogger("instagram_api")

T = TypeVar("T")

IMAGE_POSTED = "Image posted successfully"
CAROUSEL_POSTED = "Carousel posted successfully."
REEL_POSTED = "Reel posted successfully."


def _check_caption(caption: str | None) -> None:
    if caption and len(caption) > INSTAGRAM_CAPTION_MAX_LENGTH:
        raise InstagramAPIError(
            f"Caption is {len(caption)} characters long; "
            f"Instagram allows at most {INSTAGRAM_CAPTION_MAX_LENGTH}.",
            kind=ErrorKind.INVALID_REQUEST,
        )


class InstagramPublisher:
    """Runs the create -> poll -> publish pipeline for each media kind.

    Any InstagramAPIError raised along the way reaches the caller
    unchanged; every other exception is classified exactly once.
    """

    def __init__(
        self,
        client: GraphAPIClient,
        credentials: CredentialProvider,
        validator: MediaValidator | None = None,
        poller: ContainerPoller | None = None,
    ):
        """Initialize the publisher.

        Args:
            client: Graph API executor
            credentials: Source of credentials when a request carries none
            validator: Image pre-flight validator (built on the client's
                httpx client if omitted)
            poller: Container readiness poller (built on the client if omitted)
        """
        self._client = client
        self._credentials = credentials
        self._validator = validator or MediaValidator(client.http)
        self._poller = poller or ContainerPoller(client)

    def _resolve_credentials(self, explicit: Credentials | None) -> Credentials:
        return explicit or self._credentials.get_credentials()

    async def _run(self, label: str, step: Callable[[], Awaitable[T]]) -> T:
        """Run one orchestration, classifying unexpected failures."""
        _api_logger.info(f"=== NEW SESSION === {label}")
        try:
            result = await step()
        except InstagramAPIError as e:
            _api_logger.error(f"=== SESSION FAILED === {label} | {e!r}")
            raise
        except Exception as e:
            error = classify_error(e)
            _api_logger.error(f"=== SESSION FAILED === {label} | {error!r}", exc_info=True)
            raise error from e
        _api_logger.info(f"=== SESSION COMPLETE === {label}")
        return result

    # -------------------------------------------------------------------------
    # Single image
    # -------------------------------------------------------------------------

    async def publish_image(self, request: ImagePostRequest) -> PublishResult:
        """Publish a single JPEG image.

        Images are processed synchronously by Instagram, so no polling
        happens between container creation and publishing.
        """
        return await self._run("image", lambda: self._publish_image(request))

    async def _publish_image(self, request: ImagePostRequest) -> PublishResult:
        _check_caption(request.caption)
        credentials = self._resolve_credentials(request.credentials)

        # Step 1: Pre-flight check of the image URL
        await self._validator.validate(request.image_url)

        # Step 2: Create container
        params = {"image_url": request.image_url}
        if request.caption:
            params["caption"] = request.caption
        container_id = await self._client.create_container(credentials, params)
        _api_logger.info(f"Image container created: {container_id}")

        # Step 3: Publish
        post_id = await self._client.publish_container(credentials, container_id)
        _api_logger.info(f"Image published! Media ID: {post_id}")

        return PublishResult(post_id=post_id, status=IMAGE_POSTED, container_ids=(container_id,))

    # -------------------------------------------------------------------------
    # Carousel
    # -------------------------------------------------------------------------

    async def publish_carousel(self, request: CarouselPostRequest) -> PublishResult:
        """Publish a carousel of 2-10 images and/or videos.

        Child containers are created one at a time in input order, so the
        published carousel keeps the caller's ordering. Video children are
        polled until ready before the parent container is created.
        """
        return await self._run("carousel", lambda: self._publish_carousel(request))

    async def _publish_carousel(self, request: CarouselPostRequest) -> PublishResult:
        items = request.media_items
        if not INSTAGRAM_CAROUSEL_MIN_ITEMS <= len(items) <= INSTAGRAM_CAROUSEL_MAX_ITEMS:
            raise InstagramAPIError(
                f"Carousel must have between {INSTAGRAM_CAROUSEL_MIN_ITEMS} and "
                f"{INSTAGRAM_CAROUSEL_MAX_ITEMS} media items.",
                kind=ErrorKind.INVALID_REQUEST,
            )
        for item in items:
            if item.type not in (MediaKind.IMAGE, MediaKind.VIDEO):
                raise InstagramAPIError(
                    f"Carousel items must be IMAGE or VIDEO, got {item.type.value}.",
                    kind=ErrorKind.INVALID_REQUEST,
                )
        _check_caption(request.caption)
        credentials = self._resolve_credentials(request.credentials)

        # Step 1: Create child containers, in order
        child_ids: list[str] = []
        for i, item in enumerate(items):
            child_id = await self._client.create_container(
                credentials,
                {item.url_param: item.url, "is_carousel_item": "true"},
                missing_id_message=f"Media container ID not found for item {item.url}.",
            )
            child_ids.append(child_id)
            _api_logger.info(f"Created child container {i + 1}/{len(items)}: {child_id}")

        # Step 2: Wait for video children to process
        for item, child_id in zip(items, child_ids):
            if item.is_video:
                await self._poller.wait_until_ready(credentials.access_token, child_id)

        # Step 3: Create parent carousel container
        params = {"media_type": MediaKind.CAROUSEL.value, "children": ",".join(child_ids)}
        if request.caption:
            params["caption"] = request.caption
        carousel_id = await self._client.create_container(
            credentials,
            params,
            missing_id_message="Main carousel container ID not found.",
        )
        _api_logger.info(f"Carousel container created: {carousel_id}")

        # Step 4: Publish
        post_id = await self._client.publish_container(
            credentials,
            carousel_id,
            missing_id_message="Post ID not found in carousel publish response.",
        )
        _api_logger.info(f"Carousel published! Media ID: {post_id}")

        return PublishResult(
            post_id=post_id,
            status=CAROUSEL_POSTED,
            container_ids=(*child_ids, carousel_id),
        )

    # -------------------------------------------------------------------------
    # Reel
    # -------------------------------------------------------------------------

    async def publish_reel(self, request: ReelPostRequest) -> PublishResult:
        """Publish a Reel.

        Complete workflow:
        1. Create Reel container with video URL
        2. Wait for video processing
        3. Publish the container
        """
        return await self._run("reel", lambda: self._publish_reel(request))

    async def _publish_reel(self, request: ReelPostRequest) -> PublishResult:
        _check_caption(request.caption)
        credentials = self._resolve_credentials(request.credentials)

        # Step 1: Create Reel container
        params = {"media_type": MediaKind.REELS.value, "video_url": request.video_url}
        if request.caption:
            params["caption"] = request.caption
        if request.cover_url:
            params["cover_url"] = request.cover_url
        if request.share_to_feed is not None:
            params["share_to_feed"] = "true" if request.share_to_feed else "false"

        container_id = await self._client.create_container(
            credentials,
            params,
            missing_id_message="Reel media container ID not found.",
        )
        _api_logger.info(f"Reel container created: {container_id}")

        # Step 2: Wait for video processing
        await self._poller.wait_until_ready(credentials.access_token, container_id)

        # Step 3: Publish
        post_id = await self._client.publish_container(
            credentials,
            container_id,
            missing_id_message="Post ID not found in Reel publish response.",
        )
        _api_logger.info(f"Reel published! Media ID: {post_id}")

        return PublishResult(post_id=post_id, status=REEL_POSTED, container_ids=(container_id,))
