"""Data models for Instagram publishing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..constants import MediaKind


@dataclass(frozen=True)
class Credentials:
    """Instagram user id and access token used to act on an account."""
    user_id: str
    access_token: str

    def __repr__(self) -> str:
        return f"Credentials(user_id={self.user_id!r}, access_token='***')"


@dataclass
class UserRecord:
    """Single-user record persisted by the OAuth callback server."""
    id: str
    access_token: str
    refresh_token: str | None = None
    expires_in: int | None = None
    username: str | None = None
    name: str | None = None
    picture: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserRecord":
        return cls(
            id=str(data.get("id") or ""),
            access_token=data.get("accessToken") or "",
            refresh_token=data.get("refreshToken"),
            expires_in=data.get("expiresIn"),
            username=data.get("username"),
            name=data.get("name"),
            picture=data.get("picture"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON layout of user.json."""
        return {
            "id": self.id,
            "name": self.name,
            "accessToken": self.access_token,
            "refreshToken": self.refresh_token,
            "expiresIn": self.expires_in,
            "picture": self.picture,
            "username": self.username,
        }

    def public_profile(self) -> dict[str, Any]:
        """Fields safe to return to a browser."""
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "picture": self.picture,
        }

    @property
    def credentials(self) -> Credentials:
        return Credentials(user_id=self.id, access_token=self.access_token)


@dataclass(frozen=True)
class CarouselItem:
    """One child of a carousel post."""
    type: MediaKind
    url: str

    @property
    def is_video(self) -> bool:
        return self.type == MediaKind.VIDEO

    @property
    def url_param(self) -> str:
        """Container parameter carrying this item's URL."""
        return "video_url" if self.is_video else "image_url"


@dataclass(frozen=True)
class ImagePostRequest:
    """Request to publish a single JPEG image."""
    image_url: str
    caption: str | None = None
    credentials: Credentials | None = None


@dataclass(frozen=True)
class CarouselPostRequest:
    """Request to publish a carousel of 2-10 images/videos."""
    media_items: tuple[CarouselItem, ...]
    caption: str | None = None
    credentials: Credentials | None = None


@dataclass(frozen=True)
class ReelPostRequest:
    """Request to publish a Reel."""
    video_url: str
    caption: str | None = None
    cover_url: str | None = None
    share_to_feed: bool | None = None
    credentials: Credentials | None = None


@dataclass(frozen=True)
class PublishResult:
    """Result of a successful publish."""
    post_id: str
    status: str
    container_ids: tuple[str, ...] = field(default=(), compare=False)

    def to_dict(self) -> dict[str, str]:
        """Convert to the tool output payload."""
        return {
            "postId": self.post_id,
            "status": self.status,
        }
