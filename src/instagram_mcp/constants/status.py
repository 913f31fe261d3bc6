"""Status enums and state definitions.

Container status codes come straight from the Graph API `status_code`
field; anything the API returns that is not listed here is treated as
still pending.
"""

from enum import Enum


class ContainerStatus(str, Enum):
    """Processing state of a media container."""

    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"
    ERROR = "ERROR"
    EXPIRED = "EXPIRED"
    PUBLISHED = "PUBLISHED"

    @property
    def is_failure(self) -> bool:
        return self in (ContainerStatus.ERROR, ContainerStatus.EXPIRED)


class MediaKind(str, Enum):
    """Kind of media a container holds."""

    IMAGE = "IMAGE"
    VIDEO = "VIDEO"
    CAROUSEL = "CAROUSEL"
    REELS = "REELS"
