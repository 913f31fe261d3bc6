"""Instagram publishing module for the Instagram MCP server."""

from .client import GraphAPIClient
from .credentials import (
    CredentialProvider,
    StaticCredentialProvider,
    UserFileStore,
    resolve_credentials,
)
from .errors import ConfigurationError, ErrorKind, InstagramAPIError, classify_error
from .models import (
    CarouselItem,
    CarouselPostRequest,
    Credentials,
    ImagePostRequest,
    PublishResult,
    ReelPostRequest,
    UserRecord,
)
from .oauth import AuthenticationError, AuthUrl, OAuthClient, build_auth_url
from .poller import ContainerPoller
from .publisher import InstagramPublisher
from .validator import MediaValidator

__all__ = [
    "GraphAPIClient",
    "CredentialProvider",
    "StaticCredentialProvider",
    "UserFileStore",
    "resolve_credentials",
    "ConfigurationError",
    "ErrorKind",
    "InstagramAPIError",
    "classify_error",
    "CarouselItem",
    "CarouselPostRequest",
    "Credentials",
    "ImagePostRequest",
    "PublishResult",
    "ReelPostRequest",
    "UserRecord",
    "AuthenticationError",
    "AuthUrl",
    "OAuthClient",
    "build_auth_url",
    "ContainerPoller",
    "InstagramPublisher",
    "MediaValidator",
]
