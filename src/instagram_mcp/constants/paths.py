"""Path and endpoint constants.

Graph API hosts, OAuth endpoints and local file names used across the
server and the OAuth callback server.
"""

from typing import Final

# =============================================================================
# GRAPH API
# =============================================================================

GRAPH_API_HOST: Final[str] = "https://graph.instagram.com"
"""Host for Instagram Graph API calls made with Instagram user tokens."""

GRAPH_API_VERSION: Final[str] = "v19.0"
"""Graph API version used for publishing. Fixed, not negotiated."""

PROFILE_API_VERSION: Final[str] = "v21.0"
"""Graph API version used to read the user profile after login."""


# =============================================================================
# OAUTH
# =============================================================================

OAUTH_AUTHORIZE_URL: Final[str] = "https://www.instagram.com/oauth/authorize"
"""Instagram Business Login authorization page."""

OAUTH_TOKEN_URL: Final[str] = "https://api.instagram.com/oauth/access_token"
"""Endpoint exchanging an authorization code for a short-lived token."""

OAUTH_LONG_LIVED_TOKEN_URL: Final[str] = f"{GRAPH_API_HOST}/access_token"
"""Endpoint exchanging a short-lived token for a long-lived one."""

OAUTH_SCOPES: Final[tuple[str, ...]] = (
    "instagram_business_basic",
    "instagram_business_content_publish",
    "instagram_business_manage_comments",
    "instagram_business_manage_insights",
)
"""Scopes requested during Instagram Business Login."""

OAUTH_STATE_LENGTH: Final[int] = 6
"""Length of the random `state` value added to authorization URLs."""

OAUTH_CALLBACK_PATH: Final[str] = "/auth/callback/instagram-standalone"
"""Route of the OAuth callback server."""

LONG_LIVED_TOKEN_FALLBACK_SECONDS: Final[int] = 59 * 24 * 60 * 60
"""Assumed lifetime of a long-lived token when the API omits expires_in."""


# =============================================================================
# LOCAL FILES
# =============================================================================

USER_FILE_NAME: Final[str] = "user.json"
"""Single-record credential store written by the callback server."""

LOGS_DIR_NAME: Final[str] = "logs"
"""Directory receiving log files."""

LOG_INSTAGRAM_API: Final[str] = "instagram_api.log"
"""Log file for Graph API calls and publish pipelines."""
