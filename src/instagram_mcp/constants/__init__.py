"""Global constants package for the Instagram MCP server.

PACKAGE STRUCTURE:
-----------------
- limits.py   : Content limits, polling defaults, timeouts
- paths.py    : Graph API hosts, OAuth endpoints, local file names
- status.py   : Container status and media kind enums

USAGE EXAMPLES:
--------------
    from instagram_mcp.constants import GRAPH_API_VERSION, ContainerStatus
"""

# =============================================================================
# LIMIT CONSTANTS
# =============================================================================
from .limits import (
    INSTAGRAM_CAPTION_MAX_LENGTH,
    INSTAGRAM_CAROUSEL_MIN_ITEMS,
    INSTAGRAM_CAROUSEL_MAX_ITEMS,
    POLL_MAX_WAIT_SECONDS,
    POLL_INTERVAL_SECONDS,
    HTTP_TIMEOUT_SECONDS,
    HEAD_TIMEOUT_SECONDS,
)

# =============================================================================
# PATH CONSTANTS
# =============================================================================
from .paths import (
    GRAPH_API_HOST,
    GRAPH_API_VERSION,
    PROFILE_API_VERSION,
    OAUTH_AUTHORIZE_URL,
    OAUTH_TOKEN_URL,
    OAUTH_LONG_LIVED_TOKEN_URL,
    OAUTH_SCOPES,
    OAUTH_STATE_LENGTH,
    OAUTH_CALLBACK_PATH,
    LONG_LIVED_TOKEN_FALLBACK_SECONDS,
    USER_FILE_NAME,
    LOGS_DIR_NAME,
    LOG_INSTAGRAM_API,
)

# =============================================================================
# STATUS ENUMS
# =============================================================================
from .status import (
    ContainerStatus,
    MediaKind,
)

__all__ = [
    # Limits
    "INSTAGRAM_CAPTION_MAX_LENGTH",
    "INSTAGRAM_CAROUSEL_MIN_ITEMS",
    "INSTAGRAM_CAROUSEL_MAX_ITEMS",
    "POLL_MAX_WAIT_SECONDS",
    "POLL_INTERVAL_SECONDS",
    "HTTP_TIMEOUT_SECONDS",
    "HEAD_TIMEOUT_SECONDS",
    # Paths
    "GRAPH_API_HOST",
    "GRAPH_API_VERSION",
    "PROFILE_API_VERSION",
    "OAUTH_AUTHORIZE_URL",
    "OAUTH_TOKEN_URL",
    "OAUTH_LONG_LIVED_TOKEN_URL",
    "OAUTH_SCOPES",
    "OAUTH_STATE_LENGTH",
    "OAUTH_CALLBACK_PATH",
    "LONG_LIVED_TOKEN_FALLBACK_SECONDS",
    "USER_FILE_NAME",
    "LOGS_DIR_NAME",
    "LOG_INSTAGRAM_API",
    # Status
    "ContainerStatus",
    "MediaKind",
]
