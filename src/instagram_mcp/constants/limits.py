"""Limit constants for the Instagram MCP server.

This module contains all limits and constraints:
- Instagram content limits
- Readiness polling defaults
- HTTP timeouts

MODIFICATION GUIDE:
------------------
- INSTAGRAM_* limits: Based on Instagram Graph API requirements
- POLL_* settings: Fixed-interval polling, no backoff
"""

from typing import Final

# =============================================================================
# INSTAGRAM LIMITS
# =============================================================================
# Based on Instagram Graph API documentation

INSTAGRAM_CAPTION_MAX_LENGTH: Final[int] = 2200
"""Maximum caption length in characters for Instagram posts."""

INSTAGRAM_CAROUSEL_MIN_ITEMS: Final[int] = 2
"""Minimum items in a carousel post."""

INSTAGRAM_CAROUSEL_MAX_ITEMS: Final[int] = 10
"""Maximum items in a carousel post."""


# =============================================================================
# CONTAINER POLLING
# =============================================================================

POLL_MAX_WAIT_SECONDS: Final[float] = 60.0
"""How long to wait for a video container to finish processing."""

POLL_INTERVAL_SECONDS: Final[float] = 3.0
"""Fixed delay between two container status checks."""


# =============================================================================
# HTTP
# =============================================================================

HTTP_TIMEOUT_SECONDS: Final[float] = 60.0
"""Timeout applied to every Graph API request."""

HEAD_TIMEOUT_SECONDS: Final[float] = 15.0
"""Timeout for the image pre-flight HEAD request."""
