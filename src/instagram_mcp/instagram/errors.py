"""Instagram API error taxonomy and classification.

Every failure that leaves the publish pipeline is an InstagramAPIError
carrying one ErrorKind. Callers branch on `error.kind`, never on the
exception type.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

import httpx


class ErrorKind(str, Enum):
    """Closed set of error kinds surfaced to callers."""
    EXPIRED_TOKEN = "EXPIRED_TOKEN"
    INVALID_TOKEN = "INVALID_TOKEN"
    INSUFFICIENT_SCOPE = "INSUFFICIENT_SCOPE"
    RATE_LIMIT = "RATE_LIMIT"
    INVALID_REQUEST = "INVALID_REQUEST"
    NETWORK_ERROR = "NETWORK_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class InstagramAPIError(Exception):
    """Classified Instagram API failure."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN_ERROR,
        http_status: int | None = None,
        error_code: int | None = None,
        error_subcode: int | None = None,
        fbtrace_id: str | None = None,
        cause: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.http_status = http_status
        self.error_code = error_code
        self.error_subcode = error_subcode
        self.fbtrace_id = fbtrace_id
        self.cause = cause

    @property
    def is_retryable(self) -> bool:
        """Whether retrying the same call later may succeed."""
        return self.kind in (ErrorKind.RATE_LIMIT, ErrorKind.NETWORK_ERROR)

    def describe(self) -> str:
        """Human-readable rendering for tool results.

        Only the provider's trace id is exposed, never internal state.
        """
        details = [f"kind: {self.kind.value}"]
        if self.http_status is not None:
            details.append(f"status: {self.http_status}")
        if self.fbtrace_id:
            details.append(f"trace id: {self.fbtrace_id}")
        return f"{self.message} ({', '.join(details)})"

    def __repr__(self) -> str:
        return (
            f"InstagramAPIError(kind={self.kind.value}, message={self.message!r}, "
            f"http_status={self.http_status}, error_code={self.error_code})"
        )


class ConfigurationError(Exception):
    """Required process configuration is missing."""


# Provider error codes with a dedicated kind. Everything else reported in an
# error envelope is an INVALID_REQUEST.
PROVIDER_ERROR_KINDS: dict[int, ErrorKind] = {
    190: ErrorKind.EXPIRED_TOKEN,
    100: ErrorKind.INSUFFICIENT_SCOPE,
    200: ErrorKind.INSUFFICIENT_SCOPE,
    4: ErrorKind.RATE_LIMIT,
    17: ErrorKind.RATE_LIMIT,
}


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _error_envelope(error: Any) -> dict | None:
    """Return the nested `error` object of a provider payload, if any."""
    if isinstance(error, dict):
        envelope = error.get("error")
        if isinstance(envelope, dict):
            return envelope
    return None


def _message_of(error: Any) -> str:
    if error is None:
        return ""
    try:
        if isinstance(error, dict):
            message = error.get("message")
            return str(message) if message else ""
        return str(error)
    except Exception:
        return type(error).__name__


def classify_error(
    error: Any,
    response: httpx.Response | None = None,
) -> InstagramAPIError:
    """Map any raw failure onto an InstagramAPIError.

    Decision order, first match wins:
    1. An InstagramAPIError is returned unchanged.
    2. A provider envelope `{"error": {"code", "message", "fbtrace_id"}}`
       is mapped by numeric code.
    3. A non-2xx HTTP response becomes NETWORK_ERROR with its status.
    4. A transport failure (DNS, refused connection, timeout) becomes
       NETWORK_ERROR.
    5. Anything else is UNKNOWN_ERROR.

    Never raises.

    Args:
        error: Exception, decoded JSON payload, or any other value.
        response: HTTP response the error came from, if there was one.

    Returns:
        Classified error.
    """
    if isinstance(error, InstagramAPIError):
        return error

    http_status = response.status_code if response is not None else None

    envelope = _error_envelope(error)
    if envelope is not None:
        code = _as_int(envelope.get("code"))
        kind = PROVIDER_ERROR_KINDS.get(code, ErrorKind.INVALID_REQUEST)
        return InstagramAPIError(
            envelope.get("message") or "Instagram API error",
            kind=kind,
            http_status=http_status,
            error_code=code,
            error_subcode=_as_int(envelope.get("error_subcode")),
            fbtrace_id=envelope.get("fbtrace_id"),
            cause=error,
        )

    if response is not None and not response.is_success:
        return InstagramAPIError(
            _message_of(error) or f"HTTP error {response.status_code}",
            kind=ErrorKind.NETWORK_ERROR,
            http_status=http_status,
            cause=error,
        )

    if isinstance(error, httpx.TransportError):
        return InstagramAPIError(
            _message_of(error) or f"Network error: {type(error).__name__}",
            kind=ErrorKind.NETWORK_ERROR,
            cause=error,
        )

    return InstagramAPIError(
        _message_of(error) or "Unknown error",
        kind=ErrorKind.UNKNOWN_ERROR,
        cause=error,
    )
