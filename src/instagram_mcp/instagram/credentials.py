"""Credential providers.

Orchestrators receive credentials through a CredentialProvider instead of
reading files themselves, so tests can hand in fixed credentials.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from .errors import ErrorKind, InstagramAPIError
from .models import Credentials, UserRecord

_logger = logging.getLogger("instagram_auth")


class CredentialProvider(Protocol):
    """Anything able to hand out the credentials of the connected account."""

    def get_credentials(self) -> Credentials:
        ...


class StaticCredentialProvider:
    """Always returns the same credentials."""

    def __init__(self, credentials: Credentials):
        self._credentials = credentials

    def get_credentials(self) -> Credentials:
        return self._credentials


class UserFileStore:
    """Single-user credential store backed by a JSON file (user.json).

    The file is written by the OAuth callback server and read on every
    publish, so a re-authentication takes effect without a restart.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> UserRecord:
        """Read the stored user record.

        Raises:
            InstagramAPIError: INVALID_REQUEST if the file is missing,
                unreadable, or lacks `id` / `accessToken`
        """
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise InstagramAPIError(
                f"No stored Instagram user found at {self.path}. "
                "Authenticate first or pass igUserId and userAccessToken.",
                kind=ErrorKind.INVALID_REQUEST,
            )
        except (OSError, ValueError) as e:
            raise InstagramAPIError(
                f"Could not read {self.path}: {e}",
                kind=ErrorKind.INVALID_REQUEST,
                cause=e,
            )

        if not isinstance(data, dict):
            data = {}
        record = UserRecord.from_dict(data)
        if not record.id or not record.access_token:
            raise InstagramAPIError(
                f"The {self.path.name} file must contain 'id' and 'accessToken' properties.",
                kind=ErrorKind.INVALID_REQUEST,
            )
        return record

    def save(self, record: UserRecord) -> None:
        """Overwrite the stored user record."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(record.to_dict(), indent=2), encoding="utf-8")
        _logger.info(f"User details saved to {self.path}")

    def get_credentials(self) -> Credentials:
        return self.load().credentials


def resolve_credentials(
    provider: CredentialProvider,
    user_id: str | None = None,
    access_token: str | None = None,
) -> Credentials:
    """Prefer explicitly supplied credentials, else ask the provider.

    Supplying only one of `user_id` / `access_token` is rejected rather
    than mixed with stored values from another account.
    """
    if user_id and access_token:
        return Credentials(user_id=user_id, access_token=access_token)
    if user_id or access_token:
        raise InstagramAPIError(
            "igUserId and userAccessToken must be supplied together.",
            kind=ErrorKind.INVALID_REQUEST,
        )
    return provider.get_credentials()
