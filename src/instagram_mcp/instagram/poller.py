"""Readiness polling for video containers.

Instagram processes videos asynchronously; a video container can only be
published once its `status_code` reaches FINISHED.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

from ..constants import POLL_INTERVAL_SECONDS, POLL_MAX_WAIT_SECONDS, ContainerStatus
from .client import GraphAPIClient
from .errors import ErrorKind, InstagramAPIError

_api_logger = logging.getLogger("instagram_api")

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


def _parse_status(status_code: str) -> ContainerStatus | None:
    """Known status, or None for values the API added later."""
    try:
        return ContainerStatus(status_code)
    except ValueError:
        return None


class ContainerPoller:
    """Polls a container at a fixed interval until it is ready.

    The clock and sleep functions are injectable so tests can drive the
    loop without real delays.
    """

    def __init__(
        self,
        client: GraphAPIClient,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
        max_wait_seconds: float = POLL_MAX_WAIT_SECONDS,
        poll_interval: float = POLL_INTERVAL_SECONDS,
    ):
        self._client = client
        self._clock = clock
        self._sleep = sleep
        self.max_wait_seconds = max_wait_seconds
        self.poll_interval = poll_interval

    async def wait_until_ready(
        self,
        access_token: str,
        container_id: str,
        max_wait_seconds: float | None = None,
        poll_interval: float | None = None,
    ) -> bool:
        """Wait for a container to finish processing.

        FINISHED returns immediately. ERROR or EXPIRED fail immediately.
        Any other status keeps polling. NETWORK_ERROR failures while
        polling are logged and retried; every other error is fatal.

        Args:
            access_token: Token of the account owning the container
            container_id: The container ID to wait for
            max_wait_seconds: Overall deadline (defaults to the poller's)
            poll_interval: Seconds between status checks (defaults to the poller's)

        Returns:
            True once the container is FINISHED

        Raises:
            InstagramAPIError: INVALID_REQUEST if processing failed or the
                container expired, UNKNOWN_ERROR on timeout, or any fatal
                error raised by the status query
        """
        max_wait = self.max_wait_seconds if max_wait_seconds is None else max_wait_seconds
        interval = self.poll_interval if poll_interval is None else poll_interval

        started = self._clock()
        deadline = started + max_wait
        check_count = 0

        while self._clock() < deadline:
            check_count += 1
            try:
                result = await self._client.get_container_status(access_token, container_id)
            except InstagramAPIError as e:
                if e.kind != ErrorKind.NETWORK_ERROR:
                    raise
                _api_logger.warning(
                    f"Container {container_id} check #{check_count} failed, will retry: {e}"
                )
            else:
                status_code = str(result.get("status_code") or "").upper()
                status = _parse_status(status_code)
                elapsed = self._clock() - started
                _api_logger.info(
                    f"Container {container_id} check #{check_count}: "
                    f"{status_code or '<none>'} ({elapsed:.0f}s elapsed)"
                )

                if status == ContainerStatus.FINISHED:
                    return True
                if status is not None and status.is_failure:
                    raise InstagramAPIError(
                        f"Container processing failed or expired. Status: {status.value}",
                        kind=ErrorKind.INVALID_REQUEST,
                    )

            await self._sleep(interval)

        _api_logger.error(
            f"Container {container_id} not ready after {max_wait:.0f}s ({check_count} checks)"
        )
        raise InstagramAPIError(
            f"Container processing timed out after {max_wait:.0f}s.",
            kind=ErrorKind.UNKNOWN_ERROR,
        )
