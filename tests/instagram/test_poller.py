"""Tests for container readiness polling.

The poller runs on a fake clock advanced by the fake sleep, so timeouts
are exercised without real delays.
"""

from __future__ import annotations

import httpx
import pytest

from instagram_mcp.instagram import ErrorKind, InstagramAPIError


def _status(code):
    return {"status_code": code, "id": "c1"}


class TestWaitUntilReady:
    """Tests for ContainerPoller.wait_until_ready."""

    @pytest.mark.asyncio
    async def test_finished_after_three_checks(self, poller, graph_api, fake_clock):
        """Test IN_PROGRESS, IN_PROGRESS, FINISHED returns after 3 checks."""
        graph_api.queue(_status("IN_PROGRESS"), _status("IN_PROGRESS"), _status("FINISHED"))

        assert await poller.wait_until_ready("tok", "c1") is True

        assert len(graph_api.requests) == 3
        assert fake_clock.sleeps == [3.0, 3.0]
        assert fake_clock.now < 60.0

    @pytest.mark.asyncio
    async def test_finished_immediately(self, poller, graph_api, fake_clock):
        """Test no sleep happens when the first check is FINISHED."""
        graph_api.queue(_status("FINISHED"))

        assert await poller.wait_until_ready("tok", "c1") is True
        assert fake_clock.sleeps == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["ERROR", "EXPIRED"])
    async def test_failed_status_is_fatal(self, poller, graph_api, fake_clock, status):
        """Test ERROR and EXPIRED fail on the first check without waiting."""
        graph_api.queue(_status(status))

        with pytest.raises(InstagramAPIError) as exc:
            await poller.wait_until_ready("tok", "c1")

        assert exc.value.kind == ErrorKind.INVALID_REQUEST
        assert exc.value.message == f"Container processing failed or expired. Status: {status}"
        assert len(graph_api.requests) == 1
        assert fake_clock.sleeps == []

    @pytest.mark.asyncio
    async def test_timeout_is_unknown_error(self, poller, graph_api, fake_clock):
        """Test a container stuck IN_PROGRESS times out as UNKNOWN_ERROR."""
        graph_api.queue(*[_status("IN_PROGRESS")] * 3)

        with pytest.raises(InstagramAPIError) as exc:
            await poller.wait_until_ready("tok", "c1", max_wait_seconds=9.0, poll_interval=3.0)

        assert exc.value.kind == ErrorKind.UNKNOWN_ERROR
        assert "timed out" in exc.value.message
        # Checks at t=0, 3, 6; the deadline is reached at t=9
        assert len(graph_api.requests) == 3
        assert fake_clock.now == 9.0

    @pytest.mark.asyncio
    async def test_default_deadline(self, poller, graph_api, fake_clock):
        """Test the default 60s/3s schedule performs 20 checks."""
        graph_api.queue(*[_status("IN_PROGRESS")] * 20)

        with pytest.raises(InstagramAPIError) as exc:
            await poller.wait_until_ready("tok", "c1")

        assert exc.value.kind == ErrorKind.UNKNOWN_ERROR
        assert len(graph_api.requests) == 20
        assert graph_api.pending == 0

    @pytest.mark.asyncio
    async def test_unrecognized_status_keeps_polling(self, poller, graph_api):
        """Test unknown or missing statuses are treated as not ready."""
        graph_api.queue(_status("PUBLISHED_SOMEWHERE"), {"id": "c1"}, _status("FINISHED"))

        assert await poller.wait_until_ready("tok", "c1") is True
        assert len(graph_api.requests) == 3

    @pytest.mark.asyncio
    async def test_network_errors_are_retried(self, poller, graph_api, fake_clock):
        """Test transient failures while polling do not abort the wait."""
        graph_api.queue(
            httpx.ConnectError("reset"),
            httpx.Response(503, text="unavailable"),
            _status("FINISHED"),
        )

        assert await poller.wait_until_ready("tok", "c1") is True
        assert len(graph_api.requests) == 3
        assert fake_clock.sleeps == [3.0, 3.0]

    @pytest.mark.asyncio
    async def test_provider_error_is_fatal(self, poller, graph_api):
        """Test a non-network error from the status query aborts at once."""
        graph_api.queue(graph_api.provider_error(190, "token expired"))

        with pytest.raises(InstagramAPIError) as exc:
            await poller.wait_until_ready("tok", "c1")

        assert exc.value.kind == ErrorKind.EXPIRED_TOKEN
        assert len(graph_api.requests) == 1

    @pytest.mark.asyncio
    async def test_status_query_parameters(self, poller, graph_api):
        """Test the poller queries the container with the owner's token."""
        graph_api.queue(_status("FINISHED"))

        await poller.wait_until_ready("owner-token", "17890000000000001")

        request = graph_api.requests[0]
        assert request.url.path == "/v19.0/17890000000000001"
        assert request.url.params["fields"] == "status_code"
        assert request.url.params["access_token"] == "owner-token"
