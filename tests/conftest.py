"""Shared test fixtures and configuration.

Provides a scripted Graph API (an httpx MockTransport replaying queued
responses and recording every request) and a fake clock for driving the
readiness poller without real delays.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest

from instagram_mcp.instagram import (
    ContainerPoller,
    Credentials,
    GraphAPIClient,
    InstagramPublisher,
    MediaValidator,
    StaticCredentialProvider,
)


class FakeGraphAPI:
    """Scripted HTTP backend.

    Queue items may be:
    - dict: returned as a 200 JSON response
    - httpx.Response: returned as-is
    - Exception: raised from the transport (e.g. httpx.ConnectError)
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._responses: list[Any] = []

    def queue(self, *responses: Any) -> None:
        self._responses.extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, json=item)

    def form(self, index: int) -> dict[str, str]:
        """Decoded form body of a recorded request."""
        body = parse_qs(self.requests[index].content.decode(), keep_blank_values=True)
        return {key: values[0] for key, values in body.items()}

    @property
    def pending(self) -> int:
        return len(self._responses)

    @staticmethod
    def provider_error(code: int, message: str, status: int = 400, trace: str = "trace-1") -> httpx.Response:
        """Graph API error envelope response."""
        return httpx.Response(
            status,
            json={
                "error": {
                    "message": message,
                    "type": "OAuthException",
                    "code": code,
                    "fbtrace_id": trace,
                }
            },
        )

    @staticmethod
    def jpeg_head(content_type: str = "image/jpeg") -> httpx.Response:
        return httpx.Response(200, headers={"content-type": content_type})


class FakeClock:
    """Monotonic clock advanced only by the fake sleep."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def graph_api() -> FakeGraphAPI:
    return FakeGraphAPI()


@pytest.fixture
def http_client(graph_api: FakeGraphAPI) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(graph_api.handler))


@pytest.fixture
def client(http_client: httpx.AsyncClient) -> GraphAPIClient:
    return GraphAPIClient(api_version="v19.0", http_client=http_client)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def poller(client: GraphAPIClient, fake_clock: FakeClock) -> ContainerPoller:
    return ContainerPoller(
        client,
        clock=fake_clock,
        sleep=fake_clock.sleep,
        max_wait_seconds=60.0,
        poll_interval=3.0,
    )


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(user_id="17841400000000000", access_token="test-token")


@pytest.fixture
def publisher(
    client: GraphAPIClient,
    http_client: httpx.AsyncClient,
    poller: ContainerPoller,
    credentials: Credentials,
) -> InstagramPublisher:
    return InstagramPublisher(
        client,
        StaticCredentialProvider(credentials),
        validator=MediaValidator(http_client),
        poller=poller,
    )


@pytest.fixture
def user_file(tmp_path: Path) -> Path:
    """A valid user.json as written by the callback server."""
    path = tmp_path / "user.json"
    path.write_text(
        json.dumps(
            {
                "id": "17841499999999999",
                "name": "Test Account",
                "accessToken": "stored-token",
                "refreshToken": "stored-token",
                "expiresIn": 5183944,
                "picture": "https://example.com/pic.jpg",
                "username": "test.account",
            }
        )
    )
    return path
