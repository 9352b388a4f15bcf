"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from dispatch_relay.config import RelayConfig
from dispatch_relay.relay.server import RelayServer

TRIGGER_SECRET = "trigger-secret-value"
GH_TOKEN = "ghp_test_token"
GH_OWNER = "acme"
GH_REPO = "catalog"


@dataclass
class RecordedCall:
    """One request received by the fake dispatch API."""

    path: str
    headers: dict[str, str]
    body: Any


@dataclass
class FakeGitHub:
    """Stand-in for the GitHub dispatch endpoint; records every call."""

    status: int = 204
    body: str = ""
    calls: list[RecordedCall] = field(default_factory=list)

    async def handle_dispatch(self, request: web.Request) -> web.Response:
        self.calls.append(
            RecordedCall(
                path=request.path,
                headers=dict(request.headers),
                body=await request.json(),
            )
        )
        return web.Response(status=self.status, text=self.body)


def make_config(**overrides: Any) -> RelayConfig:
    defaults: dict[str, Any] = {
        "trigger_secret": TRIGGER_SECRET,
        "gh_owner": GH_OWNER,
        "gh_repo": GH_REPO,
        "gh_token": GH_TOKEN,
        "host": "127.0.0.1",
        "port": 0,
    }
    defaults.update(overrides)
    return RelayConfig(**defaults)


def auth_headers(secret: str = TRIGGER_SECRET) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {secret}",
        "Content-Type": "application/json",
    }


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
async def github_server(fake_github: FakeGitHub) -> AsyncIterator[TestServer]:
    """Real HTTP server serving the fake dispatch endpoint."""
    app = web.Application()
    app.router.add_post("/repos/{owner}/{repo}/dispatches", fake_github.handle_dispatch)
    server = TestServer(app)
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
def relay_config(github_server: TestServer) -> RelayConfig:
    return make_config(api_base=str(github_server.make_url("/")))


@pytest.fixture
async def relay_client(relay_config: RelayConfig) -> AsyncIterator[TestClient[Any, Any]]:
    """Test client bound to a real RelayServer app pointed at the fake upstream."""
    server = RelayServer(relay_config)
    client = TestClient(TestServer(server.build_app()))
    await client.start_server()
    yield client
    await client.close()


@pytest.fixture
def config_factory() -> Any:
    """``make_config`` for tests that need custom settings."""
    return make_config


@pytest.fixture
def valid_headers() -> dict[str, str]:
    return auth_headers()
