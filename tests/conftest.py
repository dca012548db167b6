from __future__ import annotations

import json
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from config import Settings
from services.cache import TTLCache
from services.lookup import LookupService

UPSTREAM_BASE = "https://upstream.test/dl/"


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubUpstream:
    """Scripted upstream: id -> (status, body). Unknown ids answer 404."""

    def __init__(self) -> None:
        self.responses: dict[str, tuple[int, Any]] = {}
        self.offline: set[str] = set()
        self.calls: list[str] = []

    def reply(self, video_id: str, status: int, body: Any) -> None:
        self.responses[video_id] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        video_id = request.url.path.rsplit("/", 1)[-1]
        self.calls.append(video_id)
        if video_id in self.offline:
            raise httpx.ConnectError("connection refused", request=request)
        status, body = self.responses.get(video_id, (404, {"message": "not found"}))
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, content=json.dumps(body).encode(), headers={"content-type": "application/json"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def upstream() -> StubUpstream:
    return StubUpstream()


@pytest.fixture()
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    monkeypatch.setenv("UPSTREAM_BASE_URL", UPSTREAM_BASE)
    monkeypatch.setenv("CACHE_TTL_SECONDS", "3600")
    monkeypatch.delenv("REMAINING_TIME_FORMAT", raising=False)
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    return Settings()


@pytest.fixture()
def client(settings: Settings, upstream: StubUpstream, clock: FakeClock) -> TestClient:
    app = create_app(settings, transport=upstream.transport)
    # Swap in a clock-driven cache so expiry is deterministic
    app.state.cache = TTLCache(
        max_entries=settings.cache_max_entries,
        ttl_seconds=settings.cache_ttl_seconds,
        clock=clock,
    )
    app.state.lookup_service = LookupService(
        app.state.cache, base_url=settings.upstream_base_url, transport=upstream.transport
    )
    return TestClient(app, raise_server_exceptions=False)
