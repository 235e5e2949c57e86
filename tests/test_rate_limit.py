from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from tasktracker.core.config import Settings
from tasktracker.core.middleware import build_limiter
from tasktracker.db import MongoStore
from tasktracker.main import create_app


def _limited_settings() -> Settings:
    return Settings(
        environment="test",
        rate_limit_enabled=True,
        rate_limit_max_requests=2,
        rate_limit_window_seconds=60,
    )


def _client_for(app, peer: str) -> AsyncClient:
    transport = ASGITransport(app=app, client=(peer, 123))
    return AsyncClient(transport=transport, base_url="http://test")


def test_limiter_enabled_when_configured() -> None:
    limiter = build_limiter(_limited_settings())

    assert limiter.enabled is True


def test_limiter_disabled_under_test_profile(settings: Settings) -> None:
    assert build_limiter(settings).enabled is False


@pytest.mark.asyncio
async def test_limiter_returns_429_after_budget(store: MongoStore) -> None:
    app = create_app(_limited_settings())
    app.state.store = store

    async with _client_for(app, "198.51.100.7") as client:
        for _ in range(2):
            assert (await client.post("/signout")).status_code == 200
        limited = await client.post("/signout")

    assert limited.status_code == 429
    assert limited.json() == {"error": "too many requests", "code": "rate_limited"}
    assert int(limited.headers["Retry-After"]) >= 1


@pytest.mark.asyncio
async def test_forwarded_header_does_not_reset_budget(store: MongoStore) -> None:
    app = create_app(_limited_settings())
    app.state.store = store

    async with _client_for(app, "198.51.100.7") as client:
        statuses = [
            (await client.post("/signout", headers={"X-Forwarded-For": f"203.0.113.{n}"})).status_code
            for n in range(4)
        ]

    assert statuses == [200, 200, 429, 429]


@pytest.mark.asyncio
async def test_budget_is_tracked_per_peer(store: MongoStore) -> None:
    app = create_app(_limited_settings())
    app.state.store = store

    async with _client_for(app, "198.51.100.7") as first, _client_for(app, "198.51.100.8") as second:
        for _ in range(2):
            await first.post("/signout")
        limited = await first.post("/signout")
        other = await second.post("/signout")

    assert limited.status_code == 429
    assert other.status_code == 200


@pytest.mark.asyncio
async def test_healthz_is_not_rate_limited(store: MongoStore) -> None:
    app = create_app(_limited_settings())
    app.state.store = store

    async with _client_for(app, "198.51.100.7") as client:
        statuses = [(await client.get("/healthz")).status_code for _ in range(4)]

    assert statuses == [200, 200, 200, 200]
