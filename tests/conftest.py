from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from tasktracker.core.config import Settings
from tasktracker.db import MongoStore
from tasktracker.main import create_app

TEST_JWT_SECRET = "test-secret-key"


@pytest.fixture()
def settings() -> Settings:
    return Settings(environment="test", jwt_secret=TEST_JWT_SECRET, token_expiry_seconds=300)


@pytest_asyncio.fixture
async def store() -> AsyncIterator[MongoStore]:
    store = MongoStore(AsyncMongoMockClient(), "taskmanager_test")
    await store.ensure_indexes()
    yield store


@pytest.fixture()
def app(settings: Settings, store: MongoStore) -> FastAPI:
    application = create_app(settings)
    application.state.store = store
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


async def sign_up(client: AsyncClient, username: str, password: str = "pw1") -> dict:
    response = await client.post("/signup", json={"username": username, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


async def sign_in(client: AsyncClient, username: str, password: str = "pw1") -> str:
    response = await client.post("/signin", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


async def auth_headers(client: AsyncClient, username: str, password: str = "pw1") -> dict[str, str]:
    await sign_up(client, username, password)
    token = await sign_in(client, username, password)
    return {"Authorization": token}
