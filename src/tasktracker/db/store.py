"""MongoDB client lifecycle and collection handles."""

from __future__ import annotations

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING

from ..core.config import Settings

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
TASKS_COLLECTION = "tasks"


class MongoStore:
    """Owns the motor client and exposes the collections the service uses.

    One instance is created at startup and shared by every request.
    """

    def __init__(self, client: AsyncIOMotorClient, database_name: str) -> None:
        self._client = client
        self._database: AsyncIOMotorDatabase = client[database_name]

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoStore":
        client = AsyncIOMotorClient(
            settings.mongo_uri,
            tz_aware=True,
            uuidRepresentation="standard",
            timeoutMS=settings.mongo_timeout_ms,
            serverSelectionTimeoutMS=settings.mongo_timeout_ms,
        )
        return cls(client, settings.mongo_database)

    @property
    def users(self) -> AsyncIOMotorCollection:
        return self._database[USERS_COLLECTION]

    @property
    def tasks(self) -> AsyncIOMotorCollection:
        return self._database[TASKS_COLLECTION]

    async def connect(self) -> None:
        """Verify connectivity and make sure the required indexes exist."""

        await self._client.admin.command("ping")
        await self.ensure_indexes()
        logger.info("Connected to MongoDB.", extra={"database": self._database.name})

    async def ensure_indexes(self) -> None:
        await self.users.create_index([("username", ASCENDING)], unique=True, name="users_username_unique")
        await self.tasks.create_index([("userId", ASCENDING)], name="tasks_user_id")

    def close(self) -> None:
        self._client.close()
        logger.info("Disconnected from MongoDB.")


__all__ = ["MongoStore", "TASKS_COLLECTION", "USERS_COLLECTION"]
