"""Repository for the ``users`` collection."""

from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorCollection

from ..models import User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Concrete repository for user records."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        super().__init__(collection, User)

    async def get_by_username(self, username: str) -> User | None:
        """Return the user with exactly this username, if any."""
        return await self.find_one({"username": username})

    async def exists(self, username: str) -> bool:
        document = await self.collection.find_one({"username": username}, projection={"_id": True})
        return document is not None
