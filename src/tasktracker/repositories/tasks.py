"""Repository for the ``tasks`` collection.

Every lookup that addresses a single task filters on the task id and the
owner id together.
"""

from __future__ import annotations

from typing import Any, Mapping

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from ..models import Task
from .base import BaseRepository


def _owned(task_id: ObjectId, owner_id: ObjectId) -> dict[str, Any]:
    return {"_id": task_id, "userId": owner_id}


class TaskRepository(BaseRepository[Task]):
    """Concrete repository encapsulating ``Task`` persistence operations."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        super().__init__(collection, Task)

    async def list_for_owner(self, owner_id: ObjectId) -> list[Task]:
        """Return all tasks created by the given owner."""
        return await self.find_many({"userId": owner_id})

    async def get_for_owner(self, task_id: ObjectId, owner_id: ObjectId) -> Task | None:
        """Retrieve a task by id ensuring it belongs to the provided owner."""
        return await self.find_one(_owned(task_id, owner_id))

    async def update_for_owner(
        self,
        task_id: ObjectId,
        owner_id: ObjectId,
        changes: Mapping[str, Any],
    ) -> Task | None:
        """Set ``changes`` on the owned task and return the stored result."""
        document = await self.collection.find_one_and_update(
            _owned(task_id, owner_id),
            {"$set": dict(changes)},
            return_document=ReturnDocument.AFTER,
        )
        return self._to_model(document)

    async def delete_for_owner(self, task_id: ObjectId, owner_id: ObjectId) -> bool:
        """Delete an owned task, returning ``True`` iff a document was removed."""
        result = await self.collection.delete_one(_owned(task_id, owner_id))
        return result.deleted_count > 0
