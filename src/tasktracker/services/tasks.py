"""Service layer encapsulating task-related operations."""

from __future__ import annotations

import logging

from bson import ObjectId

from ..errors import BadRequestError, NotFoundError
from ..models import Task, TaskStatus, parse_object_id, utcnow
from ..repositories import TaskRepository, UserRepository
from ..schemas import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

TASK_NOT_FOUND_MESSAGE = "task not found"


class TaskService:
    """Owner-scoped task operations.

    Every method takes the owner id from the authenticated identity and never
    from the request body.
    """

    def __init__(self, tasks: TaskRepository, users: UserRepository) -> None:
        self._repository = tasks
        self._users = users

    async def create_task(self, owner_id: ObjectId, payload: TaskCreate) -> Task:
        """Create a new task belonging to ``owner_id``."""
        if await self._users.get_by_username(payload.allotted_to) is None:
            raise BadRequestError("allotted user does not exist", code="assignee_not_found")

        task = Task(
            owner_id=owner_id,
            title=payload.title,
            description=payload.description,
            allotted_to=payload.allotted_to,
            done_by=payload.done_by,
            status=TaskStatus.PENDING.value,
            start_time=utcnow(),
            end_time=payload.end_time,
        )
        await self._repository.add(task)
        logger.info("Task created.", extra={"task_id": str(task.id)})
        return task

    async def list_tasks_for_owner(self, owner_id: ObjectId) -> list[Task]:
        return await self._repository.list_for_owner(owner_id)

    async def get_task_for_owner(self, owner_id: ObjectId, task_id: str) -> Task:
        object_id = parse_object_id(task_id)
        if object_id is None:
            raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
        task = await self._repository.get_for_owner(object_id, owner_id)
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
        return task

    async def update_task_for_owner(
        self,
        owner_id: ObjectId,
        task_id: str,
        payload: TaskUpdate,
    ) -> Task:
        """Apply the supplied fields and return the stored task after the update."""
        object_id = _require_task_id(task_id)
        task = await self._repository.update_for_owner(object_id, owner_id, payload.changes())
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
        return task

    async def delete_task_for_owner(self, owner_id: ObjectId, task_id: str) -> None:
        object_id = _require_task_id(task_id)
        if not await self._repository.delete_for_owner(object_id, owner_id):
            raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
        logger.info("Task deleted.", extra={"task_id": task_id})


def _require_task_id(task_id: str) -> ObjectId:
    object_id = parse_object_id(task_id)
    if object_id is None:
        raise BadRequestError("invalid task id", code="invalid_task_id")
    return object_id


__all__ = ["TASK_NOT_FOUND_MESSAGE", "TaskService"]
