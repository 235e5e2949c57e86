"""Routes handling task CRUD operations for the authenticated owner."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from ...deps import CurrentIdentityDependency, TaskServiceDependency
from ...schemas import TaskCreate, TaskRead, TaskUpdate

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
)
async def create_task(
    payload: TaskCreate,
    identity: CurrentIdentityDependency,
    service: TaskServiceDependency,
) -> TaskRead:
    task = await service.create_task(identity.user_id, payload)
    return TaskRead.from_model(task)


@router.get("", response_model=list[TaskRead], summary="List the caller's tasks")
async def list_tasks(
    identity: CurrentIdentityDependency,
    service: TaskServiceDependency,
) -> list[TaskRead]:
    tasks = await service.list_tasks_for_owner(identity.user_id)
    return [TaskRead.from_model(task) for task in tasks]


@router.get("/{task_id}", response_model=TaskRead, summary="Retrieve a task")
async def get_task(
    task_id: str,
    identity: CurrentIdentityDependency,
    service: TaskServiceDependency,
) -> TaskRead:
    task = await service.get_task_for_owner(identity.user_id, task_id)
    return TaskRead.from_model(task)


@router.put("/{task_id}", response_model=TaskRead, summary="Update a task")
async def update_task(
    task_id: str,
    payload: TaskUpdate,
    identity: CurrentIdentityDependency,
    service: TaskServiceDependency,
) -> TaskRead:
    task = await service.update_task_for_owner(identity.user_id, task_id, payload)
    return TaskRead.from_model(task)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a task",
)
async def delete_task(
    task_id: str,
    identity: CurrentIdentityDependency,
    service: TaskServiceDependency,
) -> Response:
    await service.delete_task_for_owner(identity.user_id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
