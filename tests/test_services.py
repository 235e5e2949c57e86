from __future__ import annotations

import pytest
from bson import ObjectId

from tasktracker.core.config import Settings
from tasktracker.core.security import PasswordHashingError
from tasktracker.db import MongoStore
from tasktracker.errors import BadRequestError, ConflictError, NotFoundError, ServerError, UnauthorizedError
from tasktracker.models import utcnow
from tasktracker.repositories import TaskRepository, UserRepository
from tasktracker.schemas import TaskCreate, TaskUpdate
from tasktracker.services import AuthService, TaskService


@pytest.fixture()
def users(store: MongoStore) -> UserRepository:
    return UserRepository(store.users)


@pytest.fixture()
def auth_service(users: UserRepository, settings: Settings) -> AuthService:
    return AuthService(users, settings)


@pytest.fixture()
def task_service(store: MongoStore, users: UserRepository) -> TaskService:
    return TaskService(TaskRepository(store.tasks), users)


async def test_register_user_stores_hash_not_password(auth_service: AuthService, users: UserRepository) -> None:
    user = await auth_service.register_user(username="alice", password="pw1")

    stored = await users.get(user.id)
    assert stored is not None
    assert stored.username == "alice"
    assert stored.hashed_password != "pw1"


async def test_register_user_rejects_duplicates(auth_service: AuthService) -> None:
    await auth_service.register_user(username="alice", password="pw1")

    with pytest.raises(ConflictError) as excinfo:
        await auth_service.register_user(username="alice", password="pw2")

    assert excinfo.value.code == "username_taken"


async def test_register_user_surfaces_hashing_failure(
    auth_service: AuthService,
    users: UserRepository,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def _fail(password: str) -> str:
        raise PasswordHashingError("backend unavailable")

    monkeypatch.setattr(auth_service._hasher, "hash", _fail)

    with pytest.raises(ServerError):
        await auth_service.register_user(username="alice", password="pw1")

    assert await users.get_by_username("alice") is None


async def test_authenticate_user(auth_service: AuthService) -> None:
    registered = await auth_service.register_user(username="alice", password="pw1")

    user = await auth_service.authenticate_user(username="alice", password="pw1")
    assert user.id == registered.id

    with pytest.raises(UnauthorizedError):
        await auth_service.authenticate_user(username="alice", password="wrong")
    with pytest.raises(UnauthorizedError):
        await auth_service.authenticate_user(username="nobody", password="pw1")
    with pytest.raises(BadRequestError):
        await auth_service.authenticate_user(username="alice", password=" ")


async def test_unknown_user_still_pays_for_a_hash_check(
    auth_service: AuthService,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    calls: list[str] = []
    monkeypatch.setattr(auth_service._hasher, "dummy_verify", lambda: calls.append("dummy"))

    with pytest.raises(UnauthorizedError) as excinfo:
        await auth_service.authenticate_user(username="nobody", password="pw1")

    assert excinfo.value.code == "invalid_credentials"
    assert calls == ["dummy"]

    await auth_service.register_user(username="alice", password="pw1")
    await auth_service.authenticate_user(username="alice", password="pw1")
    assert calls == ["dummy"]


async def test_issue_token_uses_configured_expiry(auth_service: AuthService, settings: Settings) -> None:
    user = await auth_service.register_user(username="alice", password="pw1")

    before = utcnow()
    issued = auth_service.issue_token(user)

    assert issued.token
    lifetime = (issued.expires_at - before).total_seconds()
    assert settings.token_expiry_seconds <= lifetime < settings.token_expiry_seconds + 5


async def test_task_lifecycle(task_service: TaskService, auth_service: AuthService) -> None:
    owner = await auth_service.register_user(username="alice", password="pw1")

    task = await task_service.create_task(owner.id, TaskCreate(title="T", description="D", allotted_to="alice"))
    assert task.id is not None
    assert task.owner_id == owner.id
    assert task.status == "Pending"

    assert [item.id for item in await task_service.list_tasks_for_owner(owner.id)] == [task.id]
    fetched = await task_service.get_task_for_owner(owner.id, str(task.id))
    assert fetched.title == "T"

    updated = await task_service.update_task_for_owner(
        owner.id,
        str(task.id),
        TaskUpdate(status="Completed"),
    )
    assert updated.status == "Completed"
    assert updated.description == "D"

    await task_service.delete_task_for_owner(owner.id, str(task.id))
    with pytest.raises(NotFoundError):
        await task_service.get_task_for_owner(owner.id, str(task.id))


async def test_create_task_requires_existing_assignee(task_service: TaskService) -> None:
    with pytest.raises(BadRequestError) as excinfo:
        await task_service.create_task(ObjectId(), TaskCreate(title="T", allotted_to="ghost"))

    assert excinfo.value.code == "assignee_not_found"
    assert await task_service.list_tasks_for_owner(ObjectId()) == []


async def test_tasks_are_scoped_to_owner(task_service: TaskService, auth_service: AuthService) -> None:
    owner = await auth_service.register_user(username="alice", password="pw1")
    task = await task_service.create_task(owner.id, TaskCreate(title="T", allotted_to="alice"))
    stranger = ObjectId()

    with pytest.raises(NotFoundError):
        await task_service.get_task_for_owner(stranger, str(task.id))
    with pytest.raises(NotFoundError):
        await task_service.update_task_for_owner(stranger, str(task.id), TaskUpdate(title="x"))
    with pytest.raises(NotFoundError):
        await task_service.delete_task_for_owner(stranger, str(task.id))


def test_task_update_requires_a_field() -> None:
    with pytest.raises(ValueError):
        TaskUpdate()
    with pytest.raises(ValueError):
        TaskUpdate(title=None)
