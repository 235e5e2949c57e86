"""Reusable FastAPI dependencies."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Annotated

from bson import ObjectId
from fastapi import Depends, Header, Request

from .core.config import Settings
from .core.context import bind_user_id
from .core.security import TokenValidationError, validate_token
from .db import MongoStore
from .errors import UnauthorizedError
from .models import parse_object_id
from .repositories import TaskRepository, UserRepository
from .services import AuthService, TaskService

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "bearer "


@dataclass(slots=True)
class AuthContext:
    """Identity established for the current request."""

    user_id: ObjectId
    expires_at: datetime

    def seconds_remaining(self, now: datetime | None = None) -> int:
        """Whole seconds until the token expires, never negative."""

        now = now or datetime.now(timezone.utc)
        return max(0, round((self.expires_at - now).total_seconds()))


def get_request_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> MongoStore:
    return request.app.state.store


SettingsDependency = Annotated[Settings, Depends(get_request_settings)]
StoreDependency = Annotated[MongoStore, Depends(get_store)]


def get_user_repository(store: StoreDependency) -> UserRepository:
    return UserRepository(store.users)


def get_task_repository(store: StoreDependency) -> TaskRepository:
    return TaskRepository(store.tasks)


UserRepositoryDependency = Annotated[UserRepository, Depends(get_user_repository)]
TaskRepositoryDependency = Annotated[TaskRepository, Depends(get_task_repository)]


def get_auth_service(users: UserRepositoryDependency, settings: SettingsDependency) -> AuthService:
    return AuthService(users, settings)


def get_task_service(tasks: TaskRepositoryDependency, users: UserRepositoryDependency) -> TaskService:
    return TaskService(tasks, users)


AuthServiceDependency = Annotated[AuthService, Depends(get_auth_service)]
TaskServiceDependency = Annotated[TaskService, Depends(get_task_service)]


def _extract_token(authorization: str) -> str:
    token = authorization.strip()
    if token[: len(_BEARER_PREFIX)].lower() == _BEARER_PREFIX:
        token = token[len(_BEARER_PREFIX) :].strip()
    return token


async def require_identity(
    request: Request,
    settings: SettingsDependency,
    authorization: Annotated[str | None, Header()] = None,
) -> AuthContext:
    """Validate the ``Authorization`` header and return the caller's identity.

    Every rejection produces the same generic 401; the reason is only logged.
    """

    if not authorization or not authorization.strip():
        logger.warning("Rejected request without an authorization token.")
        raise UnauthorizedError()

    try:
        claims = validate_token(
            _extract_token(authorization),
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
    except TokenValidationError as exc:
        logger.warning("Rejected authorization token.", extra={"reason": exc.kind.value})
        raise UnauthorizedError() from exc

    user_id = parse_object_id(claims.subject)
    if user_id is None:
        logger.warning("Rejected authorization token.", extra={"reason": "invalid_subject"})
        raise UnauthorizedError()

    identity = AuthContext(user_id=user_id, expires_at=claims.exp)
    logger.debug("Authenticated request.", extra={"expires_in": identity.seconds_remaining()})
    request.state.identity = identity
    bind_user_id(str(user_id))
    return identity


CurrentIdentityDependency = Annotated[AuthContext, Depends(require_identity)]


__all__ = [
    "AuthContext",
    "AuthServiceDependency",
    "CurrentIdentityDependency",
    "SettingsDependency",
    "StoreDependency",
    "TaskServiceDependency",
    "get_auth_service",
    "get_request_settings",
    "get_store",
    "get_task_service",
    "require_identity",
]
