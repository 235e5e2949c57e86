"""Pydantic schemas for public interfaces."""

from __future__ import annotations

from .auth import SigninRequest, SignupRequest, TokenResponse
from .system import ErrorResponse, HealthCheckResponse, MessageResponse
from .task import TaskCreate, TaskRead, TaskUpdate
from .user import UserPublic

__all__ = [
    "ErrorResponse",
    "HealthCheckResponse",
    "MessageResponse",
    "SigninRequest",
    "SignupRequest",
    "TaskCreate",
    "TaskRead",
    "TaskUpdate",
    "TokenResponse",
    "UserPublic",
]
