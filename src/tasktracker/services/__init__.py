"""Service layer coordinating repositories and domain rules."""

from __future__ import annotations

from .auth import AuthService
from .tasks import TaskService

__all__ = ["AuthService", "TaskService"]
