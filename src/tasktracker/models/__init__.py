"""Document models persisted in MongoDB."""

from __future__ import annotations

from .common import ensure_tzaware, parse_object_id, utcnow
from .task import Task, TaskStatus
from .user import User

__all__ = [
    "Task",
    "TaskStatus",
    "User",
    "ensure_tzaware",
    "parse_object_id",
    "utcnow",
]
