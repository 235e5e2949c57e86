"""Task-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..models import Task, TaskStatus

TASK_READ_EXAMPLE = {
    "id": "652f1c9e8b3e4a0012a1b2c3",
    "userId": "652f1c8a8b3e4a0012a1b2c2",
    "title": "Write release notes",
    "description": "Summarise the changes since the last tag.",
    "allotted_to": "alice",
    "done_by": "",
    "status": TaskStatus.PENDING.value,
    "start_time": "2024-01-01T12:00:00Z",
    "end_time": "2024-01-02T12:00:00Z",
}


class TaskCreate(BaseModel):
    """Payload for creating a new task.

    Server-managed fields (``id``, ``userId``, ``status``, ``start_time``) are
    ignored when supplied.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "title": "Write release notes",
                "description": "Summarise the changes since the last tag.",
                "allotted_to": "alice",
                "end_time": "2024-01-02T12:00:00Z",
            }
        },
    )

    title: str = Field(min_length=1)
    description: str = ""
    allotted_to: str = Field(min_length=1)
    done_by: str = ""
    end_time: datetime | None = None


class TaskUpdate(BaseModel):
    """Payload for partially updating an existing task."""

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "title": "Write release notes",
                "status": TaskStatus.IN_PROGRESS.value,
            }
        },
    )

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    allotted_to: str | None = Field(default=None, min_length=1)
    done_by: str | None = None
    status: str | None = None
    end_time: datetime | None = None

    @model_validator(mode="after")
    def _ensure_payload_not_empty(self) -> "TaskUpdate":
        if not self.changes():
            raise ValueError("At least one field must be provided for update.")
        return self

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller supplied with a value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class TaskRead(BaseModel):
    """Public representation of a task."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": TASK_READ_EXAMPLE},
    )

    id: str
    owner_id: str = Field(alias="userId")
    title: str
    description: str
    allotted_to: str
    done_by: str
    status: str
    start_time: datetime
    end_time: datetime | None = None

    @classmethod
    def from_model(cls, task: Task) -> "TaskRead":
        return cls(
            id=str(task.id),
            owner_id=str(task.owner_id),
            title=task.title,
            description=task.description,
            allotted_to=task.allotted_to,
            done_by=task.done_by,
            status=task.status,
            start_time=task.start_time,
            end_time=task.end_time,
        )


__all__ = ["TaskCreate", "TaskRead", "TaskUpdate"]
