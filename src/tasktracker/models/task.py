"""Task document model stored in the ``tasks`` collection."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import ensure_tzaware, utcnow


class TaskStatus(str, Enum):
    """Well-known task states. The stored status is an open string."""

    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class Task(BaseModel):
    """Persistent task record owned by the user that created it."""

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    id: ObjectId | None = Field(default=None, alias="_id")
    owner_id: ObjectId = Field(alias="userId")
    title: str
    description: str = ""
    allotted_to: str
    done_by: str = ""
    status: str = TaskStatus.PENDING.value
    start_time: datetime = Field(default_factory=utcnow)
    end_time: datetime | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _as_utc(cls, value: datetime | None) -> datetime | None:
        if value is None:
            return None
        return ensure_tzaware(value)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"id"} if self.id is None else set())


__all__ = ["Task", "TaskStatus"]
