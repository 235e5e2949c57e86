"""User-facing Pydantic schemas."""

from __future__ import annotations

from pydantic import BaseModel

from ..models import User


class UserPublic(BaseModel):
    """Public representation of a user. The password hash is never included."""

    id: str
    username: str

    @classmethod
    def from_model(cls, user: User) -> "UserPublic":
        return cls(id=str(user.id), username=user.username)


__all__ = ["UserPublic"]
