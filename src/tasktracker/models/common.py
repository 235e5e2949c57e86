"""Shared helpers for document models."""

from __future__ import annotations

from datetime import datetime, timezone

from bson import ObjectId
from bson.errors import InvalidId


def utcnow() -> datetime:
    """Return an aware UTC timestamp truncated to BSON millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def ensure_tzaware(timestamp: datetime) -> datetime:
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp


def parse_object_id(value: str) -> ObjectId | None:
    """Return ``value`` as an ``ObjectId`` or ``None`` when it is not well formed."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


__all__ = ["ObjectId", "ensure_tzaware", "parse_object_id", "utcnow"]
