"""Database related helpers."""

from __future__ import annotations

from .store import MongoStore

__all__ = ["MongoStore"]
