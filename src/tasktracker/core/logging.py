"""Structured JSON logging for the task tracker service.

Every record carries the request correlation id and, for authorized
requests, the caller's user id. Credential-bearing ``extra`` fields are
masked before a record is rendered.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

from .config import Settings
from .context import get_request_id, get_user_id

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}
_CONTEXT_ATTRS = frozenset({"request_id", "user_id"})

SENSITIVE_KEYS = frozenset({"password", "hashed_password", "token", "authorization", "jwt_secret"})
REDACTED = "***"

# Third-party loggers that are chatty at DEBUG/INFO.
_QUIET_LOGGERS = ("pymongo", "passlib", "multipart")


class JsonLogFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def __init__(self, *, defaults: dict[str, Any] | None = None, datefmt: str | None = None) -> None:
        super().__init__(datefmt=datefmt)
        self._defaults = dict(defaults or {})

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            **self._defaults,
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", get_request_id()),
            "user_id": getattr(record, "user_id", get_user_id()),
        }
        payload.update(extra_fields(record))

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Return the ``extra`` values attached to ``record`` with credentials masked."""

    fields: dict[str, Any] = {}
    for key, value in vars(record).items():
        if key in _RECORD_ATTRS or key in _CONTEXT_ATTRS:
            continue
        fields[key] = REDACTED if key.lower() in SENSITIVE_KEYS else value
    return fields


class RequestContextFilter(logging.Filter):
    """Copy the bound request and user ids onto records that lack them."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "request_id"):
            record.request_id = get_request_id()
        if not hasattr(record, "user_id"):
            record.user_id = get_user_id()
        return True


def configure_logging(settings: Settings) -> None:
    """Install the JSON handler on the root and uvicorn loggers."""

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    quiet_level = max(level, logging.WARNING)
    logging.captureWarnings(True)

    routed = {
        name: {"handlers": ["stdout"], "level": level, "propagate": False}
        for name in ("uvicorn", "uvicorn.error", "uvicorn.access")
    }
    routed.update({name: {"level": quiet_level} for name in _QUIET_LOGGERS})

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": JsonLogFormatter,
                    "defaults": {
                        "service": settings.project_name,
                        "environment": settings.environment,
                        "version": settings.version,
                    },
                }
            },
            "filters": {"request_context": {"()": RequestContextFilter}},
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "json",
                    "filters": ["request_context"],
                }
            },
            "root": {"handlers": ["stdout"], "level": level},
            "loggers": routed,
        }
    )


__all__ = [
    "JsonLogFormatter",
    "REDACTED",
    "RequestContextFilter",
    "SENSITIVE_KEYS",
    "configure_logging",
    "extra_fields",
]
