"""Per-request values made visible to log records."""

from __future__ import annotations

from contextvars import ContextVar, Token

REQUEST_ID_HEADER = "X-Request-ID"
UNSET = "-"

_request_id: ContextVar[str] = ContextVar("request_id", default=UNSET)
_user_id: ContextVar[str] = ContextVar("user_id", default=UNSET)


def get_request_id() -> str:
    return _request_id.get()


def bind_request_id(request_id: str) -> Token[str]:
    """Bind the correlation id of the request being served."""
    return _request_id.set(request_id)


def reset_request_id(token: Token[str]) -> None:
    _request_id.reset(token)


def get_user_id() -> str:
    return _user_id.get()


def bind_user_id(user_id: str) -> Token[str]:
    """Bind the authenticated caller once the authorization gate accepts a token."""
    return _user_id.set(user_id)


__all__ = [
    "REQUEST_ID_HEADER",
    "UNSET",
    "bind_request_id",
    "bind_user_id",
    "get_request_id",
    "get_user_id",
    "reset_request_id",
]
