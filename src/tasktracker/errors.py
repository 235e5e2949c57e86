"""Error taxonomy and the FastAPI handlers that render it.

Every failure leaves the service as ``{"error": <message>, "code": <code>}``.
Driver messages and tracebacks are logged, never returned.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Mapping

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError, PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from .core.context import REQUEST_ID_HEADER, bind_request_id, reset_request_id
from .schemas.system import ErrorResponse

logger = logging.getLogger(__name__)

GENERIC_SERVER_MESSAGE = "internal server error"


class ApplicationError(Exception):
    """Base class for domain-specific errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "application_error",
        status_code: int = status.HTTP_400_BAD_REQUEST,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.headers = dict(headers) if headers else None


class BadRequestError(ApplicationError):
    """Malformed input, body or identifier."""

    def __init__(self, message: str = "bad request", *, code: str = "bad_request") -> None:
        super().__init__(message, code=code, status_code=status.HTTP_400_BAD_REQUEST)


class UnauthorizedError(ApplicationError):
    """Missing, invalid or expired credentials."""

    def __init__(self, message: str = "unauthorized", *, code: str = "unauthorized") -> None:
        super().__init__(
            message,
            code=code,
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )


class NotFoundError(ApplicationError):
    """No matching record owned by the caller."""

    def __init__(self, message: str = "not found", *, code: str = "not_found") -> None:
        super().__init__(message, code=code, status_code=status.HTTP_404_NOT_FOUND)


class ConflictError(ApplicationError):
    """A uniqueness rule was violated.

    Reported as 400 to match the public contract of the sign-up endpoint.
    """

    def __init__(self, message: str = "conflict", *, code: str = "conflict") -> None:
        super().__init__(message, code=code, status_code=status.HTTP_400_BAD_REQUEST)


class ServerError(ApplicationError):
    """Unexpected store or hashing failure."""

    def __init__(self, message: str = GENERIC_SERVER_MESSAGE, *, code: str = "server_error") -> None:
        super().__init__(message, code=code, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


_HTTP_STATUS_CODE_MAP: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_429_TOO_MANY_REQUESTS: "rate_limited",
}


def _http_exception_message(status_code: int, detail: object) -> str:
    if isinstance(detail, str) and detail:
        return detail.lower()
    try:
        return HTTPStatus(status_code).phrase.lower()
    except ValueError:
        return "error"


def _respond(
    request: Request,
    *,
    status_code: int,
    code: str,
    message: str,
    log_message: str,
    exc: BaseException | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Log the failure with the request id bound and build the error body.

    4xx failures log at WARNING without a traceback, 5xx at ERROR with one.
    """

    request_id = getattr(request.state, "request_id", None)
    token = bind_request_id(request_id) if request_id else None
    try:
        extra = {"code": code, "status_code": status_code, "path": request.url.path}
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(log_message, exc_info=exc, extra=extra)
        else:
            logger.warning(log_message, extra=extra)
    finally:
        if token is not None:
            reset_request_id(token)

    response = JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message, code=code).model_dump(),
    )
    if headers:
        response.headers.update(headers)
    if request_id:
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
    return response


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the provided FastAPI app."""

    @app.exception_handler(ApplicationError)
    async def _handle_application_error(request: Request, exc: ApplicationError) -> JSONResponse:
        return _respond(
            request,
            status_code=exc.status_code,
            code=exc.code,
            message=exc.message,
            log_message="Application error encountered.",
            exc=exc.__cause__ or exc,
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        return _respond(
            request,
            status_code=status.HTTP_400_BAD_REQUEST,
            code="bad_request",
            message="cannot parse request body",
            log_message=f"Request validation failed with {len(exc.errors())} error(s).",
        )

    @app.exception_handler(DuplicateKeyError)
    async def _handle_duplicate_key_error(request: Request, exc: DuplicateKeyError) -> JSONResponse:
        return _respond(
            request,
            status_code=status.HTTP_400_BAD_REQUEST,
            code="username_taken",
            message="username already taken",
            log_message="Duplicate key rejected by the store.",
        )

    @app.exception_handler(PyMongoError)
    async def _handle_store_error(request: Request, exc: PyMongoError) -> JSONResponse:
        return _respond(
            request,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="server_error",
            message=GENERIC_SERVER_MESSAGE,
            log_message="Document store operation failed.",
            exc=exc,
        )

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _respond(
            request,
            status_code=exc.status_code,
            code=_HTTP_STATUS_CODE_MAP.get(exc.status_code, "http_error"),
            message=_http_exception_message(exc.status_code, exc.detail),
            log_message="HTTP exception raised.",
            headers=exc.headers or None,
        )

    @app.exception_handler(Exception)
    async def _handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        return _respond(
            request,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="server_error",
            message=GENERIC_SERVER_MESSAGE,
            log_message="Unhandled application error.",
            exc=exc,
        )


__all__ = [
    "ApplicationError",
    "BadRequestError",
    "ConflictError",
    "GENERIC_SERVER_MESSAGE",
    "NotFoundError",
    "ServerError",
    "UnauthorizedError",
    "register_exception_handlers",
]
