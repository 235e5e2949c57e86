"""Application middleware and rate limiting."""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..schemas.system import ErrorResponse
from .config import Settings
from .context import REQUEST_ID_HEADER, UNSET, bind_request_id, reset_request_id

access_logger = logging.getLogger("tasktracker.access")
logger = logging.getLogger(__name__)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Attach a correlation identifier to each request/response cycle and log it."""

    def __init__(self, app, header_name: str = REQUEST_ID_HEADER):  # type: ignore[override]
        super().__init__(app)
        self._header_name = header_name

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        request_id = request.headers.get(self._header_name) or self._generate_request_id()
        token = bind_request_id(request_id)
        request.state.request_id = request_id
        started = time.perf_counter()
        try:
            response = await call_next(request)
            access_logger.info(
                "%s %s %s",
                request.method,
                request.url.path,
                response.status_code,
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                    "user_id": _identity_of(request),
                },
            )
        finally:
            reset_request_id(token)
        response.headers.setdefault(self._header_name, request_id)
        return response

    @staticmethod
    def _generate_request_id() -> str:
        return str(uuid.uuid4())


def _identity_of(request: Request) -> str:
    identity = getattr(request.state, "identity", None)
    return str(identity.user_id) if identity is not None else UNSET


def build_limiter(settings: Settings) -> Limiter:
    """Per-peer fixed-window limiter keyed on the connection's remote address."""

    return Limiter(
        key_func=get_remote_address,
        default_limits=[f"{settings.rate_limit_max_requests}/{settings.rate_limit_window_seconds} second"],
        storage_uri=settings.rate_limit_storage_uri,
        headers_enabled=True,
        enabled=settings.rate_limit_enabled,
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Render a 429 in the service's error shape, with ``Retry-After`` set."""

    logger.warning(
        "Rate limit exceeded",
        extra={"client_id": get_remote_address(request), "path": request.url.path, "limit": str(exc.detail)},
    )
    response = JSONResponse(
        status_code=429,
        content=ErrorResponse(error="too many requests", code="rate_limited").model_dump(),
    )
    return request.app.state.limiter._inject_headers(response, getattr(request.state, "view_rate_limit", None))


def install_rate_limiting(application: FastAPI, settings: Settings, *, exempt=()) -> Limiter:
    """Attach a limiter, its 429 handler and the middleware applying default limits."""

    limiter = build_limiter(settings)
    for endpoint in exempt:
        limiter.exempt(endpoint)
    application.state.limiter = limiter
    application.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    application.add_middleware(SlowAPIMiddleware)
    return limiter


__all__ = [
    "CorrelationIdMiddleware",
    "build_limiter",
    "install_rate_limiting",
    "rate_limit_exceeded_handler",
]
