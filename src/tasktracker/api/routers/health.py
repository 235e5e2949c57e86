"""Liveness endpoint, exempt from rate limiting and authorization."""

from __future__ import annotations

from fastapi import APIRouter

from ...deps import SettingsDependency
from ...schemas import HealthCheckResponse

router = APIRouter(tags=["system"])


@router.get("/healthz", response_model=HealthCheckResponse, summary="Liveness check")
async def healthz(settings: SettingsDependency) -> HealthCheckResponse:
    return HealthCheckResponse(status="ok", version=settings.version)
