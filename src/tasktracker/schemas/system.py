"""Common system-level response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthCheckResponse(BaseModel):
    """Payload returned by the health check endpoint."""

    status: str = Field(default="ok", description="Service health indicator")
    version: str | None = None


class MessageResponse(BaseModel):
    """Plain acknowledgement payload."""

    message: str


class ErrorResponse(BaseModel):
    """Body returned on every failure path."""

    error: str = Field(description="Generic, client-safe error message")
    code: str = Field(description="Stable machine-readable error code")


__all__ = ["ErrorResponse", "HealthCheckResponse", "MessageResponse"]
