"""Schemas describing authentication payloads."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SignupRequest(BaseModel):
    """Incoming payload for registering a new user."""

    username: str = ""
    password: str = ""


class SigninRequest(BaseModel):
    """Credentials presented at sign-in."""

    username: str = ""
    password: str = ""


class TokenResponse(BaseModel):
    """Bearer token returned after a successful sign-in."""

    token: str
    expires_in: int = Field(description="Seconds until the token expires")


__all__ = ["SigninRequest", "SignupRequest", "TokenResponse"]
