"""Security helpers for password hashing and JWT token management."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from functools import lru_cache
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError
from passlib.context import CryptContext
from pydantic import BaseModel, ConfigDict, ValidationError

DEFAULT_ALGORITHM = "HS256"


class PasswordHashingError(RuntimeError):
    """Raised when the hashing backend fails to produce a hash."""


@lru_cache()
def _crypt_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


class PasswordHasher:
    """One-way bcrypt hashing with an embedded salt and work factor."""

    def __init__(self, rounds: int = 12) -> None:
        self._context = _crypt_context(rounds)

    def hash(self, password: str) -> str:
        """Return a bcrypt hash of ``password``."""

        try:
            return self._context.hash(password)
        except (ValueError, TypeError) as exc:
            raise PasswordHashingError("Unable to hash password.") from exc

    def verify(self, password: str, hashed_password: str) -> bool:
        """Return ``True`` iff ``password`` matches ``hashed_password``.

        Malformed or unrecognised hashes verify as ``False``.
        """

        try:
            return self._context.verify(password, hashed_password)
        except (ValueError, TypeError):
            return False

    def dummy_verify(self) -> None:
        """Spend the time of one verification without a stored hash."""

        self._context.dummy_verify()


class TokenErrorKind(str, Enum):
    """Reasons a token can fail validation."""

    MALFORMED = "malformed"
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"


class TokenValidationError(Exception):
    """Raised when a token cannot be trusted."""

    def __init__(self, kind: TokenErrorKind, message: str | None = None) -> None:
        super().__init__(message or kind.value)
        self.kind = kind


@dataclass(slots=True)
class IssuedToken:
    """A signed token together with its absolute expiry."""

    token: str
    expires_at: datetime


class TokenClaims(BaseModel):
    """Validated JWT payload."""

    model_config = ConfigDict(extra="ignore")

    sub: str
    exp: datetime

    @property
    def subject(self) -> str:
        return self.sub


def issue_token(
    subject: str,
    *,
    ttl_seconds: int,
    secret: str,
    algorithm: str = DEFAULT_ALGORITHM,
    now: datetime | None = None,
) -> IssuedToken:
    """Create a signed token for ``subject`` that expires ``ttl_seconds`` from ``now``."""

    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(seconds=ttl_seconds)
    payload: dict[str, Any] = {
        "sub": str(subject),
        "iat": issued_at,
        "exp": expires_at,
    }
    token = jwt.encode(payload, secret, algorithm=algorithm)
    return IssuedToken(token=token, expires_at=expires_at)


def validate_token(
    token: str,
    *,
    secret: str,
    algorithm: str = DEFAULT_ALGORITHM,
) -> TokenClaims:
    """Verify ``token`` and return its claims.

    The signature is checked before expiry, so a forged token that has also
    expired reports ``INVALID_SIGNATURE``.
    """

    try:
        jwt.get_unverified_claims(token)
    except JWTError as exc:
        raise TokenValidationError(TokenErrorKind.MALFORMED) from exc

    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except ExpiredSignatureError as exc:
        raise TokenValidationError(TokenErrorKind.EXPIRED) from exc
    except JWTClaimsError as exc:
        raise TokenValidationError(TokenErrorKind.MALFORMED) from exc
    except JWTError as exc:
        raise TokenValidationError(TokenErrorKind.INVALID_SIGNATURE) from exc

    try:
        claims = TokenClaims.model_validate(payload)
    except ValidationError as exc:
        raise TokenValidationError(TokenErrorKind.MALFORMED) from exc

    # jose compares whole seconds; reject anything past the exact expiry instant.
    if datetime.now(timezone.utc) > claims.exp:
        raise TokenValidationError(TokenErrorKind.EXPIRED)
    return claims


__all__ = [
    "DEFAULT_ALGORITHM",
    "IssuedToken",
    "PasswordHasher",
    "PasswordHashingError",
    "TokenClaims",
    "TokenErrorKind",
    "TokenValidationError",
    "issue_token",
    "validate_token",
]
