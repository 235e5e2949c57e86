"""Authentication service encapsulating user registration and token flows."""

from __future__ import annotations

import logging

from ..core.config import Settings
from ..core.security import IssuedToken, PasswordHasher, PasswordHashingError, issue_token
from ..errors import BadRequestError, ConflictError, ServerError, UnauthorizedError
from ..models import User
from ..repositories import UserRepository

logger = logging.getLogger(__name__)

BLANK_CREDENTIALS_MESSAGE = "username and password should not be blank!"
INVALID_CREDENTIALS_MESSAGE = "invalid credentials"


def _require_credentials(username: str, password: str) -> None:
    if not username.strip() or not password.strip():
        raise BadRequestError(BLANK_CREDENTIALS_MESSAGE)


class AuthService:
    """High-level authentication workflows."""

    def __init__(self, users: UserRepository, settings: Settings) -> None:
        self._users = users
        self._settings = settings
        self._hasher = PasswordHasher(settings.bcrypt_rounds)

    async def register_user(self, *, username: str, password: str) -> User:
        _require_credentials(username, password)
        if await self._users.exists(username):
            raise ConflictError("username already taken", code="username_taken")

        try:
            hashed_password = self._hasher.hash(password)
        except PasswordHashingError as exc:
            raise ServerError() from exc

        user = await self._users.add(User(username=username, hashed_password=hashed_password))
        logger.info("User registered.", extra={"user_id": str(user.id)})
        return user

    async def authenticate_user(self, *, username: str, password: str) -> User:
        """Return the matching user or raise a generic credentials failure.

        Unknown users and wrong passwords are indistinguishable to the caller.
        """

        _require_credentials(username, password)
        user = await self._users.get_by_username(username)
        if user is None:
            self._hasher.dummy_verify()
            matched = False
        else:
            matched = self._hasher.verify(password, user.hashed_password)
        if not matched:
            logger.warning("Sign-in rejected.")
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE, code="invalid_credentials")
        return user

    def issue_token(self, user: User) -> IssuedToken:
        if user.id is None:
            raise ServerError()
        return issue_token(
            str(user.id),
            ttl_seconds=self._settings.token_expiry_seconds,
            secret=self._settings.jwt_secret,
            algorithm=self._settings.jwt_algorithm,
        )


__all__ = ["AuthService", "BLANK_CREDENTIALS_MESSAGE", "INVALID_CREDENTIALS_MESSAGE"]
