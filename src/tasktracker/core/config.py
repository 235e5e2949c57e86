"""Application settings powered by ``pydantic-settings``."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Any, Literal, Sequence

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .. import __version__ as package_version

EnvironmentName = Literal["development", "test", "ci"]

_ENVIRONMENT_ALIASES: dict[str, EnvironmentName] = {
    "development": "development",
    "dev": "development",
    "test": "test",
    "testing": "test",
    "ci": "ci",
}

_ENVIRONMENT_PROFILES: dict[EnvironmentName, dict[str, Any]] = {
    "development": {
        "log_level": "DEBUG",
        "reload": True,
        "rate_limit_enabled": True,
    },
    "test": {
        "log_level": "WARNING",
        "reload": False,
        "rate_limit_enabled": False,
        "bcrypt_rounds": 4,
    },
    "ci": {
        "log_level": "INFO",
        "reload": False,
        "rate_limit_enabled": True,
        "bcrypt_rounds": 4,
    },
}

_SYMMETRIC_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})

CommaSeparated = Annotated[list[str], NoDecode]


class Settings(BaseSettings):
    """Runtime configuration for the task tracker service."""

    model_config = SettingsConfigDict(
        env_file=("config/.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "Task Tracker"
    environment: EnvironmentName = Field(default="development", alias="ENVIRONMENT")
    api_prefix: str = Field(default="", alias="API_PREFIX")
    version: str = Field(default=package_version, alias="VERSION")

    mongo_uri: str = Field(default="mongodb://localhost:27017", alias="MONGO_URI")
    mongo_database: str = Field(default="taskmanager", alias="MONGO_DATABASE")
    mongo_timeout_ms: int = Field(default=10_000, alias="MONGO_TIMEOUT_MS")

    cors_allow_origins: CommaSeparated = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        alias="ALLOWED_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="ALLOW_CREDENTIALS")
    cors_allow_methods: CommaSeparated = Field(default_factory=lambda: ["*"], alias="ALLOW_METHODS")
    cors_allow_headers: CommaSeparated = Field(
        default_factory=lambda: ["Origin", "Content-Type", "Accept", "Authorization"],
        alias="ALLOW_HEADERS",
    )

    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8080, alias="APP_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    reload: bool = Field(default=True, alias="RELOAD")

    jwt_secret: str = Field(default="change-me", alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    token_expiry_seconds: int = Field(default=60 * 60, alias="TOKEN_EXPIRY_TIME")
    bcrypt_rounds: int = Field(default=12, alias="BCRYPT_ROUNDS")

    rate_limit_enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED")
    rate_limit_max_requests: int = Field(default=20, alias="RATE_LIMIT_MAX_REQUESTS")
    rate_limit_window_seconds: int = Field(default=60, alias="RATE_LIMIT_WINDOW_SECONDS")
    rate_limit_storage_uri: str = Field(default="memory://", alias="RATE_LIMIT_STORAGE_URI")

    @field_validator("environment", mode="before")
    @classmethod
    def _normalise_environment(cls, value: object) -> EnvironmentName:
        if isinstance(value, str):
            normalized = value.strip().lower()
        else:
            normalized = ""
        if not normalized:
            normalized = "development"
        return _ENVIRONMENT_ALIASES.get(normalized, "development")

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _coerce_comma_separated(cls, value: object) -> list[str]:
        """Allow comma separated strings for CORS configuration."""

        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, Sequence):
            return [str(item) for item in value if str(item).strip()]
        return []

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> str:
        if not isinstance(value, str):
            return "INFO"
        return value.upper()

    @field_validator("jwt_secret")
    @classmethod
    def _require_secret(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("JWT_SECRET must not be blank.")
        return value

    @field_validator("jwt_algorithm", mode="before")
    @classmethod
    def _require_symmetric_algorithm(cls, value: object) -> str:
        algorithm = str(value or "").strip().upper()
        if algorithm not in _SYMMETRIC_ALGORITHMS:
            raise ValueError(f"JWT_ALGORITHM must be one of {sorted(_SYMMETRIC_ALGORITHMS)}.")
        return algorithm

    @field_validator("token_expiry_seconds")
    @classmethod
    def _require_positive_expiry(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("TOKEN_EXPIRY_TIME must be a positive number of seconds.")
        return value

    @field_validator("bcrypt_rounds")
    @classmethod
    def _clamp_bcrypt_rounds(cls, value: int) -> int:
        return min(max(value, 4), 31)

    @field_validator("mongo_timeout_ms", "rate_limit_max_requests", "rate_limit_window_seconds")
    @classmethod
    def _ensure_at_least_one(cls, value: int) -> int:
        return max(value, 1)

    @model_validator(mode="after")
    def _apply_environment_profile(self) -> "Settings":
        profile = _ENVIRONMENT_PROFILES[self.environment]
        fields_set = set(getattr(self, "model_fields_set", set()))
        for field_name, value in profile.items():
            if field_name not in fields_set:
                setattr(self, field_name, value)
        return self


@lru_cache()
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    return Settings()


__all__ = ["EnvironmentName", "Settings", "get_settings"]
