from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from inventory_desk.core.errors import ConfigError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="INVENTORY_DESK_", env_file=".env", extra="ignore")

    APP_NAME: str = "inventory-desk"
    BACKEND: Literal["local", "remote"] = "local"
    API_URL: str = ""
    API_KEY: str = ""
    TIMEOUT_SECONDS: float = 10.0
    VERIFY_SSL: bool = True
    DATABASE_URL: str = "sqlite+pysqlite:///./inventory_desk.db"
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    SESSION_FILE: Path | None = None
    OAUTH_REDIRECT_URL: str = "http://localhost:3000/"
    LOG_LEVEL: str = "INFO"

    @field_validator("TIMEOUT_SECONDS")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError(f"expected > 0, got {value}")
        return value

    @field_validator("ACCESS_TOKEN_EXPIRE_MINUTES")
    @classmethod
    def _positive_expiry(cls, value: int) -> int:
        if value < 1:
            raise ValueError(f"expected >= 1, got {value}")
        return value

    @field_validator("API_URL")
    @classmethod
    def _strip_url(cls, value: str) -> str:
        return value.strip().rstrip("/")


def load_settings(env_file: str | None = ".env", **overrides) -> Settings:
    """Load settings from the environment, an optional .env file and explicit overrides."""
    try:
        settings = Settings(_env_file=env_file, **overrides)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    if settings.BACKEND == "remote":
        missing = [name for name in ("API_URL", "API_KEY") if not getattr(settings, name)]
        if missing:
            names = ", ".join(f"INVENTORY_DESK_{name}" for name in missing)
            raise ConfigError(f"Missing required config values: {names}")
    return settings
