"""Centralised application configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# src/scriptflow/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class StytchConfig(BaseModel):
    """Stytch authentication provider credentials."""

    project_id: str = ""
    secret: SecretStr = SecretStr("")
    organization_id: str = ""
    environment: str = "test"


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    url: str | None = None


class AppConfig(BaseModel):
    """Application runtime configuration."""

    base_url: str = "http://localhost:8080"
    port: int = 8080
    storage_secret: SecretStr = SecretStr("dev-secret-change-me")
    log_dir: Path = Path("logs")


class ReviewConfig(BaseModel):
    """Tuning for selection capture, the comment composer and persistence."""

    selection_debounce_ms: int = 10
    composer_width: int = 360
    composer_height: int = 300
    viewport_margin: int = 20
    trigger_offset: int = 40
    persist_attempts: int = 3
    persist_backoff_seconds: float = 0.5
    reconcile_window_seconds: float = 120.0

    @model_validator(mode="after")
    def at_least_one_attempt(self) -> ReviewConfig:
        if self.persist_attempts < 1:
            msg = "REVIEW__PERSIST_ATTEMPTS must be at least 1"
            raise ValueError(msg)
        return self


class DevConfig(BaseModel):
    """Development and testing toggles."""

    auth_mock: bool = False
    database_echo: bool = False
    test_database_url: str | None = None


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Application settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``STYTCH__PROJECT_ID``, ``DATABASE__URL``, ``REVIEW__PERSIST_ATTEMPTS``, etc.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    stytch: StytchConfig = StytchConfig()
    database: DatabaseConfig = DatabaseConfig()
    app: AppConfig = AppConfig()
    review: ReviewConfig = ReviewConfig()
    dev: DevConfig = DevConfig()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.info("Settings: no .env file found, using env vars and defaults")

    return settings
