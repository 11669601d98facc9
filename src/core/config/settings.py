"""Main application settings and configuration management.

This module composes the settings from the different modules (app, database,
auth) into a single `Settings` class. It loads settings from environment
variables and an optional `.env` file, validates them, and exposes a single
`settings` object for the application wiring.

Domain services never read `settings` directly; they receive their
configuration through their constructors.
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings

logger = logging.getLogger(__name__)
logging.getLogger("passlib").setLevel(logging.ERROR)


class Settings(AppSettings, DatabaseSettings, AuthSettings):
    """The main settings class that aggregates all application configurations.

    Security Note:
        - Sensitive fields (JWT_SECRET, POSTGRES_PASSWORD) are `SecretStr` and are
          never logged.
    Usage:
        - Access settings via the module-level instance `settings`.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )


def create_settings() -> Settings:
    """Create settings instance with environment-specific configuration.

    ``APP_ENV`` selects an optional ``.env.<env>`` file; plain ``.env`` is used
    otherwise.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")
    env_file = Path(f".env.{env}")

    if env != "development" and env_file.exists():
        logger.info(f"Loading environment configuration from {env_file}")
        return Settings(_env_file=str(env_file))
    if Path(".env").exists():
        logger.info(f"Loading environment configuration from .env (environment: {env})")
    else:
        logger.info(f"No .env file found, using environment variables only (environment: {env})")
    return Settings()


settings = create_settings()
