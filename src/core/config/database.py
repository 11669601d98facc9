"""
Database connection settings.
"""
import logging

from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class DatabaseSettings(BaseSettings):
    """
    Defines settings for the identity directory database.

    Either provide DATABASE_URL directly or the individual POSTGRES_* parts,
    from which an asyncpg URL is assembled.

    Security Note:
        - POSTGRES_PASSWORD must be securely stored and never logged or exposed
          in version control.
    Performance Note:
        - Tune DATABASE_POOL_SIZE and DATABASE_MAX_OVERFLOW based on load.
    """
    POSTGRES_USER: str = "pos"
    POSTGRES_PASSWORD: SecretStr = SecretStr("pos")
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = Field(ge=1, le=65535, default=5432)
    POSTGRES_DB: str = "pos"

    DATABASE_ECHO: bool = False
    DATABASE_POOL_PRE_PING: bool = True
    DATABASE_POOL_SIZE: int = Field(ge=1, default=10)
    DATABASE_MAX_OVERFLOW: int = Field(ge=0, default=20)
    DATABASE_URL: str = Field(default="", validate_default=True)

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_url(cls, v: str | None, info: ValidationInfo) -> str:
        """
        Assembles the database connection URL if not provided explicitly.

        Args:
            v: Explicitly provided URL or None.
            info: Validation context with other field values.

        Returns:
            Assembled or provided database URL.
        """
        if v:
            return v

        values = info.data
        password = values.get("POSTGRES_PASSWORD")
        if not password:
            logger.warning("POSTGRES_PASSWORD not set during DATABASE_URL assembly.")
        secret = password.get_secret_value() if password else ""
        return (
            f"postgresql+asyncpg://{values.get('POSTGRES_USER')}:{secret}"
            f"@{values.get('POSTGRES_HOST')}:{values.get('POSTGRES_PORT')}"
            f"/{values.get('POSTGRES_DB')}"
        )
