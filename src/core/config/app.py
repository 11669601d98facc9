"""
Process-level settings: identity of the service, HTTP binding and logging.
"""
from typing import List, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Settings shared by the HTTP adapter and the logging setup.

    Security Note:
        - Restrict ALLOWED_ORIGINS to the POS front-ends in production; the
          default only admits a local development client.
    """
    PROJECT_NAME: str = "tillgate"
    VERSION: str = "0.1.0"
    APP_ENV: str = "development"
    DEBUG: bool = False

    API_HOST: str = "0.0.0.0"
    API_PORT: int = Field(ge=1, le=65535, default=8080)

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    ALLOWED_ORIGINS: Union[str, List[str]] = Field(default="http://localhost:8080")

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Accepts either a list or a comma-separated string; blank entries are dropped."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v
