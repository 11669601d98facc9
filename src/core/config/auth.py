"""Authentication and session settings.
"""

import logging

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class AuthSettings(BaseSettings):
    """Defines settings for credential hashing, token signing and session handling.

    Security Note:
        - JWT_SECRET is the HMAC signing key for every bearer token. It must be a
          random string of at least 32 characters, stored outside version control
          and rotated regularly. Rotating it invalidates all issued tokens.
    """

    # Token signing
    JWT_SECRET: SecretStr
    JWT_ALGORITHM: str = Field(default="HS256", pattern="^HS(256|384|512)$")
    ACCESS_TOKEN_EXPIRE_HOURS: int = Field(ge=1, default=24)
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(ge=1, default=7)

    # Password hashing
    BCRYPT_ROUNDS: int = Field(ge=4, le=31, default=12)

    # Session handling
    SESSION_STORE_STRIPES: int = Field(ge=1, default=16)
    SESSION_SWEEP_INTERVAL_SECONDS: int = Field(ge=1, default=300)

    # Role assigned to self-registered identities
    DEFAULT_ROLE_ID: int = Field(ge=1, default=1)

    @model_validator(mode="after")
    def _validate_jwt_secret(self) -> "AuthSettings":
        """Rejects signing secrets that are too short to be safe for HMAC.

        Raises:
            ValueError: If JWT_SECRET has fewer than 32 characters.
        """
        if len(self.JWT_SECRET.get_secret_value()) < 32:
            error_msg = "JWT_SECRET must be at least 32 characters long."
            logger.error(error_msg)
            raise ValueError(error_msg)
        return self
