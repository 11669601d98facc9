"""Token and credential value objects for the authentication domain.

Token claims are typed models rather than free-form dictionaries: a decoded
payload either validates into one of these models or is rejected as a whole.
Unknown keys, missing keys and wrongly typed values all fail structurally.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.domain.entities.user import Role, User


class TokenKind(str, Enum):
    """Discriminator embedded in every token under the ``type`` claim."""

    ACCESS = "access"
    REFRESH = "refresh"


class _TokenClaims(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    user_id: int
    tenant_id: int
    iat: int
    exp: int
    jti: str = Field(min_length=1)
    sid: Optional[str] = None


class AccessTokenClaims(_TokenClaims):
    """Claims carried by an access token.

    Attributes:
        user_id: Identity the token was issued to.
        tenant_id: The identity's tenant at issuance time.
        identity_label: Username of the identity.
        role_id: Role assigned at issuance time.
        iat: Issued-at, seconds since the epoch.
        exp: Expiry, seconds since the epoch.
        jti: Unique token id.
        sid: Session the token is bound to, if any.
    """

    type: Literal["access"] = "access"
    identity_label: str = Field(min_length=1)
    role_id: int


class RefreshTokenClaims(_TokenClaims):
    """Claims carried by a refresh token. No role: it is re-resolved on refresh."""

    type: Literal["refresh"] = "refresh"


class TokenPair(BaseModel):
    """An access/refresh token pair handed back to a client."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "Bearer"


class LoginCredentials(BaseModel):
    """Credentials presented to log in.

    ``tenant_id`` is optional. Identity labels are unique across tenants, so
    it is not needed for the lookup; when given it must match the identity's
    tenant.
    """

    model_config = ConfigDict(frozen=True)

    identity_label: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)
    tenant_id: Optional[int] = None

    @field_validator("identity_label")
    @classmethod
    def _normalize_label(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("identity_label must not be blank")
        return value


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a successful login."""

    tokens: TokenPair
    user: User
    role: Optional[Role] = None
