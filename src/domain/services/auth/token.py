import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from jwt import decode as jwt_decode
from jwt import encode as jwt_encode
from jwt.exceptions import InvalidSignatureError, PyJWTError
from pydantic import ValidationError as PydanticValidationError
from structlog import get_logger

from src.core.exceptions import (
    TokenExpiredError,
    TokenMalformedError,
    TokenSignatureInvalidError,
    WrongTokenKindError,
)
from src.domain.entities.user import User
from src.domain.interfaces.services import ITokenService
from src.domain.value_objects.tokens import (
    AccessTokenClaims,
    RefreshTokenClaims,
    TokenKind,
)

logger = get_logger(__name__)

ClaimsT = TypeVar("ClaimsT", AccessTokenClaims, RefreshTokenClaims)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService(ITokenService):
    """Service for issuing and validating HMAC-signed JWT access and refresh tokens.

    Lifetimes are fixed at construction and applied to every issuance. The
    service is stateless: it holds no revocation list, revocation is the
    session store's job. A token bound to a deleted session is still
    structurally valid here.

    Validation order is signature, then kind, then claim shape, then expiry,
    so that a tampered token is always reported as such and a token of the
    other kind is reported as the wrong kind rather than as malformed.

    Attributes:
        access_token_lifetime (timedelta): Lifetime of access tokens.
        refresh_token_lifetime (timedelta): Lifetime of refresh tokens.
        algorithm (str): HMAC algorithm used to sign tokens.
    """

    def __init__(
        self,
        secret: str,
        access_token_expire_hours: int,
        refresh_token_expire_days: int,
        algorithm: str = "HS256",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.access_token_lifetime = timedelta(hours=access_token_expire_hours)
        self.refresh_token_lifetime = timedelta(days=refresh_token_expire_days)
        self._clock = clock or _utcnow

    @property
    def access_token_ttl_seconds(self) -> int:
        return int(self.access_token_lifetime.total_seconds())

    def generate_access_token(self, user: User, session_id: Optional[str] = None) -> str:
        """Create a signed access token for ``user``.

        Args:
            user (User): Identity the token is issued to. Must be persisted.
            session_id (Optional[str]): Session to bind the token to.

        Returns:
            str: Encoded JWT access token.
        """
        claims = AccessTokenClaims(
            user_id=user.id,
            tenant_id=user.tenant_id,
            identity_label=user.identity_label,
            role_id=user.role_id,
            sid=session_id,
            **self._timing(self.access_token_lifetime),
        )
        token = self._encode(claims)
        logger.debug("Access token created", user_id=user.id, jti=claims.jti[:8])
        return token

    def generate_refresh_token(self, user: User, session_id: Optional[str] = None) -> str:
        """Create a signed refresh token for ``user``. The role is not embedded."""
        claims = RefreshTokenClaims(
            user_id=user.id,
            tenant_id=user.tenant_id,
            sid=session_id,
            **self._timing(self.refresh_token_lifetime),
        )
        token = self._encode(claims)
        logger.debug("Refresh token created", user_id=user.id, jti=claims.jti[:8])
        return token

    def validate_access_token(self, token: str) -> AccessTokenClaims:
        return self._validate(token, TokenKind.ACCESS, AccessTokenClaims)

    def validate_refresh_token(self, token: str) -> RefreshTokenClaims:
        return self._validate(token, TokenKind.REFRESH, RefreshTokenClaims)

    def _timing(self, lifetime: timedelta) -> Dict[str, Any]:
        issued_at = int(self._clock().timestamp())
        return {
            "iat": issued_at,
            "exp": issued_at + int(lifetime.total_seconds()),
            "jti": uuid.uuid4().hex,
        }

    def _encode(self, claims: AccessTokenClaims | RefreshTokenClaims) -> str:
        return jwt_encode(claims.model_dump(), self._secret, algorithm=self.algorithm)

    def _validate(self, token: str, expected: TokenKind, model: Type[ClaimsT]) -> ClaimsT:
        payload = self._decode(token)

        kind = payload.get("type")
        if kind != expected.value:
            if kind in {k.value for k in TokenKind}:
                logger.warning("Token of the wrong kind presented", expected=expected.value)
                raise WrongTokenKindError()
            raise TokenMalformedError()

        try:
            claims = model.model_validate(payload)
        except PydanticValidationError as e:
            logger.warning("Token claims failed validation", errors=e.error_count())
            raise TokenMalformedError() from e

        if int(self._clock().timestamp()) >= claims.exp:
            raise TokenExpiredError()
        return claims

    def _decode(self, token: str) -> Dict[str, Any]:
        """Verify the signature and return the raw payload.

        Expiry is checked by the caller against the injected clock, so PyJWT's
        own ``exp`` check is disabled here.
        """
        if not isinstance(token, str) or not token:
            raise TokenMalformedError()
        try:
            payload = jwt_decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except InvalidSignatureError as e:
            logger.warning("JWT signature verification failed")
            raise TokenSignatureInvalidError() from e
        except PyJWTError as e:
            logger.warning("JWT decode failed", error=str(e))
            raise TokenMalformedError() from e
        if not isinstance(payload, dict):
            raise TokenMalformedError()
        return payload
