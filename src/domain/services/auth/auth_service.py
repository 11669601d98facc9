"""Authentication Domain Service.

`AuthService` orchestrates login, registration, token refresh, logout,
password change and token validation. It is the only component that
combines the password service, the token service, the session store and the
user directory, and it emits one domain event per state change.

Per identity, a login session moves through these states::

    Anonymous --login--> Authenticated --logout / password change--> Revoked
                              |
                              +--session lifetime elapses--> Expired

Revoked and Expired are terminal; only a fresh login leads back to
Authenticated.

Known benign race: a login that verifies the old password hash just before
a concurrent password change completes still succeeds. The hash update is
last-writer-wins and no lock spans the verify-then-update sequence.
"""

import asyncio
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator, Optional

import structlog

from src.core.exceptions import (
    AccountInactiveError,
    FeatureNotImplementedError,
    IdentityNotFoundError,
    InvalidCredentialsError,
    PasswordMismatchError,
    PersistenceError,
    SessionNotFoundError,
    SessionRevokedError,
    TillgateError,
    ValidationError,
)
from src.core.logging import mask_label
from src.domain.entities.session import Session, new_session_id
from src.domain.entities.user import User
from src.domain.events import (
    BaseDomainEvent,
    PasswordResetRequestedEvent,
    UserLoggedInEvent,
    UserLoggedOutEvent,
    UserRegisteredEvent,
)
from src.domain.interfaces import (
    IEventPublisher,
    IPasswordService,
    ISessionStore,
    ITokenService,
    IUserDirectory,
)
from src.domain.services.auth.password import check_password_policy
from src.domain.value_objects.tokens import LoginCredentials, LoginResult, TokenPair

logger = structlog.get_logger(__name__)

MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 100


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthService:
    """Domain service for authentication and session identity.

    All collaborators are injected through their interfaces. The service
    itself holds no mutable state; the session store is the only shared
    mutable structure.

    Error handling:
        - Domain errors (`TillgateError` subclasses) propagate unchanged.
        - Any other failure of the user directory or the session store is
          logged with the failed operation and re-raised as
          `PersistenceError`, chained to the original exception.
        - Event publication never fails an operation.
    """

    def __init__(
        self,
        user_directory: IUserDirectory,
        session_store: ISessionStore,
        token_service: ITokenService,
        password_service: IPasswordService,
        event_publisher: IEventPublisher,
        clock: Optional[Callable[[], datetime]] = None,
        session_lifetime: Optional[timedelta] = None,
        default_role_id: int = 1,
    ):
        """Initialize the service with its collaborators.

        Args:
            user_directory: Identity persistence.
            session_store: Session storage.
            token_service: Token issuance and validation.
            password_service: Credential hashing.
            event_publisher: Outbound domain events.
            clock: Source of the current time, UTC-aware.
            session_lifetime: Lifetime of new sessions. Defaults to the
                refresh-token lifetime of ``token_service``.
            default_role_id: Role given to registrations that name none.
        """
        self._user_directory = user_directory
        self._session_store = session_store
        self._token_service = token_service
        self._password_service = password_service
        self._event_publisher = event_publisher
        self._clock = clock or _utcnow
        self._session_lifetime = session_lifetime or token_service.refresh_token_lifetime
        self._default_role_id = default_role_id

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def login(self, credentials: LoginCredentials) -> LoginResult:
        """Authenticate an identity and open a new session.

        The identity label is resolved across all tenants, by username first
        and email second. When ``credentials.tenant_id`` is given it must
        match the identity's tenant.

        Returns:
            LoginResult: The new token pair, the user and its role.

        Raises:
            InvalidCredentialsError: Unknown label, wrong password or tenant
                mismatch. The three cases are indistinguishable.
            AccountInactiveError: The user or its tenant is deactivated.
            PersistenceError: The directory or the session store failed.
        """
        label = credentials.identity_label
        log = logger.bind(identity=mask_label(label))

        with self._persistence_guard("login.find_identity"):
            user = await self._user_directory.find_by_identity_label(label)

        if user is None:
            await self._run_blocking(self._password_service.dummy_verify, credentials.password)
            log.info("Login rejected", reason="unknown_identity")
            raise InvalidCredentialsError()

        log = log.bind(user_id=user.id, tenant_id=user.tenant_id)
        if credentials.tenant_id is not None and credentials.tenant_id != user.tenant_id:
            await self._run_blocking(self._password_service.dummy_verify, credentials.password)
            log.info("Login rejected", reason="tenant_mismatch")
            raise InvalidCredentialsError()

        try:
            await self._ensure_active(user, operation="login")
        except AccountInactiveError:
            await self._run_blocking(self._password_service.dummy_verify, credentials.password)
            raise

        try:
            await self._run_blocking(
                self._password_service.verify, user.hashed_password, credentials.password
            )
        except PasswordMismatchError:
            log.info("Login rejected", reason="wrong_password")
            raise InvalidCredentialsError() from None

        now = self._clock()
        session_id = new_session_id()
        tokens = self._issue_tokens(user, session_id)
        session = Session.open(
            session_id=session_id,
            user_id=user.id,
            tenant_id=user.tenant_id,
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            lifetime=self._session_lifetime,
            now=now,
        )

        with self._persistence_guard("login.create_session"):
            await self._session_store.create(session)

        previous_login_at = user.last_login_at
        try:
            user.last_login_at = now
            user.updated_at = now
            with self._persistence_guard("login.update_identity"):
                user = await self._user_directory.update(user)
            with self._persistence_guard("login.get_role"):
                role = await self._user_directory.get_role(user.role_id)
        except BaseException:
            # Covers cancellation too: the caller must never hold a session
            # it was not told about.
            await self._discard_session(session.id)
            raise

        log.info("Login succeeded", session_id=session.id)
        await self._publish(
            UserLoggedInEvent.create(
                occurred_at=now,
                tenant_id=user.tenant_id,
                user_id=user.id,
                username=user.username,
                session_id=session.id,
                previous_login_at=previous_login_at,
            )
        )
        return LoginResult(tokens=tokens, user=user, role=role)

    async def register(
        self,
        tenant_id: int,
        username: str,
        password: str,
        email: Optional[str] = None,
        full_name: str = "",
        phone: str = "",
        role_id: Optional[int] = None,
    ) -> User:
        """Create a new active identity. No tokens are issued.

        Raises:
            ValidationError: Blank or badly sized username, or unknown tenant.
            PasswordPolicyError: The password does not meet the policy.
            DuplicateIdentityError: The username or email is already taken.
        """
        username = (username or "").strip().lower()
        email = email.strip().lower() if email and email.strip() else None
        if not MIN_USERNAME_LENGTH <= len(username) <= MAX_USERNAME_LENGTH:
            raise ValidationError(
                f"Username must be between {MIN_USERNAME_LENGTH} and "
                f"{MAX_USERNAME_LENGTH} characters long"
            )
        check_password_policy(password)

        with self._persistence_guard("register.get_tenant"):
            tenant = await self._user_directory.get_tenant(tenant_id)
        if tenant is None:
            raise ValidationError(f"Unknown tenant {tenant_id}")

        hashed = await self._run_blocking(self._password_service.hash, password)
        now = self._clock()
        user = User(
            tenant_id=tenant_id,
            role_id=role_id if role_id is not None else self._default_role_id,
            username=username,
            email=email,
            full_name=full_name,
            phone=phone,
            hashed_password=hashed,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        with self._persistence_guard("register.create_identity"):
            user = await self._user_directory.create(user)

        logger.info(
            "User registered",
            user_id=user.id,
            tenant_id=user.tenant_id,
            identity=mask_label(user.username),
        )
        await self._publish(
            UserRegisteredEvent.create(
                occurred_at=now,
                tenant_id=user.tenant_id,
                user_id=user.id,
                username=user.username,
                email=user.email,
                role_id=user.role_id,
            )
        )
        return user

    async def refresh_token(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new token pair.

        The identity is re-read from the directory so that a stale role or a
        deactivation is never trusted from the old token. The token's session
        must still be live, so a refresh token cannot outlive a logout or a
        password change; the new pair stays bound to the same session id.

        Raises:
            TokenError: The refresh token is invalid (any subclass).
            SessionRevokedError: The token's session is gone or expired.
            IdentityNotFoundError: The user no longer exists.
            AccountInactiveError: The user or its tenant is deactivated.
        """
        claims = self._token_service.validate_refresh_token(refresh_token)
        await self._require_live_session(claims.sid, claims.user_id, operation="refresh")
        user = await self._get_user(claims.user_id, operation="refresh.find_identity")
        await self._ensure_active(user, operation="refresh")

        tokens = self._issue_tokens(user, claims.sid)
        logger.info("Tokens refreshed", user_id=user.id, session_id=claims.sid)
        return tokens

    async def logout(self, user_id: int) -> int:
        """Delete every session of a user. Idempotent.

        The event's tenant is taken from the deleted sessions. Only when the
        user had none is the directory asked; if that lookup fails the logout
        still succeeds and no event is emitted.

        Returns:
            int: Number of sessions deleted.
        """
        with self._persistence_guard("logout.delete_sessions"):
            sessions = await self._session_store.find_by_user_id(user_id)
            removed = await self._session_store.delete_by_user_id(user_id)

        logger.info("User logged out", user_id=user_id, sessions_revoked=removed)
        tenant_id = sessions[0].tenant_id if sessions else await self._tenant_of(user_id)
        if tenant_id is not None:
            await self._publish(
                UserLoggedOutEvent.create(
                    occurred_at=self._clock(),
                    tenant_id=tenant_id,
                    user_id=user_id,
                    sessions_revoked=removed,
                )
            )
        return removed

    async def validate_token(self, token: str) -> User:
        """Resolve the caller's identity from an access token.

        This is the gate every other module uses. Besides the token checks,
        the token's session must still be present and unexpired, so logout
        and password change take effect immediately.

        Raises:
            TokenError: The token is invalid (any subclass).
            SessionRevokedError: The token's session is gone or expired.
            IdentityNotFoundError: The user no longer exists.
            AccountInactiveError: The user or its tenant is deactivated.
        """
        claims = self._token_service.validate_access_token(token)
        await self._require_live_session(claims.sid, claims.user_id, operation="validate")

        user = await self._get_user(claims.user_id, operation="validate.find_identity")
        await self._ensure_active(user, operation="validate")
        return user

    async def change_password(self, user_id: int, old_password: str, new_password: str) -> None:
        """Replace a user's password and revoke all of their sessions.

        Sessions are revoked before the new hash is stored. A failure in
        between leaves the user logged out with the old password still valid,
        never logged in with the new one.

        Raises:
            IdentityNotFoundError: Unknown user.
            InvalidCredentialsError: ``old_password`` is wrong.
            PasswordPolicyError: ``new_password`` does not meet the policy.
        """
        user = await self._get_user(user_id, operation="change_password.find_identity")
        try:
            await self._run_blocking(self._password_service.verify, user.hashed_password, old_password)
        except PasswordMismatchError:
            logger.info("Password change rejected", user_id=user_id, reason="wrong_password")
            raise InvalidCredentialsError() from None
        check_password_policy(new_password)

        new_hash = await self._run_blocking(self._password_service.hash, new_password)
        with self._persistence_guard("change_password.delete_sessions"):
            removed = await self._session_store.delete_by_user_id(user_id)

        previous = (user.hashed_password, user.updated_at)
        user.hashed_password = new_hash
        user.updated_at = self._clock()
        try:
            with self._persistence_guard("change_password.update_identity"):
                await self._user_directory.update(user)
        except BaseException:
            user.hashed_password, user.updated_at = previous
            raise

        logger.info("Password changed", user_id=user_id, sessions_revoked=removed)

    async def reset_password(self, identity_label: str) -> None:
        """Request a password reset for an identity.

        Only emits ``password.reset_requested``; delivering a reset secret is
        the job of whoever consumes the event.

        Raises:
            IdentityNotFoundError: No identity has this label.
        """
        label = (identity_label or "").strip().lower()
        with self._persistence_guard("reset_password.find_identity"):
            user = await self._user_directory.find_by_identity_label(label) if label else None
        if user is None:
            logger.info("Password reset for unknown identity", identity=mask_label(label))
            raise IdentityNotFoundError()

        logger.info("Password reset requested", user_id=user.id, identity=mask_label(label))
        await self._publish(
            PasswordResetRequestedEvent.create(
                occurred_at=self._clock(),
                tenant_id=user.tenant_id,
                user_id=user.id,
                username=user.username,
                email=user.email,
            )
        )

    async def verify_email(self, token: str) -> None:
        """Confirm an email address. Not available yet; always raises `FeatureNotImplementedError`."""
        raise FeatureNotImplementedError("Email verification")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _issue_tokens(self, user: User, session_id: Optional[str]) -> TokenPair:
        return TokenPair(
            access_token=self._token_service.generate_access_token(user, session_id),
            refresh_token=self._token_service.generate_refresh_token(user, session_id),
            expires_in=self._token_service.access_token_ttl_seconds,
        )

    async def _get_user(self, user_id: int, operation: str) -> User:
        with self._persistence_guard(operation):
            user = await self._user_directory.find_by_id(user_id)
        if user is None:
            raise IdentityNotFoundError()
        return user

    async def _require_live_session(
        self, session_id: Optional[str], user_id: int, operation: str
    ) -> None:
        if session_id is None:
            raise SessionRevokedError()
        try:
            with self._persistence_guard(f"{operation}.find_session"):
                session = await self._session_store.find_by_id(session_id)
        except SessionNotFoundError:
            raise SessionRevokedError() from None
        if session.user_id != user_id or session.is_expired(self._clock()):
            raise SessionRevokedError()

    async def _tenant_of(self, user_id: int) -> Optional[int]:
        try:
            user = await self._user_directory.find_by_id(user_id)
        except Exception as e:
            logger.warning("Tenant lookup for logout event failed", user_id=user_id, error=str(e))
            return None
        return user.tenant_id if user is not None else None

    async def _ensure_active(self, user: User, operation: str) -> None:
        if not user.is_active:
            logger.info("Inactive user rejected", user_id=user.id, operation=operation)
            raise AccountInactiveError()
        with self._persistence_guard(f"{operation}.get_tenant"):
            tenant = await self._user_directory.get_tenant(user.tenant_id)
        if tenant is None or not tenant.is_active:
            logger.info(
                "Inactive tenant rejected",
                user_id=user.id,
                tenant_id=user.tenant_id,
                operation=operation,
            )
            raise AccountInactiveError()

    async def _discard_session(self, session_id: str) -> None:
        try:
            await self._session_store.delete(session_id)
        except Exception as e:
            logger.error(
                "Failed to discard session after aborted login",
                session_id=session_id,
                error=str(e),
            )

    async def _publish(self, event: BaseDomainEvent) -> None:
        try:
            await self._event_publisher.publish(event)
        except Exception as e:
            logger.warning(
                "Domain event publication failed",
                event_type=event.event_type,
                user_id=event.user_id,
                error=str(e),
            )

    @staticmethod
    async def _run_blocking(func, *args):
        return await asyncio.get_running_loop().run_in_executor(None, func, *args)

    @staticmethod
    @contextmanager
    def _persistence_guard(operation: str) -> Iterator[None]:
        try:
            yield
        except TillgateError:
            raise
        except Exception as e:
            logger.error("Persistence failure", operation=operation, error=str(e), exc_info=True)
            raise PersistenceError(operation) from e
