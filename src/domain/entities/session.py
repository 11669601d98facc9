import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone


def new_session_id() -> str:
    """Generate an opaque, unique session identifier."""
    return f"sess_{secrets.token_hex(16)}"


@dataclass(frozen=True)
class Session:
    """Represents a user's session within the Authentication Bounded Context.

    A session links a user to the token pair issued at login and is the unit
    of revocation: deleting it makes every access token bound to it (through
    the ``sid`` claim) unusable, even while the token itself is still
    structurally valid. One user may hold several concurrent sessions
    (one per device).

    Sessions are owned exclusively by a session store; nothing else mutates
    them, hence the frozen dataclass.

    Attributes:
        id: Opaque unique session identifier.
        user_id: The owning user.
        tenant_id: The owning user's tenant.
        access_token: The access token issued with the session.
        refresh_token: The refresh token issued with the session.
        expires_at: Issuance time plus the fixed session lifetime.
        created_at: Issuance time.
    """

    user_id: int
    tenant_id: int
    access_token: str
    refresh_token: str
    expires_at: datetime
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: str = field(default_factory=new_session_id)

    @classmethod
    def open(
        cls,
        *,
        session_id: str,
        user_id: int,
        tenant_id: int,
        access_token: str,
        refresh_token: str,
        lifetime: timedelta,
        now: datetime,
    ) -> "Session":
        """Create a session whose expiry is derived from ``now`` and the policy lifetime."""
        return cls(
            id=session_id,
            user_id=user_id,
            tenant_id=tenant_id,
            access_token=access_token,
            refresh_token=refresh_token,
            created_at=now,
            expires_at=now + lifetime,
        )

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
