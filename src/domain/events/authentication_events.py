"""Authentication Domain Events.

These events represent significant business occurrences in the authentication domain
that other parts of the system may need to react to (auditing, monitoring, notifications).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .base import BaseDomainEvent


@dataclass(frozen=True)
class UserLoggedInEvent(BaseDomainEvent):
    """Event published when a user successfully logs in.

    Payload keys: ``username``, ``session_id`` and ``previous_login_at``
    (ISO timestamp or ``None`` on the first login).
    """

    event_type = "user.logged_in"

    @classmethod
    def create(
        cls,
        *,
        occurred_at: datetime,
        tenant_id: int,
        user_id: int,
        username: str,
        session_id: str,
        previous_login_at: Optional[datetime] = None,
        correlation_id: Optional[str] = None,
    ) -> "UserLoggedInEvent":
        return cls(
            occurred_at=occurred_at,
            tenant_id=tenant_id,
            user_id=user_id,
            correlation_id=correlation_id,
            payload={
                "username": username,
                "session_id": session_id,
                "previous_login_at": previous_login_at.isoformat() if previous_login_at else None,
            },
        )


@dataclass(frozen=True)
class UserRegisteredEvent(BaseDomainEvent):
    """Event published when a new identity has been created.

    This event can trigger welcome notifications, analytics and audit logging.
    """

    event_type = "user.registered"

    @classmethod
    def create(
        cls,
        *,
        occurred_at: datetime,
        tenant_id: int,
        user_id: int,
        username: str,
        email: Optional[str],
        role_id: int,
        correlation_id: Optional[str] = None,
    ) -> "UserRegisteredEvent":
        return cls(
            occurred_at=occurred_at,
            tenant_id=tenant_id,
            user_id=user_id,
            correlation_id=correlation_id,
            payload={"username": username, "email": email, "role_id": role_id},
        )


@dataclass(frozen=True)
class UserLoggedOutEvent(BaseDomainEvent):
    """Event published when every session of a user has been deleted.

    ``sessions_revoked`` is zero when the user had nothing to log out of.
    """

    event_type = "user.logged_out"

    @classmethod
    def create(
        cls,
        *,
        occurred_at: datetime,
        tenant_id: int,
        user_id: int,
        sessions_revoked: int,
        reason: str = "logout",
        correlation_id: Optional[str] = None,
    ) -> "UserLoggedOutEvent":
        return cls(
            occurred_at=occurred_at,
            tenant_id=tenant_id,
            user_id=user_id,
            correlation_id=correlation_id,
            payload={"sessions_revoked": sessions_revoked, "reason": reason},
        )
