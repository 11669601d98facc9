"""Password Reset Domain Events.

The reset token itself is produced and delivered by the notification
collaborator that consumes these events, so no secret ever appears here.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .base import BaseDomainEvent


@dataclass(frozen=True)
class PasswordResetRequestedEvent(BaseDomainEvent):
    """Event emitted when a password reset is requested.

    This event is useful for:
    - Audit logging
    - Security monitoring
    - Triggering reset-link delivery
    """

    event_type = "password.reset_requested"

    @classmethod
    def create(
        cls,
        *,
        occurred_at: datetime,
        tenant_id: int,
        user_id: int,
        username: str,
        email: Optional[str],
        correlation_id: Optional[str] = None,
    ) -> "PasswordResetRequestedEvent":
        return cls(
            occurred_at=occurred_at,
            tenant_id=tenant_id,
            user_id=user_id,
            correlation_id=correlation_id,
            payload={"username": username, "email": email},
        )
