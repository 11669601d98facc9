"""Base class for domain events."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Optional


@dataclass(frozen=True)
class BaseDomainEvent:
    """Base class for all domain events.

    Every event serializes to the same flat envelope
    ``{type, tenant_id, user_id, payload, occurred_at}`` so the messaging
    collaborator does not need to know the concrete event classes.

    Attributes:
        occurred_at: When the event occurred
        tenant_id: Tenant of the user the event is about
        user_id: ID of the user associated with the event
        payload: Event-specific details; never contains secrets
        correlation_id: Optional correlation ID for tracking
    """

    event_type: ClassVar[str] = "domain.event"

    occurred_at: datetime
    tenant_id: int
    user_id: int
    payload: Dict[str, Any] = field(default_factory=dict)
    correlation_id: Optional[str] = None

    def __post_init__(self):
        """Ensure occurred_at is timezone-aware."""
        if not self.occurred_at.tzinfo:
            object.__setattr__(self, "occurred_at", self.occurred_at.replace(tzinfo=timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.event_type,
            "tenant_id": self.tenant_id,
            "user_id": self.user_id,
            "payload": dict(self.payload),
            "occurred_at": self.occurred_at.isoformat(),
        }
