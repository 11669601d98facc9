"""Domain Events.

All events are immutable and represent significant business occurrences that
other parts of the system may need to react to.

Domain Events:
- Authentication Events: User registration, login, logout
- Password Reset Events: Password reset requests
"""

from .authentication_events import (
    UserLoggedInEvent,
    UserLoggedOutEvent,
    UserRegisteredEvent,
)
from .base import BaseDomainEvent
from .password_reset_events import PasswordResetRequestedEvent

__all__ = [
    "BaseDomainEvent",
    "UserLoggedInEvent",
    "UserLoggedOutEvent",
    "UserRegisteredEvent",
    "PasswordResetRequestedEvent",
]
