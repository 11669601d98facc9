"""Domain Interfaces for dependency inversion.

These interfaces define contracts that infrastructure and application
layers must implement, keeping the authentication domain independent of
storage, hashing and messaging technology.
"""

from .repositories import ISessionStore, IUserDirectory
from .services import IEventPublisher, IPasswordService, ITokenService

__all__ = [
    "IUserDirectory",
    "ISessionStore",
    "IPasswordService",
    "ITokenService",
    "IEventPublisher",
]
