"""Service interfaces for the authentication domain.

These interfaces let `AuthService` depend on abstractions for hashing, token
handling and event publication, so each can be replaced or mocked
independently.
"""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import List, Optional

from src.domain.entities.user import User
from src.domain.events.base import BaseDomainEvent
from src.domain.value_objects.tokens import AccessTokenClaims, RefreshTokenClaims


class IPasswordService(ABC):
    """Interface for one-way hashing and verification of credentials."""

    @abstractmethod
    def hash(self, plaintext: str) -> str:
        """Hashes a plaintext with a random salt.

        Two calls with the same input return different hashes.
        """
        raise NotImplementedError

    @abstractmethod
    def verify(self, hashed: str, plaintext: str) -> None:
        """Checks a plaintext against a stored hash.

        Raises:
            PasswordMismatchError: If the plaintext does not match.
        """
        raise NotImplementedError

    @abstractmethod
    def dummy_verify(self, plaintext: str) -> None:
        """Performs a verification of equal cost whose outcome is discarded."""
        raise NotImplementedError


class ITokenService(ABC):
    """Interface for issuing and validating signed bearer tokens."""

    access_token_lifetime: timedelta
    refresh_token_lifetime: timedelta

    @property
    @abstractmethod
    def access_token_ttl_seconds(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def generate_access_token(self, user: User, session_id: Optional[str] = None) -> str:
        raise NotImplementedError

    @abstractmethod
    def generate_refresh_token(self, user: User, session_id: Optional[str] = None) -> str:
        raise NotImplementedError

    @abstractmethod
    def validate_access_token(self, token: str) -> AccessTokenClaims:
        """Validates an access token.

        Raises:
            TokenError: One of its subclasses, naming the failure.
        """
        raise NotImplementedError

    @abstractmethod
    def validate_refresh_token(self, token: str) -> RefreshTokenClaims:
        raise NotImplementedError


class IEventPublisher(ABC):
    """Interface for publishing domain events."""

    @abstractmethod
    async def publish(self, event: BaseDomainEvent) -> None:
        """Publishes a single domain event.

        Args:
            event: Domain event to publish
        """
        raise NotImplementedError

    @abstractmethod
    async def publish_many(self, events: List[BaseDomainEvent]) -> None:
        """Publishes several domain events in order."""
        raise NotImplementedError
