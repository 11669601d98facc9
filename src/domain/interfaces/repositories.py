"""Repository interfaces for abstracting data persistence in the domain layer.

This module defines the abstract base classes (interfaces) for the stores the
authentication domain depends on. They act as "ports" in the context of
Hexagonal Architecture: the domain talks to these interfaces, and the concrete
adapters (a SQL-backed user directory, an in-process session store) live in
other layers and are injected at wiring time.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from src.domain.entities.session import Session
from src.domain.entities.user import Role, Tenant, User


class IUserDirectory(ABC):
    """An interface defining the contract for identity persistence.

    The directory owns users and exposes roles and tenants read-only.
    Identity labels (usernames and emails) are unique across all tenants and
    compared case-insensitively.
    """

    @abstractmethod
    async def find_by_identity_label(self, label: str) -> Optional[User]:
        """Retrieves a user by username, falling back to email.

        Args:
            label: A username or an email address.

        Returns:
            An optional `User` entity. Returns `None` if no user is found.
        """
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, user_id: int) -> Optional[User]:
        """Retrieves a user by their unique identifier."""
        raise NotImplementedError

    @abstractmethod
    async def create(self, user: User) -> User:
        """Persists a new user and returns it with its id assigned.

        Raises:
            DuplicateIdentityError: If the username or email is already taken.
        """
        raise NotImplementedError

    @abstractmethod
    async def update(self, user: User) -> User:
        """Persists changes to an existing user."""
        raise NotImplementedError

    @abstractmethod
    async def get_role(self, role_id: int) -> Optional[Role]:
        raise NotImplementedError

    @abstractmethod
    async def get_tenant(self, tenant_id: int) -> Optional[Tenant]:
        raise NotImplementedError


class ISessionStore(ABC):
    """An interface defining the contract for session storage.

    Implementations must be safe under concurrent use: several requests may
    create and delete sessions for the same or different users at once.
    """

    @abstractmethod
    async def create(self, session: Session) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Deletes a session. Unknown ids are ignored."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, session_id: str) -> Session:
        """Retrieves a session.

        Raises:
            SessionNotFoundError: If no session has this id.
        """
        raise NotImplementedError

    @abstractmethod
    async def find_by_user_id(self, user_id: int) -> List[Session]:
        raise NotImplementedError

    @abstractmethod
    async def delete_by_user_id(self, user_id: int) -> int:
        """Deletes every session of a user ("log out everywhere").

        No session created before the call survives it. A session created
        concurrently with the call may or may not survive.

        Returns:
            The number of sessions deleted.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete_expired(self) -> int:
        """Removes sessions whose expiry has passed. Returns how many were removed."""
        raise NotImplementedError
