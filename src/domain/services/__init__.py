"""Domain Services for the Authentication Bounded Context.

All services use dependency injection through interfaces for loose coupling
and testability.

Authentication Domain Services:
- AuthService: login, registration, refresh, logout, password change, token validation
- PasswordService: credential hashing and verification
- TokenService: JWT access/refresh token lifecycle
- InMemorySessionStore: in-process session storage
"""

from .auth import AuthService, InMemorySessionStore, PasswordService, TokenService

__all__ = [
    "AuthService",
    "InMemorySessionStore",
    "PasswordService",
    "TokenService",
]
