"""Domain Value Objects for the authentication domain.

Value objects are immutable objects that describe domain concepts by their attributes
rather than their identity.
"""

from .tokens import (
    AccessTokenClaims,
    LoginCredentials,
    LoginResult,
    RefreshTokenClaims,
    TokenKind,
    TokenPair,
)

__all__ = [
    "AccessTokenClaims",
    "LoginCredentials",
    "LoginResult",
    "RefreshTokenClaims",
    "TokenKind",
    "TokenPair",
]
