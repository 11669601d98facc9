from .auth_service import AuthService
from .password import MIN_PASSWORD_LENGTH, PasswordService, check_password_policy
from .session import InMemorySessionStore, sweep_expired_sessions
from .token import TokenService

__all__ = [
    "AuthService",
    "PasswordService",
    "TokenService",
    "InMemorySessionStore",
    "MIN_PASSWORD_LENGTH",
    "check_password_policy",
    "sweep_expired_sessions",
]
