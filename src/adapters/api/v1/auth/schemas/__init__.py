from __future__ import annotations

"""Authentication API schemas package.

Request models, response models and small envelopes used by the auth
routes, re-exported so routes and tests can import them from one place.
"""

# flake8: noqa: F401 re-export

from .misc import MessageResponse
from .requests import (
    ChangePasswordRequest,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UsernameStr,
    VerifyEmailRequest,
)
from .responses.auth import LoginResponse, RegisterResponse
from .responses.token import TokenOut
from .responses.user import RoleOut, UserOut

__all__ = [
    "LoginRequest",
    "RegisterRequest",
    "RefreshTokenRequest",
    "ChangePasswordRequest",
    "ResetPasswordRequest",
    "VerifyEmailRequest",
    "UsernameStr",
    "UserOut",
    "RoleOut",
    "TokenOut",
    "LoginResponse",
    "RegisterResponse",
    "MessageResponse",
]
