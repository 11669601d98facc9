from __future__ import annotations

"""Re-export response models for authentication endpoints."""

# flake8: noqa: F401 re-export

from .auth import LoginResponse, RegisterResponse
from .token import TokenOut
from .user import RoleOut, UserOut

__all__ = [
    "UserOut",
    "RoleOut",
    "TokenOut",
    "LoginResponse",
    "RegisterResponse",
]
