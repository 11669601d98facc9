from __future__ import annotations

"""Composite response Pydantic models for authentication endpoints."""

from pydantic import BaseModel

from src.adapters.api.v1.auth.schemas.responses.token import TokenOut
from src.adapters.api.v1.auth.schemas.responses.user import UserOut


class LoginResponse(TokenOut):
    """Response returned by the login endpoint: the token pair plus the user."""

    user: UserOut


class RegisterResponse(BaseModel):
    """Response returned by the register endpoint. No tokens are issued."""

    user: UserOut
    message: str
