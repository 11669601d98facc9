from __future__ import annotations

"""Request-payload Pydantic models for authentication endpoints."""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, constr

# ---------------------------------------------------------------------------
# Shared / primitive types ---------------------------------------------------
# ---------------------------------------------------------------------------

UsernameStr = constr(min_length=3, max_length=100, pattern=r"^[A-Za-z0-9_.-]+$")

# ---------------------------------------------------------------------------
# Concrete request models ----------------------------------------------------
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Payload expected by ``POST /auth/login``.

    ``username`` accepts a username or an email address. ``tenant_id`` is
    optional; when sent it must be the identity's tenant.
    """

    username: str = Field(..., min_length=1, max_length=255, examples=["alice"])
    password: str = Field(..., min_length=1, examples=["Secret1234"])
    tenant_id: Optional[int] = Field(default=None, ge=1, examples=[1])


class RegisterRequest(BaseModel):
    """Payload expected by ``POST /auth/register``."""

    tenant_id: int = Field(..., ge=1, examples=[1])
    username: UsernameStr = Field(..., examples=["alice"])
    password: str = Field(..., examples=["Secret1234"])
    email: Optional[EmailStr] = Field(default=None, examples=["alice@example.com"])
    full_name: str = Field(default="", max_length=255, examples=["Alice Liddell"])
    phone: str = Field(default="", max_length=20)


class RefreshTokenRequest(BaseModel):
    """Payload expected by ``POST /auth/refresh``."""

    refresh_token: str = Field(..., min_length=1)


class ChangePasswordRequest(BaseModel):
    """Payload expected by ``POST /auth/change-password``."""

    old_password: str = Field(
        ..., min_length=1, examples=["Secret1234"], description="Current password for verification"
    )
    new_password: str = Field(
        ...,
        examples=["NewSecret5678"],
        description="New password that meets the password policy",
    )


class ResetPasswordRequest(BaseModel):
    """Payload expected by ``POST /auth/reset-password``."""

    identity_label: str = Field(
        ...,
        min_length=1,
        max_length=255,
        examples=["alice@example.com"],
        description="Username or email of the account to reset",
    )


class VerifyEmailRequest(BaseModel):
    """Payload expected by ``POST /auth/verify-email``."""

    token: str = Field(..., min_length=1)
