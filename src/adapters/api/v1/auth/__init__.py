from __future__ import annotations

"""Authentication router package: bundles the login/session endpoints."""

from fastapi import APIRouter

from .routes import change_password as change_password_route
from .routes import login as login_route
from .routes import logout as logout_route
from .routes import refresh as refresh_route
from .routes import register as register_route
from .routes import reset_password as reset_password_route
from .routes import verify_email as verify_email_route

router = APIRouter(prefix="/auth", tags=["auth"])

# Delegate to sub-routers ----------------------------------------------------

router.include_router(login_route.router, prefix="/login")
router.include_router(register_route.router, prefix="/register")
router.include_router(refresh_route.router, prefix="/refresh")
router.include_router(logout_route.router, prefix="/logout")
router.include_router(change_password_route.router, prefix="/change-password")
router.include_router(reset_password_route.router, prefix="/reset-password")
router.include_router(verify_email_route.router, prefix="/verify-email")

__all__ = ["router"]
