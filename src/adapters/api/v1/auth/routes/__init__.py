from __future__ import annotations

"""Subpackage aggregating individual auth route modules."""

__all__ = [
    "login",
    "register",
    "refresh",
    "logout",
    "change_password",
    "reset_password",
    "verify_email",
]
