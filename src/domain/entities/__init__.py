"""Export authentication-related domain entities for use across the application."""

from .session import Session, new_session_id
from .user import Role, Tenant, User

__all__ = ["User", "Role", "Tenant", "Session", "new_session_id"]
