from __future__ import annotations

"""Response Pydantic models for user and role data."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.domain.entities.user import Role, User


class RoleOut(BaseModel):
    """Serialised representation of :class:`~src.domain.entities.user.Role`."""

    id: int
    name: str
    display_name: str
    permissions: List[str] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, role: Role) -> "RoleOut":
        return cls(
            id=role.id,
            name=role.name,
            display_name=role.display_name,
            permissions=list(role.permissions or []),
        )


class UserOut(BaseModel):
    """Serialised representation of :class:`~src.domain.entities.user.User`."""

    id: int
    tenant_id: int
    username: str
    email: Optional[str] = None
    full_name: str = ""
    phone: str = ""
    is_active: bool = True
    last_login_at: Optional[datetime] = None
    role_id: int
    role: Optional[RoleOut] = None

    @classmethod
    def from_entity(cls, user: User, role: Optional[Role] = None) -> "UserOut":
        return cls(
            id=user.id,
            tenant_id=user.tenant_id,
            username=user.username,
            email=user.email,
            full_name=user.full_name or "",
            phone=user.phone or "",
            is_active=user.is_active,
            last_login_at=user.last_login_at,
            role_id=user.role_id,
            role=RoleOut.from_entity(role) if role is not None else None,
        )
