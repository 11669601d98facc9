from datetime import datetime, timezone  # For timestamp fields
from typing import List, Optional  # For optional fields

from sqlalchemy import JSON, DateTime  # For JSON permissions and explicit DateTime type
from sqlmodel import Column, Field, SQLModel, String  # For ORM and table definition


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Tenant(SQLModel, table=True):
    """Represents a retail tenant (a business using the POS).

    Tenants are read-only from the authentication subsystem's perspective. The
    active flag gates login for every identity owned by the tenant.

    Attributes:
        id: The unique identifier for the tenant.
        name: Display name of the business.
        business_type: Free-form business category.
        email: Contact email of the tenant.
        phone: Contact phone number.
        is_active: Inactive tenants cannot authenticate any of their users.
        trial_ends_at: End of the trial period, if the tenant is on a trial.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "tenants"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    business_type: str = Field(default="", max_length=100)
    email: str = Field(sa_column=Column(String(255), unique=True, nullable=False))
    phone: str = Field(default="", max_length=20)
    is_active: bool = Field(default=True, index=True)
    trial_ends_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    created_at: datetime = Field(
        default_factory=_utcnow, sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=_utcnow, sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class Role(SQLModel, table=True):
    """Represents a role that can be assigned to users.

    Permission strings are opaque: they are stored and returned to callers,
    never evaluated by the authentication subsystem.
    """

    __tablename__ = "roles"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(sa_column=Column(String(50), unique=True, nullable=False))
    display_name: str = Field(max_length=100)
    description: str = Field(default="")
    permissions: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    is_system: bool = Field(default=False)
    created_at: datetime = Field(
        default_factory=_utcnow, sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class User(SQLModel, table=True):
    """Represents a User identity and acts as an Aggregate Root.

    Usernames and emails are globally unique across tenants and are stored
    lower-cased so identity-label lookups are case-insensitive.

    Attributes:
        id: The unique identifier for the user (primary key).
        tenant_id: The owning tenant.
        role_id: The role assigned to the user.
        username: Unique login name.
        email: Unique email address, usable as an alternative login label.
        full_name: The user's display name.
        phone: Optional phone number.
        hashed_password: The bcrypt hash of the user's password.
        is_active: Inactive users cannot log in or use their tokens.
        last_login_at: Timestamp of the last successful login.
        email_verified_at: Timestamp of the email verification, if any.
        created_at: The timestamp of when the user account was created.
        updated_at: The timestamp of the last update to the user's record.
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    tenant_id: int = Field(foreign_key="tenants.id", index=True)
    role_id: int = Field(foreign_key="roles.id")
    username: str = Field(sa_column=Column(String(100), unique=True, index=True, nullable=False))
    email: Optional[str] = Field(
        default=None, sa_column=Column(String(255), unique=True, index=True, nullable=True)
    )
    full_name: str = Field(default="", max_length=255)
    phone: str = Field(default="", max_length=20)
    hashed_password: str = Field(max_length=255)
    is_active: bool = Field(default=True)
    last_login_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    email_verified_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    created_at: datetime = Field(
        default_factory=_utcnow, sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=_utcnow, sa_column=Column(DateTime(timezone=True), nullable=False)
    )

    @property
    def identity_label(self) -> str:
        """The label embedded in access tokens."""
        return self.username
