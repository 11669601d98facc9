"""SQL-backed user directory.

Implements `IUserDirectory` on top of an async SQLAlchemy session. Users are
read and written; roles and tenants are only read. Identity labels are
stored lower-cased, and lookups normalize their input the same way, so
matching is case-insensitive without functional indexes.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from structlog import get_logger

from src.core.exceptions import DuplicateIdentityError
from src.core.logging import mask_label
from src.domain.entities.user import Role, Tenant, User
from src.domain.interfaces.repositories import IUserDirectory

logger = get_logger(__name__)


def _normalize(label: str) -> str:
    return (label or "").strip().lower()


class SqlUserDirectory(IUserDirectory):
    """SQLAlchemy implementation of `IUserDirectory`.

    Every write commits immediately; a failed write is rolled back before
    the error propagates so the session stays usable.

    Args:
        db_session: SQLAlchemy async session for database operations.
    """

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def find_by_identity_label(self, label: str) -> Optional[User]:
        label = _normalize(label)
        if not label:
            return None

        result = await self.db_session.execute(select(User).where(User.username == label))
        user = result.scalars().first()
        if user is None and "@" in label:
            result = await self.db_session.execute(select(User).where(User.email == label))
            user = result.scalars().first()

        logger.debug(
            "User lookup by identity label completed",
            identity=mask_label(label),
            found=user is not None,
        )
        return user

    async def find_by_id(self, user_id: int) -> Optional[User]:
        if user_id <= 0:
            return None
        return await self.db_session.get(User, user_id)

    async def create(self, user: User) -> User:
        user.username = _normalize(user.username)
        if user.email:
            user.email = _normalize(user.email)
        self.db_session.add(user)
        try:
            await self.db_session.commit()
        except IntegrityError as e:
            await self.db_session.rollback()
            logger.info(
                "Duplicate identity rejected",
                identity=mask_label(user.username),
                tenant_id=user.tenant_id,
            )
            raise DuplicateIdentityError() from e
        await self.db_session.refresh(user)
        logger.info("User created", user_id=user.id, tenant_id=user.tenant_id)
        return user

    async def update(self, user: User) -> User:
        if user.id is None:
            raise ValueError("Cannot update a user that has not been created")
        merged = await self.db_session.merge(user)
        try:
            await self.db_session.commit()
        except Exception:
            await self.db_session.rollback()
            logger.error("Error updating user", user_id=user.id)
            raise
        await self.db_session.refresh(merged)
        logger.debug("User updated", user_id=merged.id)
        return merged

    async def get_role(self, role_id: int) -> Optional[Role]:
        return await self.db_session.get(Role, role_id)

    async def get_tenant(self, tenant_id: int) -> Optional[Tenant]:
        return await self.db_session.get(Tenant, tenant_id)
