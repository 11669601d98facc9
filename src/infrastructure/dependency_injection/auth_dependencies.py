"""Dependencies for Authentication.

This module provides the FastAPI dependency factories that assemble
`AuthService` for a request. Process-wide services (session store, token
service, password service, event publisher, database) are created once in
the application lifespan and read from ``app.state``; the user directory is
bound to a per-request database session.

Every factory can be replaced through ``app.dependency_overrides``, which is
how the API tests swap in fakes.
"""

from typing import Annotated, AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config.settings import settings
from src.domain.interfaces import (
    IEventPublisher,
    IPasswordService,
    ISessionStore,
    ITokenService,
    IUserDirectory,
)
from src.domain.services.auth.auth_service import AuthService
from src.infrastructure.database.async_db import Database
from src.infrastructure.repositories.user_directory import SqlUserDirectory

# ---------------------------------------------------------------------------
# Infrastructure Layer Dependencies
# ---------------------------------------------------------------------------


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db_session(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncIterator[AsyncSession]:
    """Yield a database session that lives for the duration of the request."""
    async with database.session() as session:
        yield session


def get_session_store(request: Request) -> ISessionStore:
    return request.app.state.session_store


def get_token_service(request: Request) -> ITokenService:
    return request.app.state.token_service


def get_password_service(request: Request) -> IPasswordService:
    return request.app.state.password_service


def get_event_publisher(request: Request) -> IEventPublisher:
    return request.app.state.event_publisher


def get_user_directory(
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> IUserDirectory:
    """Factory that returns the SQL user directory bound to the request's session."""
    return SqlUserDirectory(db)


# ---------------------------------------------------------------------------
# Domain Service Dependencies
# ---------------------------------------------------------------------------


def get_auth_service(
    request: Request,
    user_directory: Annotated[IUserDirectory, Depends(get_user_directory)],
    session_store: Annotated[ISessionStore, Depends(get_session_store)],
    token_service: Annotated[ITokenService, Depends(get_token_service)],
    password_service: Annotated[IPasswordService, Depends(get_password_service)],
    event_publisher: Annotated[IEventPublisher, Depends(get_event_publisher)],
) -> AuthService:
    """Factory that assembles `AuthService` from its injected collaborators."""
    config = getattr(request.app.state, "settings", settings)
    return AuthService(
        user_directory=user_directory,
        session_store=session_store,
        token_service=token_service,
        password_service=password_service,
        event_publisher=event_publisher,
        default_role_id=config.DEFAULT_ROLE_ID,
    )


# ---------------------------------------------------------------------------
# Type aliases for dependency injection
# ---------------------------------------------------------------------------

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
