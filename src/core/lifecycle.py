"""Application lifecycle management.

This module handles application startup and shutdown, ensuring that the
database handle, the session store and the long-lived services are created
once, attached to ``app.state``, and released again on shutdown.
"""

import asyncio
import contextlib
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.core.config.settings import Settings, settings
from src.core.logging import logger
from src.domain.services.auth.password import PasswordService
from src.domain.services.auth.session import InMemorySessionStore, sweep_expired_sessions
from src.domain.services.auth.token import TokenService
from src.infrastructure.database.async_db import Database
from src.infrastructure.services.event_publisher import InMemoryEventPublisher


def create_database(config: Settings = settings) -> Database:
    """Build the `Database` handle described by ``config``."""
    engine_kwargs = {"pool_pre_ping": config.DATABASE_POOL_PRE_PING}
    if config.DATABASE_URL.startswith("postgresql"):
        engine_kwargs.update(
            pool_size=config.DATABASE_POOL_SIZE,
            max_overflow=config.DATABASE_MAX_OVERFLOW,
        )
    return Database(config.DATABASE_URL, echo=config.DATABASE_ECHO, **engine_kwargs)


def install_services(app: FastAPI, database: Database, config: Settings = settings) -> None:
    """Attach the process-wide services to ``app.state``.

    Request-scoped objects (the user directory and the `AuthService`) are
    assembled per request from these in
    `src.infrastructure.dependency_injection.auth_dependencies`.
    """
    app.state.settings = config
    app.state.database = database
    app.state.session_store = InMemorySessionStore(stripes=config.SESSION_STORE_STRIPES)
    app.state.token_service = TokenService(
        secret=config.JWT_SECRET.get_secret_value(),
        access_token_expire_hours=config.ACCESS_TOKEN_EXPIRE_HOURS,
        refresh_token_expire_days=config.REFRESH_TOKEN_EXPIRE_DAYS,
        algorithm=config.JWT_ALGORITHM,
    )
    app.state.password_service = PasswordService(rounds=config.BCRYPT_ROUNDS)
    app.state.event_publisher = InMemoryEventPublisher()


def create_lifespan_manager(config: Settings = settings):
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager that handles startup and shutdown events.

        Startup opens the database, creates the tables, installs the services
        and starts the periodic expired-session sweep. Shutdown stops the
        sweep and disposes of the engine.

        Raises:
            RuntimeError: If database is unavailable during startup
        """
        database = create_database(config)
        if not await database.check_health():
            logger.error("database_unavailable_on_startup")
            await database.dispose()
            raise RuntimeError("Database unavailable")
        await database.create_tables()
        install_services(app, database, config)

        sweeper = asyncio.create_task(
            sweep_expired_sessions(app.state.session_store, config.SESSION_SWEEP_INTERVAL_SECONDS)
        )
        logger.info("application_startup", env=config.APP_ENV, version=config.VERSION)

        try:
            yield
        finally:
            sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper
            await database.dispose()
            logger.info("application_shutdown", env=config.APP_ENV)

    return lifespan
