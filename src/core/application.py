"""Application factory for creating and configuring the FastAPI application.

This module provides a factory function to create a properly configured FastAPI application
with all necessary middleware, exception handlers, and routers registered.
"""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from src.adapters.api.v1 import api_router
from src.core.config.settings import Settings, settings
from src.core.handlers import register_exception_handlers
from src.core.lifecycle import create_lifespan_manager
from src.core.middleware import configure_middleware


def create_application(config: Settings = settings) -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance
    """
    app = FastAPI(
        title=config.PROJECT_NAME,
        version=config.VERSION,
        description="Authentication and session identity for the point-of-sale backend.",
        docs_url="/docs" if config.DEBUG else None,
        redoc_url=None,
        openapi_url="/openapi.json" if config.DEBUG else None,
        lifespan=create_lifespan_manager(config),
        default_response_class=JSONResponse,
    )

    configure_middleware(app)

    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api/v1")

    return app
