from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

This module contains centralized handlers for the application's exceptions,
translating them into HTTP responses. Whole families of errors share one
wire response so that callers cannot tell the sub-cases apart:

* credential failures (wrong label, wrong password, inactive account) all
  answer ``401 Invalid credentials``;
* token and session failures (expired, malformed, tampered, wrong kind,
  revoked, unknown identity) all answer ``401 Invalid or expired token``.

Starlette resolves handlers along the exception's MRO, so the most specific
registered class wins.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from src.core.exceptions import (
    AccountInactiveError,
    AuthenticationError,
    DuplicateIdentityError,
    FeatureNotImplementedError,
    IdentityNotFoundError,
    InvalidCredentialsError,
    PersistenceError,
    SessionNotFoundError,
    TillgateError,
    ValidationError,
)

__all__ = [
    "INVALID_CREDENTIALS_DETAIL",
    "INVALID_TOKEN_DETAIL",
    "credentials_error_handler",
    "token_error_handler",
    "duplicate_identity_error_handler",
    "validation_error_handler",
    "persistence_error_handler",
    "not_implemented_error_handler",
    "tillgate_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)

INVALID_CREDENTIALS_DETAIL = "Invalid credentials"
INVALID_TOKEN_DETAIL = "Invalid or expired token"


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


async def credentials_error_handler(request: Request, exc: TillgateError) -> JSONResponse:
    """Handles credential failures, returning a generic `401 Unauthorized`.

    `InvalidCredentialsError` and `AccountInactiveError` are logged under
    their own codes but produce the same response body.
    """
    logger.warning(
        "Credential check failed",
        error=exc.code,
        client_ip=_client_ip(request),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": INVALID_CREDENTIALS_DETAIL},
    )


async def token_error_handler(request: Request, exc: TillgateError) -> JSONResponse:
    """Handles token, session and identity-resolution failures.

    Returns:
        A `401 Unauthorized` with a ``WWW-Authenticate: Bearer`` challenge.
    """
    logger.warning(
        "Bearer token rejected",
        error=exc.code,
        client_ip=_client_ip(request),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": INVALID_TOKEN_DETAIL},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def duplicate_identity_error_handler(
    request: Request, exc: DuplicateIdentityError
) -> JSONResponse:
    """Handles `DuplicateIdentityError`, returning a `409 Conflict`."""
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": exc.message},
    )


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handles `ValidationError` and `PasswordPolicyError`, returning a `422`."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.message},
    )


async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    """Handles `PersistenceError`, returning a `500` without storage details.

    The chained cause was already logged where the error was raised; only the
    failed operation is repeated here.
    """
    logger.error("Persistence failure", operation=exc.operation, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


async def not_implemented_error_handler(
    request: Request, exc: FeatureNotImplementedError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        content={"detail": exc.message},
    )


async def tillgate_error_handler(request: Request, exc: TillgateError) -> JSONResponse:
    """Catch-all for application errors without a dedicated handler."""
    logger.warning("Unhandled application error", error=exc.code, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all custom exception handlers with the FastAPI application.

    Args:
        app: The `FastAPI` application instance.
    """
    app.add_exception_handler(InvalidCredentialsError, credentials_error_handler)
    app.add_exception_handler(AccountInactiveError, credentials_error_handler)
    app.add_exception_handler(AuthenticationError, token_error_handler)
    app.add_exception_handler(IdentityNotFoundError, token_error_handler)
    app.add_exception_handler(SessionNotFoundError, token_error_handler)
    app.add_exception_handler(DuplicateIdentityError, duplicate_identity_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(PersistenceError, persistence_error_handler)
    app.add_exception_handler(FeatureNotImplementedError, not_implemented_error_handler)
    app.add_exception_handler(TillgateError, tillgate_error_handler)
