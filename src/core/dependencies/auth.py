from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.core.exceptions import TokenMalformedError
from src.domain.entities.user import User
from src.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

__all__ = [
    "get_bearer_token",
    "get_current_user",
    "CurrentUser",
]


# ---------------------------------------------------------------------------
# Type-annotated dependency shortcuts
# ---------------------------------------------------------------------------

_bearer_scheme = HTTPBearer(auto_error=False)

BearerCredentials = Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)]


# ---------------------------------------------------------------------------
# Public dependencies
# ---------------------------------------------------------------------------


def get_bearer_token(credentials: BearerCredentials) -> str:
    """Extract the raw bearer token from the ``Authorization`` header.

    A missing or non-Bearer header is reported like any other unusable token,
    so it is answered by the generic "invalid or expired" 401.
    """
    if credentials is None or not credentials.credentials:
        raise TokenMalformedError("Missing bearer token")
    return credentials.credentials


async def get_current_user(
    token: Annotated[str, Depends(get_bearer_token)], auth_service: AuthServiceDep
) -> User:
    """Return the authenticated :class:`~src.domain.entities.user.User`.

    This is the gate other modules put in front of their routes. It performs
    **no** permission checks; role permission strings are returned to the
    caller, never evaluated here.
    """
    return await auth_service.validate_token(token)


CurrentUser = Annotated[User, Depends(get_current_user)]
