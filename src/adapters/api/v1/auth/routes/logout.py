"""Logout endpoint.

Logging out deletes every session of the caller ("log out everywhere"), so
all access tokens issued to the user stop validating at once.
"""

from fastapi import APIRouter, status
from structlog import get_logger

from src.adapters.api.v1.auth.schemas import MessageResponse
from src.core.dependencies.auth import CurrentUser
from src.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Logout current user",
    responses={401: {"description": "Invalid or expired token"}},
)
async def logout_user(current_user: CurrentUser, auth_service: AuthServiceDep) -> MessageResponse:
    removed = await auth_service.logout(current_user.id)
    logger.debug("Logout completed", user_id=current_user.id, sessions_revoked=removed)
    return MessageResponse(message="Logged out successfully")
