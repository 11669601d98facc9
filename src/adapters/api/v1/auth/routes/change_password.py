"""Password change endpoint. Changing the password revokes every session."""

from fastapi import APIRouter, status

from src.adapters.api.v1.auth.schemas import ChangePasswordRequest, MessageResponse
from src.core.dependencies.auth import CurrentUser
from src.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Change the current user's password",
    responses={
        401: {"description": "Invalid token or wrong current password"},
        422: {"description": "New password violates the password policy"},
    },
)
async def change_password(
    payload: ChangePasswordRequest, current_user: CurrentUser, auth_service: AuthServiceDep
) -> MessageResponse:
    await auth_service.change_password(
        user_id=current_user.id,
        old_password=payload.old_password,
        new_password=payload.new_password,
    )
    return MessageResponse(message="Password changed successfully. Please log in again.")
