"""Password reset request endpoint.

The response is identical whether or not the identity exists, so the
endpoint cannot be used to discover accounts.
"""

from fastapi import APIRouter, status

from src.adapters.api.v1.auth.schemas import MessageResponse, ResetPasswordRequest
from src.core.exceptions import IdentityNotFoundError
from src.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

router = APIRouter()

RESET_ACKNOWLEDGEMENT = "If the account exists, password reset instructions will be sent."


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Request a password reset",
)
async def reset_password(
    payload: ResetPasswordRequest, auth_service: AuthServiceDep
) -> MessageResponse:
    try:
        await auth_service.reset_password(payload.identity_label)
    except IdentityNotFoundError:
        pass
    return MessageResponse(message=RESET_ACKNOWLEDGEMENT)
