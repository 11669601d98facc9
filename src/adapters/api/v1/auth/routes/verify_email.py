"""Email verification endpoint. Answers 501 until verification is available."""

from fastapi import APIRouter, status

from src.adapters.api.v1.auth.schemas import MessageResponse, VerifyEmailRequest
from src.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Verify an email address",
    responses={501: {"description": "Email verification is not implemented"}},
)
async def verify_email(payload: VerifyEmailRequest, auth_service: AuthServiceDep):
    await auth_service.verify_email(payload.token)
    return MessageResponse(message="Email verified")
