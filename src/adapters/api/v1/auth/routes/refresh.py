"""Token refresh endpoint."""

from fastapi import APIRouter, status

from src.adapters.api.v1.auth.schemas import RefreshTokenRequest, TokenOut
from src.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

router = APIRouter()


@router.post(
    "",
    response_model=TokenOut,
    status_code=status.HTTP_200_OK,
    summary="Exchange a refresh token for a new token pair",
    responses={401: {"description": "Invalid or expired token"}},
)
async def refresh_tokens(payload: RefreshTokenRequest, auth_service: AuthServiceDep):
    tokens = await auth_service.refresh_token(payload.refresh_token)
    return TokenOut(**tokens.model_dump())
