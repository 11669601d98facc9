"""Login endpoint.

The route only translates HTTP into an `AuthService.login` call and the
result back into a response model. Every failure is a domain exception
mapped to a response by the global handlers, so unknown users, wrong
passwords and inactive accounts all look the same on the wire.
"""

import structlog
from fastapi import APIRouter, Request, status
from pydantic import ValidationError as PydanticValidationError

from src.adapters.api.v1.auth.schemas import LoginRequest, LoginResponse, UserOut
from src.core.exceptions import InvalidCredentialsError
from src.core.logging import mask_label
from src.domain.value_objects.tokens import LoginCredentials
from src.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Authenticate a user",
    description=(
        "Authenticates a user by username or email and password and opens a new "
        "session. Returns an access/refresh token pair and the user's profile."
    ),
    responses={401: {"description": "Invalid credentials"}},
)
async def login_user(request: Request, payload: LoginRequest, auth_service: AuthServiceDep):
    request_logger = logger.bind(
        endpoint="login",
        identity=mask_label(payload.username),
        client_ip=request.client.host if request.client else None,
    )
    request_logger.debug("Login attempt initiated")

    try:
        credentials = LoginCredentials(
            identity_label=payload.username,
            password=payload.password,
            tenant_id=payload.tenant_id,
        )
    except PydanticValidationError:
        raise InvalidCredentialsError() from None

    result = await auth_service.login(credentials)

    return LoginResponse(
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
        token_type=result.tokens.token_type,
        expires_in=result.tokens.expires_in,
        user=UserOut.from_entity(result.user, result.role),
    )
