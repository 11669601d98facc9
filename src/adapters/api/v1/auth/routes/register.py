"""Registration endpoint. Creates an identity but does not log it in."""

from fastapi import APIRouter, status

from src.adapters.api.v1.auth.schemas import RegisterRequest, RegisterResponse, UserOut
from src.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

router = APIRouter()


@router.post(
    "",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={
        409: {"description": "Username or email already taken"},
        422: {"description": "Invalid payload or password policy violation"},
    },
)
async def register_user(payload: RegisterRequest, auth_service: AuthServiceDep):
    user = await auth_service.register(
        tenant_id=payload.tenant_id,
        username=payload.username,
        password=payload.password,
        email=str(payload.email) if payload.email else None,
        full_name=payload.full_name,
        phone=payload.phone,
    )
    return RegisterResponse(user=UserOut.from_entity(user), message="Registration successful")
