"""Authentication API routes."""

from fastapi import APIRouter

from remiwire.core.auth.schemas import AccessToken, LoginRequest
from remiwire.core.auth.service import AuthSvc


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=AccessToken,
    summary="Login with email and password",
    description="Authenticate a staff member and receive a short-lived access token.",
)
async def login(
    data: LoginRequest,
    service: AuthSvc,
) -> AccessToken:
    _staff, token = await service.login(email=data.email, password=data.password)
    return token
