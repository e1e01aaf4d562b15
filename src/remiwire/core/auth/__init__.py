"""Authentication: password hashing, access tokens and request context."""

from remiwire.core.auth.backend import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from remiwire.core.auth.dependencies import (
    Context,
    CurrentStaff,
    get_current_staff,
    get_request_context,
)
from remiwire.core.auth.middleware import RequestIdMiddleware
from remiwire.core.auth.routes import router as auth_router
from remiwire.core.auth.schemas import AccessToken, LoginRequest, TokenData
from remiwire.core.auth.service import AuthService


__all__ = [
    "AccessToken",
    "AuthService",
    "Context",
    "CurrentStaff",
    "LoginRequest",
    "RequestIdMiddleware",
    "TokenData",
    "auth_router",
    "create_access_token",
    "decode_token",
    "get_current_staff",
    "get_request_context",
    "hash_password",
    "verify_password",
]
