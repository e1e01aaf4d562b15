"""Authentication schemas for login and token handling."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from remiwire.core.constants import MAX_PASSWORD_LENGTH


class TokenData(BaseModel):
    """Data extracted from a JWT token.

    Attributes:
        staff_id: The staff member's UUID
        tier: The staff tier at the time the token was issued
        exp: Token expiration time
        type: Token type (always "access")
        jti: Unique token id
    """

    staff_id: UUID
    tier: str
    exp: datetime
    type: str = "access"
    jti: str | None = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_LENGTH)


class AccessToken(BaseModel):
    """Access token returned by a successful login.

    Attributes:
        access_token: Short-lived JWT for API access
        token_type: Always "bearer"
        expires_in: Access token expiration in seconds
    """

    access_token: str
    token_type: str = "bearer"
    expires_in: int
