"""Authentication service for staff login."""

from datetime import UTC, datetime
from typing import Annotated

import structlog
from fastapi import Depends

from remiwire.config import settings
from remiwire.core.auth.backend import create_access_token, verify_password_or_dummy
from remiwire.core.auth.schemas import AccessToken
from remiwire.core.errors import AccountDisabledError, UnauthorizedError
from remiwire.modules.staff.models import Staff
from remiwire.modules.staff.repos import StaffRepo


logger = structlog.get_logger()


def _invalid_credentials() -> UnauthorizedError:
    # Same body for unknown email and wrong password
    return UnauthorizedError(
        "Invalid email or password",
        error_code="invalid_credentials",
    )


class AuthService:
    """Service for authentication operations."""

    def __init__(self, repo: StaffRepo) -> None:
        self.repo = repo

    async def login(self, email: str, password: str) -> tuple[Staff, AccessToken]:
        """Authenticate a staff member with email and password.

        Args:
            email: Staff email address
            password: Plain text password

        Returns:
            Tuple of (staff, access_token)

        Raises:
            UnauthorizedError: If the email is unknown or the password is wrong
            AccountDisabledError: If the account is inactive or blocked
        """
        staff = await self.repo.get_by_email(email)
        password_ok = verify_password_or_dummy(
            password, staff.password_hash if staff else None
        )
        if staff is None or not password_ok:
            logger.info("login_failed")
            raise _invalid_credentials()

        if not staff.is_active or staff.is_blocked:
            logger.info("login_refused", staff_id=str(staff.id))
            raise AccountDisabledError()

        staff.last_login_at = datetime.now(UTC)
        staff = await self.repo.update(staff)

        token = AccessToken(
            access_token=create_access_token(staff.id, str(staff.tier)),
            expires_in=settings.access_token_expire_minutes * 60,
        )
        logger.info("login_succeeded", staff_id=str(staff.id))
        return staff, token


# Type alias for dependency injection
AuthSvc = Annotated[AuthService, Depends(AuthService)]
