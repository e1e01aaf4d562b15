"""FastAPI dependencies for authentication.

This module resolves the bearer token of a request into a
``RequestContext``. Resolution never raises: a missing, invalid or
expired token, or a token for a staff id that no longer exists, yields a
context without a principal, and the route guards turn that into a 401.
"""

from typing import Annotated

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from remiwire.api.dependencies import DBSession
from remiwire.core.auth.backend import decode_token
from remiwire.core.errors import AccountDisabledError, UnauthenticatedError
from remiwire.core.permissions.context import (
    RequestContext,
    principal_from_staff,
)
from remiwire.modules.staff.models import Staff
from remiwire.modules.staff.repos import StaffRepository


logger = structlog.get_logger()

# HTTP Bearer token security scheme
bearer_scheme = HTTPBearer(auto_error=False)


async def _load_staff(
    credentials: HTTPAuthorizationCredentials | None,
    db: DBSession,
) -> Staff | None:
    if not credentials:
        return None

    token_data = decode_token(credentials.credentials)
    if not token_data or token_data.type != "access":
        return None

    repo = StaffRepository(db)
    return await repo.get_by_id(token_data.staff_id)


async def get_request_context(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: DBSession,
) -> RequestContext:
    """Build the request context from the Authorization header.

    Args:
        request: The incoming request
        credentials: Bearer token credentials, if any
        db: Database session

    Returns:
        The request context; ``principal`` is None when unauthenticated
    """
    request_id = getattr(request.state, "request_id", None)
    staff = await _load_staff(credentials, db)
    if staff is None:
        return RequestContext(principal=None, request_id=request_id)

    structlog.contextvars.bind_contextvars(staff_id=str(staff.id))
    return RequestContext(principal=principal_from_staff(staff), request_id=request_id)


async def get_current_staff(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: DBSession,
) -> Staff:
    """Get the authenticated staff row for self-service endpoints.

    Raises:
        UnauthenticatedError: If no valid token was presented
        AccountDisabledError: If the account is inactive or blocked
    """
    staff = await _load_staff(credentials, db)
    if staff is None:
        raise UnauthenticatedError()
    if not staff.is_active or staff.is_blocked:
        raise AccountDisabledError()
    return staff


# Type aliases for cleaner dependency injection
Context = Annotated[RequestContext, Depends(get_request_context)]
CurrentStaff = Annotated[Staff, Depends(get_current_staff)]
