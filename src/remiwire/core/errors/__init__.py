"""Error handling module with RFC 7807 Problem Details."""

from remiwire.core.errors.exceptions import (
    AccountDisabledError,
    AppException,
    BadRequestError,
    ConflictError,
    DuplicateCapabilityError,
    DuplicateRoleError,
    ForbiddenError,
    ForbiddenRoleAssignmentError,
    InsufficientPermissionError,
    InUseError,
    InvalidPermissionError,
    NotFoundError,
    ProtectedRoleError,
    UnauthenticatedError,
    UnauthorizedError,
    ValidationError,
)
from remiwire.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    "AccountDisabledError",
    # Exceptions
    "AppException",
    "BadRequestError",
    "ConflictError",
    "DuplicateCapabilityError",
    "DuplicateRoleError",
    # Handlers
    "FieldError",
    "ForbiddenError",
    "ForbiddenRoleAssignmentError",
    "InUseError",
    "InsufficientPermissionError",
    "InvalidPermissionError",
    "NotFoundError",
    "ProblemDetail",
    "ProtectedRoleError",
    "UnauthenticatedError",
    "UnauthorizedError",
    "ValidationError",
    "register_exception_handlers",
]
