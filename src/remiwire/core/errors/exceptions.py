"""Domain exceptions for the application.

These exceptions represent business-logic errors and are automatically
converted to RFC 7807 Problem Details responses by the exception handlers.

The access-control kinds (duplicate capability, protected role, insufficient
permission, ...) subclass the generic HTTP-shaped errors.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    All domain exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when a requested resource is not found.

    Example:
        raise NotFoundError("Role not found", resource="role", resource_id=str(role_id))
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class ConflictError(AppException):
    """Raised when there's a conflict with existing data.

    Example:
        raise ConflictError("Email already registered", details={"field": "email"})
    """

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class ValidationError(AppException):
    """Raised when request data fails validation.

    Example:
        raise ValidationError(
            "Invalid input data",
            errors=[{"field": "email", "message": "Invalid email format"}]
        )
    """

    message = "Validation error"
    error_code = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details, **kwargs)


class UnauthorizedError(AppException):
    """Raised when authentication is required but not provided or invalid."""

    message = "Authentication required"
    error_code = "unauthorized"
    status_code = 401


class ForbiddenError(AppException):
    """Raised when the caller lacks permission to access a resource."""

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403


class BadRequestError(AppException):
    """Raised for general client errors."""

    message = "Bad request"
    error_code = "bad_request"
    status_code = 400


# ============================================================
# Access-control kinds
# ============================================================


class DuplicateCapabilityError(ConflictError):
    """A permission with the same name or (module, action) already exists."""

    message = "Permission already exists"
    error_code = "duplicate_capability"

    def __init__(self, message: str | None = None, field: str = "name", **kwargs: Any) -> None:
        details = kwargs.pop("details", {})
        details["field"] = field
        super().__init__(message=message, details=details, **kwargs)


class DuplicateRoleError(ConflictError):
    """A role with the same name already exists."""

    message = "Role already exists"
    error_code = "duplicate_role"

    def __init__(self, message: str | None = None, **kwargs: Any) -> None:
        details = kwargs.pop("details", {})
        details["field"] = "name"
        super().__init__(message=message, details=details, **kwargs)


class InvalidPermissionError(ValidationError):
    """One or more permission ids do not resolve to an active permission."""

    message = "Some permissions are invalid or inactive"
    error_code = "invalid_permission"

    def __init__(
        self,
        message: str | None = None,
        invalid_ids: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        details["field"] = "permission_ids"
        if invalid_ids:
            details["invalid_ids"] = invalid_ids
        super().__init__(message=message, details=details, **kwargs)


class InUseError(ConflictError):
    """The resource is still referenced and cannot be deleted."""

    message = "Resource is still in use"
    error_code = "in_use"


class ProtectedRoleError(ForbiddenError):
    """A system role was targeted by a caller without top-tier privilege."""

    message = "System roles cannot be modified"
    error_code = "protected_role"


class ForbiddenRoleAssignmentError(ForbiddenError):
    """The top-tier role may only be granted by the bootstrap seed."""

    message = "The super-admin role cannot be assigned"
    error_code = "forbidden_role_assignment"


class UnauthenticatedError(UnauthorizedError):
    """No principal could be resolved for the request."""

    message = "Authentication required"
    error_code = "unauthenticated"


class AccountDisabledError(ForbiddenError):
    """The principal is deactivated or blocked."""

    message = "Account is disabled"
    error_code = "account_disabled"


class InsufficientPermissionError(ForbiddenError):
    """The principal lacks the required capability."""

    message = "Insufficient permissions"
    error_code = "insufficient_permission"
