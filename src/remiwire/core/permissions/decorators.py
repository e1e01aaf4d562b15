"""Permission decorators for route protection.

This module provides decorators that can be applied to FastAPI
routes to require specific capabilities. The decorated handler must
accept the request context as a keyword argument named ``ctx``.
"""

from collections.abc import Awaitable, Callable, Sequence
from functools import wraps
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar, cast

from remiwire.core.permissions.checker import (
    Capability,
    authorize_many,
    authorize_super_admin,
)
from remiwire.core.permissions.context import Principal, RequestContext


if TYPE_CHECKING:
    from fastapi import Request


P = ParamSpec("P")
R = TypeVar("R")


def _get_principal_and_endpoint(
    kwargs: dict[str, Any],
) -> tuple[Principal | None, str | None]:
    """Extract the principal and request path from handler kwargs.

    Args:
        kwargs: Function keyword arguments

    Returns:
        Tuple of (principal, endpoint)
    """
    ctx = cast("RequestContext | None", kwargs.get("ctx"))
    request = cast("Request | None", kwargs.get("request"))
    principal = ctx.principal if ctx else None
    endpoint = request.url.path if request else None
    return principal, endpoint


def _guard(
    capabilities: Sequence[Capability],
    require_all: bool,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            principal, endpoint = _get_principal_and_endpoint(kwargs)
            authorize_many(principal, capabilities, require_all, endpoint)
            return await func(*args, **kwargs)

        return wrapper

    return decorator


def require_capability(
    module: str, action: str
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires a single capability to access a route.

    Usage:
        @router.delete("/staff/{staff_id}")
        @require_capability("staff-management", "delete")
        async def delete_staff(staff_id: UUID, ctx: Context):
            ...

    Args:
        module: The business module (e.g., "staff-management")
        action: The action being performed (e.g., "delete")

    Raises:
        UnauthenticatedError: No authenticated principal
        AccountDisabledError: Principal is inactive or blocked
        InsufficientPermissionError: Principal lacks the capability
    """
    return _guard([(module, action)], require_all=True)


def require_any_capability(
    capabilities: Sequence[Capability],
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires any one of the given capabilities.

    Usage:
        @router.get("/reports")
        @require_any_capability([("reports", "read"), ("analytics", "read")])
        async def get_reports(ctx: Context):
            ...
    """
    return _guard(capabilities, require_all=False)


def require_all_capabilities(
    capabilities: Sequence[Capability],
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires every one of the given capabilities."""
    return _guard(capabilities, require_all=True)


def require_super_admin() -> Callable[
    [Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]
]:
    """Decorator that only lets the super admin through."""

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            principal, endpoint = _get_principal_and_endpoint(kwargs)
            authorize_super_admin(principal, endpoint)
            return await func(*args, **kwargs)

        return wrapper

    return decorator
