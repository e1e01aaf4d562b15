"""Authorization decision logic.

The decision is a pure function of the request principal and the required
capability; no database access happens here because the principal already
carries its permission snapshot.

Order of checks:
    1. No principal                  -> UnauthenticatedError (401)
    2. Inactive or blocked principal -> AccountDisabledError (403)
    3. Super admin                   -> allowed, logged as super_admin_bypass
    4. Capability in the snapshot    -> allowed, else InsufficientPermissionError
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

import structlog

from remiwire.core.errors import (
    AccountDisabledError,
    AppException,
    InsufficientPermissionError,
    UnauthenticatedError,
)
from remiwire.core.permissions.context import Principal, SuperAdminPrincipal


logger = structlog.get_logger()

# Either a permission name ("orders-read") or a (module, action) pair
Capability = str | tuple[str, str]


class DecisionReason(StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    ACCOUNT_DISABLED = "account_disabled"
    SUPER_ADMIN = "super_admin"
    GRANTED = "granted"
    INSUFFICIENT_PERMISSION = "insufficient_permission"


@dataclass(frozen=True, slots=True)
class AccessDecision:
    allowed: bool
    reason: DecisionReason
    required: tuple[str, ...] = ()


def capability_key(capability: Capability) -> str:
    """Render a capability the way it appears in a principal's snapshot."""
    if isinstance(capability, tuple):
        module, action = capability
        return f"{module}:{action}"
    return capability


def _holds(principal: Principal, capability: Capability) -> bool:
    if isinstance(principal, SuperAdminPrincipal):
        return True
    return capability_key(capability) in principal.capabilities


def evaluate_many(
    principal: Principal | None,
    capabilities: Iterable[Capability],
    require_all: bool = True,
    endpoint: str | None = None,
) -> AccessDecision:
    """Evaluate a set of capabilities for a principal.

    Args:
        principal: The request principal, or None when unauthenticated
        capabilities: Capabilities to check
        require_all: If True every capability is needed; if False any one
        endpoint: Optional request path for the audit log

    Returns:
        The access decision
    """
    required = tuple(capability_key(c) for c in capabilities)

    if principal is None:
        return AccessDecision(False, DecisionReason.UNAUTHENTICATED, required)

    if not principal.is_active or principal.is_blocked:
        return AccessDecision(False, DecisionReason.ACCOUNT_DISABLED, required)

    if isinstance(principal, SuperAdminPrincipal):
        logger.info(
            "super_admin_bypass",
            staff_id=str(principal.id),
            permissions=list(required),
            endpoint=endpoint or "unknown",
        )
        return AccessDecision(True, DecisionReason.SUPER_ADMIN, required)

    check = all if require_all else any
    if check(_holds(principal, c) for c in required):
        return AccessDecision(True, DecisionReason.GRANTED, required)

    return AccessDecision(False, DecisionReason.INSUFFICIENT_PERMISSION, required)


def evaluate(
    principal: Principal | None,
    capability: Capability,
    endpoint: str | None = None,
) -> AccessDecision:
    """Evaluate a single capability for a principal."""
    return evaluate_many(principal, [capability], endpoint=endpoint)


def has_capability(principal: Principal | None, capability: Capability) -> bool:
    return evaluate(principal, capability).allowed


def _error_for(decision: AccessDecision, require_all: bool) -> AppException:
    if decision.reason == DecisionReason.UNAUTHENTICATED:
        return UnauthenticatedError()
    if decision.reason == DecisionReason.ACCOUNT_DISABLED:
        return AccountDisabledError()

    required = list(decision.required)
    if require_all or len(required) == 1:
        message = f"Missing required permissions: {', '.join(required)}"
    else:
        message = f"Missing required permission. Need one of: {', '.join(required)}"
    return InsufficientPermissionError(
        message,
        details={"required_permissions": required},
    )


def authorize_many(
    principal: Principal | None,
    capabilities: Iterable[Capability],
    require_all: bool = True,
    endpoint: str | None = None,
) -> AccessDecision:
    """Like ``evaluate_many`` but raises when access is denied.

    Raises:
        UnauthenticatedError: No principal
        AccountDisabledError: Principal is inactive or blocked
        InsufficientPermissionError: Principal lacks the capability
    """
    decision = evaluate_many(principal, capabilities, require_all, endpoint)
    if not decision.allowed:
        logger.info(
            "access_denied",
            staff_id=str(principal.id) if principal else None,
            reason=decision.reason.value,
            permissions=list(decision.required),
            endpoint=endpoint or "unknown",
        )
        raise _error_for(decision, require_all)
    return decision


def authorize(
    principal: Principal | None,
    capability: Capability,
    endpoint: str | None = None,
) -> AccessDecision:
    return authorize_many(principal, [capability], endpoint=endpoint)


def authorize_super_admin(
    principal: Principal | None,
    endpoint: str | None = None,
) -> None:
    """Raise unless the principal is an enabled super admin."""
    if principal is None:
        raise UnauthenticatedError()
    if not principal.is_active or principal.is_blocked:
        raise AccountDisabledError()
    if not isinstance(principal, SuperAdminPrincipal):
        logger.info(
            "access_denied",
            staff_id=str(principal.id),
            reason=DecisionReason.INSUFFICIENT_PERMISSION.value,
            permissions=["super-admin"],
            endpoint=endpoint or "unknown",
        )
        raise InsufficientPermissionError(
            "Super admin access required",
            details={"required_permissions": ["super-admin"]},
        )
