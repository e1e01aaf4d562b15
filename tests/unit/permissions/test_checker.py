"""Unit tests for the access decision function.

These tests verify:
- The order of checks (unauthenticated, disabled, bypass, capability)
- Super admin bypass
- Any-of and all-of evaluation
"""

from uuid import uuid4

import pytest

from remiwire.core.errors import (
    AccountDisabledError,
    InsufficientPermissionError,
    UnauthenticatedError,
)
from remiwire.core.permissions.checker import (
    DecisionReason,
    authorize,
    authorize_many,
    authorize_super_admin,
    capability_key,
    evaluate,
    evaluate_many,
    has_capability,
)
from remiwire.core.permissions.context import (
    RequestContext,
    StaffPrincipal,
    SuperAdminPrincipal,
)


pytestmark = pytest.mark.unit


def _agent(**overrides) -> StaffPrincipal:
    values = {
        "id": uuid4(),
        "email": "agent@example.com",
        "role_name": "Agent",
        "capabilities": frozenset({"orders-read", "orders:read", "users-read", "users:read"}),
    }
    values.update(overrides)
    return StaffPrincipal(**values)


def _super_admin(**overrides) -> SuperAdminPrincipal:
    values = {"id": uuid4(), "email": "root@example.com"}
    values.update(overrides)
    return SuperAdminPrincipal(**values)


class TestCapabilityKey:
    def test_pair_renders_as_module_action(self):
        assert capability_key(("orders", "read")) == "orders:read"

    def test_name_is_unchanged(self):
        assert capability_key("orders-read") == "orders-read"


class TestDecisionOrder:
    """Tests for the order in which the decision is made."""

    def test_no_principal_is_unauthenticated(self):
        """A missing principal is reported before anything else."""
        decision = evaluate(None, ("orders", "read"))

        assert decision.allowed is False
        assert decision.reason == DecisionReason.UNAUTHENTICATED

    def test_inactive_principal_is_disabled(self):
        decision = evaluate(_agent(is_active=False), ("orders", "read"))

        assert decision.allowed is False
        assert decision.reason == DecisionReason.ACCOUNT_DISABLED

    def test_blocked_principal_is_disabled(self):
        decision = evaluate(_agent(is_blocked=True), ("orders", "read"))

        assert decision.reason == DecisionReason.ACCOUNT_DISABLED

    def test_disabled_super_admin_is_refused(self):
        """The bypass does not apply to a deactivated super admin."""
        decision = evaluate(_super_admin(is_active=False), ("settings", "manage"))

        assert decision.allowed is False
        assert decision.reason == DecisionReason.ACCOUNT_DISABLED

    def test_super_admin_bypasses_capability_check(self):
        decision = evaluate(_super_admin(), ("settings", "manage"))

        assert decision.allowed is True
        assert decision.reason == DecisionReason.SUPER_ADMIN

    def test_super_admin_passes_unregistered_capability(self):
        """The bypass holds even for capabilities nobody registered."""
        assert has_capability(_super_admin(), ("reports", "import")) is True

    def test_capability_in_snapshot_is_granted(self):
        decision = evaluate(_agent(), ("orders", "read"))

        assert decision.allowed is True
        assert decision.reason == DecisionReason.GRANTED

    def test_capability_by_name_is_granted(self):
        assert has_capability(_agent(), "orders-read") is True

    def test_missing_capability_is_insufficient(self):
        decision = evaluate(_agent(), ("orders", "approve"))

        assert decision.allowed is False
        assert decision.reason == DecisionReason.INSUFFICIENT_PERMISSION
        assert decision.required == ("orders:approve",)

    def test_empty_snapshot_has_nothing(self):
        principal = _agent(capabilities=frozenset())

        assert has_capability(principal, ("orders", "read")) is False


class TestEvaluateMany:
    """Tests for any-of and all-of evaluation."""

    def test_require_all_needs_every_capability(self):
        decision = evaluate_many(_agent(), [("orders", "read"), ("orders", "approve")])

        assert decision.allowed is False

    def test_require_all_passes_when_all_held(self):
        decision = evaluate_many(_agent(), [("orders", "read"), ("users", "read")])

        assert decision.allowed is True

    def test_require_any_passes_with_one(self):
        decision = evaluate_many(
            _agent(),
            [("orders", "approve"), ("users", "read")],
            require_all=False,
        )

        assert decision.allowed is True

    def test_require_any_fails_with_none(self):
        decision = evaluate_many(
            _agent(),
            [("orders", "approve"), ("payments", "approve")],
            require_all=False,
        )

        assert decision.allowed is False


class TestAuthorize:
    """Tests for the raising variants."""

    def test_raises_unauthenticated(self):
        with pytest.raises(UnauthenticatedError):
            authorize(None, ("orders", "read"))

    def test_raises_account_disabled(self):
        with pytest.raises(AccountDisabledError):
            authorize(_agent(is_blocked=True), ("orders", "read"))

    def test_raises_insufficient_with_required_list(self):
        with pytest.raises(InsufficientPermissionError) as exc_info:
            authorize_many(_agent(), [("orders", "approve"), ("orders", "reject")])

        assert exc_info.value.details["required_permissions"] == [
            "orders:approve",
            "orders:reject",
        ]
        assert exc_info.value.status_code == 403

    def test_returns_decision_when_allowed(self):
        decision = authorize(_agent(), ("users", "read"))

        assert decision.allowed is True

    def test_super_admin_requirement_refuses_staff(self):
        with pytest.raises(InsufficientPermissionError):
            authorize_super_admin(_agent())

    def test_super_admin_requirement_accepts_super_admin(self):
        authorize_super_admin(_super_admin())

    def test_super_admin_requirement_without_principal(self):
        with pytest.raises(UnauthenticatedError):
            authorize_super_admin(None)


class TestRequestContext:
    def test_actor_id_follows_principal(self):
        principal = _agent()
        ctx = RequestContext(principal=principal, request_id="req-1")

        assert ctx.actor_id == principal.id
        assert ctx.is_super_admin is False

    def test_anonymous_context(self):
        ctx = RequestContext()

        assert ctx.actor_id is None
        assert ctx.is_super_admin is False

    def test_super_admin_context(self):
        ctx = RequestContext(principal=_super_admin())

        assert ctx.is_super_admin is True
        assert ctx.principal.role_name == "super-admin"
