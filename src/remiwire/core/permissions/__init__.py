"""Role-based access control.

The bootstrap seed lives in ``remiwire.core.permissions.seed`` and is not
re-exported here because it depends on the staff module.
"""

from remiwire.core.permissions.checker import (
    AccessDecision,
    Capability,
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
    Principal,
    RequestContext,
    StaffPrincipal,
    SuperAdminPrincipal,
    principal_from_staff,
)
from remiwire.core.permissions.decorators import (
    require_all_capabilities,
    require_any_capability,
    require_capability,
    require_super_admin,
)
from remiwire.core.permissions.models import (
    Permission,
    PermissionAction,
    PermissionModule,
    Role,
    role_permissions,
    staff_permissions,
)
from remiwire.core.permissions.naming import (
    is_reserved_role_name,
    is_super_admin_label,
    normalize_role_name,
    permission_name_for,
)


__all__ = [
    "AccessDecision",
    "Capability",
    "DecisionReason",
    "Permission",
    "PermissionAction",
    "PermissionModule",
    "Principal",
    "RequestContext",
    "Role",
    "StaffPrincipal",
    "SuperAdminPrincipal",
    "authorize",
    "authorize_many",
    "authorize_super_admin",
    "capability_key",
    "evaluate",
    "evaluate_many",
    "has_capability",
    "is_reserved_role_name",
    "is_super_admin_label",
    "normalize_role_name",
    "permission_name_for",
    "principal_from_staff",
    "require_all_capabilities",
    "require_any_capability",
    "require_capability",
    "require_super_admin",
    "role_permissions",
    "staff_permissions",
]
