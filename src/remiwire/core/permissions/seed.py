"""Bootstrap data for the access-control tables.

Creates the default permission registry, the system roles and the single
super admin account. Every step looks the row up first and only inserts
when it is missing; each insert runs in a savepoint so a concurrent seeder
hitting a unique index is treated as "already seeded".
"""

from dataclasses import dataclass, field
from typing import TypedDict
from uuid import UUID

import structlog
from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from remiwire.config import Settings, settings as default_settings
from remiwire.core.auth.backend import hash_password
from remiwire.core.permissions.models import (
    Permission,
    PermissionAction,
    PermissionModule,
    Role,
)
from remiwire.core.permissions.naming import permission_name_for
from remiwire.modules.staff.models import Staff, StaffTier


logger = structlog.get_logger()


# ============================================================
# Type Definitions
# ============================================================


class PermissionData(TypedDict):
    name: str
    module: PermissionModule
    action: PermissionAction
    description: str


class RoleData(TypedDict):
    name: str
    description: str
    level: int
    permissions: list[str] | None  # None grants the whole registry


# ============================================================
# Default Data
# ============================================================


def _perm(module: PermissionModule, action: PermissionAction, description: str) -> PermissionData:
    return {
        "name": permission_name_for(module, action),
        "module": module,
        "action": action,
        "description": description,
    }


M = PermissionModule
A = PermissionAction

DEFAULT_PERMISSIONS: list[PermissionData] = [
    # Dashboard
    _perm(M.DASHBOARD, A.READ, "View dashboard and analytics"),
    _perm(M.DASHBOARD, A.EXPORT, "Export dashboard data"),
    # Users
    _perm(M.USERS, A.CREATE, "Create new users"),
    _perm(M.USERS, A.READ, "View user information"),
    _perm(M.USERS, A.UPDATE, "Update user information"),
    _perm(M.USERS, A.DELETE, "Delete users"),
    _perm(M.USERS, A.EXPORT, "Export user data"),
    # Orders
    _perm(M.ORDERS, A.CREATE, "Create new orders"),
    _perm(M.ORDERS, A.READ, "View order information"),
    _perm(M.ORDERS, A.UPDATE, "Update order information"),
    _perm(M.ORDERS, A.DELETE, "Delete orders"),
    _perm(M.ORDERS, A.APPROVE, "Approve orders"),
    _perm(M.ORDERS, A.REJECT, "Reject orders"),
    _perm(M.ORDERS, A.EXPORT, "Export order data"),
    # Payments
    _perm(M.PAYMENTS, A.CREATE, "Create payment records"),
    _perm(M.PAYMENTS, A.READ, "View payment information"),
    _perm(M.PAYMENTS, A.UPDATE, "Update payment information"),
    _perm(M.PAYMENTS, A.DELETE, "Delete payment records"),
    _perm(M.PAYMENTS, A.APPROVE, "Approve payments"),
    _perm(M.PAYMENTS, A.REJECT, "Reject payments"),
    _perm(M.PAYMENTS, A.EXPORT, "Export payment data"),
    # Forex services
    _perm(M.FOREX_SERVICES, A.CREATE, "Create forex services"),
    _perm(M.FOREX_SERVICES, A.READ, "View forex services"),
    _perm(M.FOREX_SERVICES, A.UPDATE, "Update forex services"),
    _perm(M.FOREX_SERVICES, A.DELETE, "Delete forex services"),
    _perm(M.FOREX_SERVICES, A.MANAGE, "Manage forex services"),
    # Reports
    _perm(M.REPORTS, A.READ, "View reports"),
    _perm(M.REPORTS, A.EXPORT, "Export reports"),
    _perm(M.REPORTS, A.CREATE, "Create custom reports"),
    # Settings
    _perm(M.SETTINGS, A.READ, "View system settings"),
    _perm(M.SETTINGS, A.UPDATE, "Update system settings"),
    _perm(M.SETTINGS, A.MANAGE, "Manage system settings"),
    # Staff management
    _perm(M.STAFF_MANAGEMENT, A.CREATE, "Create staff members"),
    _perm(M.STAFF_MANAGEMENT, A.READ, "View staff information"),
    _perm(M.STAFF_MANAGEMENT, A.UPDATE, "Update staff information"),
    _perm(M.STAFF_MANAGEMENT, A.DELETE, "Delete staff members"),
    _perm(M.STAFF_MANAGEMENT, A.MANAGE, "Manage staff roles and permissions"),
    # Notifications
    _perm(M.NOTIFICATIONS, A.CREATE, "Create notifications"),
    _perm(M.NOTIFICATIONS, A.READ, "View notifications"),
    _perm(M.NOTIFICATIONS, A.UPDATE, "Update notifications"),
    _perm(M.NOTIFICATIONS, A.DELETE, "Delete notifications"),
    _perm(M.NOTIFICATIONS, A.MANAGE, "Manage notification settings"),
    # Analytics
    _perm(M.ANALYTICS, A.READ, "View analytics data"),
    _perm(M.ANALYTICS, A.EXPORT, "Export analytics data"),
    _perm(M.ANALYTICS, A.MANAGE, "Manage analytics settings"),
]

DEFAULT_ROLES: list[RoleData] = [
    {
        "name": "Super Admin",
        "description": "Full system access with all permissions",
        "level": 100,
        "permissions": None,
    },
    {
        "name": "Admin",
        "description": "Administrative access with most permissions",
        "level": 80,
        "permissions": [
            p["name"] for p in DEFAULT_PERMISSIONS if p["name"] != "settings-manage"
        ],
    },
    {
        "name": "Manager",
        "description": "Management access with limited administrative permissions",
        "level": 60,
        "permissions": [
            "dashboard-read",
            "dashboard-export",
            "users-read",
            "users-update",
            "users-export",
            "orders-read",
            "orders-update",
            "orders-approve",
            "orders-reject",
            "orders-export",
            "payments-read",
            "payments-approve",
            "payments-reject",
            "payments-export",
            "forex-services-read",
            "forex-services-update",
            "reports-read",
            "reports-export",
            "reports-create",
            "staff-management-read",
            "notifications-create",
            "notifications-read",
            "analytics-read",
            "analytics-export",
        ],
    },
    {
        "name": "Agent",
        "description": "Basic operational access",
        "level": 40,
        "permissions": [
            "dashboard-read",
            "users-create",
            "users-read",
            "users-update",
            "orders-create",
            "orders-read",
            "orders-update",
            "payments-create",
            "payments-read",
            "forex-services-read",
            "notifications-read",
        ],
    },
    {
        "name": "Support",
        "description": "Customer support access",
        "level": 20,
        "permissions": [
            "dashboard-read",
            "users-read",
            "orders-read",
            "payments-read",
            "notifications-create",
            "notifications-read",
        ],
    },
]

SUPER_ADMIN_DEPARTMENT = "IT"
SUPER_ADMIN_EMPLOYEE_ID = "SA001"


# ============================================================
# Result Types
# ============================================================


@dataclass(frozen=True, slots=True)
class SeededPrincipal:
    """Public identity of the super admin account."""

    id: UUID
    email: str
    role: str | None
    is_active: bool


@dataclass(slots=True)
class SeedResult:
    permissions_created: list[str] = field(default_factory=list)
    roles_created: list[str] = field(default_factory=list)
    super_admin_created: bool = False
    super_admin: SeededPrincipal | None = None


# ============================================================
# Seed Functions
# ============================================================


async def _insert(session: AsyncSession, instance: object) -> bool:
    """Add and flush ``instance`` in a savepoint.

    Returns:
        False if a unique index rejected the row
    """
    try:
        async with session.begin_nested():
            session.add(instance)
    except IntegrityError:
        return False
    return True


async def seed_permissions(session: AsyncSession, result: SeedResult) -> dict[str, Permission]:
    """Ensure every default permission exists and return them by name."""
    by_name: dict[str, Permission] = {}

    for data in DEFAULT_PERMISSIONS:
        stmt = select(Permission).where(
            or_(
                Permission.name == data["name"],
                and_(
                    Permission.module == data["module"],
                    Permission.action == data["action"],
                ),
            )
        )
        existing = (await session.execute(stmt)).scalars().first()
        if existing:
            by_name[data["name"]] = existing
            continue

        permission = Permission(
            name=data["name"],
            module=data["module"],
            action=data["action"],
            description=data["description"],
            is_active=True,
        )
        if await _insert(session, permission):
            result.permissions_created.append(permission.name)
            by_name[data["name"]] = permission
            continue

        # Lost a race with another seeder
        existing = (await session.execute(stmt)).scalars().first()
        if existing:
            by_name[data["name"]] = existing

    return by_name


async def seed_roles(
    session: AsyncSession,
    permissions: dict[str, Permission],
    result: SeedResult,
) -> None:
    """Ensure the system roles exist. Existing roles are left untouched."""
    for data in DEFAULT_ROLES:
        stmt = select(Role).where(Role.name == data["name"])
        if (await session.execute(stmt)).scalar_one_or_none():
            continue

        names = data["permissions"]
        granted = (
            list(permissions.values())
            if names is None
            else [permissions[n] for n in names if n in permissions]
        )
        role = Role(
            name=data["name"],
            description=data["description"],
            level=data["level"],
            is_system_role=True,
            is_active=True,
            permissions=granted,
        )
        if await _insert(session, role):
            result.roles_created.append(role.name)


def _identity(staff: Staff) -> SeededPrincipal:
    return SeededPrincipal(
        id=staff.id,
        email=staff.email,
        role=staff.role_label,
        is_active=staff.is_active,
    )


async def seed_super_admin(
    session: AsyncSession,
    permissions: dict[str, Permission],
    result: SeedResult,
    config: Settings,
) -> None:
    """Create the super admin unless one already exists."""
    stmt = select(Staff).where(Staff.tier == StaffTier.SUPER_ADMIN).limit(1)
    existing = (await session.execute(stmt)).scalar_one_or_none()
    if existing:
        logger.info("super_admin_exists", staff_id=str(existing.id))
        result.super_admin = _identity(existing)
        return

    staff = Staff(
        email=str(config.super_admin_email).lower(),
        password_hash=hash_password(config.super_admin_password),
        first_name=config.super_admin_first_name,
        last_name=config.super_admin_last_name,
        tier=StaffTier.SUPER_ADMIN,
        is_active=True,
        is_blocked=False,
        department=SUPER_ADMIN_DEPARTMENT,
        employee_id=SUPER_ADMIN_EMPLOYEE_ID,
        permissions=list(permissions.values()),
    )
    if await _insert(session, staff):
        result.super_admin_created = True
        result.super_admin = _identity(staff)
        logger.info("super_admin_created", staff_id=str(staff.id), email=staff.email)
        return

    existing = (await session.execute(stmt)).scalar_one_or_none()
    if existing:
        result.super_admin = _identity(existing)
    else:
        logger.warning(
            "super_admin_seed_conflict",
            email=str(config.super_admin_email),
        )


async def seed_defaults(
    session: AsyncSession,
    config: Settings | None = None,
) -> SeedResult:
    """Seed permissions, system roles and the super admin.

    Safe to call any number of times. The caller owns the transaction.

    Args:
        session: Database session
        config: Settings to read the super admin credentials from

    Returns:
        What was created, plus the super admin's public identity
    """
    config = config or default_settings
    result = SeedResult()

    permissions = await seed_permissions(session, result)
    await seed_roles(session, permissions, result)
    await seed_super_admin(session, permissions, result, config)

    logger.info(
        "seed_completed",
        permissions_created=len(result.permissions_created),
        roles_created=len(result.roles_created),
        super_admin_created=result.super_admin_created,
    )
    return result
