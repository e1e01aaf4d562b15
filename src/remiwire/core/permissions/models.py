"""Permission system database models.

This module defines the RBAC (Role-Based Access Control) models:
- Permission: an action that can be performed on a business module
- Role: a named, leveled set of permissions
- role_permissions / staff_permissions: association tables

Staff records live in ``remiwire.modules.staff.models`` and hold a
materialized copy of their role's permissions through ``staff_permissions``.
"""

from enum import StrEnum

from sqlalchemy import (
    Boolean,
    Column,
    Enum,
    ForeignKey,
    Integer,
    String,
    Table,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from remiwire.core.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_ENUM_LENGTH,
    MAX_PERMISSION_DESCRIPTION_LENGTH,
    MAX_PERMISSION_NAME_LENGTH,
    MAX_ROLE_NAME_LENGTH,
)
from remiwire.core.database.base import ActorMixin, Base, TimestampMixin, UUIDMixin


class PermissionModule(StrEnum):
    """Business domains a permission can apply to."""

    DASHBOARD = "dashboard"
    USERS = "users"
    ORDERS = "orders"
    PAYMENTS = "payments"
    FOREX_SERVICES = "forex-services"
    REPORTS = "reports"
    SETTINGS = "settings"
    STAFF_MANAGEMENT = "staff-management"
    NOTIFICATIONS = "notifications"
    ANALYTICS = "analytics"


class PermissionAction(StrEnum):
    """Actions a permission can grant on a module."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    EXPORT = "export"
    IMPORT = "import"
    APPROVE = "approve"
    REJECT = "reject"
    MANAGE = "manage"


def _enum_column(enum_cls: type[StrEnum]) -> Enum:
    # Stored as VARCHAR so ordering follows the string values on every backend
    return Enum(
        enum_cls,
        native_enum=False,
        length=MAX_ENUM_LENGTH,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column(
        "role_id", Uuid, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True
    ),
    Column(
        "permission_id",
        Uuid,
        ForeignKey("permissions.id", ondelete="RESTRICT"),
        primary_key=True,
    ),
)

staff_permissions = Table(
    "staff_permissions",
    Base.metadata,
    Column(
        "staff_id", Uuid, ForeignKey("staff.id", ondelete="CASCADE"), primary_key=True
    ),
    Column(
        "permission_id",
        Uuid,
        ForeignKey("permissions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Permission(Base, UUIDMixin, TimestampMixin, ActorMixin):
    """Permission model representing an action on a business module.

    Attributes:
        name: Unique lowercase-hyphenated slug (e.g. "orders-read")
        module: The business module being protected
        action: The action being performed
        description: Human-readable description of the permission
        is_active: Inactive permissions cannot be granted to roles

    Examples:
        - name="orders-approve", module="orders", action="approve"
        - name="staff-management-manage", module="staff-management", action="manage"
    """

    __tablename__ = "permissions"
    __table_args__ = (
        UniqueConstraint("module", "action", name="uq_permission_module_action"),
    )

    name: Mapped[str] = mapped_column(
        String(MAX_PERMISSION_NAME_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    module: Mapped[PermissionModule] = mapped_column(
        _enum_column(PermissionModule),
        nullable=False,
        index=True,
    )
    action: Mapped[PermissionAction] = mapped_column(
        _enum_column(PermissionAction),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_PERMISSION_DESCRIPTION_LENGTH),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        index=True,
    )

    @property
    def key(self) -> str:
        """Return the capability key as 'module:action'."""
        return f"{self.module}:{self.action}"

    def __repr__(self) -> str:
        return f"<Permission({self.name} {self.module}:{self.action})>"


class Role(Base, UUIDMixin, TimestampMixin, ActorMixin):
    """Role model representing a named, leveled set of permissions.

    Attributes:
        name: Unique role name (e.g. "Agent")
        description: Human-readable description of the role
        level: Privilege level between 1 and 100, higher is more privileged
        is_system_role: System roles cannot be deleted, and only the
            super admin may edit them
        is_active: Inactive roles are hidden from assignment flows
    """

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(
        String(MAX_ROLE_NAME_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )
    level: Mapped[int] = mapped_column(
        Integer,
        default=1,
        nullable=False,
    )
    is_system_role: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    permissions: Mapped[list[Permission]] = relationship(
        Permission,
        secondary=role_permissions,
        lazy="selectin",
        order_by=[Permission.module, Permission.action],
    )

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name}, level={self.level})>"
