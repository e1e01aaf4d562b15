"""Staff database models."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from remiwire.core.constants import (
    MAX_DEPARTMENT_LENGTH,
    MAX_EMAIL_LENGTH,
    MAX_EMPLOYEE_ID_LENGTH,
    MAX_ENUM_LENGTH,
    MAX_PERSON_NAME_LENGTH,
    MAX_PHONE_LENGTH,
    SUPER_ADMIN_ROLE_LABEL,
)
from remiwire.core.database.base import ActorMixin, Base, TimestampMixin, UUIDMixin
from remiwire.core.permissions.models import Permission, Role, staff_permissions


class StaffTier(StrEnum):
    """Privilege tier of a staff account.

    ``SUPER_ADMIN`` is the single top-tier principal created by the bootstrap
    seed. It is not a Role row and is never handed out by role assignment.
    """

    SUPER_ADMIN = "super_admin"
    STAFF = "staff"


class Staff(Base, UUIDMixin, TimestampMixin, ActorMixin):
    """Staff member of the back-office.

    Attributes:
        email: Unique, lowercase email address
        password_hash: Bcrypt-hashed password
        first_name / last_name: Display name parts
        tier: StaffTier.SUPER_ADMIN for the top-tier principal, else STAFF
        role_id: The assigned Role (None until a role is assigned)
        permissions: Snapshot of the role's permissions taken at assignment
            time. Editing the Role later does not touch this list.
        is_active: Deactivated accounts cannot authenticate or pass guards
        is_blocked: Blocked accounts are refused like deactivated ones
        last_login_at: Timestamp of the last successful login
    """

    __tablename__ = "staff"

    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    first_name: Mapped[str] = mapped_column(
        String(MAX_PERSON_NAME_LENGTH),
        nullable=False,
    )
    last_name: Mapped[str] = mapped_column(
        String(MAX_PERSON_NAME_LENGTH),
        nullable=False,
    )
    tier: Mapped[StaffTier] = mapped_column(
        Enum(
            StaffTier,
            native_enum=False,
            length=MAX_ENUM_LENGTH,
            values_callable=lambda members: [m.value for m in members],
        ),
        default=StaffTier.STAFF,
        nullable=False,
        index=True,
    )
    role_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("roles.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    is_blocked: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    phone_number: Mapped[str | None] = mapped_column(
        String(MAX_PHONE_LENGTH),
        nullable=True,
    )
    department: Mapped[str | None] = mapped_column(
        String(MAX_DEPARTMENT_LENGTH),
        nullable=True,
    )
    employee_id: Mapped[str | None] = mapped_column(
        String(MAX_EMPLOYEE_ID_LENGTH),
        nullable=True,
        unique=True,
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # Relationships
    role: Mapped[Role | None] = relationship(
        Role,
        lazy="selectin",
    )
    permissions: Mapped[list[Permission]] = relationship(
        Permission,
        secondary=staff_permissions,
        lazy="selectin",
        order_by=[Permission.module, Permission.action],
    )

    @property
    def is_super_admin(self) -> bool:
        return self.tier == StaffTier.SUPER_ADMIN

    @property
    def role_label(self) -> str | None:
        """Role label shown to clients: "super-admin" or the Role's name."""
        if self.is_super_admin:
            return SUPER_ADMIN_ROLE_LABEL
        return self.role.name if self.role else None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Staff(id={self.id}, email={self.email}, tier={self.tier})>"
