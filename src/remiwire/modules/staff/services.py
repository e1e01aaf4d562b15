"""Staff business logic: accounts, role assignment and permission snapshots."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends
from sqlalchemy.exc import IntegrityError

from remiwire.core.auth.backend import (
    hash_password,
    verify_password,
    verify_password_or_dummy,
)
from remiwire.core.constants import SUPER_ADMIN_ROLE_LABEL
from remiwire.core.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    ForbiddenRoleAssignmentError,
    InvalidPermissionError,
    NotFoundError,
    UnauthorizedError,
)
from remiwire.core.permissions.checker import Capability
from remiwire.core.permissions.checker import has_capability as decide
from remiwire.core.permissions.context import Principal
from remiwire.core.permissions.models import Permission, Role
from remiwire.core.permissions.naming import is_reserved_role_name, is_super_admin_label
from remiwire.modules.permissions.repos import PermissionRepo
from remiwire.modules.roles.repos import RoleRepo
from remiwire.modules.staff.models import Staff
from remiwire.modules.staff.repos import StaffRepo
from remiwire.modules.staff.schemas import (
    RoleStat,
    StaffCreate,
    StaffStatsResponse,
    StaffUpdate,
)


logger = structlog.get_logger()


def _forbid_super_admin_role() -> ForbiddenRoleAssignmentError:
    return ForbiddenRoleAssignmentError(
        "The super-admin role can only be created by the bootstrap seed",
        details={"field": "role"},
    )


def _protected_account() -> ForbiddenError:
    return ForbiddenError(
        "The super admin account cannot be modified here",
        error_code="protected_account",
    )


def snapshot_of(role: Role) -> list[Permission]:
    """The permissions a staff member receives when given ``role``.

    The whole set is copied. Disabled permissions stay in the snapshot and are
    ignored when the principal is built, so re-enabling one restores it.
    """
    return list(role.permissions)


class StaffService:
    """Service for staff accounts.

    A staff member's permissions are a snapshot of their role's permissions
    taken when the role is assigned. Later edits to the role do not reach
    existing snapshots; assigning the role again refreshes it.
    """

    def __init__(
        self,
        repo: StaffRepo,
        role_repo: RoleRepo,
        permission_repo: PermissionRepo,
    ) -> None:
        self.repo = repo
        self.role_repo = role_repo
        self.permission_repo = permission_repo

    # ------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------

    async def get_staff(self, staff_id: UUID) -> Staff:
        staff = await self.repo.get_by_id(staff_id)
        if not staff:
            raise NotFoundError(
                "Staff member not found",
                resource="staff",
                resource_id=str(staff_id),
            )
        return staff

    async def _resolve_role(
        self,
        role_id: UUID | None = None,
        role_name: str | None = None,
    ) -> Role | None:
        """Find the role to assign, refusing the super admin role.

        Raises:
            ForbiddenRoleAssignmentError: For any spelling of the super admin role
            NotFoundError: If the role does not exist
            BadRequestError: If the role is inactive
        """
        if role_name is not None and is_super_admin_label(role_name):
            raise _forbid_super_admin_role()

        if role_id is not None:
            role = await self.role_repo.get_by_id(role_id)
            lookup = str(role_id)
        elif role_name is not None:
            role = await self.role_repo.get_by_name(role_name)
            lookup = role_name
        else:
            return None

        if not role:
            raise NotFoundError("Role not found", resource="role", resource_id=lookup)
        if is_reserved_role_name(role.name):
            raise _forbid_super_admin_role()
        if not role.is_active:
            raise BadRequestError(
                f"Role '{role.name}' is inactive",
                error_code="role_inactive",
                details={"field": "role"},
            )
        return role

    # ------------------------------------------------------------
    # Registration and role assignment
    # ------------------------------------------------------------

    async def register(self, data: StaffCreate, created_by: UUID | None = None) -> Staff:
        """Register a staff member.

        Raises:
            ForbiddenRoleAssignmentError: If the super admin role is requested
            ConflictError: If the email or employee id is taken
            NotFoundError: If the requested role does not exist
        """
        role = await self._resolve_role(data.role_id, data.role)

        if await self.repo.get_by_email(data.email):
            raise ConflictError(
                "Email already registered",
                error_code="email_exists",
                details={"field": "email"},
            )
        if data.employee_id and await self.repo.get_by_employee_id(data.employee_id):
            raise ConflictError(
                "Employee ID already registered",
                error_code="employee_id_exists",
                details={"field": "employee_id"},
            )

        staff = Staff(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            password_hash=hash_password(data.password),
            phone_number=data.phone_number,
            department=data.department,
            employee_id=data.employee_id,
            is_active=data.is_active,
            role=role,
            permissions=snapshot_of(role) if role else [],
            created_by_id=created_by,
        )
        try:
            staff = await self.repo.create(staff)
        except IntegrityError as e:
            raise ConflictError(
                "Email or employee ID already registered",
                error_code="email_exists",
                details={"field": "email"},
            ) from e

        logger.info(
            "staff_registered",
            staff_id=str(staff.id),
            role=staff.role_label,
            created_by=str(created_by) if created_by else None,
        )
        return staff

    async def assign_role(
        self,
        staff_id: UUID,
        role_id: UUID | None = None,
        role_name: str | None = None,
        assigned_by: UUID | None = None,
    ) -> Staff:
        """Assign a role and copy its current permissions onto the staff member.

        Raises:
            NotFoundError: If the staff member or role does not exist
            ForbiddenRoleAssignmentError: If the role is the super admin role
                or the target is the super admin account
        """
        staff = await self.get_staff(staff_id)
        role = await self._resolve_role(role_id, role_name)
        if role is None:
            raise BadRequestError(
                "A role is required",
                error_code="role_required",
                details={"field": "role_id"},
            )
        if staff.is_super_admin:
            raise ForbiddenRoleAssignmentError(
                "The super admin account cannot be given a role",
                details={"field": "staff_id"},
            )

        staff.role = role
        staff.permissions = snapshot_of(role)
        staff.updated_by_id = assigned_by
        staff = await self.repo.update(staff)

        logger.info(
            "role_assigned",
            staff_id=str(staff.id),
            role_id=str(role.id),
            role=role.name,
            permission_count=len(staff.permissions),
            assigned_by=str(assigned_by) if assigned_by else None,
        )
        return staff

    async def assign_permissions(
        self,
        staff_id: UUID,
        permission_ids: list[UUID],
        assigned_by: UUID | None = None,
    ) -> Staff:
        """Replace a staff member's permission snapshot directly.

        Raises:
            NotFoundError: If the staff member does not exist
            ForbiddenError: If the target is the super admin account
            InvalidPermissionError: If a permission id is unknown or inactive
        """
        staff = await self.get_staff(staff_id)
        if staff.is_super_admin:
            raise _protected_account()

        unique_ids = list(dict.fromkeys(permission_ids))
        found = await self.permission_repo.get_by_ids(unique_ids)
        active = {p.id: p for p in found if p.is_active}
        invalid = [str(pid) for pid in unique_ids if pid not in active]
        if invalid:
            raise InvalidPermissionError(invalid_ids=invalid)

        staff.permissions = list(active.values())
        staff.updated_by_id = assigned_by
        staff = await self.repo.update(staff)

        logger.info(
            "staff_permissions_assigned",
            staff_id=str(staff.id),
            permission_count=len(staff.permissions),
            assigned_by=str(assigned_by) if assigned_by else None,
        )
        return staff

    # ------------------------------------------------------------
    # Credentials and capability checks
    # ------------------------------------------------------------

    async def verify_credential(self, email: str, password: str) -> bool:
        """Check an email/password pair.

        An unknown email costs the same bcrypt comparison as a wrong
        password, and both return False.
        """
        staff = await self.repo.get_by_email(email)
        return verify_password_or_dummy(password, staff.password_hash if staff else None)

    @staticmethod
    def has_capability(principal: Principal | None, capability: Capability) -> bool:
        return decide(principal, capability)

    async def change_password(
        self,
        staff_id: UUID,
        current_password: str,
        new_password: str,
    ) -> None:
        """Change a staff member's own password.

        Raises:
            UnauthorizedError: If the current password is wrong
        """
        staff = await self.get_staff(staff_id)
        if not verify_password(current_password, staff.password_hash):
            raise UnauthorizedError(
                "Invalid email or password",
                error_code="invalid_credentials",
            )
        staff.password_hash = hash_password(new_password)
        staff.updated_by_id = staff.id
        await self.repo.update(staff)
        logger.info("password_changed", staff_id=str(staff.id))

    # ------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------

    async def list_staff(
        self,
        page: int = 1,
        page_size: int = 10,
        search: str | None = None,
        role_id: UUID | None = None,
        is_active: bool | None = None,
    ) -> tuple[list[Staff], int]:
        return await self.repo.list_staff(
            page=page,
            page_size=page_size,
            search=search,
            role_id=role_id,
            is_active=is_active,
        )

    async def role_stats(self) -> StaffStatsResponse:
        """Count active staff per role label, super admins included."""
        stats = [
            RoleStat(role=name, count=count)
            for name, count in await self.repo.active_counts_by_role()
        ]
        super_admins = await self.repo.count_super_admins(active_only=True)
        if super_admins:
            stats.insert(0, RoleStat(role=SUPER_ADMIN_ROLE_LABEL, count=super_admins))
        return StaffStatsResponse(
            total_active=sum(s.count for s in stats),
            by_role=stats,
        )

    # ------------------------------------------------------------
    # Updates and removal
    # ------------------------------------------------------------

    async def update(
        self,
        staff_id: UUID,
        data: StaffUpdate,
        updated_by: UUID | None = None,
    ) -> Staff:
        """Update profile fields and the active flag.

        Raises:
            NotFoundError: If the staff member does not exist
            ForbiddenError: If the target is the super admin account
            ConflictError: If the new email or employee id is taken
        """
        staff = await self.get_staff(staff_id)
        if staff.is_super_admin:
            raise _protected_account()

        if data.email and data.email != staff.email:
            if await self.repo.get_by_email(data.email):
                raise ConflictError(
                    "Email already in use",
                    error_code="email_exists",
                    details={"field": "email"},
                )
            staff.email = data.email

        if data.employee_id and data.employee_id != staff.employee_id:
            if await self.repo.get_by_employee_id(data.employee_id):
                raise ConflictError(
                    "Employee ID already in use",
                    error_code="employee_id_exists",
                    details={"field": "employee_id"},
                )
            staff.employee_id = data.employee_id

        if data.first_name:
            staff.first_name = data.first_name
        if data.last_name:
            staff.last_name = data.last_name
        if "phone_number" in data.model_fields_set:
            staff.phone_number = data.phone_number
        if "department" in data.model_fields_set:
            staff.department = data.department
        if data.is_active is not None:
            staff.is_active = data.is_active
        staff.updated_by_id = updated_by

        try:
            staff = await self.repo.update(staff)
        except IntegrityError as e:
            raise ConflictError(
                "Email or employee ID already in use",
                error_code="email_exists",
                details={"field": "email"},
            ) from e

        logger.info(
            "staff_updated",
            staff_id=str(staff.id),
            updated_by=str(updated_by) if updated_by else None,
        )
        return staff

    async def set_blocked(
        self,
        staff_id: UUID,
        blocked: bool,
        updated_by: UUID | None = None,
    ) -> Staff:
        """Block or unblock a staff member.

        Raises:
            NotFoundError: If the staff member does not exist
            ForbiddenError: If the target is the super admin account
        """
        staff = await self.get_staff(staff_id)
        if staff.is_super_admin:
            raise _protected_account()

        staff.is_blocked = blocked
        staff.updated_by_id = updated_by
        staff = await self.repo.update(staff)

        logger.info(
            "staff_blocked" if blocked else "staff_unblocked",
            staff_id=str(staff.id),
            updated_by=str(updated_by) if updated_by else None,
        )
        return staff

    async def deactivate(self, staff_id: UUID, updated_by: UUID | None = None) -> Staff:
        """Deactivate a staff member. The row and its snapshot are kept."""
        staff = await self.get_staff(staff_id)
        if staff.is_super_admin:
            raise _protected_account()

        staff.is_active = False
        staff.updated_by_id = updated_by
        staff = await self.repo.update(staff)
        logger.info("staff_deactivated", staff_id=str(staff.id))
        return staff

    async def delete(self, staff_id: UUID) -> None:
        """Hard-delete a staff member.

        Raises:
            NotFoundError: If the staff member does not exist
            ForbiddenError: If the target is the super admin account
        """
        staff = await self.get_staff(staff_id)
        if staff.is_super_admin:
            raise _protected_account()

        await self.repo.delete(staff)
        logger.info("staff_deleted", staff_id=str(staff_id))


# Type alias for dependency injection
StaffSvc = Annotated[StaffService, Depends(StaffService)]
