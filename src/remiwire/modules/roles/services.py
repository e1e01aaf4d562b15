"""Role catalog business logic."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends
from sqlalchemy.exc import IntegrityError

from remiwire.core.errors import (
    DuplicateRoleError,
    InUseError,
    InvalidPermissionError,
    NotFoundError,
    ProtectedRoleError,
)
from remiwire.core.permissions.context import Principal, SuperAdminPrincipal
from remiwire.core.permissions.models import Permission, Role
from remiwire.core.permissions.naming import is_reserved_role_name
from remiwire.modules.permissions.repos import PermissionRepo
from remiwire.modules.roles.repos import RoleRepo
from remiwire.modules.roles.schemas import RoleCreate, RoleUpdate
from remiwire.modules.staff.repos import StaffRepo


logger = structlog.get_logger()


def _reject_reserved_name(name: str) -> None:
    if is_reserved_role_name(name):
        raise ProtectedRoleError(
            f"'{name}' is reserved for the super admin",
            error_code="reserved_role_name",
            details={"field": "name"},
        )


class RoleService:
    """Service for creating, editing and retiring roles."""

    def __init__(
        self,
        repo: RoleRepo,
        permission_repo: PermissionRepo,
        staff_repo: StaffRepo,
    ) -> None:
        self.repo = repo
        self.permission_repo = permission_repo
        self.staff_repo = staff_repo

    async def resolve_permissions(self, permission_ids: list[UUID]) -> list[Permission]:
        """Load permissions by id, requiring every id to be an active permission.

        Raises:
            InvalidPermissionError: Listing every id that is unknown or inactive
        """
        unique_ids = list(dict.fromkeys(permission_ids))
        found = await self.permission_repo.get_by_ids(unique_ids)
        active = {p.id: p for p in found if p.is_active}
        invalid = [str(pid) for pid in unique_ids if pid not in active]
        if invalid:
            raise InvalidPermissionError(invalid_ids=invalid)
        return list(active.values())

    async def _ensure_name_free(self, name: str, exclude_id: UUID | None = None) -> None:
        if await self.repo.get_by_name(name, exclude_id=exclude_id):
            raise DuplicateRoleError(f"Role '{name}' already exists")

    async def create(self, data: RoleCreate, created_by: UUID | None = None) -> Role:
        """Create a role.

        Raises:
            ProtectedRoleError: If the name is a spelling of the super admin role
            DuplicateRoleError: If the name exists
            InvalidPermissionError: If a permission id is unknown or inactive
        """
        _reject_reserved_name(data.name)
        await self._ensure_name_free(data.name)
        permissions = await self.resolve_permissions(data.permission_ids)

        role = Role(
            name=data.name,
            description=data.description,
            level=data.level,
            is_active=data.is_active,
            is_system_role=False,
            permissions=permissions,
            created_by_id=created_by,
        )
        try:
            role = await self.repo.create(role)
        except IntegrityError as e:
            raise DuplicateRoleError(f"Role '{data.name}' already exists") from e

        logger.info(
            "role_created",
            role_id=str(role.id),
            name=role.name,
            permission_count=len(role.permissions),
            created_by=str(created_by) if created_by else None,
        )
        return role

    async def get_role(self, role_id: UUID) -> Role:
        role = await self.repo.get_by_id(role_id)
        if not role:
            raise NotFoundError("Role not found", resource="role", resource_id=str(role_id))
        return role

    async def update(
        self,
        role_id: UUID,
        data: RoleUpdate,
        actor: Principal | None = None,
    ) -> Role:
        """Update a role.

        Permission changes are not pushed to staff who already hold the
        role; their snapshots are only refreshed by a new role assignment.

        Raises:
            NotFoundError: If the role does not exist
            ProtectedRoleError: If a system role is edited by anyone but the
                super admin, or the new name is reserved
            DuplicateRoleError: If the new name exists
            InvalidPermissionError: If a permission id is unknown or inactive
        """
        role = await self.get_role(role_id)

        if role.is_system_role and not isinstance(actor, SuperAdminPrincipal):
            raise ProtectedRoleError("System roles can only be modified by the super admin")

        if data.name is not None and data.name != role.name:
            _reject_reserved_name(data.name)
            await self._ensure_name_free(data.name, exclude_id=role.id)
            role.name = data.name

        if "description" in data.model_fields_set:
            role.description = data.description
        if data.level is not None:
            role.level = data.level
        if data.is_active is not None:
            role.is_active = data.is_active
        if data.permission_ids is not None:
            role.permissions = await self.resolve_permissions(data.permission_ids)
        role.updated_by_id = actor.id if actor else None

        try:
            role = await self.repo.update(role)
        except IntegrityError as e:
            raise DuplicateRoleError(f"Role '{role.name}' already exists") from e

        logger.info(
            "role_updated",
            role_id=str(role.id),
            updated_by=str(actor.id) if actor else None,
        )
        return role

    async def delete(self, role_id: UUID) -> None:
        """Delete a role nobody holds.

        Raises:
            NotFoundError: If the role does not exist
            ProtectedRoleError: If the role is a system role
            InUseError: If any staff member currently holds the role
        """
        role = await self.get_role(role_id)

        if role.is_system_role:
            raise ProtectedRoleError("System roles cannot be deleted")

        staff_count = await self.staff_repo.count_by_role(role.id)
        if staff_count:
            raise InUseError(
                f"Role '{role.name}' is assigned to {staff_count} staff member(s)",
                details={"staff_count": staff_count},
            )

        await self.repo.delete(role)
        logger.info("role_deleted", role_id=str(role_id), name=role.name)

    async def list_roles(self, is_active: bool | None = None) -> list[Role]:
        return await self.repo.list_roles(is_active=is_active)

    async def list_available(self) -> list[Role]:
        """Active roles that may be assigned to staff."""
        roles = await self.repo.list_roles(is_active=True)
        return [role for role in roles if not is_reserved_role_name(role.name)]


# Type alias for dependency injection
RoleSvc = Annotated[RoleService, Depends(RoleService)]
