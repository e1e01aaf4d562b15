"""Permission registry business logic."""

from collections.abc import Iterable
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends
from sqlalchemy.exc import IntegrityError

from remiwire.core.errors import DuplicateCapabilityError, InUseError, NotFoundError
from remiwire.core.permissions.models import (
    Permission,
    PermissionAction,
    PermissionModule,
)
from remiwire.modules.permissions.repos import PermissionRepo
from remiwire.modules.permissions.schemas import (
    PermissionCreate,
    PermissionMatrix,
    PermissionUpdate,
)


logger = structlog.get_logger()


def permission_matrix(permissions: Iterable[Permission]) -> PermissionMatrix:
    """Build a module x action grid of granted permissions.

    Every module and action starts out False; each permission given sets
    its own cell to True.
    """
    matrix: PermissionMatrix = {
        module.value: {action.value: False for action in PermissionAction}
        for module in PermissionModule
    }
    for permission in permissions:
        matrix[str(permission.module)][str(permission.action)] = True
    return matrix


class PermissionService:
    """Service for the canonical capability registry."""

    def __init__(self, repo: PermissionRepo) -> None:
        self.repo = repo

    async def _ensure_unique(
        self,
        name: str,
        module: PermissionModule,
        action: PermissionAction,
        exclude_id: UUID | None = None,
    ) -> None:
        existing = await self.repo.find_conflict(name, module, action, exclude_id)
        if existing is None:
            return
        if existing.name == name:
            raise DuplicateCapabilityError(
                f"Permission '{name}' already exists",
                field="name",
            )
        raise DuplicateCapabilityError(
            f"Permission for {module}:{action} already exists",
            field="module/action",
        )

    async def register(
        self,
        data: PermissionCreate,
        created_by: UUID | None = None,
    ) -> Permission:
        """Register a new capability.

        Raises:
            DuplicateCapabilityError: If the name or (module, action) exists
        """
        await self._ensure_unique(data.name, data.module, data.action)

        permission = Permission(
            name=data.name,
            module=data.module,
            action=data.action,
            description=data.description,
            is_active=data.is_active,
            created_by_id=created_by,
        )
        try:
            permission = await self.repo.create(permission)
        except IntegrityError as e:
            raise DuplicateCapabilityError(
                f"Permission '{data.name}' already exists",
                field="name",
            ) from e

        logger.info(
            "permission_registered",
            permission_id=str(permission.id),
            name=permission.name,
            created_by=str(created_by) if created_by else None,
        )
        return permission

    async def list_permissions(
        self,
        module: PermissionModule | None = None,
        is_active: bool | None = None,
    ) -> list[Permission]:
        return await self.repo.list_permissions(module=module, is_active=is_active)

    async def get_permission(self, permission_id: UUID) -> Permission:
        permission = await self.repo.get_by_id(permission_id)
        if not permission:
            raise NotFoundError(
                "Permission not found",
                resource="permission",
                resource_id=str(permission_id),
            )
        return permission

    async def update(
        self,
        permission_id: UUID,
        data: PermissionUpdate,
        updated_by: UUID | None = None,
    ) -> Permission:
        """Update a permission.

        Raises:
            NotFoundError: If the permission does not exist
            DuplicateCapabilityError: If the new name or pair is taken
        """
        permission = await self.get_permission(permission_id)

        name = data.name if data.name is not None else permission.name
        module = data.module if data.module is not None else permission.module
        action = data.action if data.action is not None else permission.action
        if (name, module, action) != (permission.name, permission.module, permission.action):
            await self._ensure_unique(name, module, action, exclude_id=permission.id)

        permission.name = name
        permission.module = module
        permission.action = action
        if "description" in data.model_fields_set:
            permission.description = data.description
        if data.is_active is not None:
            permission.is_active = data.is_active
        permission.updated_by_id = updated_by

        try:
            permission = await self.repo.update(permission)
        except IntegrityError as e:
            raise DuplicateCapabilityError(
                f"Permission '{name}' already exists",
                field="name",
            ) from e

        logger.info(
            "permission_updated",
            permission_id=str(permission.id),
            updated_by=str(updated_by) if updated_by else None,
        )
        return permission

    async def retire(self, permission_id: UUID) -> None:
        """Hard-delete a permission no role references.

        Raises:
            NotFoundError: If the permission does not exist
            InUseError: If any role still grants the permission
        """
        permission = await self.get_permission(permission_id)

        role_count = await self.repo.count_role_references(permission.id)
        if role_count:
            raise InUseError(
                f"Permission '{permission.name}' is assigned to {role_count} role(s)",
                details={"role_count": role_count},
            )

        await self.repo.delete(permission)
        logger.info("permission_retired", permission_id=str(permission_id))


# Type alias for dependency injection
PermissionSvc = Annotated[PermissionService, Depends(PermissionService)]
