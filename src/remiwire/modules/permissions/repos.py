"""Permission repository for database operations."""

from collections.abc import Iterable
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import and_, delete, func, or_, select

from remiwire.api.dependencies import DBSession
from remiwire.core.permissions.models import (
    Permission,
    PermissionAction,
    PermissionModule,
    role_permissions,
    staff_permissions,
)


class PermissionRepository:
    """Repository for Permission database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, permission: Permission) -> Permission:
        """Insert a permission inside a savepoint.

        Raises:
            IntegrityError: If the name or (module, action) is already taken
        """
        async with self.session.begin_nested():
            self.session.add(permission)
        await self.session.refresh(permission)
        return permission

    async def get_by_id(self, permission_id: UUID) -> Permission | None:
        stmt = select(Permission).where(Permission.id == permission_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_ids(self, permission_ids: Iterable[UUID]) -> list[Permission]:
        ids = list(permission_ids)
        if not ids:
            return []
        stmt = (
            select(Permission)
            .where(Permission.id.in_(ids))
            .order_by(Permission.module, Permission.action)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_conflict(
        self,
        name: str,
        module: PermissionModule,
        action: PermissionAction,
        exclude_id: UUID | None = None,
    ) -> Permission | None:
        """Find a permission clashing on name or on (module, action)."""
        stmt = select(Permission).where(
            or_(
                Permission.name == name,
                and_(Permission.module == module, Permission.action == action),
            )
        )
        if exclude_id is not None:
            stmt = stmt.where(Permission.id != exclude_id)
        result = await self.session.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def list_permissions(
        self,
        module: PermissionModule | None = None,
        is_active: bool | None = None,
    ) -> list[Permission]:
        stmt = select(Permission).order_by(Permission.module, Permission.action)
        if module is not None:
            stmt = stmt.where(Permission.module == module)
        if is_active is not None:
            stmt = stmt.where(Permission.is_active == is_active)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_role_references(self, permission_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(role_permissions)
            .where(role_permissions.c.permission_id == permission_id)
        )
        return (await self.session.execute(stmt)).scalar_one()

    async def update(self, permission: Permission) -> Permission:
        await self.session.flush()
        await self.session.refresh(permission)
        return permission

    async def delete(self, permission: Permission) -> None:
        """Delete a permission and drop it from every staff snapshot."""
        await self.session.execute(
            delete(staff_permissions).where(
                staff_permissions.c.permission_id == permission.id
            )
        )
        await self.session.delete(permission)
        await self.session.flush()


# Type alias for dependency injection
PermissionRepo = Annotated[PermissionRepository, Depends(PermissionRepository)]
