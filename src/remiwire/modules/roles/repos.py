"""Role repository for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, select

from remiwire.api.dependencies import DBSession
from remiwire.core.permissions.models import Role


class RoleRepository:
    """Repository for Role database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, role: Role) -> Role:
        """Insert a role inside a savepoint.

        Raises:
            IntegrityError: If the name is already taken
        """
        async with self.session.begin_nested():
            self.session.add(role)
        await self.session.refresh(role)
        return role

    async def get_by_id(self, role_id: UUID) -> Role | None:
        stmt = select(Role).where(Role.id == role_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str, exclude_id: UUID | None = None) -> Role | None:
        """Get a role by name, ignoring case and surrounding whitespace."""
        stmt = select(Role).where(func.lower(Role.name) == name.strip().lower())
        if exclude_id is not None:
            stmt = stmt.where(Role.id != exclude_id)
        result = await self.session.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def list_roles(self, is_active: bool | None = None) -> list[Role]:
        """List roles, most privileged first."""
        stmt = select(Role).order_by(Role.level.desc(), Role.name)
        if is_active is not None:
            stmt = stmt.where(Role.is_active == is_active)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, role: Role) -> Role:
        await self.session.flush()
        await self.session.refresh(role)
        return role

    async def delete(self, role: Role) -> None:
        await self.session.delete(role)
        await self.session.flush()


# Type alias for dependency injection
RoleRepo = Annotated[RoleRepository, Depends(RoleRepository)]
