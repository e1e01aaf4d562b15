"""Staff repository for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, or_, select

from remiwire.api.dependencies import DBSession
from remiwire.core.permissions.models import Role
from remiwire.modules.staff.models import Staff, StaffTier


class StaffRepository:
    """Repository for Staff database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, staff: Staff) -> Staff:
        """Create a new staff member.

        The insert runs in a savepoint so a unique-index violation leaves
        the outer transaction usable.

        Raises:
            IntegrityError: If the email or employee id is already taken
        """
        async with self.session.begin_nested():
            self.session.add(staff)
        await self.session.refresh(staff)
        return staff

    async def get_by_id(self, staff_id: UUID) -> Staff | None:
        stmt = select(Staff).where(Staff.id == staff_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Staff | None:
        """Get a staff member by email address (case-insensitive)."""
        stmt = select(Staff).where(Staff.email == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_employee_id(self, employee_id: str) -> Staff | None:
        stmt = select(Staff).where(Staff.employee_id == employee_id.strip().upper())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_super_admin(self) -> Staff | None:
        stmt = select(Staff).where(Staff.tier == StaffTier.SUPER_ADMIN).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_staff(
        self,
        page: int = 1,
        page_size: int = 10,
        search: str | None = None,
        role_id: UUID | None = None,
        is_active: bool | None = None,
    ) -> tuple[list[Staff], int]:
        """List staff with pagination and optional filters.

        Args:
            page: Page number (1-indexed)
            page_size: Number of items per page
            search: Case-insensitive match on name, email, employee id or department
            role_id: Only staff holding this role
            is_active: Only active (True) or inactive (False) staff

        Returns:
            Tuple of (staff list, total count)
        """
        conditions = []
        if search:
            pattern = f"%{search.strip().lower()}%"
            conditions.append(
                or_(
                    func.lower(Staff.first_name).like(pattern),
                    func.lower(Staff.last_name).like(pattern),
                    func.lower(Staff.email).like(pattern),
                    func.lower(Staff.employee_id).like(pattern),
                    func.lower(Staff.department).like(pattern),
                )
            )
        if role_id is not None:
            conditions.append(Staff.role_id == role_id)
        if is_active is not None:
            conditions.append(Staff.is_active == is_active)

        count_stmt = select(func.count()).select_from(Staff).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        offset = (page - 1) * page_size
        stmt = (
            select(Staff)
            .where(*conditions)
            .order_by(Staff.created_at.desc(), Staff.email)
            .offset(offset)
            .limit(page_size)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def count_by_role(self, role_id: UUID) -> int:
        stmt = select(func.count()).select_from(Staff).where(Staff.role_id == role_id)
        return (await self.session.execute(stmt)).scalar_one()

    async def active_counts_by_role(self) -> list[tuple[str | None, int]]:
        """Count active ordinary staff grouped by role name.

        Staff without a role are counted under ``None``.
        """
        stmt = (
            select(Role.name, func.count(Staff.id))
            .select_from(Staff)
            .outerjoin(Role, Staff.role_id == Role.id)
            .where(Staff.is_active.is_(True), Staff.tier == StaffTier.STAFF)
            .group_by(Role.name)
            .order_by(Role.name)
        )
        result = await self.session.execute(stmt)
        return [(name, count) for name, count in result.all()]

    async def count_super_admins(self, active_only: bool = True) -> int:
        stmt = select(func.count()).select_from(Staff).where(
            Staff.tier == StaffTier.SUPER_ADMIN
        )
        if active_only:
            stmt = stmt.where(Staff.is_active.is_(True))
        return (await self.session.execute(stmt)).scalar_one()

    async def update(self, staff: Staff) -> Staff:
        """Flush pending changes and reload the row.

        Raises:
            IntegrityError: If a changed unique column collides
        """
        await self.session.flush()
        await self.session.refresh(staff)
        return staff

    async def delete(self, staff: Staff) -> None:
        await self.session.delete(staff)
        await self.session.flush()


# Type alias for dependency injection
StaffRepo = Annotated[StaffRepository, Depends(StaffRepository)]
