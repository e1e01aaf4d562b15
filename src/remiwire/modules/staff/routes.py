"""Staff API routes."""

from uuid import UUID

from fastapi import Query, status

from remiwire.api.dependencies import Pagination
from remiwire.core.auth.dependencies import Context, CurrentStaff
from remiwire.core.permissions import require_capability
from remiwire.modules.staff import router
from remiwire.modules.staff.schemas import (
    PasswordChange,
    PermissionAssignment,
    RoleAssignment,
    StaffCreate,
    StaffListResponse,
    StaffResponse,
    StaffStatsResponse,
    StaffUpdate,
)
from remiwire.modules.staff.services import StaffSvc


# ============================================================
# Self-service Routes
# ============================================================


@router.get(
    "/me",
    response_model=StaffResponse,
    summary="Get current staff member",
    description="Returns the authenticated staff member's profile and permissions.",
)
async def get_me(current_staff: CurrentStaff) -> StaffResponse:
    return StaffResponse.model_validate(current_staff)


@router.post(
    "/me/password",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Change own password",
)
async def change_my_password(
    data: PasswordChange,
    current_staff: CurrentStaff,
    service: StaffSvc,
) -> None:
    await service.change_password(current_staff.id, data.current_password, data.new_password)


# ============================================================
# Staff Management Routes
# ============================================================


@router.post(
    "",
    response_model=StaffResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register staff member",
    description="Create a staff account, optionally with a role. Requires staff-management:create.",
)
@require_capability("staff-management", "create")
async def create_staff(
    data: StaffCreate,
    service: StaffSvc,
    ctx: Context,
) -> StaffResponse:
    staff = await service.register(data, created_by=ctx.actor_id)
    return StaffResponse.model_validate(staff)


@router.get(
    "",
    response_model=StaffListResponse,
    summary="List staff",
    description="List staff with pagination, search and filters. Requires staff-management:read.",
)
@require_capability("staff-management", "read")
async def list_staff(
    service: StaffSvc,
    ctx: Context,  # noqa: ARG001 - read by the guard
    pagination: Pagination,
    search: str | None = Query(None, description="Match name, email, employee ID or department"),
    role_id: UUID | None = Query(None, description="Filter by role"),
    is_active: bool | None = Query(None, description="Filter by active flag"),
) -> StaffListResponse:
    staff, total = await service.list_staff(
        page=pagination.page,
        page_size=pagination.page_size,
        search=search,
        role_id=role_id,
        is_active=is_active,
    )
    return StaffListResponse(
        items=[StaffResponse.model_validate(s) for s in staff],
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.get(
    "/stats",
    response_model=StaffStatsResponse,
    summary="Staff per role",
    description="Count active staff per role label. Requires staff-management:read.",
)
@require_capability("staff-management", "read")
async def staff_stats(
    service: StaffSvc,
    ctx: Context,  # noqa: ARG001 - read by the guard
) -> StaffStatsResponse:
    return await service.role_stats()


@router.get(
    "/{staff_id}",
    response_model=StaffResponse,
    summary="Get staff member by ID",
)
@require_capability("staff-management", "read")
async def get_staff(
    staff_id: UUID,
    service: StaffSvc,
    ctx: Context,  # noqa: ARG001 - read by the guard
) -> StaffResponse:
    staff = await service.get_staff(staff_id)
    return StaffResponse.model_validate(staff)


@router.patch(
    "/{staff_id}",
    response_model=StaffResponse,
    summary="Update staff member",
    description="Update profile fields or the active flag. Requires staff-management:update.",
)
@require_capability("staff-management", "update")
async def update_staff(
    staff_id: UUID,
    data: StaffUpdate,
    service: StaffSvc,
    ctx: Context,
) -> StaffResponse:
    staff = await service.update(staff_id, data, updated_by=ctx.actor_id)
    return StaffResponse.model_validate(staff)


@router.delete(
    "/{staff_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete staff member",
    description="Hard-delete a staff account. Requires staff-management:delete.",
)
@require_capability("staff-management", "delete")
async def delete_staff(
    staff_id: UUID,
    service: StaffSvc,
    ctx: Context,  # noqa: ARG001 - read by the guard
) -> None:
    await service.delete(staff_id)


@router.post(
    "/{staff_id}/role",
    response_model=StaffResponse,
    summary="Assign role",
    description=(
        "Assign a role and copy its current permissions onto the staff member. "
        "Requires staff-management:manage."
    ),
)
@require_capability("staff-management", "manage")
async def assign_role(
    staff_id: UUID,
    data: RoleAssignment,
    service: StaffSvc,
    ctx: Context,
) -> StaffResponse:
    staff = await service.assign_role(
        staff_id,
        role_id=data.role_id,
        role_name=data.role,
        assigned_by=ctx.actor_id,
    )
    return StaffResponse.model_validate(staff)


@router.put(
    "/{staff_id}/permissions",
    response_model=StaffResponse,
    summary="Replace permissions",
    description="Replace the staff member's permission set. Requires staff-management:manage.",
)
@require_capability("staff-management", "manage")
async def assign_permissions(
    staff_id: UUID,
    data: PermissionAssignment,
    service: StaffSvc,
    ctx: Context,
) -> StaffResponse:
    staff = await service.assign_permissions(
        staff_id, data.permission_ids, assigned_by=ctx.actor_id
    )
    return StaffResponse.model_validate(staff)


@router.post(
    "/{staff_id}/block",
    response_model=StaffResponse,
    summary="Block staff member",
    description="Block a staff account. Requires staff-management:update.",
)
@require_capability("staff-management", "update")
async def block_staff(
    staff_id: UUID,
    service: StaffSvc,
    ctx: Context,
) -> StaffResponse:
    staff = await service.set_blocked(staff_id, True, updated_by=ctx.actor_id)
    return StaffResponse.model_validate(staff)


@router.post(
    "/{staff_id}/unblock",
    response_model=StaffResponse,
    summary="Unblock staff member",
    description="Unblock a staff account. Requires staff-management:update.",
)
@require_capability("staff-management", "update")
async def unblock_staff(
    staff_id: UUID,
    service: StaffSvc,
    ctx: Context,
) -> StaffResponse:
    staff = await service.set_blocked(staff_id, False, updated_by=ctx.actor_id)
    return StaffResponse.model_validate(staff)
