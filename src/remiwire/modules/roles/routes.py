"""Role catalog API routes."""

from uuid import UUID

from fastapi import Query, status

from remiwire.core.auth.dependencies import Context
from remiwire.core.permissions import require_capability, require_super_admin
from remiwire.core.permissions.models import Role
from remiwire.modules.permissions.services import permission_matrix
from remiwire.modules.roles import router
from remiwire.modules.roles.schemas import (
    RoleCreate,
    RoleDetailResponse,
    RoleListResponse,
    RoleResponse,
    RoleUpdate,
)
from remiwire.modules.roles.services import RoleSvc


def _detail(role: Role) -> RoleDetailResponse:
    base = RoleResponse.model_validate(role)
    return RoleDetailResponse(
        **base.model_dump(exclude={"permission_count"}),
        permission_matrix=permission_matrix(role.permissions),
    )


@router.post(
    "",
    response_model=RoleDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create role",
    description="Create a role from registered, active permissions. Requires staff-management:manage.",
)
@require_capability("staff-management", "manage")
async def create_role(
    data: RoleCreate,
    service: RoleSvc,
    ctx: Context,
) -> RoleDetailResponse:
    role = await service.create(data, created_by=ctx.actor_id)
    return _detail(role)


@router.get(
    "",
    response_model=RoleListResponse,
    summary="List roles",
    description="List roles ordered by level (highest first), then name.",
)
@require_capability("staff-management", "read")
async def list_roles(
    service: RoleSvc,
    ctx: Context,  # noqa: ARG001 - read by the guard
    is_active: bool | None = Query(None, description="Filter by active flag"),
) -> RoleListResponse:
    roles = await service.list_roles(is_active=is_active)
    return RoleListResponse(
        items=[RoleResponse.model_validate(r) for r in roles],
        total=len(roles),
    )


@router.get(
    "/available",
    response_model=RoleListResponse,
    summary="List assignable roles",
    description="Active roles that can be assigned to staff. The super admin role is never listed.",
)
@require_capability("staff-management", "read")
async def list_available_roles(
    service: RoleSvc,
    ctx: Context,  # noqa: ARG001 - read by the guard
) -> RoleListResponse:
    roles = await service.list_available()
    return RoleListResponse(
        items=[RoleResponse.model_validate(r) for r in roles],
        total=len(roles),
    )


@router.get(
    "/{role_id}",
    response_model=RoleDetailResponse,
    summary="Get role by ID",
)
@require_capability("staff-management", "read")
async def get_role(
    role_id: UUID,
    service: RoleSvc,
    ctx: Context,  # noqa: ARG001 - read by the guard
) -> RoleDetailResponse:
    role = await service.get_role(role_id)
    return _detail(role)


@router.patch(
    "/{role_id}",
    response_model=RoleDetailResponse,
    summary="Update role",
    description=(
        "Update a role. Staff already holding the role keep their permission "
        "snapshot until the role is assigned again. Requires staff-management:manage."
    ),
)
@require_capability("staff-management", "manage")
async def update_role(
    role_id: UUID,
    data: RoleUpdate,
    service: RoleSvc,
    ctx: Context,
) -> RoleDetailResponse:
    role = await service.update(role_id, data, actor=ctx.principal)
    return _detail(role)


@router.delete(
    "/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete role",
    description="Delete a non-system role that no staff member holds. Super admin only.",
)
@require_super_admin()
async def delete_role(
    role_id: UUID,
    service: RoleSvc,
    ctx: Context,  # noqa: ARG001 - read by the guard
) -> None:
    await service.delete(role_id)
