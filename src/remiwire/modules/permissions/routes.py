"""Permission registry API routes."""

from uuid import UUID

from fastapi import Query, status

from remiwire.core.auth.dependencies import Context
from remiwire.core.permissions import (
    PermissionModule,
    require_capability,
    require_super_admin,
)
from remiwire.modules.permissions import router
from remiwire.modules.permissions.schemas import (
    PermissionCreate,
    PermissionListResponse,
    PermissionResponse,
    PermissionUpdate,
)
from remiwire.modules.permissions.services import PermissionSvc, permission_matrix


@router.post(
    "",
    response_model=PermissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register permission",
    description="Add a capability to the registry. Requires staff-management:manage.",
)
@require_capability("staff-management", "manage")
async def create_permission(
    data: PermissionCreate,
    service: PermissionSvc,
    ctx: Context,
) -> PermissionResponse:
    permission = await service.register(data, created_by=ctx.actor_id)
    return PermissionResponse.model_validate(permission)


@router.get(
    "",
    response_model=PermissionListResponse,
    summary="List permissions",
    description="List registered capabilities ordered by module and action.",
)
@require_capability("staff-management", "read")
async def list_permissions(
    service: PermissionSvc,
    ctx: Context,  # noqa: ARG001 - read by the guard
    module: PermissionModule | None = Query(None, description="Filter by module"),
    is_active: bool | None = Query(None, description="Filter by active flag"),
) -> PermissionListResponse:
    permissions = await service.list_permissions(module=module, is_active=is_active)
    return PermissionListResponse(
        items=[PermissionResponse.model_validate(p) for p in permissions],
        total=len(permissions),
        matrix=permission_matrix(permissions),
    )


@router.get(
    "/{permission_id}",
    response_model=PermissionResponse,
    summary="Get permission by ID",
)
@require_capability("staff-management", "read")
async def get_permission(
    permission_id: UUID,
    service: PermissionSvc,
    ctx: Context,  # noqa: ARG001 - read by the guard
) -> PermissionResponse:
    permission = await service.get_permission(permission_id)
    return PermissionResponse.model_validate(permission)


@router.patch(
    "/{permission_id}",
    response_model=PermissionResponse,
    summary="Update permission",
    description="Rename, move or soft-disable a capability. Requires staff-management:manage.",
)
@require_capability("staff-management", "manage")
async def update_permission(
    permission_id: UUID,
    data: PermissionUpdate,
    service: PermissionSvc,
    ctx: Context,
) -> PermissionResponse:
    permission = await service.update(permission_id, data, updated_by=ctx.actor_id)
    return PermissionResponse.model_validate(permission)


@router.delete(
    "/{permission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Retire permission",
    description="Delete a capability no role references. Super admin only.",
)
@require_super_admin()
async def delete_permission(
    permission_id: UUID,
    service: PermissionSvc,
    ctx: Context,  # noqa: ARG001 - read by the guard
) -> None:
    await service.retire(permission_id)
