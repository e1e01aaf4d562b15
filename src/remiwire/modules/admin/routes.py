"""Super-admin maintenance routes."""

from uuid import UUID

from pydantic import BaseModel

from remiwire.api.dependencies import DBSession
from remiwire.core.auth.dependencies import Context
from remiwire.core.permissions import require_super_admin
from remiwire.core.permissions.seed import seed_defaults
from remiwire.modules.admin import router


class SeededPrincipalResponse(BaseModel):
    id: UUID
    email: str
    role: str | None
    is_active: bool


class SeedResponse(BaseModel):
    permissions_created: list[str]
    roles_created: list[str]
    super_admin_created: bool
    super_admin: SeededPrincipalResponse | None = None


@router.post(
    "/seed",
    response_model=SeedResponse,
    summary="Run bootstrap seed",
    description=(
        "Create any missing default permissions, system roles and the super "
        "admin account. Safe to repeat. Super admin only."
    ),
)
@require_super_admin()
async def run_seed(
    db: DBSession,
    ctx: Context,  # noqa: ARG001 - read by the guard
) -> SeedResponse:
    result = await seed_defaults(db)
    return SeedResponse(
        permissions_created=result.permissions_created,
        roles_created=result.roles_created,
        super_admin_created=result.super_admin_created,
        super_admin=(
            SeededPrincipalResponse(
                id=result.super_admin.id,
                email=result.super_admin.email,
                role=result.super_admin.role,
                is_active=result.super_admin.is_active,
            )
            if result.super_admin
            else None
        ),
    )
