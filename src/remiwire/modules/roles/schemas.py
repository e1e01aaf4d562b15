"""Pydantic schemas for role catalog operations."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from remiwire.core.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_ROLE_LEVEL,
    MAX_ROLE_NAME_LENGTH,
    MIN_ROLE_LEVEL,
    MIN_ROLE_NAME_LENGTH,
)
from remiwire.modules.permissions.schemas import PermissionMatrix, PermissionResponse


def _strip(v: Any) -> Any:
    if isinstance(v, str):
        return v.strip()
    return v


def _dedupe(ids: list[UUID] | None) -> list[UUID] | None:
    if ids is None:
        return None
    return list(dict.fromkeys(ids))


class RoleCreate(BaseModel):
    """Schema for creating a role. Duplicate permission ids are collapsed."""

    name: str = Field(..., min_length=MIN_ROLE_NAME_LENGTH, max_length=MAX_ROLE_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    permission_ids: list[UUID] = Field(default_factory=list)
    level: int = Field(1, ge=MIN_ROLE_LEVEL, le=MAX_ROLE_LEVEL)
    is_active: bool = True

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return _strip(v)

    @field_validator("permission_ids")
    @classmethod
    def dedupe_permission_ids(cls, v: list[UUID]) -> list[UUID]:
        return _dedupe(v) or []


class RoleUpdate(BaseModel):
    """Schema for updating a role.

    When ``permission_ids`` is present the whole permission set is replaced.
    """

    name: str | None = Field(
        None, min_length=MIN_ROLE_NAME_LENGTH, max_length=MAX_ROLE_NAME_LENGTH
    )
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    permission_ids: list[UUID] | None = None
    level: int | None = Field(None, ge=MIN_ROLE_LEVEL, le=MAX_ROLE_LEVEL)
    is_active: bool | None = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return _strip(v)

    @field_validator("permission_ids")
    @classmethod
    def dedupe_permission_ids(cls, v: list[UUID] | None) -> list[UUID] | None:
        return _dedupe(v)


class RoleResponse(BaseModel):
    id: UUID
    name: str
    description: str | None = None
    level: int
    is_system_role: bool
    is_active: bool
    permissions: list[PermissionResponse]
    created_by_id: UUID | None = None
    updated_by_id: UUID | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def permission_count(self) -> int:
        return len(self.permissions)


class RoleDetailResponse(RoleResponse):
    """Role with its module x action permission grid."""

    permission_matrix: PermissionMatrix


class RoleListResponse(BaseModel):
    items: list[RoleResponse]
    total: int
