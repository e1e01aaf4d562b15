"""Pydantic schemas for permission registry operations."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from remiwire.core.constants import (
    MAX_PERMISSION_DESCRIPTION_LENGTH,
    MAX_PERMISSION_NAME_LENGTH,
    MIN_PERMISSION_NAME_LENGTH,
    PERMISSION_NAME_PATTERN,
)
from remiwire.core.permissions.models import PermissionAction, PermissionModule


# module -> action -> granted
PermissionMatrix = dict[str, dict[str, bool]]


def _normalize_name(v: Any) -> Any:
    if isinstance(v, str):
        return v.strip().lower()
    return v


class PermissionCreate(BaseModel):
    """Schema for registering a permission."""

    name: str = Field(
        ...,
        min_length=MIN_PERMISSION_NAME_LENGTH,
        max_length=MAX_PERMISSION_NAME_LENGTH,
        pattern=PERMISSION_NAME_PATTERN,
        examples=["orders-read"],
    )
    module: PermissionModule
    action: PermissionAction
    description: str | None = Field(None, max_length=MAX_PERMISSION_DESCRIPTION_LENGTH)
    is_active: bool = True

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, v: Any) -> Any:
        return _normalize_name(v)


class PermissionUpdate(BaseModel):
    """Schema for updating a permission. Omitted fields are left unchanged."""

    name: str | None = Field(
        None,
        min_length=MIN_PERMISSION_NAME_LENGTH,
        max_length=MAX_PERMISSION_NAME_LENGTH,
        pattern=PERMISSION_NAME_PATTERN,
    )
    module: PermissionModule | None = None
    action: PermissionAction | None = None
    description: str | None = Field(None, max_length=MAX_PERMISSION_DESCRIPTION_LENGTH)
    is_active: bool | None = None

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, v: Any) -> Any:
        return _normalize_name(v)


class PermissionResponse(BaseModel):
    id: UUID
    name: str
    module: PermissionModule
    action: PermissionAction
    key: str
    description: str | None = None
    is_active: bool
    created_by_id: UUID | None = None
    updated_by_id: UUID | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PermissionListResponse(BaseModel):
    """Schema for listing permissions, with the module x action grid."""

    items: list[PermissionResponse]
    total: int
    matrix: PermissionMatrix
