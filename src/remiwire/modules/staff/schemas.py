"""Pydantic schemas for staff operations."""

import re
from datetime import datetime
from typing import Any, Self
from uuid import UUID

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

from remiwire.core.constants import (
    MAX_DEPARTMENT_LENGTH,
    MAX_EMPLOYEE_ID_LENGTH,
    MAX_PASSWORD_LENGTH,
    MAX_PERSON_NAME_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_ROLE_NAME_LENGTH,
    MIN_PASSWORD_LENGTH,
    MIN_PERSON_NAME_LENGTH,
)
from remiwire.modules.permissions.schemas import PermissionResponse
from remiwire.modules.staff.models import StaffTier


# ============================================================
# Password Validation
# ============================================================

# Password complexity rules: (regex pattern, human-readable name)
PASSWORD_COMPLEXITY_RULES: list[tuple[str, str]] = [
    (r"[A-Z]", "uppercase letter"),
    (r"[a-z]", "lowercase letter"),
    (r"\d", "digit"),
    (r"[!@#$%^&*(),.?\":{}|<>\[\]\\;'`~_+\-=/]", "special character"),
]


def validate_password_complexity(password: str) -> str:
    """Validate password meets complexity requirements.

    Requirements:
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit
    - At least one special character

    Raises:
        ValueError: If password doesn't meet requirements
    """
    missing = [
        name
        for pattern, name in PASSWORD_COMPLEXITY_RULES
        if not re.search(pattern, password)
    ]

    if missing:
        if len(missing) == 1:
            raise ValueError(f"Password must contain at least one {missing[0]}")
        raise ValueError(f"Password must contain at least one: {', '.join(missing)}")

    return password


def _strip(v: Any) -> Any:
    if isinstance(v, str):
        return v.strip()
    return v


def _upper(v: Any) -> Any:
    if isinstance(v, str):
        return v.strip().upper() or None
    return v


# ============================================================
# Staff Schemas
# ============================================================


class StaffProfile(BaseModel):
    """Profile fields shared by create and update."""

    phone_number: str | None = Field(None, max_length=MAX_PHONE_LENGTH)
    department: str | None = Field(None, max_length=MAX_DEPARTMENT_LENGTH)
    employee_id: str | None = Field(None, max_length=MAX_EMPLOYEE_ID_LENGTH)

    @field_validator("employee_id", mode="before")
    @classmethod
    def normalize_employee_id(cls, v: Any) -> Any:
        return _upper(v)


class StaffCreate(StaffProfile):
    """Schema for registering a staff member.

    The role may be given by id or by name. Asking for the super admin
    role by any spelling is refused by the service.
    """

    first_name: str = Field(
        ..., min_length=MIN_PERSON_NAME_LENGTH, max_length=MAX_PERSON_NAME_LENGTH
    )
    last_name: str = Field(
        ..., min_length=MIN_PERSON_NAME_LENGTH, max_length=MAX_PERSON_NAME_LENGTH
    )
    email: EmailStr
    password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )
    role_id: UUID | None = None
    role: str | None = Field(None, max_length=MAX_ROLE_NAME_LENGTH)
    is_active: bool = True

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, v: Any) -> Any:
        return _strip(v)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Validate password complexity."""
        return validate_password_complexity(v)


class StaffUpdate(StaffProfile):
    """Schema for updating a staff member. Omitted fields are left unchanged."""

    first_name: str | None = Field(
        None, min_length=MIN_PERSON_NAME_LENGTH, max_length=MAX_PERSON_NAME_LENGTH
    )
    last_name: str | None = Field(
        None, min_length=MIN_PERSON_NAME_LENGTH, max_length=MAX_PERSON_NAME_LENGTH
    )
    email: EmailStr | None = None
    is_active: bool | None = None

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, v: Any) -> Any:
        return _strip(v)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str | None) -> str | None:
        return v.lower() if v else v


class RoleAssignment(BaseModel):
    """Schema for assigning a role by id or by name."""

    role_id: UUID | None = None
    role: str | None = Field(None, max_length=MAX_ROLE_NAME_LENGTH)

    @model_validator(mode="after")
    def exactly_one(self) -> Self:
        if (self.role_id is None) == (self.role is None):
            raise ValueError("Provide exactly one of role_id or role")
        return self


class PermissionAssignment(BaseModel):
    permission_ids: list[UUID]


class PasswordChange(BaseModel):
    """Schema for changing one's own password."""

    current_password: str = Field(..., min_length=1, max_length=MAX_PASSWORD_LENGTH)
    new_password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )

    @field_validator("new_password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Validate password complexity."""
        return validate_password_complexity(v)


class StaffResponse(BaseModel):
    """Schema for staff response data. The password hash is never included."""

    id: UUID
    first_name: str
    last_name: str
    email: str
    tier: StaffTier
    role: str | None = Field(None, validation_alias=AliasChoices("role_label", "role"))
    role_id: UUID | None = None
    permissions: list[PermissionResponse]
    is_active: bool
    is_blocked: bool
    phone_number: str | None = None
    department: str | None = None
    employee_id: str | None = None
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class StaffListResponse(BaseModel):
    """Schema for listing staff."""

    items: list[StaffResponse]
    total: int
    page: int
    page_size: int


class RoleStat(BaseModel):
    role: str | None
    count: int


class StaffStatsResponse(BaseModel):
    """Active staff counted per role label."""

    total_active: int
    by_role: list[RoleStat]
