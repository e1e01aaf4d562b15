"""Request-scoped principals.

A principal is built once per request from the authenticated staff row and
never mutated afterwards. The top-tier principal is its own type so that the
bypass in the decision function is a type check, not a string comparison.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID

from remiwire.core.constants import SUPER_ADMIN_ROLE_LABEL


if TYPE_CHECKING:
    from remiwire.modules.staff.models import Staff


@dataclass(frozen=True, slots=True)
class SuperAdminPrincipal:
    id: UUID
    email: str
    is_active: bool = True
    is_blocked: bool = False

    @property
    def role_name(self) -> str:
        return SUPER_ADMIN_ROLE_LABEL


@dataclass(frozen=True, slots=True)
class StaffPrincipal:
    """An ordinary staff member.

    ``capabilities`` holds both the permission names ("orders-read") and the
    "module:action" keys of the staff member's permission snapshot.
    """

    id: UUID
    email: str
    role_id: UUID | None = None
    role_name: str | None = None
    capabilities: frozenset[str] = field(default_factory=frozenset)
    is_active: bool = True
    is_blocked: bool = False


Principal = SuperAdminPrincipal | StaffPrincipal


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Everything a handler needs to know about who is calling."""

    principal: Principal | None = None
    request_id: str | None = None

    @property
    def actor_id(self) -> UUID | None:
        return self.principal.id if self.principal else None

    @property
    def is_super_admin(self) -> bool:
        return isinstance(self.principal, SuperAdminPrincipal)


def principal_from_staff(staff: "Staff") -> Principal:
    """Build the immutable principal for a loaded staff row."""
    if staff.is_super_admin:
        return SuperAdminPrincipal(
            id=staff.id,
            email=staff.email,
            is_active=staff.is_active,
            is_blocked=staff.is_blocked,
        )

    capabilities: set[str] = set()
    for permission in staff.permissions:
        if not permission.is_active:
            continue
        capabilities.add(permission.name)
        capabilities.add(permission.key)

    return StaffPrincipal(
        id=staff.id,
        email=staff.email,
        role_id=staff.role_id,
        role_name=staff.role.name if staff.role else None,
        capabilities=frozenset(capabilities),
        is_active=staff.is_active,
        is_blocked=staff.is_blocked,
    )
