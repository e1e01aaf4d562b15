"""Naming rules for roles and permissions."""

from remiwire.core.constants import RESERVED_ROLE_NAMES, SUPER_ADMIN_ROLE_LABEL


def normalize_role_name(name: str) -> str:
    """Lowercase and trim a role name for comparison."""
    return name.strip().lower()


def is_reserved_role_name(name: str) -> bool:
    """Return True if ``name`` is a spelling of the top-tier role.

    A name is reserved when, lowercased and trimmed, it equals one of the
    reserved spellings or contains any of them. "Team Super Admin Support"
    is therefore reserved while "Admin" is not.

    This is the single place the rule lives; role creation, role listing and
    role assignment all call it.
    """
    normalized = normalize_role_name(name)
    if normalized in RESERVED_ROLE_NAMES:
        return True
    return any(reserved in normalized for reserved in RESERVED_ROLE_NAMES)


def is_super_admin_label(label: str | None) -> bool:
    """Return True if a requested role label asks for the top-tier role."""
    if label is None:
        return False
    return label == SUPER_ADMIN_ROLE_LABEL or is_reserved_role_name(label)


def permission_name_for(module: str, action: str) -> str:
    """Build the conventional permission name for a (module, action) pair."""
    return f"{module}-{action}"
