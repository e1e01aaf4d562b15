"""Permissions module: the canonical capability registry."""

from fastapi import APIRouter


router = APIRouter(prefix="/permissions", tags=["permissions"])


# Module metadata
__module__ = {
    "name": "permissions",
    "version": "1.0.0",
    "description": "Capability registry for role-based access control",
    "dependencies": [],
}


def register_routes() -> None:
    """Register routes - called after all imports are complete."""
    from remiwire.modules.permissions import routes  # noqa: F401
