"""Roles module: the catalog of named, leveled permission sets."""

from fastapi import APIRouter


router = APIRouter(prefix="/roles", tags=["roles"])


# Module metadata
__module__ = {
    "name": "roles",
    "version": "1.0.0",
    "description": "Role catalog with system-role protection",
    "dependencies": ["permissions"],
}


def register_routes() -> None:
    """Register routes - called after all imports are complete."""
    from remiwire.modules.roles import routes  # noqa: F401
