"""Admin module: super-admin maintenance endpoints."""

from fastapi import APIRouter


router = APIRouter(prefix="/admin", tags=["admin"])


# Module metadata
__module__ = {
    "name": "admin",
    "version": "1.0.0",
    "description": "Bootstrap seeding and other super-admin operations",
    "dependencies": ["staff"],
}


def register_routes() -> None:
    """Register routes - called after all imports are complete."""
    from remiwire.modules.admin import routes  # noqa: F401
