"""Staff module: back-office accounts and their permission snapshots."""

from fastapi import APIRouter


router = APIRouter(prefix="/staff", tags=["staff"])


# Module metadata
__module__ = {
    "name": "staff",
    "version": "1.0.0",
    "description": "Staff accounts, role assignment and access levels",
    "dependencies": ["roles", "permissions"],
}


def register_routes() -> None:
    """Register routes - called after all imports are complete."""
    from remiwire.modules.staff import routes  # noqa: F401
