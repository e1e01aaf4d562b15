"""Feature modules with auto-discovery."""

import logging
from importlib import import_module
from pathlib import Path

from fastapi import APIRouter


logger = logging.getLogger(__name__)


def discover_modules() -> list[APIRouter]:
    """Auto-discover and return routers from all modules.

    Scans the modules directory for packages exposing a ``router``.
    A package's ``register_routes()`` hook, when present, is called so its
    route handlers are attached before the router is returned.

    Returns:
        List of FastAPI routers from discovered modules.
    """
    modules_dir = Path(__file__).parent
    routers: list[APIRouter] = []

    for path in sorted(modules_dir.iterdir()):
        if path.is_dir() and not path.name.startswith("_"):
            try:
                module = import_module(f"remiwire.modules.{path.name}")
            except ImportError as e:
                logger.warning(f"Failed to load module {path.name}: {e}")
                continue

            if hasattr(module, "register_routes"):
                module.register_routes()
            if hasattr(module, "router"):
                routers.append(module.router)
                logger.info(f"Loaded module: {path.name}")

    return routers
