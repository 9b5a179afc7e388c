"""Feature modules with auto-discovery."""

import logging
from importlib import import_module
from pathlib import Path

from fastapi import APIRouter


logger = logging.getLogger(__name__)


def discover_modules() -> list[APIRouter]:
    """Auto-discover and return routers from all modules.

    This function scans the modules directory for subpackages whose
    ``routes`` module defines a ``router`` attribute.

    Returns:
        List of FastAPI routers from discovered modules.
    """
    modules_dir = Path(__file__).parent
    routers: list[APIRouter] = []

    for path in sorted(modules_dir.iterdir()):
        if (
            path.is_dir()
            and not path.name.startswith("_")
            and (path / "routes.py").exists()
        ):
            module = import_module(f"login_service.modules.{path.name}.routes")
            if hasattr(module, "router"):
                routers.append(module.router)
                logger.info(f"Loaded module: {path.name}")

    return routers
