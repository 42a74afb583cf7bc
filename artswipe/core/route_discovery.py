"""FastAPI route auto-discovery.

Conventions:
- Put route modules under `artswipe/routes/`.
- Each module exports a `router: APIRouter` with its own `prefix` and `tags`.
- Files starting with `_` are ignored.
- A router without a prefix is mounted at `/api/<file stem>`.
"""

import importlib
import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, FastAPI

logger = logging.getLogger(__name__)

_DEFAULT_ROUTES_DIR = Path(__file__).parent.parent / "routes"


class RouterDiscoveryError(Exception):
    """Raised when router discovery fails."""


def _iter_route_files(routes_dir: Path) -> list[Path]:
    return sorted(
        (
            py_file
            for py_file in routes_dir.rglob("*.py")
            if py_file.is_file() and not py_file.name.startswith("_")
        ),
        key=lambda path: path.as_posix(),
    )


def _module_path(routes_dir: Path, py_file: Path) -> str:
    """`<root>/artswipe/routes/images.py` -> `artswipe.routes.images`"""
    package = f"{routes_dir.parent.name}.{routes_dir.name}"
    return ".".join((package, *py_file.relative_to(routes_dir).with_suffix("").parts))


def discover_routers(routes_dir: Path) -> list[tuple[APIRouter, dict[str, Any]]]:
    """Import every route module and collect its router.

    Returns a list of `(router, include_kwargs)` pairs.
    """
    routers: list[tuple[APIRouter, dict[str, Any]]] = []

    for py_file in _iter_route_files(routes_dir):
        module_path = _module_path(routes_dir, py_file)

        try:
            module = importlib.import_module(module_path)
        except Exception as e:
            msg = (
                f"Failed to import route module '{module_path}'.\n"
                f"  File: {py_file}\n"
                f"  Hint: Ensure the package is importable and dependencies are installed"
            )
            raise RouterDiscoveryError(msg) from e

        router = getattr(module, "router", None)
        if not isinstance(router, APIRouter):
            msg = (
                f"Router file '{py_file.name}' must export 'router' as an APIRouter instance.\n"
                f"  File: {py_file}\n"
                f"  Module: {module_path}\n"
                f"  Type: {type(router).__name__}"
            )
            raise RouterDiscoveryError(msg)

        # Passing prefix/tags for a router that already has them would apply them twice
        include_kwargs: dict[str, Any] = {}
        if not router.prefix:
            include_kwargs["prefix"] = f"/api/{py_file.stem}"
        if not router.tags:
            include_kwargs["tags"] = [py_file.stem]

        routers.append((router, include_kwargs))

    return routers


def register_routers(app: FastAPI, routes_dir: Path | None = None) -> None:
    """Discover and register routers with a FastAPI app.

    Fails fast on startup if a route module can't be imported or doesn't export a
    valid `router`.
    """
    routes_dir = routes_dir or _DEFAULT_ROUTES_DIR

    if not routes_dir.exists():
        msg = f"Routes directory not found: {routes_dir}"
        raise FileNotFoundError(msg)

    logger.info("Discovering routes in: %s", routes_dir)

    routers = discover_routers(routes_dir)
    if not routers:
        logger.warning("No routers discovered in %s", routes_dir)
        return

    for router, config in routers:
        app.include_router(router, **config)
        logger.info(
            "  - %s (tags: %s)",
            config.get("prefix") or router.prefix,
            config.get("tags") or list(router.tags),
        )
