"""CineBusca FastAPI application package."""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS: dict[str, str] = {
    "app": "app.main",
    "create_app": "app.main",
    "CatalogClient": "app.services.catalog_client",
    "CatalogController": "app.services.controller",
    "project_view": "app.projector",
}

__all__ = list(_EXPORTS)


def __getattr__(name: str) -> Any:
    # Importing ``app`` must not build the FastAPI app.
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module 'app' has no attribute {name}")
    return getattr(import_module(module_name), name)
