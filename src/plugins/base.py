"""
plugins/base.py — What an API plugin declares to the application factory.

Each sub-package of ``plugins/`` exposes a module-level ``plugin`` object::

    # src/plugins/endpoint_groups/__init__.py
    from plugins.base import PluginMeta
    from plugins.endpoint_groups.router import router

    plugin = PluginMeta(name="endpoint_groups", router=router, tags=["Endpoint Groups"])

``create_app`` mounts ``router`` under ``tags`` and lets every path listed in
``public_paths`` through without an API key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi import APIRouter, FastAPI


@dataclass
class PluginMeta:
    name: str
    router: APIRouter
    tags: list[str] = field(default_factory=list)
    description: str = ""
    public_paths: frozenset[str] = frozenset()
    """Paths served without the DOCKHAND_API_KEY check."""

    def mount(self, app: FastAPI) -> None:
        app.include_router(self.router, tags=self.tags or None)

    def __repr__(self) -> str:
        return f"PluginMeta(name={self.name!r}, routes={len(self.router.routes)})"
