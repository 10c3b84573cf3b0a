"""
plugins/__init__.py — Loads the API plugins mounted by ``dashboard/server.py``.

Plugins are sub-packages of ``plugins/`` exposing ``plugin = PluginMeta(...)``.
The ones named in ``ENABLED_PLUGINS`` are loaded in that order, which is also
the order their routes appear in the OpenAPI document.
"""

from __future__ import annotations

import importlib

from core.logger import LOGGER
from plugins.base import PluginMeta

ENABLED_PLUGINS = (
    "health",
    "endpoints",
    "endpoint_groups",
)

_LOADED: dict[str, PluginMeta] = {}


def load_plugin(name: str) -> PluginMeta:
    """Import ``plugins.<name>`` and return its ``plugin`` object (cached)."""
    if name not in _LOADED:
        mod = importlib.import_module(f"plugins.{name}")
        meta = getattr(mod, "plugin", None)
        if not isinstance(meta, PluginMeta):
            raise TypeError(f"plugins.{name} does not define a PluginMeta named 'plugin'")
        _LOADED[name] = meta
        LOGGER.debug("Loaded %r", meta)
    return _LOADED[name]


def register_all(names: tuple[str, ...] = ENABLED_PLUGINS) -> list[PluginMeta]:
    return [load_plugin(name) for name in names]


def public_paths(plugins: list[PluginMeta]) -> set[str]:
    """Union of every plugin's unauthenticated paths."""
    paths: set[str] = set()
    for meta in plugins:
        paths |= meta.public_paths
    return paths
