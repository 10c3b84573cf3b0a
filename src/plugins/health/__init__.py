"""plugins/health — Liveness probe, reachable without an API key."""

from plugins.base import PluginMeta
from plugins.health.router import router

plugin = PluginMeta(
    name="health",
    router=router,
    tags=["Health"],
    description="Liveness probe reporting the number of stored endpoints.",
    public_paths=frozenset({"/health"}),
)
