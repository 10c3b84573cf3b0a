"""plugins/endpoints — Managed endpoint records and their TLS material."""

from plugins.base import PluginMeta
from plugins.endpoints.router import router

plugin = PluginMeta(
    name="endpoints",
    description="List, inspect and update endpoints, storing TLS certificates on disk.",
    router=router,
    tags=["Endpoints"],
)
