"""plugins/endpoint_groups — Group reference data for the endpoint group selector."""

from plugins.base import PluginMeta
from plugins.endpoint_groups.router import router

plugin = PluginMeta(
    name="endpoint_groups",
    description="Read-only list of endpoint groups.",
    router=router,
    tags=["Endpoint Groups"],
)
