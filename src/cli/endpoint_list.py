"""Endpoint list view — cached list of endpoints, refetched on demand."""

from __future__ import annotations

from core.models import Endpoint, Group

from .client import EndpointAPIError, EndpointService
from .display import print_endpoints
from .notifications import Notifications


class EndpointListView:
    def __init__(self, service: EndpointService, notifications: Notifications, render: bool = True) -> None:
        self.service = service
        self.notifications = notifications
        self.render = render
        self.endpoints: list[Endpoint] | None = None
        self.groups: list[Group] = []
        self.fetch_count = 0

    async def show(self, reload: bool = False) -> list[Endpoint]:
        """Render the list, fetching it first when nothing is cached or ``reload`` is set."""
        if reload or self.endpoints is None:
            try:
                self.endpoints = await self.service.endpoints()
                self.groups = await self.service.groups()
            except EndpointAPIError as exc:
                self.notifications.error("Failure", exc, "Unable to retrieve endpoints")
                self.endpoints = None
                return []
            self.fetch_count += 1
        if self.render:
            print_endpoints(self.endpoints, self.groups)
        return self.endpoints

    async def handle(self, params: dict, reload: bool) -> list[Endpoint]:  # noqa: ARG002
        """Navigator entry point."""
        return await self.show(reload=reload)
