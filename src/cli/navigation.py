"""Named-view navigation for the CLI."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, NamedTuple

from core.errors import NavigationError
from core.logger import LOGGER

# handler(params, reload) → anything the view wants to return
ViewHandler = Callable[[dict, bool], Awaitable[Any]]


class Visit(NamedTuple):
    name: str
    params: dict
    reload: bool


class Navigator:
    """Routes ``go(name)`` calls to registered view handlers and keeps a history."""

    def __init__(self) -> None:
        self._views: dict[str, ViewHandler] = {}
        self.history: list[Visit] = []

    def register(self, name: str, handler: ViewHandler) -> None:
        self._views[name] = handler

    async def go(self, name: str, params: dict | None = None, reload: bool = False) -> Any:
        handler = self._views.get(name)
        if handler is None:
            raise NavigationError(f"No view registered under {name!r}")
        params = params or {}
        self.history.append(Visit(name, params, reload))
        LOGGER.debug("Navigating to %s %s (reload=%s)", name, params, reload)
        return await handler(params, reload)

    @property
    def current(self) -> str | None:
        return self.history[-1].name if self.history else None
