"""Notification sink for what the operator is told about loads and updates."""

from __future__ import annotations

import logging
from typing import NamedTuple

from rich.markup import escape

from core.logger import LOGGER

from .display import err, ok, warn

_LOG_LEVELS = {"success": logging.INFO, "warning": logging.WARNING, "error": logging.ERROR}


class Notification(NamedTuple):
    severity: str
    title: str
    detail: str


class Notifications:
    """Fire-and-forget (severity, title, detail) sink.

    Everything is kept in ``history``; with ``echo`` enabled it is also
    printed through the rich console.
    """

    def __init__(self, echo: bool = True) -> None:
        self.echo = echo
        self.history: list[Notification] = []

    def notify(self, severity: str, title: str, detail: str) -> None:
        note = Notification(severity, title, detail)
        self.history.append(note)
        LOGGER.log(_LOG_LEVELS.get(severity, logging.INFO), "%s: %s", title, detail)
        if not self.echo:
            return
        title, detail = escape(title), escape(detail)
        if severity == "success":
            ok(f"{title} [dock.muted]{detail}[/dock.muted]")
        elif severity == "warning":
            warn(f"{title}: {detail}")
        else:
            err(f"{title}: {detail}")

    def success(self, title: str, detail: str) -> None:
        self.notify("success", title, detail)

    def warning(self, title: str, detail: str) -> None:
        self.notify("warning", title, detail)

    def error(self, title: str, error: BaseException | str, message: str) -> None:
        self.notify("error", title, f"{message}: {error}")
