"""core/state.py — Application state handed explicitly to the views that need it."""

from __future__ import annotations

from dataclasses import dataclass, field

from core.logger import LOGGER
from core.storage import load_state, save_state


@dataclass
class EndpointContext:
    """Address of the endpoint the operator is currently working against."""

    endpoint_id: int | None = None
    public_url: str = ""

    def set_public_url(self, public_url: str) -> None:
        LOGGER.debug("Active endpoint public URL: %r → %r", self.public_url, public_url)
        self.public_url = public_url


@dataclass
class AppState:
    """Holds the feature flags and the active endpoint context for one process."""

    endpoint_management: bool = True
    endpoint_context: EndpointContext = field(default_factory=EndpointContext)

    @classmethod
    def load(cls) -> AppState:
        """Restore the state saved by a previous CLI run; defaults when none exists."""
        data = load_state()
        ctx = data.get("endpoint_context", {})
        return cls(
            endpoint_management=bool(data.get("endpoint_management", True)),
            endpoint_context=EndpointContext(
                endpoint_id=ctx.get("endpoint_id"),
                public_url=ctx.get("public_url", ""),
            ),
        )

    def save(self) -> None:
        save_state(
            {
                "endpoint_management": self.endpoint_management,
                "endpoint_context": {
                    "endpoint_id": self.endpoint_context.endpoint_id,
                    "public_url": self.endpoint_context.public_url,
                },
            }
        )
