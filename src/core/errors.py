"""core/errors.py — Domain exceptions shared by the API server and the CLI views."""


class EndpointError(Exception):
    """Base class for every endpoint management failure."""


# ── Server side ────────────────────────────────────────────────────────────────


class EndpointNotFoundError(EndpointError):
    """Raised when no endpoint record matches the requested identifier."""

    def __init__(self, endpoint_id: int) -> None:
        super().__init__(f"Endpoint {endpoint_id} not found")
        self.endpoint_id = endpoint_id


class EndpointValidationError(EndpointError):
    """Raised when an update carries values the endpoint cannot be configured with."""


# ── View side ──────────────────────────────────────────────────────────────────


class EndpointNotLoadedError(EndpointError):
    """Raised when an update is attempted before the endpoint finished loading."""


class SubmissionInProgressError(EndpointError):
    """Raised when submit is invoked while a previous update is still in flight."""


class NavigationError(EndpointError):
    """Raised when navigating to a view name nobody registered."""
