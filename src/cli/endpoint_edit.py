"""
Endpoint edit view.

One instance per edit session.  :meth:`EndpointEditView.initialize` loads the
endpoint and the group list concurrently; :meth:`EndpointEditView.submit`
turns the form into a partial update and sends it.  Submission follows a
small state machine:

    idle ──submit──▶ submitting ──ok──▶ done
                         │
                         └──error──▶ failed ──submit──▶ submitting …

A second submit while ``submitting`` is rejected.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from enum import Enum

from core.errors import EndpointNotLoadedError, SubmissionInProgressError
from core.logger import LOGGER
from core.models import ConnectionKind, Endpoint, Group, classify_connection, strip_protocol
from core.state import AppState
from core.update import EndpointForm, EndpointUpdateRequest, build_update_request

from .client import EndpointAPIError, EndpointService
from .navigation import Navigator
from .notifications import Notifications

ENDPOINT_LIST_VIEW = "endpoints"


class SubmitState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    DONE = "done"
    FAILED = "failed"


class EndpointEditView:
    def __init__(
        self,
        endpoint_id: int,
        service: EndpointService,
        notifications: Notifications,
        navigator: Navigator,
        app_state: AppState,
    ) -> None:
        self.endpoint_id = endpoint_id
        self.service = service
        self.notifications = notifications
        self.navigator = navigator
        self.app_state = app_state

        self.endpoint: Endpoint | None = None
        self.groups: list[Group] = []
        self.kind: ConnectionKind | None = None
        self.display_url = ""
        self.form: EndpointForm | None = None

        self.state = SubmitState.IDLE
        self.upload_progress: float | None = None
        self.on_upload_progress: Callable[[float], None] | None = None

    @property
    def loaded(self) -> bool:
        return self.endpoint is not None

    @property
    def in_progress(self) -> bool:
        return self.state == SubmitState.SUBMITTING

    # ── Load ──────────────────────────────────────────────────────────────────

    async def initialize(self) -> bool:
        """Fetch endpoint and groups together; populate the view only if both succeed."""
        if not self.app_state.endpoint_management:
            await self.navigator.go(ENDPOINT_LIST_VIEW)
            return False

        try:
            endpoint, groups = await asyncio.gather(
                self.service.endpoint(self.endpoint_id),
                self.service.groups(),
            )
        except EndpointAPIError as exc:
            self.notifications.error("Failure", exc, "Unable to retrieve endpoint details")
            return False

        # classify on the stored URL, before the scheme is stripped for display
        self.kind = classify_connection(endpoint.url)
        self.display_url = strip_protocol(endpoint.url)
        self.endpoint = endpoint
        self.groups = groups
        self.form = EndpointForm.from_endpoint(endpoint)
        LOGGER.debug("Loaded endpoint %s (%s, %d groups)", endpoint.id, self.kind.value, len(groups))
        return True

    # ── Submit ────────────────────────────────────────────────────────────────

    def build_request(self) -> EndpointUpdateRequest:
        if self.endpoint is None or self.form is None:
            raise EndpointNotLoadedError(f"Endpoint {self.endpoint_id} is not loaded")
        return build_update_request(self.endpoint, self.form, self.kind)

    def _on_progress(self, fraction: float) -> None:
        self.upload_progress = fraction
        if self.on_upload_progress is not None:
            self.on_upload_progress(fraction)

    async def submit(self) -> bool:
        """Send the form as a partial update.

        Returns True when the update was applied.  Raises EndpointNotLoadedError
        before a successful load and SubmissionInProgressError while a previous
        submit is still in flight.
        """
        if self.in_progress:
            raise SubmissionInProgressError(f"Update of endpoint {self.endpoint_id} already in progress")
        request = self.build_request()

        self.state = SubmitState.SUBMITTING
        self.upload_progress = None
        try:
            await self.service.update_endpoint(self.endpoint_id, request, on_progress=self._on_progress)
        except EndpointAPIError as exc:
            self.state = SubmitState.FAILED
            self.notifications.error("Failure", exc, "Unable to update endpoint")
            return False
        except BaseException:
            self.state = SubmitState.FAILED
            raise

        # applied server-side from here on
        self.state = SubmitState.DONE
        context = self.app_state.endpoint_context
        context.endpoint_id = self.endpoint_id
        context.set_public_url(self.form.public_url)
        self.notifications.success("Endpoint updated", self.form.name)
        await self.navigator.go(ENDPOINT_LIST_VIEW, reload=True)
        return True
