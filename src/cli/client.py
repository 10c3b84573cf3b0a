"""Async client for the endpoint API, with upload progress on updates."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Callable
from typing import Any, TypeVar

import httpx

from core.config import DASHBOARD_URL_DEFAULT
from core.logger import LOGGER
from core.models import Endpoint, Group
from core.update import EndpointUpdateRequest

ProgressCallback = Callable[[float], None]
T = TypeVar("T")


class EndpointAPIError(Exception):
    """Raised when the endpoint API is unreachable or answers with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _error_detail(r: httpx.Response) -> str:
    try:
        detail = r.json().get("detail")
    except (ValueError, AttributeError):
        detail = None
    return str(detail) if detail else r.text[:200]


def _decode(what: str, decoder: Callable[[Any], T], data: Any) -> T:
    try:
        return decoder(data)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise EndpointAPIError(f"Malformed {what} in API response: {exc!r}") from exc


class EndpointService:
    """
    Endpoint API client.

    Every call raises :class:`EndpointAPIError` on failure, whether the
    transport failed or the server rejected the request.
    """

    def __init__(
        self,
        base_url: str = DASHBOARD_URL_DEFAULT,
        api_key: str = "",
        timeout: float = 30.0,
        chunk_size: int = 16 * 1024,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.chunk_size = chunk_size
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._http = httpx.AsyncClient(base_url=self.base_url, headers=headers, timeout=timeout, transport=transport)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            r = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise EndpointAPIError(f"{method} {path} failed: {exc}") from exc
        if not r.is_success:
            raise EndpointAPIError(f"{_error_detail(r)} ({r.status_code})", r.status_code)
        try:
            return r.json()
        except ValueError as exc:
            raise EndpointAPIError(f"{method} {path} returned a non-JSON body", r.status_code) from exc

    # ── Endpoints ─────────────────────────────────────────────────────────────

    async def endpoint(self, endpoint_id: int) -> Endpoint:
        return _decode("endpoint", Endpoint.from_api, await self._request("GET", f"/endpoints/{endpoint_id}"))

    async def endpoints(self) -> list[Endpoint]:
        data = await self._request("GET", "/endpoints")
        return _decode("endpoint list", lambda items: [Endpoint.from_api(e) for e in items], data)

    async def update_endpoint(
        self,
        endpoint_id: int,
        request: EndpointUpdateRequest,
        on_progress: ProgressCallback | None = None,
    ) -> Endpoint:
        """PUT the partial update, streaming the body so progress can be reported."""
        body = json.dumps(request.to_payload()).encode("utf-8")
        LOGGER.debug("Updating endpoint %s (%d bytes)", endpoint_id, len(body))
        data = await self._request(
            "PUT",
            f"/endpoints/{endpoint_id}",
            content=self._upload(body, on_progress),
            headers={"Content-Type": "application/json", "Content-Length": str(len(body))},
        )
        return _decode("endpoint", Endpoint.from_api, data)

    async def _upload(self, body: bytes, on_progress: ProgressCallback | None) -> AsyncIterator[bytes]:
        total = len(body)
        sent = 0
        for start in range(0, total, self.chunk_size):
            chunk = body[start : start + self.chunk_size]
            yield chunk
            sent += len(chunk)
            if on_progress is not None:
                on_progress(sent / total)

    # ── Groups ────────────────────────────────────────────────────────────────

    async def groups(self) -> list[Group]:
        data = await self._request("GET", "/endpoint_groups")
        return _decode("group list", lambda items: [Group.from_api(g) for g in items], data)

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> EndpointService:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
