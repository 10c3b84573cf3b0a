"""
dashboard/server.py — FastAPI application serving the endpoint API.

Startup modes:
  dockhand-server                           → serve on DOCKHAND_PORT (default DASHBOARD_PORT)
  uvicorn dashboard.server:app --reload     → dev mode with auto-reload

Routes come from the plugins listed in ``plugins.ENABLED_PLUGINS``.  Storage
errors raised by the routes are turned into HTTP errors here, so route
handlers only deal with the happy path.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from core.config import DASHBOARD_PORT, DATA_DIR, REPO_ROOT
from core.errors import EndpointNotFoundError, EndpointValidationError
from core.logger import LOGGER
from plugins import public_paths, register_all

# ── Logging ────────────────────────────────────────────────────────────────────


class _QuietAccessFilter(logging.Filter):
    """Demote access-log lines for polled paths to DEBUG."""

    def __init__(self, paths: Iterable[str]) -> None:
        super().__init__()
        self.paths = tuple(paths)

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        if any(f" {p} " in msg for p in self.paths):
            record.levelno = logging.DEBUG
            record.levelname = "DEBUG"
        return True


# ── Auth middleware ────────────────────────────────────────────────────────────

_DOC_PATHS = {"/docs", "/openapi.json"}


class _APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Bearer-token gate, active only while DOCKHAND_API_KEY is set.

    Send:  Authorization: Bearer <secret>   OR   X-Dockhand-Key: <secret>
    """

    def __init__(self, app, exempt: set[str]) -> None:
        super().__init__(app)
        self.exempt = exempt | _DOC_PATHS

    async def dispatch(self, request: Request, call_next):
        api_key = os.environ.get("DOCKHAND_API_KEY", "")
        if not api_key or request.url.path in self.exempt:
            return await call_next(request)

        if request.headers.get("Authorization", "") == f"Bearer {api_key}":
            return await call_next(request)
        if request.headers.get("X-Dockhand-Key", "") == api_key:
            return await call_next(request)

        LOGGER.warning("Rejected %s %s: missing or wrong API key", request.method, request.url.path)
        return JSONResponse(
            {"error": "Unauthorized", "detail": "Provide Authorization: Bearer <DOCKHAND_API_KEY>"},
            status_code=401,
        )


# ── Error mapping ──────────────────────────────────────────────────────────────


async def _not_found(request: Request, exc: EndpointNotFoundError) -> JSONResponse:
    return JSONResponse({"detail": str(exc)}, status_code=404)


async def _invalid(request: Request, exc: EndpointValidationError) -> JSONResponse:
    LOGGER.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"detail": str(exc)}, status_code=400)


# ── Application factory ────────────────────────────────────────────────────────


@asynccontextmanager
async def _lifespan(app: FastAPI):  # noqa: ARG001
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    yield


def create_app() -> FastAPI:
    """Build the endpoint API with every enabled plugin mounted."""
    plugins = register_all()
    exempt = public_paths(plugins)

    application = FastAPI(title="dockhand", docs_url="/docs", redoc_url=None, lifespan=_lifespan)
    application.add_middleware(_APIKeyMiddleware, exempt=exempt)
    application.add_exception_handler(EndpointNotFoundError, _not_found)
    application.add_exception_handler(EndpointValidationError, _invalid)

    for plugin in plugins:
        plugin.mount(application)

    access_log = logging.getLogger("uvicorn.access")
    if not any(isinstance(f, _QuietAccessFilter) for f in access_log.filters):
        access_log.addFilter(_QuietAccessFilter(exempt))
    return application


app = create_app()


# ── Startup helpers ────────────────────────────────────────────────────────────


def _load_env() -> None:
    """Read ``KEY=VALUE`` lines from the repo's .env without overriding the environment."""
    env_file = REPO_ROOT / ".env"
    if not env_file.exists():
        return
    for line in env_file.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            k, _, v = line.partition("=")
            os.environ.setdefault(k.strip(), v.strip())


# ── Entry point ────────────────────────────────────────────────────────────────


def main():
    _load_env()
    port = int(os.environ.get("DOCKHAND_PORT", DASHBOARD_PORT))
    host = os.environ.get("DOCKHAND_HOST", "127.0.0.1")
    LOGGER.info("Endpoint API → http://%s:%s", host, port)
    uvicorn.run(app, host=host, port=port, log_level="warning")


if __name__ == "__main__":
    main()
