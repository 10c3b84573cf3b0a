"""
dockhand — CLI entry point.

Usage:
  dockhand endpoints
  dockhand edit <id> [--name NAME] [--endpoint-url HOST:PORT] [--public-url URL] [--group ID]
                     [--tls/--no-tls] [--tls-mode MODE] [--ca-cert FILE] [--cert FILE] [--key FILE]
                     [--dry-run]
  dockhand context
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.markup import escape

from core.logger import set_verbosity
from core.state import AppState
from core.tls import TLSMode

from . import __version__
from .client import EndpointService
from .display import console, info, print_endpoint_form, spinner, upload_progress, warn
from .endpoint_edit import ENDPOINT_LIST_VIEW, EndpointEditView
from .endpoint_list import EndpointListView
from .navigation import Navigator
from .notifications import Notifications

# ── App ───────────────────────────────────────────────────────────────────────

app = typer.Typer(
    name="dockhand",
    help="Manage remote endpoints and their TLS settings",
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

# ── Shared options ────────────────────────────────────────────────────────────

URL_OPT = typer.Option("http://localhost:9080", "--url", "-u", help="Endpoint API URL", envvar="DOCKHAND_URL")
KEY_OPT = typer.Option("", "--api-key", help="Bearer token for the endpoint API", envvar="DOCKHAND_API_KEY")
VERBOSE_OPT = typer.Option(False, "--verbose", "-v", help="Show debug logging")


@app.callback()
def root(
    version: bool = typer.Option(False, "--version", "-V", help="Print version and exit", is_eager=True),
) -> None:
    """[bold]dockhand[/bold] — endpoint management CLI"""
    if version:
        console.print(f"dockhand [bold]v{__version__}[/bold]")
        raise typer.Exit()


# ── Wiring ────────────────────────────────────────────────────────────────────


def _build_navigator(service: EndpointService, notifications: Notifications) -> Navigator:
    navigator = Navigator()
    list_view = EndpointListView(service, notifications)
    navigator.register(ENDPOINT_LIST_VIEW, list_view.handle)
    return navigator


def _read_pem(path: Path | None) -> str | None:
    return path.read_text(encoding="utf-8") if path is not None else None


# ── Subcommands ───────────────────────────────────────────────────────────────


@app.command()
def endpoints(url: str = URL_OPT, api_key: str = KEY_OPT, verbose: bool = VERBOSE_OPT) -> None:
    """List every managed endpoint."""
    set_verbosity(verbose)

    async def _run() -> bool:
        async with EndpointService(base_url=url, api_key=api_key) as service:
            view = EndpointListView(service, Notifications())
            await view.show()
            return view.endpoints is not None

    raise typer.Exit(0 if asyncio.run(_run()) else 1)


@app.command()
def edit(
    endpoint_id: Annotated[int, typer.Argument(help="Identifier of the endpoint to edit")],
    url: str = URL_OPT,
    api_key: str = KEY_OPT,
    name: Optional[str] = typer.Option(None, "--name", help="New display name"),
    endpoint_url: Optional[str] = typer.Option(None, "--endpoint-url", help="Connection URL, scheme optional"),
    public_url: Optional[str] = typer.Option(None, "--public-url", help="Public-facing URL"),
    group: Optional[int] = typer.Option(None, "--group", help="Endpoint group id"),
    tls: Optional[bool] = typer.Option(None, "--tls/--no-tls", help="Enable or disable TLS"),
    tls_mode: Optional[TLSMode] = typer.Option(None, "--tls-mode", help="TLS verification mode"),
    ca_cert: Optional[Path] = typer.Option(None, "--ca-cert", exists=True, dir_okay=False, help="CA certificate PEM"),
    cert: Optional[Path] = typer.Option(None, "--cert", exists=True, dir_okay=False, help="Client certificate PEM"),
    key: Optional[Path] = typer.Option(None, "--key", exists=True, dir_okay=False, help="Client key PEM"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the update payload instead of sending it"),
    verbose: bool = VERBOSE_OPT,
) -> None:
    """
    Edit endpoint [bold]ENDPOINT_ID[/bold].  Options left out keep their current value.

    Examples:
      dockhand edit 2 --public-url 10.0.0.5
      dockhand edit 2 --tls --tls-mode tls_client_ca --ca-cert ca.pem --cert cert.pem --key key.pem
    """
    set_verbosity(verbose)
    state = AppState.load()

    async def _run() -> bool:
        async with EndpointService(base_url=url, api_key=api_key) as service:
            notifications = Notifications()
            view = EndpointEditView(endpoint_id, service, notifications, _build_navigator(service, notifications), state)
            with spinner(f"Loading endpoint {endpoint_id}"):
                if not await view.initialize():
                    return False

            form = view.form
            if name is not None:
                form.name = name
            if endpoint_url is not None:
                form.url = endpoint_url
            if public_url is not None:
                form.public_url = public_url
            if group is not None:
                form.group_id = group
            if tls is not None:
                form.security.tls = tls
            if tls_mode is not None:
                form.security.tls_mode = tls_mode
            if ca_cert is not None:
                form.security.tls_ca_cert = _read_pem(ca_cert)
            if cert is not None:
                form.security.tls_cert = _read_pem(cert)
            if key is not None:
                form.security.tls_key = _read_pem(key)

            print_endpoint_form(form, view.kind, view.groups)
            if dry_run:
                console.print_json(data=view.build_request().to_payload())
                warn("Dry run: nothing was sent")
                return True

            with upload_progress("Updating endpoint") as report:
                view.on_upload_progress = report
                return await view.submit()

    success = asyncio.run(_run())
    if success and not dry_run:
        state.save()
    raise typer.Exit(0 if success else 1)


@app.command()
def context() -> None:
    """Show the active endpoint context kept between runs."""
    state = AppState.load()
    ctx = state.endpoint_context
    info(f"Endpoint management  [bold]{'enabled' if state.endpoint_management else 'disabled'}[/bold]")
    info(f"Active endpoint      [bold]{ctx.endpoint_id if ctx.endpoint_id is not None else '—'}[/bold]")
    info(f"Public URL           [bold]{escape(ctx.public_url) or '—'}[/bold]")


# ── Entry ─────────────────────────────────────────────────────────────────────


def main() -> None:
    app()


if __name__ == "__main__":
    main()
