"""Rich display helpers — panels, tables, spinners."""

from __future__ import annotations

from contextlib import contextmanager

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich.theme import Theme

from core.models import ConnectionKind, Endpoint, Group
from core.update import EndpointForm

# ── Colour palette ───────────────────────────────────────────────────────────
THEME = Theme(
    {
        "dock.accent": "#2EA3D6",
        "dock.accent2": "#7CC6E8",
        "dock.accent3": "#1D6E93",
        "dock.silver": "#A4B4CC",
        "dock.muted": "#5A6278",
        "dock.ok": "#3d9e5a",
        "dock.warn": "#d4a017",
        "dock.err": "#e05555",
    }
)

console = Console(theme=THEME, highlight=False)
err_console = Console(theme=THEME, stderr=True)

_MISSING = "[dock.muted]—[/dock.muted]"


def _group_name(group_id: int, groups: list[Group]) -> str:
    for g in groups:
        if g.id == group_id:
            return escape(g.name)
    return str(group_id)


def _pem_summary(pem: str | None) -> str:
    if not pem:
        return _MISSING
    lines = pem.strip().splitlines()
    return f"[dock.silver]{escape(lines[0]) if lines else 'PEM'}[/dock.silver] [dock.muted]({len(pem)} bytes)[/dock.muted]"


# ── Endpoints ─────────────────────────────────────────────────────────────────


def print_endpoints(endpoints: list[Endpoint], groups: list[Group] | None = None) -> None:
    if not endpoints:
        console.print("  [dock.muted]No endpoints registered.[/dock.muted]")
        return

    groups = groups or []
    table = Table(box=box.ROUNDED, show_header=True, header_style="dock.accent3", padding=(0, 1))
    table.add_column("Id", style="dock.muted", justify="right")
    table.add_column("Name", style="dock.accent", no_wrap=True)
    table.add_column("URL", style="dock.silver", max_width=48)
    table.add_column("Kind", no_wrap=True)
    table.add_column("Group", style="dock.muted")
    table.add_column("TLS", no_wrap=True)

    for ep in endpoints:
        kind_style = "dock.accent2" if ep.kind == ConnectionKind.LOCAL else "dock.silver"
        table.add_row(
            str(ep.id),
            escape(ep.name),
            escape(ep.url),
            f"[{kind_style}]{ep.kind.value}[/{kind_style}]",
            _group_name(ep.group_id, groups),
            "[dock.ok]on[/dock.ok]" if ep.tls_config.tls else "[dock.muted]off[/dock.muted]",
        )

    console.print(table)


def print_endpoint_form(form: EndpointForm, kind: ConnectionKind, groups: list[Group]) -> None:
    """Render the edit form as currently filled in."""
    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    table.add_column(style="dock.muted", no_wrap=True, width=16)
    table.add_column(style="dock.silver")

    security = form.security
    table.add_row("Name", f"[dock.accent]{escape(form.name)}[/dock.accent]")
    table.add_row("URL", escape(form.url))
    table.add_row("Public URL", escape(form.public_url) or _MISSING)
    table.add_row("Group", _group_name(form.group_id, groups))
    table.add_row("Kind", kind.value)
    table.add_row("TLS", "[dock.ok]enabled[/dock.ok]" if security.tls else "[dock.muted]disabled[/dock.muted]")
    if security.tls:
        table.add_row("TLS mode", security.tls_mode.value)
        flags = security.flags
        if not flags.skip_verify:
            table.add_row("CA certificate", _pem_summary(security.tls_ca_cert))
        if not flags.skip_client_verify:
            table.add_row("Certificate", _pem_summary(security.tls_cert))
            table.add_row("Key", _pem_summary(security.tls_key))

    console.print(Panel(table, title="[dock.accent]Endpoint[/dock.accent]", border_style="dock.accent3", padding=(1, 2)))


# ── Spinners ──────────────────────────────────────────────────────────────────


@contextmanager
def spinner(message: str):
    """Context manager that shows a spinner while work is done."""
    with Progress(
        SpinnerColumn(style="dock.accent"),
        TextColumn(f"[dock.silver]{message}[/dock.silver]"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as prog:
        prog.add_task("", total=None)
        yield prog


@contextmanager
def upload_progress(message: str):
    """Progress bar fed with upload fractions in [0, 1]; yields an update callable."""
    with Progress(
        SpinnerColumn(style="dock.accent"),
        TextColumn(f"[dock.silver]{message}[/dock.silver]"),
        BarColumn(bar_width=30, style="dock.accent3", complete_style="dock.accent"),
        console=console,
        transient=True,
    ) as prog:
        task = prog.add_task("", total=1.0)
        yield lambda fraction: prog.update(task, completed=fraction)


# ── Utility ───────────────────────────────────────────────────────────────────


def ok(message: str) -> None:
    console.print(f"  [dock.ok]✓[/dock.ok]  {message}")


def warn(message: str) -> None:
    console.print(f"  [dock.warn]⚠[/dock.warn]  {message}")


def err(message: str) -> None:
    err_console.print(f"  [dock.err]✗[/dock.err]  [dock.err]{message}[/dock.err]")


def info(message: str) -> None:
    console.print(f"  [dock.muted]·[/dock.muted]  [dock.silver]{message}[/dock.silver]")
