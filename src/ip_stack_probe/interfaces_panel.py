"""Render parsed interfaces as rich panels for quick review."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ip_stack_probe.detection.types import AddressRecord, NetInterface


def _format_records(records: Sequence[AddressRecord]) -> str:
    if not records:
        return "-"
    lines: list[str] = []
    for record in records:
        label = "global" if record.is_global else "reserved"
        if record.scope and record.scope != label:
            label = f"{label}, scope {record.scope}"
        lines.append(f"{record.literal} ({label})")
    return "\n".join(lines)


def render_interfaces_panel(interfaces: Iterable[NetInterface], subtitle: str | None = None) -> Panel:
    """Build a rich Panel listing each interface and its classified addresses."""

    table = Table("Interface", "IPv4", "IPv6", expand=True)
    for iface in interfaces:
        table.add_row(iface.name or "?", _format_records(iface.ipv4), _format_records(iface.ipv6))
    return Panel(table, title="Network interfaces", subtitle=subtitle)


def print_interfaces_panel(
    interfaces: Iterable[NetInterface],
    console: Console | None = None,
    subtitle: str | None = None,
) -> None:
    """Render and print an interface panel to the provided console."""

    output_console = console or Console(force_terminal=False)
    output_console.print(render_interfaces_panel(interfaces, subtitle=subtitle))
