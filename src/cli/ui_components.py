"""Componentes de UI para CLI (Rich).

Tablas y paneles reutilizables entre comandos; los comandos no construyen
estilos a mano.
"""

from __future__ import annotations

import json

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import ConnectivityResult, ContractRecord


def print_banner(console: Console) -> None:
    """Print the welcome banner (only from `agxcl version`)."""

    title = Text("AGXCL CLI", style="bold green")
    subtitle = Text("🏥 AgeFix Smart Contract Development CLI", style="cyan")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="green", padding=(1, 4)))


def build_checks_table(title: str = "AGXCL Validator Setup") -> Table:
    table = Table(title=title)
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")
    return table


def status_cell(ok: bool) -> Text:
    return Text("OK", style="green") if ok else Text("FAIL", style="bold red")


def build_connectivity_table(result: ConnectivityResult) -> Table:
    table = Table(title=f"Network connectivity ({result.percentage:.1f}%)")
    table.add_column("Endpoint", style="cyan")
    table.add_column("Reachable")
    table.add_column("Details", style="dim")
    for probe in result.probes:
        table.add_row(probe.endpoint, status_cell(probe.reachable), escape(probe.detail))
    return table


def build_contract_panel(record: ContractRecord) -> Panel:
    title = Text(record.name or record.address or "Contract", style="bold cyan")
    body = Text(json.dumps(record.model_dump(mode="json", exclude_none=True), indent=2, sort_keys=True))
    return Panel(body, title=title, border_style="cyan")
