"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from adapters.network import Port
from core.domain.models import ServiceInfo


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("nimbus", style="bold cyan")
    subtitle = Text("Descubrimiento • Versiones • Recursos de red", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _or_dash(value: object) -> str:
    return "-" if value is None or value == "" else str(value)


def build_service_info_table(info: ServiceInfo, service_type: str) -> Table:
    table = Table(title=f"Service: {service_type}")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("Root URL", info.root_url)
    table.add_row("Minimum version", _or_dash(info.minimum_version))
    table.add_row("Current version", _or_dash(info.current_version))
    return table


def build_ports_table(ports: Iterable[Port]) -> Table:
    table = Table(title="Ports")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Status", style="green")
    table.add_column("MAC", style="magenta")
    table.add_column("Fixed IPs", style="white")
    table.add_column("Device owner", style="dim")
    for port in ports:
        ips = ", ".join(str(ip.ip_address) for ip in port.fixed_ips)
        table.add_row(
            port.id,
            _or_dash(port.name),
            port.status.value,
            _or_dash(port.mac_address),
            ips or "-",
            _or_dash(port.device_owner),
        )
    return table
