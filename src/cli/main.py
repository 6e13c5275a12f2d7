"""CLI de diagnóstico (Typer + Rich).

Por qué una CLI mínima:
- Permite comprobar descubrimiento y listados contra una nube real sin
  escribir un script.
- No pretende ser un cliente completo: la librería es el producto.
"""

from __future__ import annotations

import json
import logging
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.cloud import Cloud
from adapters.http_client import HttpxExecutor
from cli import doctor
from cli.ui_components import build_ports_table, build_service_info_table, print_banner
from core.config import AppSettings, write_user_env_vars
from core.errors import NimbusError
from core.services.discovery import fetch_service_info

app = typer.Typer(no_args_is_help=True, help="nimbus: versioned REST resources of a cloud control plane.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def _build_cloud(settings: AppSettings) -> Cloud:
    return Cloud.from_settings(settings)


def _build_executor(settings: AppSettings) -> HttpxExecutor:
    return HttpxExecutor.from_settings(settings)


def _fail(exc: Exception) -> NoReturn:
    _console.print(f"[red]Error:[/red] {exc}")
    raise typer.Exit(code=1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging (discovery, HTTP, pagination)."),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


@app.command()
def discover(
    endpoint: str = typer.Argument(..., help="Catalog endpoint URL of the service."),
    service_type: str = typer.Option("network", "--service-type", help="Logical service type."),
    major_version: str = typer.Option("v2.0", "--major-version", help="Major version id, e.g. v2.0 or v2.1."),
) -> None:
    """Resolve an endpoint to its versioned root URL and micro-version range."""

    settings = AppSettings()
    with _build_executor(settings) as executor:
        try:
            info = fetch_service_info(endpoint, executor, service_type, major_version)
        except NimbusError as exc:
            _fail(exc)
    _console.print(build_service_info_table(info, service_type))


@app.command()
def ports(
    network: Optional[str] = typer.Option(None, "--network", help="Network name or ID."),
    name: Optional[str] = typer.Option(None, "--name", help="Port name."),
    device_id: Optional[str] = typer.Option(None, "--device-id", help="Attached device ID."),
    limit: Optional[int] = typer.Option(None, "--limit", min=1, help="Single page of at most N ports."),
) -> None:
    """List ports in a table."""

    settings = AppSettings()
    with _build_cloud(settings) as cloud:
        query = cloud.find_ports()
        if network:
            query.with_network(network)
        if name:
            query.with_name(name)
        if device_id:
            query.with_device_id(device_id)
        if limit:
            query.with_limit(limit)
        try:
            items = query.all()
        except NimbusError as exc:
            _fail(exc)
    _console.print(build_ports_table(items))


@app.command()
def configure(
    token: Optional[str] = typer.Option(None, "--token", help="Auth token (X-Auth-Token)."),
    endpoint: list[str] = typer.Option(
        [],
        "--endpoint",
        help="Catalog entry as SERVICE=URL, e.g. network=https://cloud:9696/. Repeatable.",
    ),
) -> None:
    """Store token/endpoints in the user config .env."""

    print_banner(_console)
    endpoints: dict[str, str] = {}
    for item in endpoint:
        service_type, sep, url = item.partition("=")
        if not sep or not service_type.strip() or not url.strip():
            raise typer.BadParameter(f"expected SERVICE=URL, got {item!r}")
        endpoints[service_type.strip()] = url.strip()

    if token is None and not endpoints:
        token = typer.prompt("Auth token", hide_input=True).strip() or None

    env_path = write_user_env_vars(
        {
            "NIMBUS_AUTH_TOKEN": token,
            "NIMBUS_ENDPOINTS": json.dumps(endpoints) if endpoints else None,
        }
    )
    _console.print(f"[green]Saved config to:[/green] {env_path}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
