"""Doctor command for environment diagnostics."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import HttpxExecutor
from core.config import AppSettings, get_user_env_file
from core.errors import NimbusError
from core.services.discovery import fetch_service_info
from core.session import COMPUTE, NETWORK

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

_MAJOR_VERSIONS = {
    NETWORK.catalog_type: NETWORK.major_version,
    COMPUTE.catalog_type: COMPUTE.major_version,
}


def _check_endpoint(executor: HttpxExecutor, service_type: str, endpoint: str) -> tuple[bool, str]:
    major_version = _MAJOR_VERSIONS.get(service_type)
    if major_version is None:
        return True, "unknown service type, skipped"
    try:
        info = fetch_service_info(endpoint, executor, service_type, major_version)
    except NimbusError as exc:
        return False, str(exc)
    versions = f"{info.minimum_version or '-'} .. {info.current_version or '-'}"
    return True, f"{info.root_url} ({versions})"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="nimbus Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if settings.auth_token:
        table.add_row("Auth token", "OK", "X-Auth-Token will be sent")
    else:
        table.add_row("Auth token", "MISSING", "Set NIMBUS_AUTH_TOKEN or run `nimbus configure`")
    table.add_row("User config", "OK", str(get_user_env_file()))

    failed = False
    if not settings.endpoints:
        table.add_row("Endpoints", "MISSING", "Set NIMBUS_ENDPOINTS (JSON: service type -> URL)")
        failed = True
    else:
        with HttpxExecutor.from_settings(settings) as executor:
            for service_type, endpoint in sorted(settings.endpoints.items()):
                ok, detail = _check_endpoint(executor, service_type, endpoint)
                failed = failed or not ok
                table.add_row(f"Service {service_type}", "OK" if ok else "FAIL", detail)

    _console.print(table)

    if failed:
        _console.print(
            "\n[yellow]Note:[/yellow] discovery walks up the endpoint path on HTTP 404; "
            "check the catalog URL and the token."
        )
        raise typer.Exit(code=1)
