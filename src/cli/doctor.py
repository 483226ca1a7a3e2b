"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters import tsoft_endpoints as ops
from adapters.tsoft_client import TSoftClient
from core.config import AppSettings, ConfigurationError, write_user_env_vars
from core.domain.endpoints import EndpointCandidate, Operation
from core.interfaces.transport import TransportResult

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


_NOT_PROBED = {ops.ADD_PRODUCT.name, ops.GET_PRODUCT_IMAGES.name}


def probeable_operations() -> list[Operation]:
    """Operaciones de solo lectura sin parámetros de path (seguras de sondear)."""

    return [
        op
        for op in ops.ALL_OPERATIONS
        if op.name not in _NOT_PROBED and not any("{" in c.path for c in op.candidates)
    ]


async def _probe_all(settings: AppSettings) -> list[tuple[Operation, list[tuple[EndpointCandidate, TransportResult]]]]:
    async with TSoftClient(settings) as client:
        out = []
        for op in probeable_operations():
            out.append((op, await client.resolver.probe(op)))
        return out


@app.command()
def run() -> None:
    """Check configuration and probe every endpoint of the read-only operations."""

    settings = AppSettings()

    table = Table(title="tsoft-client Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Base URL", "OK" if settings.base_url else "MISSING", settings.base_url or "set TSOFT_BASE_URL")
    table.add_row("API token", "OK" if settings.api_token else "MISSING", "hidden" if settings.api_token else "set TSOFT_API_TOKEN")
    table.add_row("Debug logging", "ON" if settings.debug else "OFF", "TSOFT_DEBUG")
    _console.print(table)

    try:
        settings.require_connection()
    except ConfigurationError as exc:
        _console.print(f"\n[yellow]Skipping endpoint probe:[/yellow] {exc}")
        raise typer.Exit(code=2) from exc

    results = asyncio.run(_probe_all(settings))

    probe = Table(title="Endpoint probe")
    probe.add_column("Operation", style="cyan", no_wrap=True)
    probe.add_column("Endpoint")
    probe.add_column("HTTP", justify="right")
    probe.add_column("Result")
    for op, attempts in results:
        winner_seen = False
        for candidate, result in attempts:
            if result.success and not winner_seen:
                verdict = "[green]WINNER[/green]"
                winner_seen = True
            elif result.success:
                verdict = "[dim]ok (unused)[/dim]"
            else:
                verdict = "[red]fail[/red]"
            probe.add_row(op.name, candidate.describe(), str(result.status_code or "-"), verdict)
    _console.print(probe)


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    base_url = typer.prompt("Base URL (e.g. https://<shop>.tsoft.biz/rest1)").strip()
    token = typer.prompt("API token", hide_input=True, confirmation_prompt=False).strip()
    debug = typer.confirm("Enable debug logging?", default=False)

    if not base_url or not token:
        raise typer.BadParameter("base URL and token are required")

    env_path = write_user_env_vars(
        {
            "TSOFT_BASE_URL": base_url.rstrip("/"),
            "TSOFT_API_TOKEN": token,
            "TSOFT_DEBUG": "true" if debug else "false",
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
