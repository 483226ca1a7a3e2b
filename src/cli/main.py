"""CLI de tsoft-client (Typer + Rich).

Comandos de operador para consultar el backend sin la capa de dashboard:
listar productos, categorías, pedidos e imágenes, y exportar el envelope a
JSON. El diagnóstico de configuración vive en `cli.doctor`.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from adapters.json_exporter import export_envelope_json
from adapters.tsoft_client import TSoftClient
from cli import doctor
from cli.ui_components import (
    build_category_tree,
    build_failure_panel,
    build_images_table,
    build_orders_table,
    build_products_table,
    print_banner,
)
from core.config import AppSettings, ConfigurationError
from core.domain.results import ResultEnvelope

app = typer.Typer(no_args_is_help=True, help="Resilient client for the T-Soft catalog/order backend.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def configure_logging(settings: AppSettings, *, verbose: bool = False) -> None:
    level = logging.DEBUG if (settings.debug or verbose) else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # httpx loguea cada request a INFO; solo interesa en modo debug.
    logging.getLogger("httpx").setLevel(logging.DEBUG if settings.debug else logging.WARNING)


def _load_settings(verbose: bool) -> AppSettings:
    settings = AppSettings()
    configure_logging(settings, verbose=verbose)
    return settings


def _open_client(settings: AppSettings) -> TSoftClient:
    try:
        return TSoftClient(settings)
    except ConfigurationError as exc:
        _console.print(f"[red]Configuration error:[/red] {exc}")
        _console.print("Run [bold]tsoft-client doctor setup[/bold] or set TSOFT_BASE_URL / TSOFT_API_TOKEN.")
        raise typer.Exit(code=2) from exc


def _finish(envelope: ResultEnvelope, output: Path | None) -> bool:
    if output is not None:
        path = export_envelope_json(envelope=envelope, output_path=output)
        _console.print(f"[green]Saved:[/green] {path}")
    if not envelope.success:
        _console.print(build_failure_panel(envelope))
        return False
    return True


@app.command()
def products(
    limit: int = typer.Option(50, min=1, help="Page size."),
    page: int = typer.Option(1, min=1, help="Page number (JSON API only)."),
    search: str | None = typer.Option(None, help="Free-text search (JSON API only)."),
    enhanced: bool = typer.Option(False, "--enhanced", help="Join category path and primary image."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the envelope as JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """List products."""

    settings = _load_settings(verbose)

    async def _run() -> ResultEnvelope:
        async with _open_client(settings) as client:
            if enhanced:
                return await client.get_enhanced_products(limit=limit, page=page)
            return await client.get_products(limit=limit, page=page, search=search)

    envelope = asyncio.run(_run())
    if _finish(envelope, output):
        _console.print(build_products_table(envelope.data or []))
    else:
        raise typer.Exit(code=1)


@app.command()
def categories(
    tree: bool = typer.Option(False, "--tree", help="Render the category hierarchy."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the envelope as JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """List categories (flat or as a tree)."""

    settings = _load_settings(verbose)

    async def _run() -> ResultEnvelope:
        async with _open_client(settings) as client:
            return await (client.get_category_tree() if tree else client.get_categories())

    envelope = asyncio.run(_run())
    if not _finish(envelope, output):
        raise typer.Exit(code=1)

    if tree:
        _console.print(build_category_tree(envelope.data or []))
        return

    table = Table(title="Categories")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Parent", style="dim")
    for node in envelope.data or []:
        table.add_row(node.code or "", node.name or "", node.parent_code or "")
    _console.print(table)


@app.command()
def orders(
    limit: int = typer.Option(50, min=1, help="Page size."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the envelope as JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """List orders."""

    settings = _load_settings(verbose)

    async def _run() -> ResultEnvelope:
        async with _open_client(settings) as client:
            return await client.get_orders(limit=limit)

    envelope = asyncio.run(_run())
    if _finish(envelope, output):
        _console.print(build_orders_table(envelope.data or []))
    else:
        raise typer.Exit(code=1)


@app.command()
def images(
    codes: list[str] = typer.Argument(..., help="Product codes."),
    max_concurrency: int | None = typer.Option(None, min=1, help="Parallel requests (default from settings)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Fetch images for several products in parallel."""

    settings = _load_settings(verbose)

    async def _run() -> dict:
        async with _open_client(settings) as client:
            return await client.get_bulk_product_images(codes, max_concurrency=max_concurrency)

    found = asyncio.run(_run())
    _console.print(build_images_table(found))
    missing = [c for c in codes if c not in found]
    if missing:
        _console.print(f"[yellow]No images for:[/yellow] {', '.join(missing)}")


@app.callback()
def _main(
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Hide the banner."),
) -> None:
    if not quiet:
        print_banner(_console)


def run() -> None:
    app()
