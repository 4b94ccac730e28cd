#!/usr/bin/env python3
"""
Main CLI Entry Point for ServerPulse.

Commands:
- snapshot: probe every server once and print the result
- roster: validate and list a roster file
- serve: run the HTTP status endpoints
"""

import asyncio
import sys

import click
from loguru import logger
from pydantic import ValidationError
from rich.console import Console

from ..core.aggregator import StatusAggregator
from ..core.config import ServerPulseSettings
from ..core.logging import configure_logging_from_settings
from ..core.roster import RosterError, RosterStore
from ..web.status_endpoints import create_status_endpoints
from .status_cli import StatusCLI

console = Console()


def _load_settings(**overrides) -> ServerPulseSettings:
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return ServerPulseSettings(**values)
    except ValidationError as e:
        raise click.BadParameter(str(e)) from e


def _load_roster(settings: ServerPulseSettings) -> RosterStore:
    try:
        return RosterStore.from_settings(settings.roster_path)
    except RosterError as e:
        console.print(f"[red]❌ {e}[/red]")
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--debug-scope",
    multiple=True,
    help="Module to log at DEBUG without raising the global level (e.g. core.probe)",
)
@click.pass_context
def cli(ctx, verbose: bool, debug_scope: tuple[str, ...]):
    """
    ServerPulse: live status for a roster of game servers.
    """
    configure_logging_from_settings(
        ServerPulseSettings(),
        verbose=verbose,
        debug_scopes=debug_scope,
        colorize=True,
    )
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command()
@click.option(
    "--roster", "-r", type=click.Path(exists=True), help="Roster JSON file path"
)
@click.option("--timeout-ms", "-t", type=int, help="Per-server probe timeout")
@click.option(
    "--output",
    "-o",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
def snapshot(roster: str | None, timeout_ms: int | None, output: str):
    """Probe every server once and print the snapshot."""
    settings = _load_settings(roster_path=roster, ping_timeout_ms=timeout_ms)
    store = _load_roster(settings)
    status_cli = StatusCLI(console)

    async def _snapshot():
        aggregator = StatusAggregator(roster_store=store, settings=settings)
        result = await aggregator.build_snapshot()

        if output == "table":
            status_cli.display_snapshot(result)
        elif output == "json":
            status_cli.print_json(result.to_document())

    asyncio.run(_snapshot())


@cli.command()
@click.option(
    "--roster", "-r", type=click.Path(exists=True), help="Roster JSON file path"
)
def roster(roster: str | None):
    """Validate a roster and list its servers."""
    settings = _load_settings(roster_path=roster)
    store = _load_roster(settings)
    StatusCLI(console).display_roster(store)


@cli.command()
@click.option("--host", "-h", help="Address to listen on")
@click.option("--port", "-p", type=int, help="Port to listen on")
@click.option(
    "--roster", "-r", type=click.Path(exists=True), help="Roster JSON file path"
)
def serve(host: str | None, port: int | None, roster: str | None):
    """Serve live snapshots over HTTP until interrupted."""
    settings = _load_settings(host=host, port=port, roster_path=roster)
    store = _load_roster(settings)

    async def _serve():
        endpoints = create_status_endpoints(settings, roster_store=store)
        await endpoints.start()
        console.print(
            f"[green]✅ Serving status on {endpoints.base_url}/api/servers[/green]"
        )
        try:
            await asyncio.Event().wait()
        finally:
            await endpoints.stop()

    asyncio.run(_serve())


def main():
    """Main CLI entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️ Stopped by user[/yellow]")
        sys.exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]❌ Unexpected error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
