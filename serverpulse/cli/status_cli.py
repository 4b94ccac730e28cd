"""Rich console rendering for roster listings and status snapshots."""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.table import Table

from ..core.roster import RosterStore, is_probeable
from ..datastructures.status_types import Snapshot
from ..serialization import SnapshotSerializer


class StatusCLI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def display_snapshot(self, snapshot: Snapshot) -> None:
        """Display a snapshot as one table per category."""
        if snapshot.degraded:
            self.console.print(
                "[red]❌ Status collection failed, all servers shown offline[/red]"
            )

        for category, entries in snapshot.to_document().items():
            if not isinstance(entries, list):
                continue
            table = Table(title=f"🌍 {category}")
            table.add_column("ID", style="cyan", no_wrap=True)
            table.add_column("Name", style="magenta")
            table.add_column("Region", style="green")
            table.add_column("Ping", justify="right")
            table.add_column("Players", justify="right")
            table.add_column("Status", justify="center")

            for entry in entries:
                table.add_row(
                    str(entry.get("id", "")),
                    str(entry.get("name", "")),
                    str(entry.get("region", "")),
                    self._ping_cell(entry.get("ping") or {}),
                    str(entry.get("players", "")),
                    self._status_cell(entry.get("status") or {}),
                )
            self.console.print(table)

        summary = snapshot.summary()
        self.console.print(
            f"[bold]{summary['online']}/{summary['total']}[/bold] servers online "
            f"({snapshot.duration_ms:.0f}ms)"
        )

    def display_roster(self, store: RosterStore) -> None:
        table = Table(title=f"📋 Roster {store.source}")
        table.add_column("Category", style="yellow")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Name", style="magenta")
        table.add_column("Region", style="green")
        table.add_column("Probe Link", style="blue")

        for category, entries in store.snapshot_source().items():
            if not isinstance(entries, list):
                continue
            for entry in entries:
                link = entry["link"] if is_probeable(entry) else "[dim]none[/dim]"
                table.add_row(
                    category,
                    entry["id"],
                    entry["name"],
                    str(entry.get("region", "")),
                    link,
                )
        self.console.print(table)
        self.console.print(
            f"{store.descriptor_count} servers, {store.probeable_count} probeable"
        )

    def print_json(self, document: Any) -> None:
        text = SnapshotSerializer(indent=True).serialize(document).decode()
        self.console.print_json(text)

    @staticmethod
    def _ping_cell(ping: dict[str, Any]) -> str:
        value = str(ping.get("value", "N/A"))
        color = {"good": "green", "medium": "yellow", "high": "red"}.get(
            ping.get("quality", "")
        )
        return f"[{color}]{value}[/{color}]" if color else f"[dim]{value}[/dim]"

    @staticmethod
    def _status_cell(status: dict[str, Any]) -> str:
        label = str(status.get("label", "Offline"))
        if status.get("state") == "online":
            return f"[green]🟢 {label}[/green]"
        return f"[red]🔴 {label}[/red]"
