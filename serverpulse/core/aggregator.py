"""
Aggregator: builds one status snapshot for the whole roster.

Every probeable descriptor gets its own task and its own deadline; tasks
write only into the descriptor they were created for, so no locking is
needed. The snapshot is returned only after every task has finished.

If anything unexpected goes wrong while building, the result degrades to
the fallback document: the roster as-is with every server marked offline.
``build_snapshot`` never raises to its caller.
"""

from __future__ import annotations

import asyncio
import copy
import time
from collections.abc import Callable
from typing import Any, TypeAlias

import aiohttp
from loguru import logger

from ..datastructures.status_types import ProbeFailure, Snapshot
from ..datastructures.type_aliases import RosterDocument, ServerDescriptor
from .classifier import apply_outcome, mark_offline
from .config import ServerPulseSettings
from .probe import ProbeClient
from .roster import RosterError, RosterStore, is_probeable

ProbeClientFactory: TypeAlias = Callable[[aiohttp.ClientSession | None], ProbeClient]


def build_fallback_snapshot(roster: Any, duration_ms: float = 0.0) -> Snapshot:
    """Degraded snapshot: an unmodified copy with every server offline.

    Works on whatever shape it is handed; entries it cannot interpret are
    copied through untouched.
    """
    try:
        document = copy.deepcopy(roster)
    except Exception as e:
        logger.error("Fallback could not copy roster: {}", e)
        document = {}

    if not isinstance(document, dict):
        document = {}

    for entries in document.values():
        if not isinstance(entries, list):
            continue
        for entry in entries:
            if isinstance(entry, dict):
                mark_offline(entry)

    return Snapshot(categories=document, degraded=True, duration_ms=duration_ms)


def _descriptors_to_probe(document: RosterDocument) -> list[ServerDescriptor]:
    if not isinstance(document, dict):
        raise RosterError("Roster must be a mapping of categories")

    descriptors: list[ServerDescriptor] = []
    for category, entries in document.items():
        if not isinstance(entries, list):
            continue
        for position, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise RosterError(
                    f"Entry {position} in category '{category}' is not an object"
                )
            descriptors.append(entry)
    return descriptors


class StatusAggregator:
    """Fans out one probe per server and merges the results into a snapshot."""

    def __init__(
        self,
        roster_store: RosterStore | None = None,
        settings: ServerPulseSettings | None = None,
        probe_client_factory: ProbeClientFactory | None = None,
    ) -> None:
        self.roster_store = roster_store
        self.settings = settings or ServerPulseSettings()
        self.probe_client_factory = probe_client_factory or self._default_probe_client

    def _default_probe_client(
        self, session: aiohttp.ClientSession | None
    ) -> ProbeClient:
        return ProbeClient(timeout_ms=self.settings.ping_timeout_ms, session=session)

    def _roster_copy(self, roster: RosterDocument | None) -> Any:
        if roster is not None:
            return copy.deepcopy(roster)
        if self.roster_store is None:
            raise RosterError("No roster supplied and no roster store configured")
        return self.roster_store.snapshot_source()

    async def build_snapshot(self, roster: RosterDocument | None = None) -> Snapshot:
        """Probe every server in the roster and return a fresh snapshot.

        ``roster`` overrides the configured store for this call only.
        """
        started = time.perf_counter()
        try:
            document = self._roster_copy(roster)
            await self._probe_all(document)
        except Exception as e:
            duration_ms = (time.perf_counter() - started) * 1000.0
            logger.error("Snapshot build failed, serving all-offline fallback: {}", e)
            # the probed copy may be half-updated; degrade from the pristine roster
            if roster is None and self.roster_store is not None:
                roster = self.roster_store.snapshot_source()
            return build_fallback_snapshot(roster, duration_ms=duration_ms)

        snapshot = Snapshot(
            categories=document, duration_ms=(time.perf_counter() - started) * 1000.0
        )
        summary = snapshot.summary()
        logger.info(
            "Snapshot built: {}/{} servers online in {:.1f}ms",
            summary["online"],
            summary["total"],
            snapshot.duration_ms,
        )
        return snapshot

    async def _probe_all(self, document: RosterDocument) -> None:
        descriptors = _descriptors_to_probe(document)

        for descriptor in descriptors:
            if not is_probeable(descriptor):
                apply_outcome(descriptor, ProbeFailure.no_endpoint())

        targets = [entry for entry in descriptors if is_probeable(entry)]
        if not targets:
            return

        # limit=0: no connection pool cap, every probe connects immediately
        connector = aiohttp.TCPConnector(limit=0)
        async with aiohttp.ClientSession(connector=connector) as session:
            client = self.probe_client_factory(session)
            async with asyncio.TaskGroup() as group:
                for descriptor in targets:
                    group.create_task(self._probe_one(client, descriptor))

    @staticmethod
    async def _probe_one(client: ProbeClient, descriptor: ServerDescriptor) -> None:
        outcome = await client.probe(descriptor)
        apply_outcome(descriptor, outcome)
