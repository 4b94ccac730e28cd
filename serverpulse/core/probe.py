"""
Probe Client: one bounded, cancellable status request per server.

A probe never raises for expected failures. Missing endpoints, deadlines,
non-2xx answers and transport errors all come back as a ProbeFailure so the
caller can treat every server the same way.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping
from typing import Any

import aiohttp
from loguru import logger

from ..datastructures.status_types import ProbeFailure, ProbeOutcome, ProbeSuccess
from ..datastructures.type_aliases import LatencyMs, TimeoutMs, UrlString
from ..serialization import SnapshotSerializer

PING_PATH = "/ping"
DEFAULT_PING_TIMEOUT_MS: TimeoutMs = 4000


def build_probe_url(link: UrlString) -> UrlString:
    return f"{link.rstrip('/')}{PING_PATH}"


def elapsed_latency_ms(started: float, finished: float) -> LatencyMs:
    """Wall-clock latency in whole milliseconds, never below 1."""
    return max(1, round((finished - started) * 1000.0))


class ProbeClient:
    """Issues single GET requests against ``<link>/ping`` with a hard deadline.

    When a session is supplied it is shared by every probe and closed by its
    owner. Otherwise each probe opens and closes a session of its own.
    """

    def __init__(
        self,
        timeout_ms: TimeoutMs = DEFAULT_PING_TIMEOUT_MS,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        if timeout_ms <= 0:
            raise ValueError("Probe timeout must be positive")
        self.timeout_ms = timeout_ms
        self.session = session
        self.serializer = SnapshotSerializer()

    async def probe(self, server: Mapping[str, Any]) -> ProbeOutcome:
        link = server.get("link")
        if not isinstance(link, str) or not link.strip():
            return ProbeFailure.no_endpoint()

        url = build_probe_url(link.strip())
        server_id = server.get("id", "?")

        try:
            if self.session is not None:
                outcome = await self._request(self.session, url)
            else:
                async with aiohttp.ClientSession() as session:
                    outcome = await self._request(session, url)
        except TimeoutError:
            outcome = ProbeFailure.timeout(f"no answer within {self.timeout_ms}ms")
        except (aiohttp.ClientError, OSError, ValueError) as e:
            outcome = ProbeFailure.network_error(str(e) or type(e).__name__)

        match outcome:
            case ProbeSuccess(latency_ms=latency_ms):
                logger.debug(
                    "Probe {} {} answered in {}ms", server_id, url, latency_ms
                )
            case ProbeFailure():
                logger.debug(
                    "Probe {} {} failed: {}", server_id, url, outcome.describe()
                )
        return outcome

    async def _request(
        self, session: aiohttp.ClientSession, url: UrlString
    ) -> ProbeOutcome:
        started = time.perf_counter()
        async with asyncio.timeout(self.timeout_ms / 1000.0):
            async with session.get(url) as response:
                if not 200 <= response.status < 300:
                    return ProbeFailure.http_error(response.status)
                body = await response.read()
        latency_ms = elapsed_latency_ms(started, time.perf_counter())
        return ProbeSuccess(
            latency_ms=latency_ms, payload=self.serializer.try_deserialize(body)
        )
