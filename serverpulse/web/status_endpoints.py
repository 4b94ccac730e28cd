"""
HTTP endpoints serving live server status snapshots.

Each request to ``/api/servers`` runs a fresh probe round; responses tell
browsers and proxies not to cache them.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from aiohttp import web
from loguru import logger

from ..core.aggregator import StatusAggregator
from ..core.config import ServerPulseSettings
from ..core.roster import RosterStore
from ..datastructures.type_aliases import HostAddress, PortNumber
from ..serialization import SnapshotSerializer

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@dataclass(slots=True)
class StatusEndpoints:
    """aiohttp application exposing the aggregation engine."""

    aggregator: StatusAggregator
    host: HostAddress = "127.0.0.1"
    port: PortNumber = 3000
    enable_cors: bool = True

    app: web.Application = field(init=False)
    runner: web.AppRunner | None = field(default=None, init=False)
    site: web.TCPSite | None = field(default=None, init=False)
    serializer: SnapshotSerializer = field(default_factory=SnapshotSerializer)

    def __post_init__(self) -> None:
        self.app = web.Application()
        self._setup_routes()
        self._setup_middleware()

    def _setup_routes(self) -> None:
        self.app.router.add_get("/api/servers", self._get_servers)
        self.app.router.add_get("/api/servers/summary", self._get_summary)
        self.app.router.add_get("/health", self._get_health)

    def _setup_middleware(self) -> None:
        @web.middleware
        async def cors_middleware(request: web.Request, handler) -> web.StreamResponse:
            """Handle CORS headers for browser access."""
            response = await handler(request)
            if self.enable_cors:
                response.headers["Access-Control-Allow-Origin"] = "*"
                response.headers["Access-Control-Allow-Methods"] = "GET, OPTIONS"
            return response

        @web.middleware
        async def timing_middleware(
            request: web.Request, handler
        ) -> web.StreamResponse:
            start_time = time.perf_counter()
            try:
                response = await handler(request)
            except web.HTTPException:
                raise
            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000.0
                logger.error(
                    f"Error processing {request.path}: {e} (took {duration_ms:.1f}ms)"
                )
                return web.json_response(
                    {"status": "error", "message": str(e)}, status=500
                )
            duration_ms = (time.perf_counter() - start_time) * 1000.0
            response.headers["X-Response-Time-Ms"] = f"{duration_ms:.1f}"
            return response

        self.app.middlewares.append(cors_middleware)
        self.app.middlewares.append(timing_middleware)

    def _json(self, data: Any, *, no_cache: bool = False) -> web.Response:
        return web.Response(
            body=self.serializer.serialize(data),
            content_type="application/json",
            headers=NO_CACHE_HEADERS if no_cache else None,
        )

    async def _get_servers(self, request: web.Request) -> web.Response:
        snapshot = await self.aggregator.build_snapshot()
        return self._json(snapshot.to_document(), no_cache=True)

    async def _get_summary(self, request: web.Request) -> web.Response:
        snapshot = await self.aggregator.build_snapshot()
        return self._json(snapshot.summary(), no_cache=True)

    async def _get_health(self, request: web.Request) -> web.Response:
        return self._json({"status": "ok"})

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    async def start(self) -> None:
        """Start serving; port 0 is resolved to the port actually bound."""
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()

        self.site = web.TCPSite(self.runner, host=self.host, port=self.port)
        await self.site.start()

        if self.port == 0 and self.site._server and self.site._server.sockets:
            self.port = self.site._server.sockets[0].getsockname()[1]

        logger.info(f"Server status endpoints listening on {self.base_url}")

    async def stop(self) -> None:
        try:
            if self.site:
                await self.site.stop()
                self.site = None

            if self.runner:
                await self.runner.cleanup()
                self.runner = None

            logger.debug("Server status endpoints stopped")

        except Exception as e:
            logger.error(f"Error stopping status endpoints: {e}")


def create_status_endpoints(
    settings: ServerPulseSettings,
    roster_store: RosterStore | None = None,
) -> StatusEndpoints:
    """Wire a roster, an aggregator and the HTTP surface from settings."""
    store = roster_store or RosterStore.from_settings(settings.roster_path)
    aggregator = StatusAggregator(roster_store=store, settings=settings)
    return StatusEndpoints(
        aggregator=aggregator, host=settings.host, port=settings.port
    )
