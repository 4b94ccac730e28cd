"""Pytest configuration and fixtures for ServerPulse testing.

The fixtures here start real aiohttp servers on ephemeral ports so probes
exercise actual HTTP round trips, and make sure every server and task is
cleaned up so tests never hang or leak sockets.
"""

import asyncio
from collections.abc import AsyncGenerator, Mapping
from typing import Any

import pytest
import pytest_asyncio
from aiohttp import web
from loguru import logger

from serverpulse.datastructures.status_types import ProbeFailure, ProbeOutcome

SLOW_RESPONSE_SECONDS = 1.0


class AsyncTestContext:
    """Context manager for async test operations with automatic cleanup."""

    def __init__(self) -> None:
        self.runners: list[web.AppRunner] = []
        self.tasks: list[asyncio.Task[Any]] = []

    async def __aenter__(self) -> "AsyncTestContext":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Ensure all resources are cleaned up properly."""
        for task in self.tasks:
            if not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass

        for runner in self.runners:
            try:
                await runner.cleanup()
            except Exception as e:
                logger.warning(f"Error stopping test server: {e}")

        self.runners.clear()
        self.tasks.clear()

    async def serve(self, app: web.Application) -> str:
        """Start ``app`` on a free local port and return its base URL."""
        runner = web.AppRunner(app)
        await runner.setup()
        self.runners.append(runner)
        site = web.TCPSite(runner, host="127.0.0.1", port=0)
        await site.start()
        port = site._server.sockets[0].getsockname()[1]
        return f"http://127.0.0.1:{port}"


@pytest_asyncio.fixture
async def test_context() -> AsyncGenerator[AsyncTestContext, None]:
    """Provides a clean async test context with automatic resource cleanup."""
    async with AsyncTestContext() as ctx:
        yield ctx


def build_status_app() -> web.Application:
    """Game-server lookalike with one ``/ping`` route per upstream behavior."""

    async def flat(request: web.Request) -> web.Response:
        return web.json_response({"players": 42, "maxPlayers": 100})

    async def nested(request: web.Request) -> web.Response:
        return web.json_response({"players": {"activeCount": 7, "totalCapacity": 20}})

    async def unrecognized(request: web.Request) -> web.Response:
        return web.json_response({})

    async def not_json(request: web.Request) -> web.Response:
        return web.Response(text="pong")

    async def blank(request: web.Request) -> web.Response:
        return web.Response(body=b"")

    async def broken(request: web.Request) -> web.Response:
        return web.json_response({"error": "maintenance"}, status=503)

    async def slow(request: web.Request) -> web.Response:
        await asyncio.sleep(SLOW_RESPONSE_SECONDS)
        return web.json_response({"players": 1})

    app = web.Application()
    app.router.add_get("/flat/ping", flat)
    app.router.add_get("/nested/ping", nested)
    app.router.add_get("/unrecognized/ping", unrecognized)
    app.router.add_get("/not-json/ping", not_json)
    app.router.add_get("/blank/ping", blank)
    app.router.add_get("/broken/ping", broken)
    app.router.add_get("/slow/ping", slow)
    return app


@pytest_asyncio.fixture
async def status_server(test_context: AsyncTestContext) -> str:
    """Base URL of a running game-server lookalike.

    Example Usage:
        async def test_probe(status_server):
            outcome = await ProbeClient().probe({"link": f"{status_server}/flat"})
    """
    return await test_context.serve(build_status_app())


def make_descriptor(server_id: str, link: str | None = None, **extra: Any) -> dict:
    descriptor: dict[str, Any] = {
        "id": server_id,
        "name": server_id.replace("-", " ").title(),
        "region": "Test Region",
        "ping": {"value": "N/A", "quality": ""},
        "players": "--",
        "status": {"label": "Offline", "state": "offline"},
        "pingData": None,
    }
    if link is not None:
        descriptor["link"] = link
    descriptor.update(extra)
    return descriptor


class FakeProbeClient:
    """Stands in for ProbeClient with scripted outcomes per server id.

    A script entry is either an outcome, an exception to raise, or a
    ``(delay_seconds, outcome)`` pair.
    """

    def __init__(self, script: Mapping[str, Any]) -> None:
        self.script = dict(script)
        self.calls: list[str] = []

    async def probe(self, server: Mapping[str, Any]) -> ProbeOutcome:
        server_id = server["id"]
        self.calls.append(server_id)
        entry = self.script.get(server_id, ProbeFailure.network_error("unscripted"))
        if isinstance(entry, tuple):
            delay, entry = entry
            await asyncio.sleep(delay)
        if isinstance(entry, BaseException):
            raise entry
        return entry


@pytest.fixture
def descriptor_factory():
    return make_descriptor
