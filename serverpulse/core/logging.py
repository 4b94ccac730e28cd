"""Central logging configuration helpers for ServerPulse."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable
from typing import Any

from loguru import logger

from .config import ServerPulseSettings

PACKAGE_PREFIX = "serverpulse."

DEFAULT_LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line} - {message}"
)


def debug_scope_filter(scopes: Iterable[str]) -> Callable[[dict[str, Any]], bool]:
    """Build a loguru filter passing DEBUG records from the given modules.

    Scopes may be written with or without the ``serverpulse.`` prefix, so
    ``core.probe`` and ``serverpulse.core.probe`` select the same records.
    """
    prefixes = tuple(
        scope if scope.startswith(PACKAGE_PREFIX) else f"{PACKAGE_PREFIX}{scope}"
        for scope in (scope.strip() for scope in scopes)
        if scope
    )

    def _filter(record: dict[str, Any]) -> bool:
        if record["level"].name != "DEBUG":
            return False
        return record["name"].startswith(prefixes)

    return _filter


def configure_logging(
    level: str,
    *,
    debug_scopes: Iterable[str] = (),
    colorize: bool = False,
) -> tuple[int, ...]:
    """Configure loguru with module-based debug filtering.

    ``debug_scopes`` lets DEBUG records through for selected modules (for
    example ``core.probe``) while everything else stays at ``level``.
    """
    logger.remove()

    handler_ids: list[int] = [
        logger.add(
            sys.stderr,
            level=level,
            format=DEFAULT_LOG_FORMAT,
            colorize=colorize,
        )
    ]

    scopes = tuple(scope for scope in debug_scopes if scope.strip())
    if scopes and level.upper() != "DEBUG":
        handler_ids.append(
            logger.add(
                sys.stderr,
                level="DEBUG",
                format=DEFAULT_LOG_FORMAT,
                colorize=colorize,
                filter=debug_scope_filter(scopes),
            )
        )

    return tuple(handler_ids)


def configure_logging_from_settings(
    settings: ServerPulseSettings,
    *,
    verbose: bool = False,
    debug_scopes: Iterable[str] = (),
    colorize: bool = False,
) -> tuple[int, ...]:
    """Apply ``settings.log_level``; ``verbose`` forces DEBUG everywhere."""
    level = "DEBUG" if verbose else settings.log_level
    return configure_logging(level, debug_scopes=debug_scopes, colorize=colorize)
