"""Map probe outcomes onto the display fields of a server descriptor."""

from __future__ import annotations

from collections.abc import Callable

from ..datastructures.status_types import (
    PingQuality,
    PingReading,
    ProbeFailure,
    ProbeOutcome,
    ProbeSuccess,
    StatusReading,
)
from ..datastructures.type_aliases import (
    JsonPayload,
    LatencyMs,
    PlayerCountText,
    ServerDescriptor,
)
from .normalizer import extract_player_count

GOOD_LATENCY_MAX_MS = 80
MEDIUM_LATENCY_MAX_MS = 160

DEFAULT_PLAYERS_TEXT = "--"


def classify_latency(ms: LatencyMs) -> PingQuality:
    if ms <= GOOD_LATENCY_MAX_MS:
        return PingQuality.GOOD
    if ms <= MEDIUM_LATENCY_MAX_MS:
        return PingQuality.MEDIUM
    return PingQuality.HIGH


def ensure_placeholders(descriptor: ServerDescriptor) -> ServerDescriptor:
    """Fill in any display field the roster left out."""
    if not isinstance(descriptor.get("ping"), dict):
        descriptor["ping"] = PingReading.unavailable().to_dict()
    if descriptor.get("players") is None:
        descriptor["players"] = DEFAULT_PLAYERS_TEXT
    if not isinstance(descriptor.get("status"), dict):
        descriptor["status"] = StatusReading.offline().to_dict()
    descriptor.setdefault("pingData", None)
    return descriptor


def mark_offline(descriptor: ServerDescriptor) -> ServerDescriptor:
    """Apply the failure state; players and pingData are left as they were."""
    ensure_placeholders(descriptor)
    descriptor["status"] = StatusReading.offline().to_dict()
    descriptor["ping"] = PingReading.unavailable().to_dict()
    return descriptor


def apply_outcome(
    descriptor: ServerDescriptor,
    outcome: ProbeOutcome,
    extract: Callable[[JsonPayload], PlayerCountText | None] = extract_player_count,
) -> ServerDescriptor:
    """Fold one probe outcome into the descriptor it was taken for."""
    match outcome:
        case ProbeSuccess(latency_ms=latency_ms, payload=payload):
            ensure_placeholders(descriptor)
            descriptor["status"] = StatusReading.online().to_dict()
            descriptor["ping"] = PingReading.measured(
                latency_ms, classify_latency(latency_ms)
            ).to_dict()
            descriptor["pingData"] = payload
            players = extract(payload)
            if players is not None:
                descriptor["players"] = players
        case ProbeFailure():
            mark_offline(descriptor)
        case _:
            raise TypeError(f"Unknown probe outcome: {outcome!r}")
    return descriptor
