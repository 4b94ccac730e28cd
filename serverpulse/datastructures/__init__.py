"""Value types shared across the ServerPulse status engine."""

from .status_types import (
    FailureReason,
    PingQuality,
    PingReading,
    ProbeFailure,
    ProbeOutcome,
    ProbeSuccess,
    ReachabilityState,
    Snapshot,
    StatusReading,
)

__all__ = [
    "FailureReason",
    "PingQuality",
    "PingReading",
    "ProbeFailure",
    "ProbeOutcome",
    "ProbeSuccess",
    "ReachabilityState",
    "Snapshot",
    "StatusReading",
]
