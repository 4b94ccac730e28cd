"""
Status value types for the ServerPulse aggregation engine.

ProbeOutcome is a closed union of ProbeSuccess and ProbeFailure. Outcomes are
ephemeral: produced by the probe client and consumed immediately when they
are folded into a descriptor.
"""

from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import TypeAlias

from .type_aliases import (
    DurationMilliseconds,
    HttpStatusCode,
    JsonPayload,
    LatencyMs,
    RosterDocument,
    Timestamp,
)


class PingQuality(Enum):
    """Latency bucket shown next to a server's ping."""

    GOOD = "good"
    MEDIUM = "medium"
    HIGH = "high"
    UNKNOWN = ""


class ReachabilityState(Enum):
    """Whether a server answered its status probe."""

    ONLINE = "online"
    OFFLINE = "offline"


class FailureReason(Enum):
    """Why a probe did not produce a usable response."""

    NO_ENDPOINT = "no_endpoint"
    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"


@dataclass(frozen=True, slots=True)
class PingReading:
    value: str
    quality: PingQuality

    @classmethod
    def unavailable(cls) -> PingReading:
        return cls(value="N/A", quality=PingQuality.UNKNOWN)

    @classmethod
    def measured(cls, latency_ms: LatencyMs, quality: PingQuality) -> PingReading:
        return cls(value=f"{latency_ms}ms", quality=quality)

    def to_dict(self) -> dict[str, str]:
        return {"value": self.value, "quality": self.quality.value}


@dataclass(frozen=True, slots=True)
class StatusReading:
    label: str
    state: ReachabilityState

    @classmethod
    def online(cls) -> StatusReading:
        return cls(label="Online", state=ReachabilityState.ONLINE)

    @classmethod
    def offline(cls) -> StatusReading:
        return cls(label="Offline", state=ReachabilityState.OFFLINE)

    def to_dict(self) -> dict[str, str]:
        return {"label": self.label, "state": self.state.value}


@dataclass(frozen=True, slots=True)
class ProbeSuccess:
    """A server answered its status endpoint with a 2xx response."""

    latency_ms: LatencyMs
    payload: JsonPayload = None

    def __post_init__(self) -> None:
        if self.latency_ms < 1:
            raise ValueError("Latency must be at least 1ms")


@dataclass(frozen=True, slots=True)
class ProbeFailure:
    """A probe that could not establish reachability."""

    reason: FailureReason
    http_status: HttpStatusCode | None = None
    detail: str = ""

    def __post_init__(self) -> None:
        if (self.reason is FailureReason.HTTP_ERROR) != (self.http_status is not None):
            raise ValueError("http_status is set exactly when reason is HTTP_ERROR")

    @classmethod
    def no_endpoint(cls) -> ProbeFailure:
        return cls(reason=FailureReason.NO_ENDPOINT)

    @classmethod
    def timeout(cls, detail: str = "") -> ProbeFailure:
        return cls(reason=FailureReason.TIMEOUT, detail=detail)

    @classmethod
    def http_error(cls, status: HttpStatusCode) -> ProbeFailure:
        return cls(reason=FailureReason.HTTP_ERROR, http_status=status)

    @classmethod
    def network_error(cls, detail: str = "") -> ProbeFailure:
        return cls(reason=FailureReason.NETWORK_ERROR, detail=detail)

    def describe(self) -> str:
        if self.reason is FailureReason.HTTP_ERROR:
            return f"HTTP {self.http_status}"
        if self.detail:
            return f"{self.reason.value}: {self.detail}"
        return self.reason.value


ProbeOutcome: TypeAlias = ProbeSuccess | ProbeFailure


@dataclass(slots=True)
class Snapshot:
    """One complete aggregation result covering the whole roster.

    ``categories`` has the same shape as the roster it was built from and is
    owned by whoever holds the snapshot; it shares nothing with the roster.
    """

    categories: RosterDocument
    generated_at: Timestamp = field(default_factory=time.time)
    degraded: bool = False
    duration_ms: DurationMilliseconds = 0.0

    def to_document(self) -> RosterDocument:
        return self.categories

    def descriptors(self) -> list[dict]:
        found: list[dict] = []
        for entries in self.categories.values():
            if isinstance(entries, list):
                found.extend(entry for entry in entries if isinstance(entry, dict))
        return found

    def descriptor_count(self) -> int:
        return len(self.descriptors())

    def summary(self) -> dict[str, int | bool | float]:
        """Count descriptors per reachability state."""
        states = Counter(
            (entry.get("status") or {}).get("state", ReachabilityState.OFFLINE.value)
            for entry in self.descriptors()
        )
        return {
            "total": sum(states.values()),
            "online": states.get(ReachabilityState.ONLINE.value, 0),
            "offline": states.get(ReachabilityState.OFFLINE.value, 0),
            "degraded": self.degraded,
            "generated_at": self.generated_at,
        }
