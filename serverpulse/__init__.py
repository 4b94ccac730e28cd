"""
ServerPulse - live status aggregation for a roster of game servers.

Given a static roster of server descriptors grouped into categories,
ServerPulse probes every server's ``/ping`` endpoint concurrently, measures
latency, normalizes player counts from several payload shapes, and returns
one JSON-ready snapshot with the same shape as the roster.

## Quick Start

```python
from serverpulse import RosterStore, StatusAggregator

aggregator = StatusAggregator(roster_store=RosterStore.default())
snapshot = await aggregator.build_snapshot()
document = snapshot.to_document()
```
"""

from .core import (
    ProbeClient,
    RosterError,
    RosterStore,
    ServerPulseSettings,
    StatusAggregator,
    build_fallback_snapshot,
    classify_latency,
    extract_player_count,
)
from .datastructures import (
    FailureReason,
    PingQuality,
    ProbeFailure,
    ProbeOutcome,
    ProbeSuccess,
    ReachabilityState,
    Snapshot,
)
from .serialization import SnapshotSerializer

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    "FailureReason",
    "PingQuality",
    "ProbeClient",
    "ProbeFailure",
    "ProbeOutcome",
    "ProbeSuccess",
    "ReachabilityState",
    "RosterError",
    "RosterStore",
    "ServerPulseSettings",
    "Snapshot",
    "SnapshotSerializer",
    "StatusAggregator",
    "build_fallback_snapshot",
    "classify_latency",
    "extract_player_count",
]
