"""
ServerPulse Core Module

Roster loading, status probing, payload normalization, classification and
snapshot aggregation.
"""

from .aggregator import StatusAggregator, build_fallback_snapshot
from .classifier import (
    apply_outcome,
    classify_latency,
    ensure_placeholders,
    mark_offline,
)
from .config import ServerPulseSettings
from .normalizer import PLAYER_COUNT_RULES, PlayerCountRule, extract_player_count
from .probe import ProbeClient, build_probe_url
from .roster import RosterError, RosterStore, is_probeable

__all__ = [
    "PLAYER_COUNT_RULES",
    "PlayerCountRule",
    "ProbeClient",
    "RosterError",
    "RosterStore",
    "ServerPulseSettings",
    "StatusAggregator",
    "apply_outcome",
    "build_fallback_snapshot",
    "build_probe_url",
    "classify_latency",
    "ensure_placeholders",
    "extract_player_count",
    "is_probeable",
    "mark_offline",
]
