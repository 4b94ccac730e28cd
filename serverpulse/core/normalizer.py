"""
Player-count extraction from heterogeneous status payloads.

Upstream servers report players in several shapes. Each known shape is a
PlayerCountRule; rules are tried in priority order and the first one that
yields a finite connected count wins. Supporting a new upstream schema means
adding a rule to PLAYER_COUNT_RULES.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from ..datastructures.type_aliases import JsonPayload, PlayerCountText

PlayerCount: TypeAlias = tuple[Any, Any]  # (connected, capacity), either may be unusable
PlayerCountExtractor: TypeAlias = Callable[[Mapping[str, Any]], PlayerCount | None]


def is_finite_number(value: Any) -> bool:
    """True for real JSON numbers. Booleans are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value)


def _coalesce(source: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = source.get(key)
        if value is not None:
            return value
    return None


def format_count(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True, slots=True)
class PlayerCountRule:
    name: str
    extract: PlayerCountExtractor


def _top_level_players(payload: Mapping[str, Any]) -> PlayerCount | None:
    players = payload.get("players")
    if not is_finite_number(players):
        return None
    return players, payload.get("maxPlayers")


def _nested(count_key: str, *capacity_keys: str) -> PlayerCountExtractor:
    def extract(payload: Mapping[str, Any]) -> PlayerCount | None:
        players = payload.get("players")
        if not isinstance(players, Mapping):
            return None
        return players.get(count_key), _coalesce(players, *capacity_keys)

    return extract


def _top_level(count_key: str) -> PlayerCountExtractor:
    def extract(payload: Mapping[str, Any]) -> PlayerCount | None:
        return payload.get(count_key), payload.get("maxPlayers")

    return extract


PLAYER_COUNT_RULES: tuple[PlayerCountRule, ...] = (
    PlayerCountRule("players", _top_level_players),
    PlayerCountRule(
        "players.totalConnected", _nested("totalConnected", "totalCapacity")
    ),
    PlayerCountRule("players.activeCount", _nested("activeCount", "totalCapacity")),
    PlayerCountRule("players.total", _nested("total", "maxPlayers", "totalCapacity")),
    PlayerCountRule("players.count", _nested("count", "maxPlayers", "totalCapacity")),
    PlayerCountRule("playerCount", _top_level("playerCount")),
    PlayerCountRule("totalPlayers", _top_level("totalPlayers")),
)


def extract_player_count(
    payload: JsonPayload,
    rules: Sequence[PlayerCountRule] = PLAYER_COUNT_RULES,
) -> PlayerCountText | None:
    """Return ``"<connected>/<capacity>"``, ``"<connected>"`` or None.

    None means no rule recognized the payload and the caller should keep
    whatever player count it already shows. Missing or malformed fields are
    treated as "not a finite number", never as errors.
    """
    if not isinstance(payload, Mapping):
        return None

    for rule in rules:
        candidate = rule.extract(payload)
        if candidate is None:
            continue
        connected, capacity = candidate
        if not is_finite_number(connected):
            continue
        if is_finite_number(capacity) and capacity > 0:
            return f"{format_count(connected)}/{format_count(capacity)}"
        return format_count(connected)

    return None
