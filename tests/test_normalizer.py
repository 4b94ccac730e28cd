"""
Tests for player-count extraction across the known payload shapes.

Covers the priority order between shapes, capacity formatting, and the
guarantee that unknown or malformed payloads yield None instead of errors.
"""

import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from serverpulse.core.normalizer import (
    PLAYER_COUNT_RULES,
    PlayerCountRule,
    extract_player_count,
    format_count,
    is_finite_number,
)

json_values = st.recursive(
    st.none()
    | st.booleans()
    | st.integers(min_value=-(10**6), max_value=10**6)
    | st.floats(allow_nan=True, allow_infinity=True)
    | st.text(max_size=10),
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(
        st.sampled_from(
            [
                "players",
                "maxPlayers",
                "playerCount",
                "totalPlayers",
                "totalConnected",
                "totalCapacity",
                "activeCount",
                "total",
                "count",
            ]
        ),
        children,
        max_size=5,
    ),
    max_leaves=12,
)


class TestKnownShapes:
    """Each supported upstream schema on its own."""

    def test_top_level_players_with_capacity(self):
        assert extract_player_count({"players": 42, "maxPlayers": 100}) == "42/100"

    def test_nested_active_count(self):
        payload = {"players": {"activeCount": 7, "totalCapacity": 20}}
        assert extract_player_count(payload) == "7/20"

    def test_nested_total_connected(self):
        payload = {"players": {"totalConnected": 12, "totalCapacity": 64}}
        assert extract_player_count(payload) == "12/64"

    def test_nested_total_prefers_max_players(self):
        payload = {"players": {"total": 3, "maxPlayers": 10, "totalCapacity": 99}}
        assert extract_player_count(payload) == "3/10"

    def test_nested_total_falls_back_to_total_capacity(self):
        payload = {"players": {"total": 3, "totalCapacity": 99}}
        assert extract_player_count(payload) == "3/99"

    def test_nested_count(self):
        payload = {"players": {"count": 5, "maxPlayers": 8}}
        assert extract_player_count(payload) == "5/8"

    def test_player_count_field(self):
        assert extract_player_count({"playerCount": 9, "maxPlayers": 16}) == "9/16"

    def test_total_players_field(self):
        assert extract_player_count({"totalPlayers": 30}) == "30"

    def test_unrecognized_payload(self):
        assert extract_player_count({}) is None
        assert extract_player_count({"motd": "hello"}) is None

    def test_null_payload(self):
        assert extract_player_count(None) is None


class TestPriorityOrder:
    def test_top_level_number_wins_over_player_count(self):
        payload = {"players": 4, "playerCount": 40, "totalPlayers": 400}
        assert extract_player_count(payload) == "4"

    def test_total_connected_wins_over_active_count(self):
        payload = {
            "players": {"totalConnected": 1, "activeCount": 2, "totalCapacity": 10}
        }
        assert extract_player_count(payload) == "1/10"

    def test_invalid_nested_shape_falls_through_to_player_count(self):
        payload = {"players": {"activeCount": "seven"}, "playerCount": 6}
        assert extract_player_count(payload) == "6"

    def test_players_list_is_not_an_object_shape(self):
        payload = {"players": [{"name": "a"}], "totalPlayers": 1, "maxPlayers": 2}
        assert extract_player_count(payload) == "1/2"

    def test_rule_table_order(self):
        assert [rule.name for rule in PLAYER_COUNT_RULES] == [
            "players",
            "players.totalConnected",
            "players.activeCount",
            "players.total",
            "players.count",
            "playerCount",
            "totalPlayers",
        ]

    def test_custom_rules(self):
        rules = (PlayerCountRule("online", lambda p: (p.get("online"), p.get("slots"))),)
        assert extract_player_count({"online": 2, "slots": 4}, rules) == "2/4"
        assert extract_player_count({"players": 2}, rules) is None


class TestCapacityFormatting:
    @pytest.mark.parametrize(
        "capacity",
        [0, -5, None, "100", float("inf"), True],
    )
    def test_unusable_capacity_shows_connected_only(self, capacity):
        assert extract_player_count({"players": 10, "maxPlayers": capacity}) == "10"

    def test_integral_floats_format_as_integers(self):
        assert extract_player_count({"players": 42.0, "maxPlayers": 100.0}) == "42/100"

    def test_fractional_values_are_kept(self):
        assert format_count(2.5) == "2.5"

    def test_zero_players_is_a_valid_count(self):
        assert extract_player_count({"players": 0, "maxPlayers": 10}) == "0/10"


class TestMalformedPayloads:
    @pytest.mark.parametrize("payload", [[], [1, 2], "players", 42, True, 3.5])
    def test_non_object_payloads(self, payload):
        assert extract_player_count(payload) is None

    @pytest.mark.parametrize(
        "players",
        [True, False, "12", float("nan"), float("inf"), None],
    )
    def test_non_finite_connected_values(self, players):
        assert extract_player_count({"players": players, "maxPlayers": 10}) is None

    def test_is_finite_number(self):
        assert is_finite_number(1)
        assert is_finite_number(-1.5)
        assert not is_finite_number(True)
        assert not is_finite_number(math.nan)
        assert not is_finite_number("1")

    @given(json_values)
    def test_never_raises_and_is_pure(self, payload):
        first = extract_player_count(payload)
        second = extract_player_count(payload)
        assert first == second
        assert first is None or isinstance(first, str)
