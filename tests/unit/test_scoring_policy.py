"""Unit tests for interpreting challenge configuration documents."""

from __future__ import annotations

import pytest

from hamchallenges.scoring import ScoringPolicy, Tier, historical_qsos_allowed, interpret


class TestDefaults:
    """Missing or malformed fields fall back to documented defaults, never raise."""

    @pytest.mark.parametrize("configuration", [{}, None, [], "not a document", 42])
    def test_empty_or_non_object_configuration(self, configuration):
        policy = interpret(configuration)
        assert policy == ScoringPolicy(
            method="count", goal_type="collection", total_goals=0, target_value=100, tiers=()
        )

    def test_sections_of_wrong_type_are_ignored(self):
        policy = interpret({"scoring": "points", "goals": ["a", "b"], "tiers": {"threshold": 1}})
        assert policy.method == "count"
        assert policy.goal_type == "collection"
        assert policy.total_goals == 0
        assert policy.tiers == ()

    def test_non_string_method_defaults_to_count(self):
        assert interpret({"scoring": {"method": 7}}).method == "count"

    def test_unknown_method_is_kept_verbatim(self):
        # the calculator treats it like "count"
        assert interpret({"scoring": {"method": "bonus"}}).method == "bonus"

    def test_items_not_a_list_means_zero_goals(self):
        assert interpret({"goals": {"items": {"a": 1}}}).total_goals == 0

    @pytest.mark.parametrize("target", ["250", 12.5, True, None])
    def test_non_integer_target_value_defaults_to_100(self, target):
        assert interpret({"goals": {"type": "cumulative", "targetValue": target}}).target_value == 100


class TestInterpretation:
    def test_full_document(self):
        policy = interpret(
            {
                "scoring": {"method": "points"},
                "goals": {"type": "cumulative", "targetValue": 250, "items": []},
                "tiers": [{"threshold": 0, "id": "bronze"}, {"threshold": 100, "id": "gold"}],
            }
        )
        assert policy.method == "points"
        assert policy.goal_type == "cumulative"
        assert policy.target_value == 250
        assert policy.tiers == (Tier(0, "bronze"), Tier(100, "gold"))

    def test_total_goals_is_item_count(self):
        items = [{"id": "EU"}, {"id": "NA"}, {"id": "SA"}, {"id": "AF"}, {"id": "AS"}, {"id": "OC"}]
        assert interpret({"goals": {"items": items}}).total_goals == 6

    def test_zero_and_negative_target_values_are_kept(self):
        assert interpret({"goals": {"targetValue": 0}}).target_value == 0
        assert interpret({"goals": {"targetValue": -5}}).target_value == -5

    def test_tier_order_is_preserved(self):
        policy = interpret({"tiers": [{"threshold": 100, "id": "gold"}, {"threshold": 0, "id": "bronze"}]})
        assert [t.id for t in policy.tiers] == ["gold", "bronze"]

    @pytest.mark.parametrize(
        "bad_entry",
        [
            {"threshold": "50", "id": "silver"},
            {"threshold": True, "id": "flag"},
            {"id": "platinum"},
            "gold",
        ],
    )
    def test_one_malformed_threshold_voids_all_tiers(self, bad_entry):
        policy = interpret(
            {"tiers": [{"threshold": 0, "id": "bronze"}, bad_entry, {"threshold": 100, "id": "gold"}]}
        )
        assert policy.tiers == ()

    def test_tier_without_string_id_is_kept_without_id(self):
        policy = interpret(
            {"tiers": [{"threshold": 0, "id": "bronze"}, {"threshold": 50}, {"threshold": 100, "id": 7}]}
        )
        assert policy.tiers == (Tier(0, "bronze"), Tier(50, None), Tier(100, None))


class TestHistoricalQsos:
    def test_defaults_to_true(self):
        assert historical_qsos_allowed({}) is True
        assert historical_qsos_allowed(None) is True

    def test_explicit_false(self):
        assert historical_qsos_allowed({"historicalQsosAllowed": False}) is False

    def test_non_boolean_is_ignored(self):
        assert historical_qsos_allowed({"historicalQsosAllowed": "no"}) is True
