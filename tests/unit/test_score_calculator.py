"""Unit tests for score and percentage computation."""

from __future__ import annotations

import pytest

from hamchallenges.scoring import ScoringPolicy, calculate_percentage, calculate_score, evaluate, score


def _policy(**kwargs) -> ScoringPolicy:
    return ScoringPolicy(**kwargs)


class TestCountMethod:
    @pytest.mark.parametrize(
        "goals",
        [[], ["EU"], ["EU", "NA", "SA"], ["EU", "EU", "EU"], ["unknown-goal", "EU"]],
    )
    def test_score_is_number_of_reported_goals(self, goals):
        assert calculate_score(_policy(method="count"), goals, 999) == len(goals)

    def test_duplicates_are_counted(self):
        """Duplicate goal ids inflate the count; they are not deduplicated."""
        assert calculate_score(_policy(method="count", total_goals=2), ["EU", "EU", "EU"], 0) == 3

    def test_unknown_method_behaves_like_count(self):
        assert calculate_score(_policy(method="bonus"), ["EU", "NA"], 50) == 2


class TestPercentageMethod:
    def test_three_of_five(self):
        assert calculate_score(_policy(method="percentage", total_goals=5), ["A", "B", "C"], 0) == 60

    def test_zero_items_scores_zero(self):
        assert calculate_score(_policy(method="percentage", total_goals=0), ["A", "B"], 0) == 0

    def test_rounds_half_up(self):
        # 1/8 = 12.5% -> 13, 1/3 = 33.33% -> 33, 2/3 = 66.67% -> 67
        assert calculate_score(_policy(method="percentage", total_goals=8), ["A"], 0) == 13
        assert calculate_score(_policy(method="percentage", total_goals=3), ["A"], 0) == 33
        assert calculate_score(_policy(method="percentage", total_goals=3), ["A", "B"], 0) == 67

    def test_can_exceed_100_with_duplicates(self):
        assert calculate_score(_policy(method="percentage", total_goals=2), ["A", "A", "B"], 0) == 150


class TestPointsMethod:
    @pytest.mark.parametrize("value", [0, 1, 37, 1000, -5])
    def test_score_is_current_value(self, value):
        assert calculate_score(_policy(method="points"), ["A", "B", "C"], value) == value

    def test_ignores_completed_goals(self):
        policy = _policy(method="points", total_goals=5)
        assert calculate_score(policy, [], 42) == calculate_score(policy, ["A", "B"], 42) == 42


class TestPercentageComplete:
    def test_collection(self):
        assert calculate_percentage(_policy(goal_type="collection", total_goals=4), ["A"], 0) == 25.0

    def test_collection_without_items(self):
        assert calculate_percentage(_policy(goal_type="collection", total_goals=0), ["A"], 0) == 0.0

    def test_collection_is_not_rounded(self):
        assert calculate_percentage(_policy(goal_type="collection", total_goals=3), ["A"], 0) == pytest.approx(
            33.3333, rel=1e-4
        )

    def test_cumulative(self):
        assert calculate_percentage(_policy(goal_type="cumulative", target_value=200), [], 50) == 25.0

    @pytest.mark.parametrize("target", [0, -10])
    def test_cumulative_non_positive_target(self, target):
        assert calculate_percentage(_policy(goal_type="cumulative", target_value=target), [], 50) == 0.0

    def test_other_goal_type(self):
        assert calculate_percentage(_policy(goal_type="streak", total_goals=5), ["A"], 10) == 0.0


class TestScoreAndPercentageAreIndependent:
    """Score follows scoring.method while percentage follows goals.type."""

    def test_points_score_with_collection_percentage(self):
        policy = _policy(method="points", goal_type="collection", total_goals=4)
        assert score(policy, ["A", "B"], 500) == (500, 50.0)

    def test_count_score_with_cumulative_percentage(self):
        policy = _policy(method="count", goal_type="cumulative", target_value=10)
        assert score(policy, ["A", "B", "C"], 5) == (3, 50.0)


class TestEvaluate:
    def test_runs_interpreter_calculator_and_tiers(self):
        configuration = {
            "scoring": {"method": "percentage"},
            "goals": {"type": "collection", "items": ["A", "B", "C", "D", "E"]},
            "tiers": [{"threshold": 0, "id": "bronze"}, {"threshold": 50, "id": "silver"}],
        }
        result = evaluate(configuration, ["A", "B", "C"], 0)
        assert result.score == 60
        assert result.percentage == 60.0
        assert result.tier == "silver"

    def test_empty_configuration(self):
        result = evaluate({}, ["A", "B"], 10)
        assert (result.score, result.percentage, result.tier) == (2, 0.0, None)
