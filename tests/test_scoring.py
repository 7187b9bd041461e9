# tests/test_scoring.py
"""
Scoring Tests
tests/test_scoring.py

Unit tests for impact/effort scoring, quadrant classification, manual
overrides, T-shirt sizing and maturity scoring.
"""

from decimal import Decimal

import pytest

from app.models.metadata import EffortWeights, ImpactWeights, ScoringModel
from app.models.sizing import MappingRule, SizeDefinition, SizingCondition, TShirtSizingConfig
from app.scoring.impact_effort import calculate_effort_score, calculate_impact_score, calculate_scores
from app.scoring.maturity import (
    calculate_maturity,
    count_survey_questions,
    estimate_completion_time,
    maturity_level,
)
from app.scoring.overrides import (
    effective_effort,
    effective_impact,
    effective_quadrant,
    has_manual_overrides,
    override_status,
)
from app.scoring.quadrant import classify_quadrant
from app.scoring.tshirt_sizing import TBD_SIZE, estimate_tshirt_size, select_rule
from app.scoring.utils import safe_number


# ---------------------------------------------------------------------------
# Impact / effort
# ---------------------------------------------------------------------------

class TestImpactEffort:

    def test_equal_weights_is_plain_mean(self):
        assert calculate_impact_score([5, 4, 3, 2, 1]) == 3.0
        assert calculate_effort_score([1, 1, 1, 1, 2]) == 1.2

    def test_custom_weights(self):
        assert calculate_impact_score([5, 1, 1, 1, 1], [60, 10, 10, 10, 10]) == 3.4

    def test_composite_keeps_full_precision(self):
        impact = calculate_impact_score([4, 4, 4, 4, 3.9998])
        assert impact == 3.99996
        assert classify_quadrant(impact, 3.0) == "Watchlist"

    def test_zero_weights_give_zero(self):
        assert calculate_impact_score([5, 5, 5, 5, 5], [0, 0, 0, 0, 0]) == 0.0

    def test_result_is_clamped(self):
        assert calculate_impact_score([9, 9, 9, 9, 9]) == 5.0

    def test_missing_values_count_as_zero(self):
        assert calculate_effort_score([None, "x", 5, 5, 5]) == 3.0

    def test_calculate_scores_with_model(self):
        model = ScoringModel(
            impact_weights=ImpactWeights(
                revenue_impact=100, cost_savings=0, risk_reduction=0,
                broker_partner_experience=0, strategic_fit=0,
            ),
            effort_weights=EffortWeights(),
        )
        sub_scores = {
            "revenue_impact": 5, "cost_savings": 1, "risk_reduction": 1,
            "broker_partner_experience": 1, "strategic_fit": 1,
            "data_readiness": 2, "technical_complexity": 2, "change_impact": 2,
            "model_risk": 2, "adoption_readiness": 2,
        }
        result = calculate_scores(sub_scores, model)
        assert result.impact_score == 5.0
        assert result.effort_score == 2.0
        assert result.quadrant == "Quick Win"


# ---------------------------------------------------------------------------
# Quadrant
# ---------------------------------------------------------------------------

class TestQuadrant:

    @pytest.mark.parametrize(
        "impact, effort, expected",
        [
            (4.0, 2.5, "Quick Win"),
            (4.0, 2.51, "Strategic Bet"),
            (3.99, 2.5, "Experimental"),
            (3.99, 2.51, "Watchlist"),
            (5.0, 0.0, "Quick Win"),
            (0.0, 5.0, "Watchlist"),
        ],
    )
    def test_boundaries(self, impact, effort, expected):
        assert classify_quadrant(impact, effort) == expected

    def test_custom_thresholds(self):
        assert classify_quadrant(3.0, 3.0, impact_threshold=3.0, effort_threshold=3.0) == "Quick Win"


# ---------------------------------------------------------------------------
# Overrides
# ---------------------------------------------------------------------------

class TestOverrides:

    def test_no_overrides(self):
        row = {"impact_score": 3.2, "effort_score": 2.0}
        assert effective_impact(row) == 3.2
        assert effective_effort(row) == 2.0
        assert effective_quadrant(row) == "Experimental"
        assert has_manual_overrides(row) is False

    def test_manual_scores_take_precedence(self):
        row = {"impact_score": 2.0, "effort_score": 4.0, "manual_impact_score": 4.5, "manual_effort_score": 1.0}
        assert effective_impact(row) == 4.5
        assert effective_quadrant(row) == "Quick Win"

    def test_zero_manual_score_is_ignored(self):
        row = {"impact_score": 2.0, "effort_score": 4.0, "manual_impact_score": 0}
        assert effective_impact(row) == 2.0
        assert override_status(row).override_count == 0
        assert has_manual_overrides(row) is True

    def test_invalid_manual_quadrant_falls_back(self):
        row = {"impact_score": 4.5, "effort_score": 1.0, "manual_quadrant": "Moonshot"}
        assert effective_quadrant(row) == "Quick Win"

    def test_manual_quadrant_wins_over_scores(self):
        row = {"impact_score": 4.5, "effort_score": 1.0, "manual_quadrant": "Watchlist"}
        assert effective_quadrant(row) == "Watchlist"

    def test_negative_calculated_score_is_zero(self):
        assert effective_impact({"impact_score": -1}) == 0.0

    def test_override_status(self, make_use_case):
        use_case = make_use_case(
            manual_impact_score=4.8,
            manual_quadrant="Strategic Bet",
            override_reason="Sponsor request",
        )
        status = override_status(use_case)
        assert status.has_overrides is True
        assert status.override_count == 2
        assert status.reason == "Sponsor request"
        assert status.effective_impact == 4.8
        assert status.effective_quadrant == "Strategic Bet"


# ---------------------------------------------------------------------------
# T-shirt sizing
# ---------------------------------------------------------------------------

class TestTShirtSizing:

    def test_priority_order(self):
        # impact 4, effort 2.5 matches both the S (100) and M (90) rules
        estimate = estimate_tshirt_size(4.0, 2.5)
        assert estimate.size == "S"
        assert estimate.matched_rule == "Quick Win - High Impact, Low Effort"

    def test_small_experiment(self):
        estimate = estimate_tshirt_size(2.0, 2.0)
        assert estimate.size == "XS"
        assert estimate.team_size == 1.5

    def test_no_match_is_tbd(self):
        estimate = estimate_tshirt_size(2.0, 4.0)
        assert estimate.size == TBD_SIZE
        assert estimate.min_cost is None

    def test_unknown_target_size_is_tbd(self):
        config = TShirtSizingConfig(
            mapping_rules=[MappingRule(name="Everything", target_size="XXL", priority=1)]
        )
        estimate = estimate_tshirt_size(3.0, 3.0, config)
        assert estimate.size == TBD_SIZE
        assert estimate.matched_rule == "Everything"

    def test_disabled_config(self):
        estimate = estimate_tshirt_size(4.0, 2.0, TShirtSizingConfig(enabled=False))
        assert estimate.fallback is True
        assert estimate.size is None

    def test_cost_and_benefit(self):
        config = TShirtSizingConfig(
            sizes=[SizeDefinition(name="S", min_weeks=2, max_weeks=4, team_size_min=2, team_size_max=2)],
            roles=[],
            overhead_multiplier=1.0,
            mapping_rules=[MappingRule(name="All", target_size="S")],
            benefit_multipliers={},
        )
        estimate = estimate_tshirt_size(4.0, 2.0, config)
        # 2 people × 400/day × 5 days × weeks
        assert estimate.min_cost == 8000
        assert estimate.max_cost == 16000
        assert estimate.average_daily_rate == 400.0
        # 4 × 50 × 1000, ±20%
        assert estimate.min_benefit == 160000
        assert estimate.max_benefit == 240000

    def test_ties_keep_config_order(self):
        config = TShirtSizingConfig(
            mapping_rules=[
                MappingRule(name="first", target_size="L", priority=5),
                MappingRule(name="second", target_size="XS", priority=5),
            ]
        )
        assert select_rule(3.0, 3.0, config).name == "first"

    def test_condition_bounds_are_inclusive(self):
        condition = SizingCondition(impact_min=3.5, effort_max=2.5)
        assert condition.matches(3.5, 2.5)
        assert not condition.matches(3.49, 2.5)


# ---------------------------------------------------------------------------
# Maturity
# ---------------------------------------------------------------------------

class TestMaturity:

    @pytest.mark.parametrize(
        "average, level",
        [(1.0, "Initial"), (1.5, "Repeatable"), (2.5, "Defined"), (3.5, "Managed"), (4.5, "Optimized")],
    )
    def test_levels(self, average, level):
        assert maturity_level(average) == level

    def test_category_and_overall(self):
        answers = [
            {"type": "score", "question_id": "s1", "category": "strategy", "value": 3},
            {"type": "score", "question_id": "s2", "category": "strategy", "value": 4},
            {"type": "score", "question_id": "g1", "category": "governance", "value": 5},
            {"type": "text", "question_id": "notes", "value": "ignored"},
            {"type": "choice", "question_id": "primary_focus_area", "value": "risk_management"},
        ]
        result = calculate_maturity(answers)

        strategy = result.categories["strategy"]
        assert strategy.average == 3.5
        assert strategy.count == 2
        assert strategy.total == 7
        assert strategy.percentage == 70
        assert strategy.level == "Managed"

        assert result.overall_average == 4.25
        assert result.overall_score == 85.0
        assert result.ai_strategy_maturity == 3.5
        assert result.primary_focus_area == "risk_management"

    def test_no_answers(self):
        result = calculate_maturity([])
        assert result.categories == {}
        assert result.overall_score == 0.0
        assert result.overall_level == "Initial"
        assert result.category_average("implementation") == 0.0

    def test_unknown_focus_area_is_ignored(self):
        answers = [{"type": "choice", "question_id": "primary_focus_area", "value": "marketing"}]
        assert calculate_maturity(answers).primary_focus_area is None

    def test_count_survey_questions(self, sample_survey_config):
        assert count_survey_questions(sample_survey_config) == 3
        assert count_survey_questions({"elements": [{"type": "text"}, {"type": "html"}]}) == 1

    @pytest.mark.parametrize("count, expected", [(0, "0-0 min"), (1, "3-4 min"), (6, "15-24 min")])
    def test_completion_time(self, count, expected):
        assert estimate_completion_time(count) == expected


class TestSafeNumber:

    @pytest.mark.parametrize("value", [None, True, "abc", float("nan"), float("inf")])
    def test_non_numbers_become_zero(self, value):
        assert safe_number(value) == Decimal("0")

    def test_numeric_strings(self):
        assert safe_number("2.5") == Decimal("2.5")
