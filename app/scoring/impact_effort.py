# app/scoring/impact_effort.py
"""
Impact / Effort Calculator
--------------------------
Collapses the ten rubric ratings of a use case into two composite scores.

Formula:
    impact = Σ (lever_i × weight_i) / Σ weight_i     over the 5 business-value levers
    effort = Σ (lever_i × weight_i) / Σ weight_i     over the 5 feasibility levers
    both clamped to [0, 5]

Default weights are 20% per lever, so with defaults the score is sum × 0.2.
Input ranges are not validated here; API models constrain ratings to 1-5.
"""
import structlog
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from app.models.metadata import ScoringModel
from app.models.use_case import EFFORT_FIELDS, IMPACT_FIELDS
from app.scoring.quadrant import classify_quadrant
from app.scoring.utils import clamp, safe_number, weighted_mean

logger = structlog.get_logger(__name__)

_EQUAL_WEIGHT = Decimal("20")


@dataclass
class ScoreResult:
    """Output of calculate_scores()."""
    impact_score: float
    effort_score: float
    quadrant: str


def _composite(values: Sequence[Any], weights: Optional[Sequence[Any]]) -> float:
    dec_values = [safe_number(v) for v in values]
    dec_weights = [safe_number(w) for w in weights] if weights is not None else [_EQUAL_WEIGHT] * len(dec_values)
    return float(clamp(weighted_mean(dec_values, dec_weights)))


def calculate_impact_score(values: Sequence[Any], weights: Optional[Sequence[Any]] = None) -> float:
    """Weighted mean of the five business-value levers."""
    return _composite(values, weights)


def calculate_effort_score(values: Sequence[Any], weights: Optional[Sequence[Any]] = None) -> float:
    """Weighted mean of the five feasibility levers."""
    return _composite(values, weights)


def calculate_scores(
    sub_scores: Mapping[str, Any],
    scoring_model: Optional[ScoringModel] = None,
) -> ScoreResult:
    """
    Args:
        sub_scores: Mapping containing the ten lever ratings by field name
                    (a use case row or SubScores.model_dump()).
        scoring_model: Lever weights; equal weights when omitted.

    Returns:
        ScoreResult with impact, effort and the derived quadrant.
    """
    impact_values = [sub_scores.get(name) for name in IMPACT_FIELDS]
    effort_values = [sub_scores.get(name) for name in EFFORT_FIELDS]

    impact_weights = effort_weights = None
    if scoring_model is not None:
        iw = scoring_model.impact_weights.model_dump()
        ew = scoring_model.effort_weights.model_dump()
        impact_weights = [iw[name] for name in IMPACT_FIELDS]
        effort_weights = [ew[name] for name in EFFORT_FIELDS]

    impact = calculate_impact_score(impact_values, impact_weights)
    effort = calculate_effort_score(effort_values, effort_weights)
    quadrant = classify_quadrant(impact, effort)

    logger.debug(
        "scores_calculated",
        impact_score=impact,
        effort_score=effort,
        quadrant=quadrant,
        weighted=scoring_model is not None,
    )

    return ScoreResult(impact_score=impact, effort_score=effort, quadrant=quadrant)
