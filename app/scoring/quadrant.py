# app/scoring/quadrant.py
"""
Quadrant Classifier
-------------------
Places a use case on the 2x2 prioritization matrix.

    impact >= 4.0 and effort <= 2.5  -> Quick Win
    impact >= 4.0 and effort >  2.5  -> Strategic Bet
    impact <  4.0 and effort <= 2.5  -> Experimental
    otherwise                        -> Watchlist

Thresholds come from QUADRANT_IMPACT_THRESHOLD / QUADRANT_EFFORT_THRESHOLD.
Scores are compared unrounded.
"""
from typing import Optional

from app.config import settings
from app.models.enumerations import Quadrant

QUADRANTS = tuple(q.value for q in Quadrant)


def is_valid_quadrant(value: Optional[str]) -> bool:
    return bool(value) and value in QUADRANTS


def classify_quadrant(
    impact: float,
    effort: float,
    impact_threshold: Optional[float] = None,
    effort_threshold: Optional[float] = None,
) -> str:
    """Return the quadrant label for an (impact, effort) pair."""
    if impact_threshold is None:
        impact_threshold = settings.QUADRANT_IMPACT_THRESHOLD
    if effort_threshold is None:
        effort_threshold = settings.QUADRANT_EFFORT_THRESHOLD

    high_impact = impact >= impact_threshold
    low_effort = effort <= effort_threshold

    if high_impact and low_effort:
        return Quadrant.QUICK_WIN.value
    if high_impact:
        return Quadrant.STRATEGIC_BET.value
    if low_effort:
        return Quadrant.EXPERIMENTAL.value
    return Quadrant.WATCHLIST.value
