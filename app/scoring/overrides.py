# app/scoring/overrides.py
"""
Manual Score Overrides
----------------------
Resolves the scores every view should display for a use case.

    effective impact  = manual impact if set and > 0 (clamped to [0, 5]),
                        else calculated impact (clamped, 0 if non-positive)
    effective effort  = same rule on effort
    effective quadrant = manual quadrant if it is a valid label,
                         else classify_quadrant(effective impact, effective effort)

Works on use case rows (dicts) and on any object exposing the same attributes.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from app.scoring.quadrant import classify_quadrant, is_valid_quadrant
from app.scoring.utils import clamp, safe_number


@dataclass
class OverrideStatus:
    has_overrides: bool
    override_count: int
    reason: Optional[str]
    effective_impact: float
    effective_effort: float
    effective_quadrant: str


def _field(use_case: Any, name: str) -> Any:
    if isinstance(use_case, dict):
        return use_case.get(name)
    return getattr(use_case, name, None)


def _is_truthy(value: Any) -> bool:
    # Zero scores and empty labels do not count as overrides
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value)
    return safe_number(value) != Decimal("0")


def _effective(calculated: Any, manual: Any) -> float:
    if manual is not None:
        manual_score = safe_number(manual)
        if manual_score > 0:
            return float(clamp(manual_score))
    calculated_score = safe_number(calculated)
    return float(clamp(calculated_score)) if calculated_score > 0 else 0.0


def effective_impact(use_case: Any) -> float:
    return _effective(_field(use_case, "impact_score"), _field(use_case, "manual_impact_score"))


def effective_effort(use_case: Any) -> float:
    return _effective(_field(use_case, "effort_score"), _field(use_case, "manual_effort_score"))


def effective_quadrant(use_case: Any) -> str:
    manual = _field(use_case, "manual_quadrant")
    if is_valid_quadrant(manual):
        return manual
    return classify_quadrant(effective_impact(use_case), effective_effort(use_case))


def has_manual_overrides(use_case: Any) -> bool:
    return (
        _field(use_case, "manual_impact_score") is not None
        or _field(use_case, "manual_effort_score") is not None
        or bool(_field(use_case, "manual_quadrant"))
    )


def override_status(use_case: Any) -> OverrideStatus:
    """Summary of the active overrides and the values they produce."""
    manual_values = [
        _field(use_case, "manual_impact_score"),
        _field(use_case, "manual_effort_score"),
        _field(use_case, "manual_quadrant"),
    ]
    count = sum(1 for v in manual_values if _is_truthy(v))

    return OverrideStatus(
        has_overrides=has_manual_overrides(use_case),
        override_count=count,
        reason=_field(use_case, "override_reason"),
        effective_impact=effective_impact(use_case),
        effective_effort=effective_effort(use_case),
        effective_quadrant=effective_quadrant(use_case),
    )
