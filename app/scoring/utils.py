"""
Decimal Utilities
app/scoring/utils.py

Provides precision-safe decimal math for scoring calculations.
"""

from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP
from typing import Any, List


def to_decimal(value: Any, places: int = 4) -> Decimal:
    """Convert a number to Decimal with explicit precision."""
    return Decimal(str(value)).quantize(
        Decimal(10) ** -places, rounding=ROUND_HALF_UP
    )


def clamp(
    value: Decimal,
    min_val: Decimal = Decimal("0"),
    max_val: Decimal = Decimal("5"),
) -> Decimal:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def weighted_mean(values: List[Decimal], weights: List[Decimal]) -> Decimal:
    """
    Calculate weighted mean.

    Formula: Σ(value_i × weight_i) / Σ(weight_i)
    Returns Decimal("0") if all weights are zero. Not rounded; callers
    quantize for display.
    """
    if len(values) != len(weights):
        raise ValueError("values and weights must have same length")

    total_weight = sum(weights)
    if total_weight == 0:
        return Decimal("0")

    numerator = sum(v * w for v, w in zip(values, weights))
    return numerator / total_weight


def mean(values: List[Decimal]) -> Decimal:
    """Arithmetic mean; Decimal("0") for an empty list."""
    if not values:
        return Decimal("0")
    return sum(values) / Decimal(len(values))


def round_half_up(value: Decimal, places: int = 0) -> Decimal:
    """Round half away from zero (Decimal's default is banker's rounding)."""
    return value.quantize(Decimal(10) ** -places, rounding=ROUND_HALF_UP)


def ceil_int(value: Decimal) -> int:
    """Smallest integer >= value."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_CEILING))


def safe_number(value: Any) -> Decimal:
    """Coerce None / non-numeric values to Decimal("0")."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        result = Decimal(str(value))
    except (ArithmeticError, ValueError):
        return Decimal("0")
    if not result.is_finite():
        return Decimal("0")
    return result
