# app/scoring/tshirt_sizing.py
"""
T-Shirt Sizing Estimator
------------------------
Maps an (impact, effort) pair to a T-shirt size and derives cost, timeline
and benefit ranges.

Rule selection:
    mapping rules sorted by priority (descending, ties keep config order);
    the first rule whose condition contains (impact, effort) picks the size.

Derived values:
    team_size     = (team_size_min + team_size_max) / 2
    day_rate      = mean(role daily rates)                  (400 if no roles)
    cost(weeks)   = team_size × day_rate × weeks × 5 × overhead   -> min/max weeks
    base_benefit  = impact × benefit_multiplier[size] × £1000
    benefit range = 80% .. 120% of base_benefit

No match, or a rule pointing at an unknown size, yields size "TBD" with no
estimates. A disabled config yields no size and fallback=True.
"""
import structlog
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from app.models.sizing import DEFAULT_BENEFIT_MULTIPLIERS, MappingRule, TShirtSizingConfig
from app.scoring.utils import mean, round_half_up, safe_number

logger = structlog.get_logger(__name__)

TBD_SIZE = "TBD"
DEFAULT_DAILY_RATE = Decimal("400")
DEFAULT_BENEFIT_MULTIPLIER = Decimal("50")
WORKING_DAYS_PER_WEEK = Decimal("5")
BENEFIT_LOW = Decimal("0.8")
BENEFIT_HIGH = Decimal("1.2")


@dataclass
class TShirtEstimate:
    """Output of estimate_tshirt_size()."""
    impact_score: float
    effort_score: float
    size: Optional[str] = None
    color: Optional[str] = None
    matched_rule: Optional[str] = None
    min_weeks: Optional[int] = None
    max_weeks: Optional[int] = None
    team_size: Optional[float] = None
    average_daily_rate: Optional[float] = None
    min_cost: Optional[int] = None
    max_cost: Optional[int] = None
    min_benefit: Optional[int] = None
    max_benefit: Optional[int] = None
    fallback: bool = False


def select_rule(impact: float, effort: float, config: TShirtSizingConfig) -> Optional[MappingRule]:
    """Highest-priority rule whose condition contains (impact, effort)."""
    for rule in sorted(config.mapping_rules, key=lambda r: -r.priority):
        if rule.condition.matches(impact, effort):
            return rule
    return None


def average_daily_rate(config: TShirtSizingConfig) -> Decimal:
    if not config.roles:
        return DEFAULT_DAILY_RATE
    return mean([safe_number(role.daily_rate) for role in config.roles])


def benefit_multiplier(size: str, config: TShirtSizingConfig) -> Decimal:
    value = config.benefit_multipliers.get(size) or DEFAULT_BENEFIT_MULTIPLIERS.get(size)
    return safe_number(value) if value else DEFAULT_BENEFIT_MULTIPLIER


def estimate_tshirt_size(
    impact: float,
    effort: float,
    config: Optional[TShirtSizingConfig] = None,
) -> TShirtEstimate:
    """
    Args:
        impact: Effective impact score (0-5).
        effort: Effective effort score (0-5).
        config: Sizing configuration; built-in defaults when omitted.

    Returns:
        TShirtEstimate. Pure: the same inputs always give the same estimate.
    """
    config = config or TShirtSizingConfig()

    if not config.enabled:
        return TShirtEstimate(impact_score=impact, effort_score=effort, fallback=True)

    rule = select_rule(impact, effort, config)
    size_def = config.get_size(rule.target_size) if rule else None

    if size_def is None:
        logger.debug(
            "tshirt_size_unmatched",
            impact_score=impact,
            effort_score=effort,
            rule=rule.name if rule else None,
        )
        return TShirtEstimate(
            impact_score=impact,
            effort_score=effort,
            size=TBD_SIZE,
            matched_rule=rule.name if rule else None,
        )

    team_size = (Decimal(size_def.team_size_min) + Decimal(size_def.team_size_max)) / 2
    day_rate = average_daily_rate(config)
    overhead = safe_number(config.overhead_multiplier)

    def cost(weeks: int) -> int:
        return int(round_half_up(team_size * day_rate * Decimal(weeks) * WORKING_DAYS_PER_WEEK * overhead))

    base_benefit = safe_number(impact) * benefit_multiplier(size_def.name, config) * Decimal("1000")

    estimate = TShirtEstimate(
        impact_score=impact,
        effort_score=effort,
        size=size_def.name,
        color=size_def.color,
        matched_rule=rule.name,
        min_weeks=size_def.min_weeks,
        max_weeks=size_def.max_weeks,
        team_size=float(team_size),
        average_daily_rate=float(round_half_up(day_rate, 2)),
        min_cost=cost(size_def.min_weeks),
        max_cost=cost(size_def.max_weeks),
        min_benefit=int(round_half_up(base_benefit * BENEFIT_LOW)),
        max_benefit=int(round_half_up(base_benefit * BENEFIT_HIGH)),
    )

    logger.debug(
        "tshirt_size_estimated",
        impact_score=impact,
        effort_score=effort,
        size=estimate.size,
        rule=estimate.matched_rule,
        min_cost=estimate.min_cost,
        max_cost=estimate.max_cost,
    )
    return estimate
