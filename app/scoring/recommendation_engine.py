# app/scoring/recommendation_engine.py
"""
Recommendation Engine
---------------------
Matches a completed assessment's maturity gaps to catalog use cases.

Match score (text matching is case-insensitive substring):
    +0.4  primary focus 'automation':          title/description has "automat"
                                                or process has "process"
    +0.4  primary focus 'customer_experience':  title has "customer"/"experience"
                                                or description has "customer"
    +0.4  primary focus 'risk_management':      title has "risk"/"fraud"
                                                or description has "risk"
    +0.3  ai_strategy_maturity < 3.0 and effective quadrant is Quick Win
    +0.2  implementation average < 3.0 and (title has "automat"
                                            or process has "operation")
    +0.3  overall_score < 60 and effective quadrant is Quick Win

A use case is recommended when its score is >= 0.3; at most six are kept.
RECOMMENDATION_ORDER="catalog" keeps the first matches in catalog order,
"score" keeps the highest scores (ties in catalog order).
"""
import structlog
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from app.config import settings
from app.models.enumerations import FocusArea, MaturityCategory, Quadrant, RecommendationOrder
from app.scoring.maturity import MaturityResult
from app.scoring.overrides import effective_quadrant
from app.scoring.utils import to_decimal

logger = structlog.get_logger(__name__)

FOCUS_MATCH_POINTS = Decimal("0.4")
STRATEGY_GAP_POINTS = Decimal("0.3")
IMPLEMENTATION_GAP_POINTS = Decimal("0.2")
LOW_MATURITY_POINTS = Decimal("0.3")
MAX_RECOMMENDATIONS = 6

# Catalog areas surfaced for each primary focus and maturity gap
FOCUS_AREA_MAPPINGS: Dict[str, List[str]] = {
    FocusArea.AUTOMATION.value: ["Claims Processing", "Underwriting", "Policy Administration"],
    FocusArea.CUSTOMER_EXPERIENCE.value: ["Customer Experience", "Broker Experience", "Digital Services"],
    FocusArea.RISK_MANAGEMENT.value: ["Risk Assessment", "Fraud Detection", "Compliance"],
}
STRATEGY_GAP_AREAS = ["Strategic Planning", "Governance"]
IMPLEMENTATION_GAP_AREAS = ["Process Automation", "Technical Implementation"]
GOVERNANCE_GAP_AREAS = ["Risk Management", "Compliance"]

FOCUS_REASONS = {
    FocusArea.AUTOMATION.value: "Matches your automation focus area and process improvement needs",
    FocusArea.CUSTOMER_EXPERIENCE.value: "Aligns with your customer experience improvement goals",
    FocusArea.RISK_MANAGEMENT.value: "Addresses your risk management and compliance priorities",
}


@dataclass
class MaturityScores:
    """Engine input derived from an assessment."""
    overall_score: float
    ai_strategy_maturity: float
    primary_focus_area: Optional[str] = None
    strategy: float = 0.0
    governance: float = 0.0
    implementation: float = 0.0

    @classmethod
    def from_maturity(cls, result: MaturityResult) -> "MaturityScores":
        return cls(
            overall_score=float(result.exact_overall_score),
            ai_strategy_maturity=float(result.exact_average(MaturityCategory.STRATEGY.value)),
            primary_focus_area=result.primary_focus_area,
            strategy=float(result.exact_average(MaturityCategory.STRATEGY.value)),
            governance=float(result.exact_average(MaturityCategory.GOVERNANCE.value)),
            implementation=float(result.exact_average(MaturityCategory.IMPLEMENTATION.value)),
        )


@dataclass
class Recommendation:
    use_case_id: str
    title: str
    match_score: Decimal
    reasoning: str
    quadrant: str


@dataclass
class RecommendationResult:
    """Output of RecommendationEngine.generate()."""
    recommendations: List[Recommendation] = field(default_factory=list)
    focus_areas: List[str] = field(default_factory=list)

    @property
    def use_case_ids(self) -> List[str]:
        return [r.use_case_id for r in self.recommendations]

    @property
    def reasoning_map(self) -> Dict[str, str]:
        return {r.use_case_id: r.reasoning for r in self.recommendations}


def _text(use_case: Any, name: str) -> str:
    value = use_case.get(name) if isinstance(use_case, dict) else getattr(use_case, name, None)
    return (value or "").lower()


def _append(reasoning: str, joined: str, standalone: str) -> str:
    return reasoning + joined if reasoning else standalone


class RecommendationEngine:
    """Score catalog use cases against an assessment's maturity scores."""

    def __init__(
        self,
        match_threshold: Optional[float] = None,
        maturity_threshold: Optional[float] = None,
        low_overall_score: Optional[float] = None,
        limit: Optional[int] = None,
        order: Optional[str] = None,
    ):
        self.match_threshold = to_decimal(
            match_threshold if match_threshold is not None else settings.RECOMMENDATION_MATCH_THRESHOLD
        )
        self.maturity_threshold = (
            maturity_threshold if maturity_threshold is not None else settings.MATURITY_GAP_THRESHOLD
        )
        self.low_overall_score = (
            low_overall_score if low_overall_score is not None else settings.LOW_MATURITY_OVERALL_SCORE
        )
        self.limit = min(limit if limit is not None else settings.RECOMMENDATION_LIMIT, MAX_RECOMMENDATIONS)
        self.order = RecommendationOrder(order or settings.RECOMMENDATION_ORDER)

    def focus_areas(self, scores: MaturityScores) -> List[str]:
        areas: List[str] = list(FOCUS_AREA_MAPPINGS.get(scores.primary_focus_area or "", []))
        if scores.ai_strategy_maturity < self.maturity_threshold:
            areas.extend(STRATEGY_GAP_AREAS)
        if scores.implementation < self.maturity_threshold:
            areas.extend(IMPLEMENTATION_GAP_AREAS)
        if scores.governance < self.maturity_threshold:
            areas.extend(GOVERNANCE_GAP_AREAS)
        # Deduplicate, keeping first occurrence
        return list(dict.fromkeys(areas))

    def _focus_match(self, focus: Optional[str], title: str, description: str, process: str) -> bool:
        if focus == FocusArea.AUTOMATION.value:
            return "automat" in title or "automat" in description or "process" in process
        if focus == FocusArea.CUSTOMER_EXPERIENCE.value:
            return "customer" in title or "experience" in title or "customer" in description
        if focus == FocusArea.RISK_MANAGEMENT.value:
            return "risk" in title or "fraud" in title or "risk" in description
        return False

    def score_use_case(self, scores: MaturityScores, use_case: Any) -> Recommendation:
        title = _text(use_case, "title")
        description = _text(use_case, "description")
        process = _text(use_case, "process")
        quadrant = effective_quadrant(use_case)
        is_quick_win = quadrant == Quadrant.QUICK_WIN.value

        match_score = Decimal("0")
        reasoning = ""

        if self._focus_match(scores.primary_focus_area, title, description, process):
            match_score += FOCUS_MATCH_POINTS
            reasoning = FOCUS_REASONS[scores.primary_focus_area]

        if scores.ai_strategy_maturity < self.maturity_threshold and is_quick_win:
            match_score += STRATEGY_GAP_POINTS
            reasoning = _append(
                reasoning,
                " and provides quick wins for AI strategy development",
                "Recommended as a quick win to build AI strategy maturity",
            )

        if scores.implementation < self.maturity_threshold and ("automat" in title or "operation" in process):
            match_score += IMPLEMENTATION_GAP_POINTS
            reasoning = _append(
                reasoning,
                " and helps improve implementation capabilities",
                "Helps build implementation experience and operational maturity",
            )

        if scores.overall_score < self.low_overall_score and is_quick_win:
            match_score += LOW_MATURITY_POINTS
            reasoning = _append(
                reasoning,
                " with high impact and low complexity",
                "Quick win opportunity ideal for building AI confidence",
            )

        use_case_id = use_case.get("id") if isinstance(use_case, dict) else getattr(use_case, "id")
        raw_title = use_case.get("title") if isinstance(use_case, dict) else getattr(use_case, "title")
        return Recommendation(
            use_case_id=str(use_case_id),
            title=raw_title or "",
            match_score=match_score,
            reasoning=reasoning,
            quadrant=quadrant,
        )

    def generate(self, scores: MaturityScores, use_cases: Sequence[Any]) -> RecommendationResult:
        """
        Args:
            scores: Maturity scores of the assessment.
            use_cases: Catalog use cases (rows or models), in catalog order.

        Returns:
            RecommendationResult with at most `limit` recommendations, each
            scoring at least `match_threshold`.
        """
        matches = [
            rec for rec in (self.score_use_case(scores, uc) for uc in use_cases)
            if rec.match_score >= self.match_threshold
        ]

        if self.order == RecommendationOrder.SCORE:
            matches = sorted(matches, key=lambda r: -r.match_score)

        result = RecommendationResult(
            recommendations=matches[: self.limit],
            focus_areas=self.focus_areas(scores),
        )

        logger.info(
            "recommendations_generated",
            catalog_size=len(use_cases),
            matched=len(matches),
            returned=len(result.recommendations),
            order=self.order.value,
            focus_areas=result.focus_areas,
        )
        return result
