# app/scoring/maturity.py
"""
Maturity Scorer
---------------
Turns the answers of a completed assessment into maturity scores.

Per category (score answers grouped by their category):
    average    = total / count
    percentage = round(average / 5 × 100)
    level      = Optimized ≥ 4.5 > Managed ≥ 3.5 > Defined ≥ 2.5 > Repeatable ≥ 1.5 > Initial

Overall:
    overall_average = mean of category averages
    overall_score   = overall_average / 5 × 100            (0-100)
    ai_strategy_maturity = strategy category average       (0 when unanswered)

Also provides the survey completion-time estimate (2.5-4 minutes/question).
"""
import structlog
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from app.models.enumerations import FocusArea, MaturityCategory, MaturityLevel
from app.scoring.utils import ceil_int, mean, round_half_up

logger = structlog.get_logger(__name__)

PRIMARY_FOCUS_QUESTION = "primary_focus_area"

MIN_MINUTES_PER_QUESTION = Decimal("2.5")
MAX_MINUTES_PER_QUESTION = Decimal("4")

_LEVEL_THRESHOLDS = [
    (Decimal("4.5"), MaturityLevel.OPTIMIZED),
    (Decimal("3.5"), MaturityLevel.MANAGED),
    (Decimal("2.5"), MaturityLevel.DEFINED),
    (Decimal("1.5"), MaturityLevel.REPEATABLE),
]

# Survey element types that are layout, not questions
_NON_QUESTION_TYPES = {"panel", "paneldynamic", "html", "expression", "image"}


@dataclass
class CategoryResult:
    category: str
    average: float
    count: int
    total: int
    level: str
    percentage: int


@dataclass
class MaturityResult:
    """Output of calculate_maturity()."""
    categories: Dict[str, CategoryResult] = field(default_factory=dict)
    overall_average: float = 0.0
    overall_level: str = MaturityLevel.INITIAL.value
    overall_score: float = 0.0
    ai_strategy_maturity: float = 0.0
    primary_focus_area: Optional[str] = None
    # Unrounded values; gap rules compare against these
    exact_averages: Dict[str, Decimal] = field(default_factory=dict)
    exact_overall_score: Decimal = Decimal("0")

    def category_average(self, category: str) -> float:
        """Average for a category; 0 when the category was not answered."""
        result = self.categories.get(category)
        return result.average if result else 0.0

    def exact_average(self, category: str) -> Decimal:
        return self.exact_averages.get(category, Decimal("0"))


def maturity_level(average: Any) -> str:
    value = Decimal(str(average))
    for threshold, level in _LEVEL_THRESHOLDS:
        if value >= threshold:
            return level.value
    return MaturityLevel.INITIAL.value


def _answer_value(answer: Any, name: str) -> Any:
    if isinstance(answer, dict):
        return answer.get(name)
    return getattr(answer, name, None)


def calculate_maturity(answers: Iterable[Any]) -> MaturityResult:
    """
    Args:
        answers: Tagged answers (ScoreAnswer/ChoiceAnswer/... models or dicts).

    Returns:
        MaturityResult with per-category and overall scores.
    """
    totals: Dict[str, List[int]] = {}
    primary_focus: Optional[str] = None

    for answer in answers:
        kind = _answer_value(answer, "type")
        if kind == "score":
            category = _answer_value(answer, "category")
            totals.setdefault(category, []).append(int(_answer_value(answer, "value")))
        elif kind == "choice" and _answer_value(answer, "question_id") == PRIMARY_FOCUS_QUESTION:
            value = _answer_value(answer, "value")
            if value in {f.value for f in FocusArea}:
                primary_focus = value

    categories: Dict[str, CategoryResult] = {}
    exact_averages: Dict[str, Decimal] = {}
    for category, values in totals.items():
        total = sum(values)
        average = Decimal(total) / Decimal(len(values))
        exact_averages[category] = average
        categories[category] = CategoryResult(
            category=category,
            average=float(round_half_up(average, 2)),
            count=len(values),
            total=total,
            level=maturity_level(average),
            percentage=int(round_half_up(average / Decimal("5") * Decimal("100"))),
        )

    overall_average = mean(list(exact_averages.values()))
    overall_score = overall_average / Decimal("5") * Decimal("100")

    result = MaturityResult(
        categories=categories,
        overall_average=float(round_half_up(overall_average, 2)),
        overall_level=maturity_level(overall_average),
        overall_score=float(round_half_up(overall_score, 2)),
        primary_focus_area=primary_focus,
        exact_averages=exact_averages,
        exact_overall_score=overall_score,
    )
    result.ai_strategy_maturity = result.category_average(MaturityCategory.STRATEGY.value)

    logger.info(
        "maturity_calculated",
        categories={k: v.average for k, v in categories.items()},
        overall_score=result.overall_score,
        primary_focus_area=primary_focus,
    )
    return result


def count_survey_questions(survey_config: Dict[str, Any]) -> int:
    """Count answerable elements in a survey definition (pages -> elements, panels nested)."""

    def walk(elements: Iterable[Dict[str, Any]]) -> int:
        count = 0
        for element in elements or []:
            if not isinstance(element, dict):
                continue
            nested = element.get("elements") or element.get("templateElements")
            if nested:
                count += walk(nested)
            if element.get("type") not in _NON_QUESTION_TYPES:
                count += 1
        return count

    pages = survey_config.get("pages")
    if pages is None:
        return walk(survey_config.get("elements", []))
    return sum(walk(page.get("elements", [])) for page in pages if isinstance(page, dict))


def estimate_completion_time(question_count: int) -> str:
    """Format the completion estimate, e.g. 6 questions -> "15-24 min"."""
    low = ceil_int(Decimal(question_count) * MIN_MINUTES_PER_QUESTION)
    high = ceil_int(Decimal(question_count) * MAX_MINUTES_PER_QUESTION)
    return f"{low}-{high} min"
