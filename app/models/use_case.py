from pydantic import BaseModel, Field, model_validator
from datetime import datetime
from typing import Optional, List, Dict

from app.models.enumerations import (
    LibrarySource,
    LibraryTier,
    Quadrant,
    UseCaseStatus,
)


IMPACT_FIELDS = (
    "revenue_impact",
    "cost_savings",
    "risk_reduction",
    "broker_partner_experience",
    "strategic_fit",
)

EFFORT_FIELDS = (
    "data_readiness",
    "technical_complexity",
    "change_impact",
    "model_risk",
    "adoption_readiness",
)


def _sub_score(description: str):
    return Field(default=3, ge=1, le=5, description=description)


class SubScores(BaseModel):
    """
    The ten 1-5 rubric ratings behind a use case's impact and effort.
    """

    # Business value levers (impact)
    revenue_impact: int = _sub_score("Revenue impact (1-5)")
    cost_savings: int = _sub_score("Cost savings (1-5)")
    risk_reduction: int = _sub_score("Risk reduction (1-5)")
    broker_partner_experience: int = _sub_score("Broker/partner experience (1-5)")
    strategic_fit: int = _sub_score("Strategic fit (1-5)")

    # Feasibility levers (effort)
    data_readiness: int = _sub_score("Data readiness (1-5)")
    technical_complexity: int = _sub_score("Technical complexity (1-5)")
    change_impact: int = _sub_score("Change impact (1-5)")
    model_risk: int = _sub_score("Model risk (1-5)")
    adoption_readiness: int = _sub_score("Adoption readiness (1-5)")

    def impact_values(self) -> List[int]:
        return [getattr(self, name) for name in IMPACT_FIELDS]

    def effort_values(self) -> List[int]:
        return [getattr(self, name) for name in EFFORT_FIELDS]


class UseCaseBase(SubScores):
    """
    Base Pydantic model for a use case.
    """

    title: str = Field(..., min_length=1, max_length=255, description="Short use case title")
    description: str = Field(..., min_length=1, description="What the use case does")
    problem_statement: Optional[str] = Field(default=None, description="Business problem addressed")
    meaningful_id: Optional[str] = Field(default=None, max_length=50, description="Human-readable ID")

    process: Optional[str] = None
    line_of_business: Optional[str] = None
    business_segment: Optional[str] = None
    geography: Optional[str] = None
    use_case_type: Optional[str] = None

    processes: List[str] = Field(default_factory=list)
    lines_of_business: List[str] = Field(default_factory=list)
    business_segments: List[str] = Field(default_factory=list)
    geographies: List[str] = Field(default_factory=list)

    use_case_status: UseCaseStatus = Field(default=UseCaseStatus.DISCOVERY)
    library_source: LibrarySource = Field(default=LibrarySource.INTERNAL)


class UseCaseCreate(UseCaseBase):
    """
    Model for creating a new use case. Derived scores are computed server-side.
    """

    library_tier: LibraryTier = Field(default=LibraryTier.REFERENCE)
    is_active_for_portfolio: bool = False
    is_dashboard_visible: bool = False
    activation_reason: Optional[str] = None


class UseCaseUpdate(BaseModel):
    """
    Partial update. Any sub-score change triggers a score recalculation.
    """

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    problem_statement: Optional[str] = None
    meaningful_id: Optional[str] = Field(default=None, max_length=50)

    process: Optional[str] = None
    line_of_business: Optional[str] = None
    business_segment: Optional[str] = None
    geography: Optional[str] = None
    use_case_type: Optional[str] = None

    processes: Optional[List[str]] = None
    lines_of_business: Optional[List[str]] = None
    business_segments: Optional[List[str]] = None
    geographies: Optional[List[str]] = None

    revenue_impact: Optional[int] = Field(default=None, ge=1, le=5)
    cost_savings: Optional[int] = Field(default=None, ge=1, le=5)
    risk_reduction: Optional[int] = Field(default=None, ge=1, le=5)
    broker_partner_experience: Optional[int] = Field(default=None, ge=1, le=5)
    strategic_fit: Optional[int] = Field(default=None, ge=1, le=5)
    data_readiness: Optional[int] = Field(default=None, ge=1, le=5)
    technical_complexity: Optional[int] = Field(default=None, ge=1, le=5)
    change_impact: Optional[int] = Field(default=None, ge=1, le=5)
    model_risk: Optional[int] = Field(default=None, ge=1, le=5)
    adoption_readiness: Optional[int] = Field(default=None, ge=1, le=5)

    use_case_status: Optional[UseCaseStatus] = None
    library_source: Optional[LibrarySource] = None
    library_tier: Optional[LibraryTier] = None
    is_dashboard_visible: Optional[bool] = None


class UseCaseResponse(UseCaseBase):
    """
    Model returned in API responses, including derived and effective scores.
    """

    id: str
    impact_score: float = Field(..., ge=0, le=5)
    effort_score: float = Field(..., ge=0, le=5)
    quadrant: Quadrant

    manual_impact_score: Optional[float] = None
    manual_effort_score: Optional[float] = None
    manual_quadrant: Optional[str] = None
    override_reason: Optional[str] = None

    effective_impact_score: float
    effective_effort_score: float
    effective_quadrant: Quadrant
    has_manual_overrides: bool = False

    is_active_for_portfolio: bool = False
    is_dashboard_visible: bool = False
    library_tier: LibraryTier = LibraryTier.REFERENCE
    activation_date: Optional[datetime] = None
    activation_reason: Optional[str] = None
    deactivation_reason: Optional[str] = None
    recommended_by_assessment: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UseCaseListResponse(BaseModel):
    items: List[UseCaseResponse]
    total: int


class UseCaseSummary(BaseModel):
    """
    Portfolio-level counts for the dashboard header.
    """

    total: int
    active: int
    reference: int
    dashboard_visible: int
    with_overrides: int
    by_quadrant: Dict[str, int]
    quadrant_colors: Dict[str, Dict[str, str]] = Field(default_factory=dict)
    average_impact: float
    average_effort: float


class ActivationRequest(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=1000)


class BulkTierRequest(BaseModel):
    ids: List[str] = Field(..., min_length=1)
    library_tier: LibraryTier


class BulkTierResponse(BaseModel):
    updated: int
    library_tier: LibraryTier


class OverrideRequest(BaseModel):
    """
    Manual score override. At least one of the override values must be set.
    """

    manual_impact_score: Optional[float] = Field(default=None, ge=0, le=5)
    manual_effort_score: Optional[float] = Field(default=None, ge=0, le=5)
    manual_quadrant: Optional[Quadrant] = None
    override_reason: Optional[str] = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def validate_has_override(self):
        if (
            self.manual_impact_score is None
            and self.manual_effort_score is None
            and self.manual_quadrant is None
        ):
            raise ValueError("At least one manual override value is required")
        return self


class OverrideStatusResponse(BaseModel):
    has_overrides: bool
    override_count: int
    reason: Optional[str] = None
    effective_impact: float
    effective_effort: float
    effective_quadrant: Quadrant
