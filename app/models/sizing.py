from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Dict


class SizeDefinition(BaseModel):
    """
    One T-shirt size band: duration and team size ranges.
    """

    name: str = Field(..., min_length=1, max_length=10)
    min_weeks: int = Field(..., ge=0)
    max_weeks: int = Field(..., ge=0)
    team_size_min: int = Field(..., ge=1)
    team_size_max: int = Field(..., ge=1)
    color: str = Field(default="#6B7280")
    description: Optional[str] = None

    @model_validator(mode="after")
    def validate_ranges(self):
        if self.max_weeks < self.min_weeks:
            raise ValueError("max_weeks must be >= min_weeks")
        if self.team_size_max < self.team_size_min:
            raise ValueError("team_size_max must be >= team_size_min")
        return self


class RoleRate(BaseModel):
    type: str = Field(..., min_length=1)
    daily_rate: float = Field(..., ge=0, description="Daily rate in GBP")


class SizingCondition(BaseModel):
    """
    Inclusive bounds on (impact, effort). Unset bounds always match.
    """

    impact_min: Optional[float] = Field(default=None, ge=0, le=5)
    impact_max: Optional[float] = Field(default=None, ge=0, le=5)
    effort_min: Optional[float] = Field(default=None, ge=0, le=5)
    effort_max: Optional[float] = Field(default=None, ge=0, le=5)

    def matches(self, impact: float, effort: float) -> bool:
        if self.impact_min is not None and impact < self.impact_min:
            return False
        if self.impact_max is not None and impact > self.impact_max:
            return False
        if self.effort_min is not None and effort < self.effort_min:
            return False
        if self.effort_max is not None and effort > self.effort_max:
            return False
        return True


class MappingRule(BaseModel):
    name: str
    condition: SizingCondition = Field(default_factory=SizingCondition)
    target_size: str
    priority: int = 0


DEFAULT_SIZES = [
    SizeDefinition(name="XS", min_weeks=1, max_weeks=3, team_size_min=1, team_size_max=2,
                   color="#10B981", description="Quick fixes and small enhancements"),
    SizeDefinition(name="S", min_weeks=2, max_weeks=6, team_size_min=2, team_size_max=3,
                   color="#3B82F6", description="Small projects with limited scope"),
    SizeDefinition(name="M", min_weeks=4, max_weeks=12, team_size_min=3, team_size_max=5,
                   color="#FBBF24", description="Medium projects requiring coordination"),
    SizeDefinition(name="L", min_weeks=8, max_weeks=24, team_size_min=5, team_size_max=8,
                   color="#EF4444", description="Large projects with significant complexity"),
    SizeDefinition(name="XL", min_weeks=16, max_weeks=52, team_size_min=8, team_size_max=12,
                   color="#8B5CF6", description="Enterprise-wide transformations"),
]

DEFAULT_ROLES = [
    RoleRate(type="Developer", daily_rate=400),
    RoleRate(type="Analyst", daily_rate=350),
    RoleRate(type="PM", daily_rate=500),
]

DEFAULT_MAPPING_RULES = [
    MappingRule(
        name="Quick Win - High Impact, Low Effort",
        condition=SizingCondition(impact_min=3.5, effort_max=2.5),
        target_size="S",
        priority=100,
    ),
    MappingRule(
        name="Strategic Bet - High Impact, Medium Effort",
        condition=SizingCondition(impact_min=3.0, effort_min=2.5, effort_max=3.5),
        target_size="M",
        priority=90,
    ),
    MappingRule(
        name="Complex Strategic - High Impact, High Effort",
        condition=SizingCondition(impact_min=2.5, effort_min=3.5),
        target_size="L",
        priority=80,
    ),
    MappingRule(
        name="Small Experiment - Low to Medium Impact",
        condition=SizingCondition(impact_max=3.0, effort_max=3.0),
        target_size="XS",
        priority=70,
    ),
]

# £K of annual benefit per impact point
DEFAULT_BENEFIT_MULTIPLIERS: Dict[str, float] = {
    "XS": 25,
    "S": 50,
    "M": 100,
    "L": 200,
    "XL": 400,
}


class TShirtSizingConfig(BaseModel):
    """
    Configuration for the T-shirt sizing estimator.
    """

    enabled: bool = True
    sizes: List[SizeDefinition] = Field(default_factory=lambda: [s.model_copy() for s in DEFAULT_SIZES])
    roles: List[RoleRate] = Field(default_factory=lambda: [r.model_copy() for r in DEFAULT_ROLES])
    overhead_multiplier: float = Field(default=1.35, gt=0)
    mapping_rules: List[MappingRule] = Field(
        default_factory=lambda: [r.model_copy(deep=True) for r in DEFAULT_MAPPING_RULES]
    )
    benefit_multipliers: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_BENEFIT_MULTIPLIERS))

    @field_validator("sizes")
    @classmethod
    def validate_unique_sizes(cls, v: List[SizeDefinition]) -> List[SizeDefinition]:
        names = [s.name for s in v]
        if len(names) != len(set(names)):
            raise ValueError("Size names must be unique")
        return v

    def get_size(self, name: str) -> Optional[SizeDefinition]:
        for size in self.sizes:
            if size.name == name:
                return size
        return None


class SizingEstimateResponse(BaseModel):
    """
    Output of the T-shirt sizing estimator. Estimates are null for size TBD.
    """

    size: Optional[str] = None
    color: Optional[str] = None
    matched_rule: Optional[str] = None
    impact_score: float
    effort_score: float
    min_weeks: Optional[int] = None
    max_weeks: Optional[int] = None
    team_size: Optional[float] = None
    average_daily_rate: Optional[float] = None
    min_cost: Optional[int] = None
    max_cost: Optional[int] = None
    min_benefit: Optional[int] = None
    max_benefit: Optional[int] = None
    fallback: bool = False
