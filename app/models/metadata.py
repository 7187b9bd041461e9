from pydantic import BaseModel, Field, model_validator
from datetime import datetime
from typing import Optional

from app.models.sizing import TShirtSizingConfig


def _weight(description: str):
    return Field(default=20.0, ge=0, le=100, description=description)


class ImpactWeights(BaseModel):
    """Percentage weights of the five business-value levers (sum = 100)."""

    revenue_impact: float = _weight("Revenue impact weight (%)")
    cost_savings: float = _weight("Cost savings weight (%)")
    risk_reduction: float = _weight("Risk reduction weight (%)")
    broker_partner_experience: float = _weight("Broker/partner experience weight (%)")
    strategic_fit: float = _weight("Strategic fit weight (%)")

    @model_validator(mode="after")
    def validate_sum(self):
        total = sum(self.model_dump().values())
        if abs(total - 100.0) > 0.01:
            raise ValueError(f"Impact weights must sum to 100, got {total}")
        return self


class EffortWeights(BaseModel):
    """Percentage weights of the five feasibility levers (sum = 100)."""

    data_readiness: float = _weight("Data readiness weight (%)")
    technical_complexity: float = _weight("Technical complexity weight (%)")
    change_impact: float = _weight("Change impact weight (%)")
    model_risk: float = _weight("Model risk weight (%)")
    adoption_readiness: float = _weight("Adoption readiness weight (%)")

    @model_validator(mode="after")
    def validate_sum(self):
        total = sum(self.model_dump().values())
        if abs(total - 100.0) > 0.01:
            raise ValueError(f"Effort weights must sum to 100, got {total}")
        return self


class ScoringModel(BaseModel):
    impact_weights: ImpactWeights = Field(default_factory=ImpactWeights)
    effort_weights: EffortWeights = Field(default_factory=EffortWeights)


class MetadataConfig(BaseModel):
    """
    The single 'default' metadata record.
    """

    id: str = "default"
    scoring_model: ScoringModel = Field(default_factory=ScoringModel)
    tshirt_sizing: TShirtSizingConfig = Field(default_factory=TShirtSizingConfig)
    updated_at: Optional[datetime] = None


class MetadataUpdate(BaseModel):
    scoring_model: Optional[ScoringModel] = None
    tshirt_sizing: Optional[TShirtSizingConfig] = None


class RecalculateResponse(BaseModel):
    updated: int
    message: str
