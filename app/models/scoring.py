from pydantic import BaseModel, Field
from typing import Optional

from app.models.enumerations import Quadrant
from app.models.metadata import ScoringModel
from app.models.sizing import TShirtSizingConfig
from app.models.use_case import SubScores


class ScoreCalculationRequest(SubScores):
    """
    Sub-scores to score without persisting. Weights default to the stored model.
    """

    scoring_model: Optional[ScoringModel] = None


class ScoreCalculationResponse(BaseModel):
    impact_score: float = Field(..., ge=0, le=5)
    effort_score: float = Field(..., ge=0, le=5)
    quadrant: Quadrant


class TShirtSizeRequest(BaseModel):
    impact_score: float = Field(..., ge=0, le=5)
    effort_score: float = Field(..., ge=0, le=5)
    config: Optional[TShirtSizingConfig] = None
