from pydantic import BaseModel, Field
from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from app.models.enumerations import FocusArea, MaturityLevel, ResponseStatus
from app.models.use_case import UseCaseResponse


# =============================================================================
# ANSWERS (tagged by "type")
# =============================================================================

class ScoreAnswer(BaseModel):
    """1-5 rating counted towards a maturity category."""

    type: Literal["score"] = "score"
    question_id: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    value: int = Field(..., ge=1, le=5)


class ChoiceAnswer(BaseModel):
    type: Literal["choice"] = "choice"
    question_id: str = Field(..., min_length=1)
    value: str


class MultiChoiceAnswer(BaseModel):
    type: Literal["multi_choice"] = "multi_choice"
    question_id: str = Field(..., min_length=1)
    values: List[str] = Field(default_factory=list)


class TextAnswer(BaseModel):
    type: Literal["text"] = "text"
    question_id: str = Field(..., min_length=1)
    value: str = ""


Answer = Annotated[
    Union[ScoreAnswer, ChoiceAnswer, MultiChoiceAnswer, TextAnswer],
    Field(discriminator="type"),
]


# =============================================================================
# RESPONSE SESSIONS
# =============================================================================

class ResponseCreate(BaseModel):
    questionnaire_id: str = Field(..., min_length=1)
    respondent_name: Optional[str] = Field(default=None, max_length=255)
    respondent_email: Optional[str] = Field(default=None, max_length=255)


class AnswersUpdate(BaseModel):
    """Answers are merged into the session by question_id."""

    answers: List[Answer] = Field(default_factory=list)


class ResponseSession(BaseModel):
    id: str
    questionnaire_id: str
    respondent_name: Optional[str] = None
    respondent_email: Optional[str] = None
    status: ResponseStatus = ResponseStatus.STARTED
    answers: List[Answer] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =============================================================================
# MATURITY SCORES
# =============================================================================

class CategoryScore(BaseModel):
    category: str
    average: float
    count: int
    total: int
    level: MaturityLevel
    percentage: int


class MaturityScoresResponse(BaseModel):
    response_id: str
    categories: Dict[str, CategoryScore]
    overall_average: float
    overall_level: MaturityLevel
    overall_score: float = Field(..., ge=0, le=100)
    ai_strategy_maturity: float
    primary_focus_area: Optional[FocusArea] = None


# =============================================================================
# RECOMMENDATIONS
# =============================================================================

class RecommendationItem(BaseModel):
    use_case_id: str
    title: str
    match_score: float
    reasoning: str
    quadrant: str


class AssessmentRecommendations(BaseModel):
    response_id: str
    recommendations: List[RecommendationItem]
    focus_areas: List[str]
    applied: bool = False


class ApplyRecommendationsRequest(BaseModel):
    assessment_id: str = Field(..., min_length=1)
    use_case_ids: List[str] = Field(default_factory=list)
    reasoning: Dict[str, str] = Field(default_factory=dict)


class ApplyRecommendationsResponse(BaseModel):
    success: bool = True
    message: str
    assessment_id: str
    recommended_count: int


class RecommendedUseCasesResponse(BaseModel):
    assessment_id: str
    recommended_use_cases: List[UseCaseResponse]
    count: int


# =============================================================================
# SURVEY CONFIGURATION
# =============================================================================

class SurveyConfigUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    survey_config: Dict[str, Any]


class SurveyConfigResponse(BaseModel):
    id: str
    title: Optional[str] = None
    survey_config: Dict[str, Any]
    question_count: int
    estimated_time: str
    updated_at: Optional[datetime] = None
