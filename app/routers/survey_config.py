"""
Survey Config Router - AI Use-Case Portfolio
app/routers/survey_config.py

Serves survey definitions verbatim for the survey widget, with the
question count and completion-time estimate.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.config import settings
from app.core.dependencies import get_survey_config_repository
from app.core.errors import raise_not_found
from app.models.assessment import SurveyConfigResponse, SurveyConfigUpdate
from app.repositories.survey_config_repository import SurveyConfigRepository
from app.scoring.maturity import count_survey_questions, estimate_completion_time

router = APIRouter(prefix=f"{settings.API_PREFIX}/survey-config", tags=["Survey Config"])


def row_to_response(row: Dict[str, Any]) -> SurveyConfigResponse:
    question_count = count_survey_questions(row["survey_config"])
    return SurveyConfigResponse(
        id=row["id"],
        title=row.get("title"),
        survey_config=row["survey_config"],
        question_count=question_count,
        estimated_time=estimate_completion_time(question_count),
        updated_at=row.get("updated_at"),
    )


@router.get(
    "/{id}",
    response_model=SurveyConfigResponse,
    summary="Get survey definition",
)
async def get_survey_config(
    id: str,
    survey_repo: SurveyConfigRepository = Depends(get_survey_config_repository),
) -> SurveyConfigResponse:
    row = survey_repo.get_by_id(id)
    if not row:
        raise_not_found("Survey configuration", "SURVEY_CONFIG_NOT_FOUND")
    return row_to_response(row)


@router.put(
    "/{id}",
    response_model=SurveyConfigResponse,
    summary="Save survey definition",
    description="Creates or replaces the survey definition stored under this id.",
)
async def put_survey_config(
    id: str,
    update: SurveyConfigUpdate,
    survey_repo: SurveyConfigRepository = Depends(get_survey_config_repository),
) -> SurveyConfigResponse:
    row = survey_repo.upsert(id, update.survey_config, title=update.title)
    return row_to_response(row)
