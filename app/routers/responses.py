"""
Response Router - AI Use-Case Portfolio
app/routers/responses.py

Assessment response sessions: start, auto-save answers, complete, and
compute maturity scores.
"""

from typing import Any, Dict

import structlog
from fastapi import APIRouter, Depends, status

from app.config import settings
from app.core.dependencies import get_response_repository
from app.core.errors import raise_not_found
from app.models.assessment import (
    AnswersUpdate,
    CategoryScore,
    MaturityScoresResponse,
    ResponseCreate,
    ResponseSession,
)
from app.models.enumerations import ResponseStatus
from app.repositories.response_repository import ResponseRepository
from app.scoring.maturity import MaturityResult, calculate_maturity

logger = structlog.get_logger(__name__)

router = APIRouter(prefix=f"{settings.API_PREFIX}/responses", tags=["Responses"])


def raise_response_not_found():
    raise_not_found("Assessment response", "RESPONSE_NOT_FOUND")


def get_existing_response(response_repo: ResponseRepository, response_id: str) -> Dict[str, Any]:
    existing = response_repo.get_by_id(response_id)
    if not existing:
        raise_response_not_found()
    return existing


def maturity_to_response(response_id: str, result: MaturityResult) -> MaturityScoresResponse:
    return MaturityScoresResponse(
        response_id=response_id,
        categories={name: CategoryScore(**vars(c)) for name, c in result.categories.items()},
        overall_average=result.overall_average,
        overall_level=result.overall_level,
        overall_score=result.overall_score,
        ai_strategy_maturity=result.ai_strategy_maturity,
        primary_focus_area=result.primary_focus_area,
    )


@router.post(
    "",
    response_model=ResponseSession,
    status_code=status.HTTP_201_CREATED,
    summary="Start an assessment response",
)
async def start_response(
    request: ResponseCreate,
    response_repo: ResponseRepository = Depends(get_response_repository),
) -> ResponseSession:
    created = response_repo.create(
        questionnaire_id=request.questionnaire_id,
        respondent_name=request.respondent_name,
        respondent_email=request.respondent_email,
    )
    logger.info("response_started", response_id=created["id"], questionnaire_id=request.questionnaire_id)
    return ResponseSession(**created)


@router.get(
    "/{id}",
    response_model=ResponseSession,
    summary="Get assessment response",
)
async def get_response(
    id: str,
    response_repo: ResponseRepository = Depends(get_response_repository),
) -> ResponseSession:
    return ResponseSession(**get_existing_response(response_repo, id))


@router.put(
    "/{id}/answers",
    response_model=ResponseSession,
    summary="Save answers",
    description="Merges answers into the session by question_id. Completed sessions stay completed.",
)
async def save_answers(
    id: str,
    update: AnswersUpdate,
    response_repo: ResponseRepository = Depends(get_response_repository),
) -> ResponseSession:
    existing = get_existing_response(response_repo, id)

    merged: Dict[str, Dict[str, Any]] = {a["question_id"]: a for a in existing.get("answers") or []}
    for answer in update.answers:
        merged[answer.question_id] = answer.model_dump(mode="json")

    new_status = (
        ResponseStatus.COMPLETED
        if existing["status"] == ResponseStatus.COMPLETED.value
        else ResponseStatus.IN_PROGRESS
    )
    saved = response_repo.save_answers(id, list(merged.values()), new_status)
    if not saved:
        raise_response_not_found()

    logger.debug("answers_saved", response_id=id, received=len(update.answers), total=len(merged))
    return ResponseSession(**saved)


@router.post(
    "/{id}/complete",
    response_model=ResponseSession,
    summary="Complete an assessment response",
)
async def complete_response(
    id: str,
    response_repo: ResponseRepository = Depends(get_response_repository),
) -> ResponseSession:
    get_existing_response(response_repo, id)
    completed = response_repo.complete(id)
    if not completed:
        raise_response_not_found()
    logger.info("response_completed", response_id=id)
    return ResponseSession(**completed)


@router.get(
    "/{id}/scores",
    response_model=MaturityScoresResponse,
    summary="Maturity scores",
    description="Per-category and overall maturity computed from the score answers.",
)
async def get_scores(
    id: str,
    response_repo: ResponseRepository = Depends(get_response_repository),
) -> MaturityScoresResponse:
    session = ResponseSession(**get_existing_response(response_repo, id))
    return maturity_to_response(id, calculate_maturity(session.answers))
