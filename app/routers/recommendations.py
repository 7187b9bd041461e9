"""
Recommendations Router - AI Use-Case Portfolio
app/routers/recommendations.py

Generates use case recommendations from a completed assessment and
persists them as the use cases' recommended_by_assessment marker.
"""

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.config import settings
from app.core.dependencies import (
    get_recommendation_engine,
    get_response_repository,
    get_use_case_repository,
)
from app.core.errors import raise_bad_request, raise_not_found
from app.models.assessment import (
    ApplyRecommendationsRequest,
    ApplyRecommendationsResponse,
    AssessmentRecommendations,
    RecommendationItem,
    RecommendedUseCasesResponse,
    ResponseSession,
)
from app.models.enumerations import ResponseStatus
from app.repositories.response_repository import ResponseRepository
from app.repositories.use_case_repository import UseCaseRepository
from app.routers.use_cases import row_to_response
from app.scoring.maturity import calculate_maturity
from app.scoring.recommendation_engine import (
    MaturityScores,
    RecommendationEngine,
    RecommendationResult,
)
from app.services.cache import invalidate_use_case_cache

logger = structlog.get_logger(__name__)

router = APIRouter(prefix=settings.API_PREFIX, tags=["Recommendations"])



#  Schemas


class ClearRecommendationsResponse(BaseModel):
    success: bool = True
    message: str
    assessment_id: str
    cleared: int



#  Helper Functions


def load_completed_session(response_repo: ResponseRepository, response_id: str) -> ResponseSession:
    row = response_repo.get_by_id(response_id)
    if not row:
        raise_not_found("Assessment response", "RESPONSE_NOT_FOUND")
    session = ResponseSession(**row)
    if session.status != ResponseStatus.COMPLETED:
        raise_bad_request(
            "RESPONSE_NOT_COMPLETED",
            "Recommendations require a completed assessment response",
        )
    return session


def generate_for_session(
    session: ResponseSession,
    use_case_repo: UseCaseRepository,
    engine: RecommendationEngine,
) -> RecommendationResult:
    scores = MaturityScores.from_maturity(calculate_maturity(session.answers))
    return engine.generate(scores, use_case_repo.get_all())


def to_assessment_recommendations(
    response_id: str, result: RecommendationResult, applied: bool
) -> AssessmentRecommendations:
    return AssessmentRecommendations(
        response_id=response_id,
        recommendations=[
            RecommendationItem(
                use_case_id=r.use_case_id,
                title=r.title,
                match_score=float(r.match_score),
                reasoning=r.reasoning,
                quadrant=r.quadrant,
            )
            for r in result.recommendations
        ],
        focus_areas=result.focus_areas,
        applied=applied,
    )


def replace_recommendations(use_case_repo: UseCaseRepository, assessment_id: str, use_case_ids) -> int:
    """Replace an assessment's recommended set: clear, then apply."""
    use_case_repo.clear_recommendations(assessment_id)
    applied = use_case_repo.apply_recommendations(assessment_id, list(use_case_ids))
    invalidate_use_case_cache()
    return applied



#  Assessment Recommendations


@router.post(
    "/assessments/{response_id}/recommendations",
    response_model=AssessmentRecommendations,
    summary="Generate and apply recommendations",
    description="Scores the catalog against a completed assessment and marks the recommended use cases.",
)
async def create_assessment_recommendations(
    response_id: str,
    response_repo: ResponseRepository = Depends(get_response_repository),
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
) -> AssessmentRecommendations:
    session = load_completed_session(response_repo, response_id)
    result = generate_for_session(session, use_case_repo, engine)
    replace_recommendations(use_case_repo, response_id, result.use_case_ids)

    logger.info("recommendations_applied", response_id=response_id, count=len(result.recommendations))
    return to_assessment_recommendations(response_id, result, applied=True)


@router.get(
    "/assessments/{response_id}/recommendations",
    response_model=AssessmentRecommendations,
    summary="Preview recommendations",
    description="Scores the catalog against a completed assessment without persisting anything.",
)
async def preview_assessment_recommendations(
    response_id: str,
    response_repo: ResponseRepository = Depends(get_response_repository),
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
) -> AssessmentRecommendations:
    session = load_completed_session(response_repo, response_id)
    result = generate_for_session(session, use_case_repo, engine)
    return to_assessment_recommendations(response_id, result, applied=False)


@router.delete(
    "/assessments/{response_id}/recommendations",
    response_model=ClearRecommendationsResponse,
    summary="Remove an assessment's recommendations",
    description="Clears the flags whatever the response status, like POST /recommendations/clear/{id}.",
)
async def delete_assessment_recommendations(
    response_id: str,
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> ClearRecommendationsResponse:
    return await clear_recommendations(response_id, use_case_repo)



#  Recommendation Persistence


@router.post(
    "/recommendations/apply",
    response_model=ApplyRecommendationsResponse,
    summary="Apply recommendations",
    description="Marks the given use cases as recommended by the assessment.",
)
async def apply_recommendations(
    request: ApplyRecommendationsRequest,
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> ApplyRecommendationsResponse:
    updated = use_case_repo.apply_recommendations(request.assessment_id, request.use_case_ids)
    invalidate_use_case_cache()
    return ApplyRecommendationsResponse(
        message=f"Applied recommendations for {len(request.use_case_ids)} use cases",
        assessment_id=request.assessment_id,
        recommended_count=updated,
    )


@router.post(
    "/recommendations/clear/{assessment_id}",
    response_model=ClearRecommendationsResponse,
    summary="Clear recommendations",
)
async def clear_recommendations(
    assessment_id: str,
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> ClearRecommendationsResponse:
    cleared = use_case_repo.clear_recommendations(assessment_id)
    invalidate_use_case_cache()
    return ClearRecommendationsResponse(
        message=f"Cleared recommendations for assessment {assessment_id}",
        assessment_id=assessment_id,
        cleared=cleared,
    )


@router.get(
    "/recommendations/{assessment_id}",
    response_model=RecommendedUseCasesResponse,
    summary="Get recommended use cases",
)
async def get_recommendations(
    assessment_id: str,
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> RecommendedUseCasesResponse:
    rows = use_case_repo.get_recommended(assessment_id)
    items = [row_to_response(r) for r in rows]
    return RecommendedUseCasesResponse(
        assessment_id=assessment_id,
        recommended_use_cases=items,
        count=len(items),
    )
