"""
Scoring Router - AI Use-Case Portfolio
app/routers/scoring.py

Stateless scoring endpoints: score a set of sub-scores, or size an
(impact, effort) pair, without touching any use case.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends

from app.config import settings
from app.core.dependencies import get_metadata_repository
from app.models.scoring import ScoreCalculationRequest, ScoreCalculationResponse, TShirtSizeRequest
from app.models.sizing import SizingEstimateResponse
from app.repositories.metadata_repository import MetadataRepository
from app.routers.metadata import load_metadata
from app.scoring.impact_effort import calculate_scores
from app.scoring.tshirt_sizing import estimate_tshirt_size

router = APIRouter(prefix=f"{settings.API_PREFIX}/scoring", tags=["Scoring"])


@router.post(
    "/calculate",
    response_model=ScoreCalculationResponse,
    summary="Calculate impact, effort and quadrant",
    description="Uses the request's scoring model when given, else the stored weights.",
)
async def calculate(
    request: ScoreCalculationRequest,
    metadata_repo: MetadataRepository = Depends(get_metadata_repository),
) -> ScoreCalculationResponse:
    scoring_model = request.scoring_model or load_metadata(metadata_repo).scoring_model
    result = calculate_scores(request.model_dump(exclude={"scoring_model"}), scoring_model)
    return ScoreCalculationResponse(**asdict(result))


@router.post(
    "/tshirt-size",
    response_model=SizingEstimateResponse,
    summary="Estimate T-shirt size",
    description="Uses the request's sizing config when given, else the stored configuration.",
)
async def tshirt_size(
    request: TShirtSizeRequest,
    metadata_repo: MetadataRepository = Depends(get_metadata_repository),
) -> SizingEstimateResponse:
    config = request.config or load_metadata(metadata_repo).tshirt_sizing
    estimate = estimate_tshirt_size(request.impact_score, request.effort_score, config)
    return SizingEstimateResponse(**asdict(estimate))
