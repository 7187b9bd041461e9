"""
Metadata Router - AI Use-Case Portfolio
app/routers/metadata.py

Scoring model weights and T-shirt sizing configuration, plus bulk score
recalculation after the weights change.
"""

import structlog
from fastapi import APIRouter, Depends

from app.config import settings
from app.core.dependencies import get_metadata_repository, get_use_case_repository
from app.models.metadata import MetadataConfig, MetadataUpdate, RecalculateResponse
from app.repositories.metadata_repository import MetadataRepository
from app.repositories.use_case_repository import UseCaseRepository
from app.scoring.impact_effort import calculate_scores
from app.services.cache import (
    CACHE_KEY_METADATA,
    TTL_METADATA,
    cached,
    invalidate_metadata_cache,
    invalidate_use_case_cache,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix=settings.API_PREFIX, tags=["Metadata"])


def load_metadata(metadata_repo: MetadataRepository) -> MetadataConfig:
    """Stored configuration, or the built-in defaults when none is saved."""

    def loader() -> MetadataConfig:
        row = metadata_repo.get_config()
        return MetadataConfig(**row) if row else MetadataConfig()

    return cached(CACHE_KEY_METADATA, MetadataConfig, TTL_METADATA, loader)


@router.get(
    "/metadata",
    response_model=MetadataConfig,
    summary="Get metadata configuration",
    description="Returns the scoring model and T-shirt sizing configuration. Cached for 1 hour.",
)
async def get_metadata(
    metadata_repo: MetadataRepository = Depends(get_metadata_repository),
) -> MetadataConfig:
    return load_metadata(metadata_repo)


@router.put(
    "/metadata",
    response_model=MetadataConfig,
    summary="Update metadata configuration",
    description="Replaces the scoring model and/or T-shirt sizing configuration.",
)
async def update_metadata(
    update: MetadataUpdate,
    metadata_repo: MetadataRepository = Depends(get_metadata_repository),
) -> MetadataConfig:
    current = load_metadata(metadata_repo)
    scoring_model = update.scoring_model or current.scoring_model
    tshirt_sizing = update.tshirt_sizing or current.tshirt_sizing

    row = metadata_repo.save_config(
        scoring_model=scoring_model.model_dump(mode="json"),
        tshirt_sizing=tshirt_sizing.model_dump(mode="json"),
    )
    invalidate_metadata_cache()

    logger.info(
        "metadata_updated",
        scoring_model_changed=update.scoring_model is not None,
        tshirt_sizing_changed=update.tshirt_sizing is not None,
    )
    return MetadataConfig(**row)


@router.post(
    "/recalculate-scores",
    response_model=RecalculateResponse,
    summary="Recalculate all use case scores",
    description="Recomputes impact, effort and quadrant of every use case with the current weights.",
)
async def recalculate_scores(
    metadata_repo: MetadataRepository = Depends(get_metadata_repository),
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> RecalculateResponse:
    metadata = load_metadata(metadata_repo)
    use_cases = use_case_repo.get_all()

    updated = 0
    for row in use_cases:
        scores = calculate_scores(row, metadata.scoring_model)
        if (
            row.get("impact_score") != scores.impact_score
            or row.get("effort_score") != scores.effort_score
            or row.get("quadrant") != scores.quadrant
        ):
            use_case_repo.update(
                row["id"],
                {
                    "impact_score": scores.impact_score,
                    "effort_score": scores.effort_score,
                    "quadrant": scores.quadrant,
                },
            )
            updated += 1

    invalidate_use_case_cache()
    logger.info("scores_recalculated", total=len(use_cases), updated=updated)

    return RecalculateResponse(
        updated=updated,
        message=f"Recalculated scores for {len(use_cases)} use cases ({updated} changed)",
    )
