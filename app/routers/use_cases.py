"""
Use Case Router - AI Use-Case Portfolio
app/routers/use_cases.py

Handles use case CRUD, library tier lifecycle, manual score overrides and
T-shirt sizing, with Redis caching of read views.
"""

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
from fastapi import APIRouter, Depends, Query, status

from app.config import get_quadrant_colors, settings
from app.core.dependencies import get_metadata_repository, get_use_case_repository
from app.core.errors import raise_not_found
from app.models.enumerations import LibraryTier, Quadrant
from app.models.sizing import SizingEstimateResponse
from app.models.use_case import (
    EFFORT_FIELDS,
    IMPACT_FIELDS,
    ActivationRequest,
    BulkTierRequest,
    BulkTierResponse,
    OverrideRequest,
    UseCaseCreate,
    UseCaseListResponse,
    UseCaseResponse,
    UseCaseSummary,
    UseCaseUpdate,
)
from app.repositories.metadata_repository import MetadataRepository
from app.repositories.use_case_repository import UseCaseRepository
from app.routers.metadata import load_metadata
from app.scoring.impact_effort import calculate_scores
from app.scoring.overrides import override_status
from app.scoring.tshirt_sizing import estimate_tshirt_size
from app.services.cache import (
    CACHE_KEY_USE_CASE_PREFIX,
    CACHE_KEY_USE_CASES_PREFIX,
    TTL_USE_CASES,
    cached,
    invalidate_use_case_cache,
)
from app.state import PortfolioFilters, PortfolioState

logger = structlog.get_logger(__name__)

router = APIRouter(prefix=f"{settings.API_PREFIX}/use-cases", tags=["Use Cases"])

SUB_SCORE_FIELDS = set(IMPACT_FIELDS) | set(EFFORT_FIELDS)


#  Helper Functions


def raise_use_case_not_found():
    raise_not_found("Use case", "USE_CASE_NOT_FOUND")


def row_to_response(row: Dict[str, Any]) -> UseCaseResponse:
    """Build the API model from a repository row, resolving effective scores."""
    data = {k: v for k, v in row.items() if v is not None}
    resolved = override_status(row)
    return UseCaseResponse(
        **data,
        effective_impact_score=resolved.effective_impact,
        effective_effort_score=resolved.effective_effort,
        effective_quadrant=resolved.effective_quadrant,
        has_manual_overrides=resolved.has_overrides,
    )


def to_list_response(rows: List[Dict[str, Any]]) -> UseCaseListResponse:
    items = [row_to_response(r) for r in rows]
    return UseCaseListResponse(items=items, total=len(items))


def get_existing(use_case_repo: UseCaseRepository, use_case_id: str) -> Dict[str, Any]:
    existing = use_case_repo.get_by_id(use_case_id)
    if not existing:
        raise_use_case_not_found()
    return existing


def save_and_respond(use_case_repo: UseCaseRepository, use_case_id: str, changes: Dict[str, Any]) -> UseCaseResponse:
    updated = use_case_repo.update(use_case_id, changes)
    if not updated:
        raise_use_case_not_found()
    invalidate_use_case_cache(use_case_id)
    return row_to_response(updated)


def tier_fields(library_tier: str, reason: Optional[str] = None) -> Dict[str, Any]:
    """Lifecycle columns implied by moving a use case to a library tier."""
    if library_tier == LibraryTier.ACTIVE.value:
        return {
            "library_tier": LibraryTier.ACTIVE.value,
            "is_active_for_portfolio": True,
            "activation_date": datetime.now(timezone.utc),
            "activation_reason": reason,
            "deactivation_reason": None,
        }
    return {
        "library_tier": LibraryTier.REFERENCE.value,
        "is_active_for_portfolio": False,
        "deactivation_reason": reason,
    }


#  Routes (static paths before /{id})


@router.get(
    "",
    response_model=UseCaseListResponse,
    summary="List use cases",
    description="Returns all use cases in catalog order, optionally filtered. Cached for 5 minutes.",
)
async def list_use_cases(
    search: Optional[str] = Query(default=None, max_length=200),
    process: Optional[str] = Query(default=None),
    line_of_business: Optional[str] = Query(default=None),
    business_segment: Optional[str] = Query(default=None),
    geography: Optional[str] = Query(default=None),
    use_case_type: Optional[str] = Query(default=None),
    quadrant: Optional[Quadrant] = Query(default=None),
    library_tier: Optional[LibraryTier] = Query(default=None),
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> UseCaseListResponse:
    everything = cached(
        f"{CACHE_KEY_USE_CASES_PREFIX}all",
        UseCaseListResponse,
        TTL_USE_CASES,
        lambda: to_list_response(use_case_repo.get_all()),
    )

    filters = PortfolioFilters(
        search=search or "",
        process=process,
        line_of_business=line_of_business,
        business_segment=business_segment,
        geography=geography,
        use_case_type=use_case_type,
        quadrant=quadrant.value if quadrant else None,
        library_tier=library_tier.value if library_tier else None,
    )
    if filters == PortfolioFilters():
        return everything

    items = PortfolioState(use_cases=tuple(everything.items), filters=filters).filtered()
    return UseCaseListResponse(items=items, total=len(items))


@router.get(
    "/dashboard",
    response_model=UseCaseListResponse,
    summary="Dashboard use cases",
    description="Use cases flagged as visible on the dashboard.",
)
async def list_dashboard_use_cases(
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> UseCaseListResponse:
    return cached(
        f"{CACHE_KEY_USE_CASES_PREFIX}dashboard",
        UseCaseListResponse,
        TTL_USE_CASES,
        lambda: to_list_response(use_case_repo.get_dashboard()),
    )


@router.get(
    "/active",
    response_model=UseCaseListResponse,
    summary="Active portfolio use cases",
)
async def list_active_use_cases(
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> UseCaseListResponse:
    return cached(
        f"{CACHE_KEY_USE_CASES_PREFIX}active",
        UseCaseListResponse,
        TTL_USE_CASES,
        lambda: to_list_response(use_case_repo.get_by_tier(LibraryTier.ACTIVE.value)),
    )


@router.get(
    "/reference",
    response_model=UseCaseListResponse,
    summary="Reference library use cases",
)
async def list_reference_use_cases(
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> UseCaseListResponse:
    return cached(
        f"{CACHE_KEY_USE_CASES_PREFIX}reference",
        UseCaseListResponse,
        TTL_USE_CASES,
        lambda: to_list_response(use_case_repo.get_by_tier(LibraryTier.REFERENCE.value)),
    )


@router.get(
    "/summary",
    response_model=UseCaseSummary,
    summary="Portfolio summary",
    description="Counts per tier and effective quadrant, and average effective scores.",
)
async def get_summary(
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> UseCaseSummary:
    items = [row_to_response(r) for r in use_case_repo.get_all()]
    state = PortfolioState(use_cases=tuple(items))
    total = len(items)

    return UseCaseSummary(
        total=total,
        active=sum(1 for uc in items if uc.library_tier == LibraryTier.ACTIVE),
        reference=sum(1 for uc in items if uc.library_tier == LibraryTier.REFERENCE),
        dashboard_visible=sum(1 for uc in items if uc.is_dashboard_visible),
        with_overrides=sum(1 for uc in items if uc.has_manual_overrides),
        by_quadrant=state.quadrant_counts(),
        quadrant_colors={q.value: get_quadrant_colors(q.value) for q in Quadrant},
        average_impact=round(sum(uc.effective_impact_score for uc in items) / total, 2) if total else 0.0,
        average_effort=round(sum(uc.effective_effort_score for uc in items) / total, 2) if total else 0.0,
    )


@router.patch(
    "/bulk-tier",
    response_model=BulkTierResponse,
    summary="Move use cases between library tiers",
)
async def bulk_update_tier(
    request: BulkTierRequest,
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> BulkTierResponse:
    updated = use_case_repo.bulk_update_tier(request.ids, request.library_tier.value)
    invalidate_use_case_cache()
    logger.info("bulk_tier_updated", requested=len(request.ids), updated=updated, tier=request.library_tier.value)
    return BulkTierResponse(updated=updated, library_tier=request.library_tier)


@router.post(
    "",
    response_model=UseCaseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new use case",
    description="Creates a use case. Impact, effort and quadrant are derived from the sub-scores.",
)
async def create_use_case(
    use_case: UseCaseCreate,
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
    metadata_repo: MetadataRepository = Depends(get_metadata_repository),
) -> UseCaseResponse:
    metadata = load_metadata(metadata_repo)
    scores = calculate_scores(use_case.model_dump(), metadata.scoring_model)

    data = use_case.model_dump(mode="json")
    data.update(
        impact_score=scores.impact_score,
        effort_score=scores.effort_score,
        quadrant=scores.quadrant,
    )
    if use_case.library_tier == LibraryTier.ACTIVE or use_case.is_active_for_portfolio:
        data.update(tier_fields(LibraryTier.ACTIVE.value, use_case.activation_reason))

    created = use_case_repo.create(data)
    invalidate_use_case_cache()

    logger.info("use_case_created", use_case_id=created["id"], quadrant=scores.quadrant)
    return row_to_response(created)


@router.get(
    "/{id}",
    response_model=UseCaseResponse,
    summary="Get use case by ID",
    description="Retrieves a use case. Cached for 5 minutes.",
)
async def get_use_case(
    id: str,
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> UseCaseResponse:
    return cached(
        f"{CACHE_KEY_USE_CASE_PREFIX}{id}",
        UseCaseResponse,
        TTL_USE_CASES,
        lambda: row_to_response(get_existing(use_case_repo, id)),
    )


@router.put(
    "/{id}",
    response_model=UseCaseResponse,
    summary="Update use case",
    description="Updates a use case; sub-score changes recompute impact, effort and quadrant.",
)
async def update_use_case(
    id: str,
    use_case: UseCaseUpdate,
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
    metadata_repo: MetadataRepository = Depends(get_metadata_repository),
) -> UseCaseResponse:
    existing = get_existing(use_case_repo, id)

    changes = use_case.model_dump(exclude_unset=True, mode="json")
    if not changes:
        return row_to_response(existing)

    if SUB_SCORE_FIELDS & changes.keys():
        metadata = load_metadata(metadata_repo)
        scores = calculate_scores({**existing, **changes}, metadata.scoring_model)
        changes.update(
            impact_score=scores.impact_score,
            effort_score=scores.effort_score,
            quadrant=scores.quadrant,
        )

    if "library_tier" in changes and changes["library_tier"] != existing.get("library_tier"):
        changes.update(tier_fields(changes["library_tier"]))

    return save_and_respond(use_case_repo, id, changes)


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete use case",
    description="Permanently deletes a use case and invalidates cache.",
)
async def delete_use_case(
    id: str,
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> None:
    if not use_case_repo.delete(id):
        raise_use_case_not_found()
    invalidate_use_case_cache(id)
    logger.info("use_case_deleted", use_case_id=id)


@router.patch(
    "/{id}/activate",
    response_model=UseCaseResponse,
    summary="Activate use case",
    description="Moves a use case into the active portfolio tier.",
)
async def activate_use_case(
    id: str,
    request: Optional[ActivationRequest] = None,
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> UseCaseResponse:
    get_existing(use_case_repo, id)
    reason = request.reason if request else None
    return save_and_respond(use_case_repo, id, tier_fields(LibraryTier.ACTIVE.value, reason))


@router.patch(
    "/{id}/deactivate",
    response_model=UseCaseResponse,
    summary="Deactivate use case",
    description="Moves a use case back to the reference library.",
)
async def deactivate_use_case(
    id: str,
    request: Optional[ActivationRequest] = None,
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> UseCaseResponse:
    get_existing(use_case_repo, id)
    reason = request.reason if request else None
    return save_and_respond(use_case_repo, id, tier_fields(LibraryTier.REFERENCE.value, reason))


@router.patch(
    "/{id}/toggle-dashboard",
    response_model=UseCaseResponse,
    summary="Toggle dashboard visibility",
)
async def toggle_dashboard(
    id: str,
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> UseCaseResponse:
    existing = get_existing(use_case_repo, id)
    visible = not bool(existing.get("is_dashboard_visible"))
    return save_and_respond(use_case_repo, id, {"is_dashboard_visible": visible})


@router.put(
    "/{id}/override",
    response_model=UseCaseResponse,
    summary="Set manual score overrides",
    description="Manual impact/effort/quadrant supersede the derived values wherever effective scores are read.",
)
async def set_override(
    id: str,
    override: OverrideRequest,
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> UseCaseResponse:
    get_existing(use_case_repo, id)
    changes = override.model_dump(exclude_unset=True, mode="json")
    logger.info("override_set", use_case_id=id, fields=sorted(changes))
    return save_and_respond(use_case_repo, id, changes)


@router.delete(
    "/{id}/override",
    response_model=UseCaseResponse,
    summary="Clear manual score overrides",
)
async def clear_override(
    id: str,
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
) -> UseCaseResponse:
    get_existing(use_case_repo, id)
    changes = {
        "manual_impact_score": None,
        "manual_effort_score": None,
        "manual_quadrant": None,
        "override_reason": None,
    }
    return save_and_respond(use_case_repo, id, changes)


@router.get(
    "/{id}/sizing",
    response_model=SizingEstimateResponse,
    summary="T-shirt size estimate",
    description="Cost, timeline and benefit estimate from the effective scores.",
)
async def get_sizing(
    id: str,
    use_case_repo: UseCaseRepository = Depends(get_use_case_repository),
    metadata_repo: MetadataRepository = Depends(get_metadata_repository),
) -> SizingEstimateResponse:
    existing = get_existing(use_case_repo, id)
    resolved = override_status(existing)
    metadata = load_metadata(metadata_repo)

    estimate = estimate_tshirt_size(
        resolved.effective_impact,
        resolved.effective_effort,
        metadata.tshirt_sizing,
    )
    return SizingEstimateResponse(**asdict(estimate))
