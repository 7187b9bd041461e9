"""
Dependencies - AI Use-Case Portfolio
app/core/dependencies.py

FastAPI dependency injection for repositories and the recommendation engine.
"""

from functools import lru_cache

from app.repositories.metadata_repository import MetadataRepository
from app.repositories.response_repository import ResponseRepository
from app.repositories.survey_config_repository import SurveyConfigRepository
from app.repositories.use_case_repository import UseCaseRepository
from app.scoring.recommendation_engine import RecommendationEngine


@lru_cache()
def get_use_case_repository() -> UseCaseRepository:
    """Get cached UseCaseRepository instance."""
    return UseCaseRepository()


@lru_cache()
def get_metadata_repository() -> MetadataRepository:
    """Get cached MetadataRepository instance."""
    return MetadataRepository()


@lru_cache()
def get_response_repository() -> ResponseRepository:
    """Get cached ResponseRepository instance."""
    return ResponseRepository()


@lru_cache()
def get_survey_config_repository() -> SurveyConfigRepository:
    """Get cached SurveyConfigRepository instance."""
    return SurveyConfigRepository()


@lru_cache()
def get_recommendation_engine() -> RecommendationEngine:
    """Get RecommendationEngine configured from settings."""
    return RecommendationEngine()
