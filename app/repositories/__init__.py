"""
Repositories Package - AI Use-Case Portfolio
app/repositories/__init__.py

Data access layer for Snowflake database operations.
"""

from app.repositories.base import BaseRepository
from app.repositories.metadata_repository import MetadataRepository
from app.repositories.response_repository import ResponseRepository
from app.repositories.survey_config_repository import SurveyConfigRepository
from app.repositories.use_case_repository import UseCaseRepository

__all__ = [
    "BaseRepository",
    "MetadataRepository",
    "ResponseRepository",
    "SurveyConfigRepository",
    "UseCaseRepository",
]
