"""
Core Package - AI Use-Case Portfolio
app/core/__init__.py

Core infrastructure: dependencies, exceptions, error responses, logging.
"""

from app.core.dependencies import (
    get_metadata_repository,
    get_recommendation_engine,
    get_response_repository,
    get_survey_config_repository,
    get_use_case_repository,
)
from app.core.exceptions import (
    DatabaseConnectionException,
    DuplicateEntityException,
    EntityNotFoundException,
    ForeignKeyViolationException,
    RepositoryException,
)

__all__ = [
    # Dependencies
    "get_metadata_repository",
    "get_recommendation_engine",
    "get_response_repository",
    "get_survey_config_repository",
    "get_use_case_repository",
    # Exceptions
    "DatabaseConnectionException",
    "DuplicateEntityException",
    "EntityNotFoundException",
    "ForeignKeyViolationException",
    "RepositoryException",
]
