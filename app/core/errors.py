"""
Error Responses - AI Use-Case Portfolio
app/core/errors.py

Structured error bodies shared by every router, the request-validation
handler and the repository exception handler.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from app.core.exceptions import (
    DatabaseConnectionException,
    DuplicateEntityException,
    EntityNotFoundException,
    RepositoryException,
)

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    error_code: str
    message: str
    details: Optional[dict] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


#  Exception Helpers


def raise_error(status_code: int, error_code: str, message: str, details: Optional[dict] = None):
    raise HTTPException(
        status_code=status_code,
        detail=ErrorResponse(error_code=error_code, message=message, details=details).model_dump(mode="json"),
    )


def raise_not_found(entity: str, error_code: str):
    raise_error(status.HTTP_404_NOT_FOUND, error_code, f"{entity} not found")


def raise_bad_request(error_code: str, message: str):
    raise_error(status.HTTP_400_BAD_REQUEST, error_code, message)


#  Validation Error Messages


FIELD_MESSAGES = {
    "title": {
        "missing": "Use case title is required",
        "string_too_short": "Use case title cannot be empty",
        "string_too_long": "Use case title must not exceed 255 characters",
    },
    "description": {
        "missing": "Use case description is required",
        "string_too_short": "Use case description cannot be empty",
    },
    "quadrant": {
        "literal_error": "Quadrant must be one of Quick Win, Strategic Bet, Experimental, Watchlist",
    },
    "manual_quadrant": {
        "literal_error": "Quadrant must be one of Quick Win, Strategic Bet, Experimental, Watchlist",
    },
    "library_tier": {
        "enum": "Library tier must be 'active' or 'reference'",
    },
    "ids": {
        "too_short": "At least one use case ID is required",
    },
}

DEFAULT_MESSAGES = {
    "missing": "Field '{field}' is required",
    "string_too_short": "Field '{field}' is too short",
    "string_too_long": "Field '{field}' is too long",
    "less_than_equal": "Field '{field}' exceeds maximum allowed value",
    "greater_than_equal": "Field '{field}' is below minimum allowed value",
    "uuid_parsing": "Field '{field}' must be a valid UUID",
    "string_type": "Field '{field}' must be a string",
    "float_type": "Field '{field}' must be a number",
    "float_parsing": "Field '{field}' must be a valid number",
    "int_type": "Field '{field}' must be an integer",
    "int_parsing": "Field '{field}' must be a valid integer",
    "enum": "Field '{field}' has an unsupported value",
    "literal_error": "Field '{field}' has an unsupported value",
    "json_invalid": "Malformed JSON request body",
    "extra_forbidden": "Unknown field '{field}' is not allowed",
}


def get_validation_message(field: str, error_type: str) -> str:
    leaf = field.split(".")[-1] if field else field
    if leaf in FIELD_MESSAGES:
        for key in FIELD_MESSAGES[leaf]:
            if key in error_type:
                return FIELD_MESSAGES[leaf][key]
    for key, template in DEFAULT_MESSAGES.items():
        if key in error_type:
            return template.format(field=field)
    return f"Invalid value for field '{field}'"


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR", message="Request validation failed"
            ).model_dump(mode="json"),
        )
    err = errors[0]
    error_type = err.get("type", "")
    loc = err.get("loc", [])
    if "json_invalid" in error_type:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                error_code="INVALID_REQUEST", message="Malformed JSON request body"
            ).model_dump(mode="json"),
        )
    field = ".".join(str(l) for l in loc if l not in ("body", "query", "path"))
    message = get_validation_message(field, error_type)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error_code="VALIDATION_ERROR",
            message=message,
            details={"field": field, "type": error_type} if field else None,
        ).model_dump(mode="json"),
    )


async def repository_exception_handler(request: Request, exc: RepositoryException):
    """Map repository failures that escaped a router to a structured body."""
    if isinstance(exc, EntityNotFoundException):
        status_code, error_code = status.HTTP_404_NOT_FOUND, "NOT_FOUND"
    elif isinstance(exc, DuplicateEntityException):
        status_code, error_code = status.HTTP_409_CONFLICT, "DUPLICATE_ENTITY"
    elif isinstance(exc, DatabaseConnectionException):
        status_code, error_code = status.HTTP_503_SERVICE_UNAVAILABLE, "DATABASE_UNAVAILABLE"
    else:
        status_code, error_code = status.HTTP_500_INTERNAL_SERVER_ERROR, "DATABASE_ERROR"

    logger.error("Repository error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error_code=error_code, message=str(exc)).model_dump(mode="json"),
    )
