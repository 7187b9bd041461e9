# tests/conftest.py

"""
Pytest Fixtures - Shared test configuration for the portfolio API

The API runs against in-memory repositories (same method signatures as the
Snowflake repositories) and with the Redis cache disabled.
"""

import os

os.environ["CACHE_ENABLED"] = "false"

import pytest
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4
from fastapi.testclient import TestClient

from app.main import app
from app.core.dependencies import (
    get_metadata_repository,
    get_response_repository,
    get_survey_config_repository,
    get_use_case_repository,
)
from app.models.enumerations import ResponseStatus
from app.repositories.use_case_repository import ALL_COLUMNS, JSON_COLUMNS, UPDATABLE_COLUMNS
from app.routers.use_cases import row_to_response
from app.scoring.impact_effort import calculate_scores


def _now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# IN-MEMORY REPOSITORIES
# =============================================================================

class InMemoryUseCaseRepository:
    def __init__(self):
        self.rows: Dict[str, Dict[str, Any]] = {}

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        row = {column: data.get(column) for column in ALL_COLUMNS}
        for column in JSON_COLUMNS:
            row[column] = list(row[column] or [])
        now = _now()
        row.update(id=str(uuid4()), created_at=now, updated_at=now)
        self.rows[row["id"]] = row
        return dict(row)

    def get_by_id(self, use_case_id: str) -> Optional[Dict[str, Any]]:
        row = self.rows.get(str(use_case_id))
        return dict(row) if row else None

    def get_all(self) -> List[Dict[str, Any]]:
        return [dict(r) for r in self.rows.values()]

    def get_dashboard(self) -> List[Dict[str, Any]]:
        return [dict(r) for r in self.rows.values() if r.get("is_dashboard_visible")]

    def get_by_tier(self, library_tier: str) -> List[Dict[str, Any]]:
        return [dict(r) for r in self.rows.values() if r.get("library_tier") == library_tier]

    def get_recommended(self, assessment_id: str) -> List[Dict[str, Any]]:
        return [dict(r) for r in self.rows.values() if r.get("recommended_by_assessment") == assessment_id]

    def update(self, use_case_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        row = self.rows.get(str(use_case_id))
        if row is None:
            return None
        row.update({k: v for k, v in data.items() if k in UPDATABLE_COLUMNS})
        row["updated_at"] = _now()
        return dict(row)

    def delete(self, use_case_id: str) -> bool:
        return self.rows.pop(str(use_case_id), None) is not None

    def bulk_update_tier(self, use_case_ids: List[str], library_tier: str) -> int:
        updated = 0
        for use_case_id in use_case_ids:
            row = self.rows.get(use_case_id)
            if row:
                row.update(library_tier=library_tier, is_active_for_portfolio=library_tier == "active")
                updated += 1
        return updated

    def apply_recommendations(self, assessment_id: str, use_case_ids: List[str]) -> int:
        updated = 0
        for use_case_id in use_case_ids:
            row = self.rows.get(use_case_id)
            if row:
                row["recommended_by_assessment"] = assessment_id
                updated += 1
        return updated

    def clear_recommendations(self, assessment_id: str) -> int:
        cleared = 0
        for row in self.rows.values():
            if row.get("recommended_by_assessment") == assessment_id:
                row["recommended_by_assessment"] = None
                cleared += 1
        return cleared


class InMemoryMetadataRepository:
    def __init__(self):
        self.row: Optional[Dict[str, Any]] = None

    def get_config(self, config_id: str = "default") -> Optional[Dict[str, Any]]:
        return dict(self.row) if self.row else None

    def save_config(self, scoring_model, tshirt_sizing, config_id: str = "default") -> Dict[str, Any]:
        self.row = {
            "id": config_id,
            "scoring_model": scoring_model,
            "tshirt_sizing": tshirt_sizing,
            "updated_at": _now(),
        }
        return dict(self.row)


class InMemoryResponseRepository:
    def __init__(self):
        self.rows: Dict[str, Dict[str, Any]] = {}

    def create(self, questionnaire_id, respondent_name=None, respondent_email=None) -> Dict[str, Any]:
        now = _now()
        row = {
            "id": str(uuid4()),
            "questionnaire_id": questionnaire_id,
            "respondent_name": respondent_name,
            "respondent_email": respondent_email,
            "status": ResponseStatus.STARTED.value,
            "answers": [],
            "started_at": now,
            "completed_at": None,
            "updated_at": now,
        }
        self.rows[row["id"]] = row
        return dict(row)

    def get_by_id(self, response_id: str) -> Optional[Dict[str, Any]]:
        row = self.rows.get(str(response_id))
        return dict(row) if row else None

    def save_answers(self, response_id, answers, status: ResponseStatus) -> Optional[Dict[str, Any]]:
        row = self.rows.get(str(response_id))
        if row is None:
            return None
        row.update(answers=list(answers), status=status.value, updated_at=_now())
        return dict(row)

    def complete(self, response_id: str) -> Optional[Dict[str, Any]]:
        row = self.rows.get(str(response_id))
        if row is None:
            return None
        now = _now()
        row.update(status=ResponseStatus.COMPLETED.value, completed_at=now, updated_at=now)
        return dict(row)


class InMemorySurveyConfigRepository:
    def __init__(self):
        self.rows: Dict[str, Dict[str, Any]] = {}

    def get_by_id(self, config_id: str) -> Optional[Dict[str, Any]]:
        row = self.rows.get(config_id)
        return dict(row) if row else None

    def upsert(self, config_id, survey_config, title=None) -> Dict[str, Any]:
        existing = self.rows.get(config_id, {})
        self.rows[config_id] = {
            "id": config_id,
            "title": title if title is not None else existing.get("title"),
            "survey_config": survey_config,
            "updated_at": _now(),
        }
        return dict(self.rows[config_id])


# =============================================================================
# FASTAPI TEST CLIENT FIXTURES
# =============================================================================

@pytest.fixture
def use_case_repo():
    return InMemoryUseCaseRepository()


@pytest.fixture
def metadata_repo():
    return InMemoryMetadataRepository()


@pytest.fixture
def response_repo():
    return InMemoryResponseRepository()


@pytest.fixture
def survey_config_repo():
    return InMemorySurveyConfigRepository()


@pytest.fixture
def client(use_case_repo, metadata_repo, response_repo, survey_config_repo):
    """TestClient wired to fresh in-memory repositories."""
    app.dependency_overrides[get_use_case_repository] = lambda: use_case_repo
    app.dependency_overrides[get_metadata_repository] = lambda: metadata_repo
    app.dependency_overrides[get_response_repository] = lambda: response_repo
    app.dependency_overrides[get_survey_config_repository] = lambda: survey_config_repo
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

QUICK_WIN_SCORES = {
    "revenue_impact": 5,
    "cost_savings": 5,
    "risk_reduction": 4,
    "broker_partner_experience": 4,
    "strategic_fit": 5,
    "data_readiness": 2,
    "technical_complexity": 2,
    "change_impact": 2,
    "model_risk": 1,
    "adoption_readiness": 2,
}


@pytest.fixture
def valid_use_case_data():
    """Minimal valid create payload (all sub-scores default to 3)."""
    return {
        "title": "Broker email triage",
        "description": "Classify inbound broker emails and route them to the right team",
    }


@pytest.fixture
def quick_win_use_case_data():
    """Create payload whose sub-scores land in the Quick Win quadrant."""
    return {
        "title": "Claims automation assistant",
        "description": "Automates first notice of loss intake",
        "process": "Claims",
        "processes": ["Claims", "Operations"],
        "line_of_business": "Property",
        **QUICK_WIN_SCORES,
    }


@pytest.fixture
def make_use_case():
    """Factory building UseCaseResponse models the way the API does."""

    def _make(**overrides) -> Any:
        row: Dict[str, Any] = {
            "id": str(uuid4()),
            "title": "Use case",
            "description": "Description",
            **{name: 3 for name in QUICK_WIN_SCORES},
            "library_tier": "reference",
        }
        row.update(overrides)
        scores = calculate_scores(row)
        row.setdefault("impact_score", scores.impact_score)
        row.setdefault("effort_score", scores.effort_score)
        row.setdefault("quadrant", scores.quadrant)
        return row_to_response(row)

    return _make


@pytest.fixture
def sample_survey_config():
    return {
        "title": "AI Maturity Assessment",
        "pages": [
            {
                "name": "strategy",
                "elements": [
                    {"type": "rating", "name": "strategy_vision"},
                    {
                        "type": "panel",
                        "name": "governance_panel",
                        "elements": [
                            {"type": "rating", "name": "governance_policies"},
                            {"type": "html", "name": "intro"},
                        ],
                    },
                    {"type": "radiogroup", "name": "primary_focus_area"},
                ],
            }
        ],
    }
