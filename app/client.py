"""
Portfolio API Client - AI Use-Case Portfolio
app/client.py

Thin httpx wrapper over the REST API, plus a debounced answer auto-saver
for survey sessions. Non-2xx responses raise httpx.HTTPStatusError.
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

import httpx
from pydantic import BaseModel

from app.config import settings
from app.models.assessment import (
    AssessmentRecommendations,
    MaturityScoresResponse,
    RecommendedUseCasesResponse,
    ResponseSession,
    SurveyConfigResponse,
)
from app.models.metadata import MetadataConfig, RecalculateResponse
from app.models.sizing import SizingEstimateResponse
from app.models.use_case import UseCaseListResponse, UseCaseResponse
from app.scoring.recommendation_engine import RecommendationResult
from app.state import PortfolioState

logger = logging.getLogger(__name__)

Payload = Union[BaseModel, Dict[str, Any]]


def _to_json(payload: Payload, exclude_unset: bool = False) -> Dict[str, Any]:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", exclude_unset=exclude_unset)
    return payload


class PortfolioClient:
    """Synchronous client for the portfolio API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._http = httpx.Client(
            base_url=f"{(base_url or settings.API_BASE_URL).rstrip('/')}{settings.API_PREFIX}",
            timeout=timeout or settings.CLIENT_TIMEOUT_SECONDS,
            transport=transport,
        )

    def __enter__(self) -> "PortfolioClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self._http.request(method, path, **kwargs)
        if response.is_error:
            logger.warning("%s %s failed with %s", method, path, response.status_code)
        response.raise_for_status()
        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        return response.json()

    # -------------------------
    # Use cases
    # -------------------------
    def list_use_cases(self, **filters) -> List[UseCaseResponse]:
        params = {k: v for k, v in filters.items() if v is not None}
        data = self._request("GET", "/use-cases", params=params)
        return UseCaseListResponse(**data).items

    def list_dashboard_use_cases(self) -> List[UseCaseResponse]:
        return UseCaseListResponse(**self._request("GET", "/use-cases/dashboard")).items

    def get_use_case(self, use_case_id: str) -> UseCaseResponse:
        return UseCaseResponse(**self._request("GET", f"/use-cases/{use_case_id}"))

    def create_use_case(self, use_case: Payload) -> UseCaseResponse:
        return UseCaseResponse(**self._request("POST", "/use-cases", json=_to_json(use_case)))

    def update_use_case(self, use_case_id: str, changes: Payload) -> UseCaseResponse:
        body = _to_json(changes, exclude_unset=True)
        return UseCaseResponse(**self._request("PUT", f"/use-cases/{use_case_id}", json=body))

    def delete_use_case(self, use_case_id: str) -> None:
        self._request("DELETE", f"/use-cases/{use_case_id}")

    def activate_use_case(self, use_case_id: str, reason: Optional[str] = None) -> UseCaseResponse:
        data = self._request("PATCH", f"/use-cases/{use_case_id}/activate", json={"reason": reason})
        return UseCaseResponse(**data)

    def deactivate_use_case(self, use_case_id: str, reason: Optional[str] = None) -> UseCaseResponse:
        data = self._request("PATCH", f"/use-cases/{use_case_id}/deactivate", json={"reason": reason})
        return UseCaseResponse(**data)

    def toggle_dashboard(self, use_case_id: str) -> UseCaseResponse:
        return UseCaseResponse(**self._request("PATCH", f"/use-cases/{use_case_id}/toggle-dashboard"))

    def bulk_update_tier(self, use_case_ids: Iterable[str], library_tier: str) -> int:
        body = {"ids": list(use_case_ids), "library_tier": library_tier}
        return self._request("PATCH", "/use-cases/bulk-tier", json=body)["updated"]

    def set_override(self, use_case_id: str, override: Payload) -> UseCaseResponse:
        body = _to_json(override, exclude_unset=True)
        return UseCaseResponse(**self._request("PUT", f"/use-cases/{use_case_id}/override", json=body))

    def clear_override(self, use_case_id: str) -> UseCaseResponse:
        return UseCaseResponse(**self._request("DELETE", f"/use-cases/{use_case_id}/override"))

    def get_sizing(self, use_case_id: str) -> SizingEstimateResponse:
        return SizingEstimateResponse(**self._request("GET", f"/use-cases/{use_case_id}/sizing"))

    def load_state(self, state: Optional[PortfolioState] = None) -> PortfolioState:
        """Refresh a PortfolioState with the full use case list, keeping its filters."""
        return (state or PortfolioState()).replace_all(self.list_use_cases())

    # -------------------------
    # Metadata
    # -------------------------
    def get_metadata(self) -> MetadataConfig:
        return MetadataConfig(**self._request("GET", "/metadata"))

    def update_metadata(self, update: Payload) -> MetadataConfig:
        return MetadataConfig(**self._request("PUT", "/metadata", json=_to_json(update, exclude_unset=True)))

    def recalculate_scores(self) -> RecalculateResponse:
        return RecalculateResponse(**self._request("POST", "/recalculate-scores"))

    # -------------------------
    # Assessment responses
    # -------------------------
    def start_response(
        self,
        questionnaire_id: str,
        respondent_name: Optional[str] = None,
        respondent_email: Optional[str] = None,
    ) -> ResponseSession:
        body = {
            "questionnaire_id": questionnaire_id,
            "respondent_name": respondent_name,
            "respondent_email": respondent_email,
        }
        return ResponseSession(**self._request("POST", "/responses", json=body))

    def get_response(self, response_id: str) -> ResponseSession:
        return ResponseSession(**self._request("GET", f"/responses/{response_id}"))

    def save_answers(self, response_id: str, answers: Iterable[Payload]) -> ResponseSession:
        body = {"answers": [_to_json(a) for a in answers]}
        return ResponseSession(**self._request("PUT", f"/responses/{response_id}/answers", json=body))

    def complete_response(self, response_id: str) -> ResponseSession:
        return ResponseSession(**self._request("POST", f"/responses/{response_id}/complete"))

    def get_scores(self, response_id: str) -> MaturityScoresResponse:
        return MaturityScoresResponse(**self._request("GET", f"/responses/{response_id}/scores"))

    # -------------------------
    # Recommendations
    # -------------------------
    def generate_recommendations(self, response_id: str) -> AssessmentRecommendations:
        data = self._request("POST", f"/assessments/{response_id}/recommendations")
        return AssessmentRecommendations(**data)

    def clear_recommendations(self, assessment_id: str) -> int:
        return self._request("POST", f"/recommendations/clear/{assessment_id}")["cleared"]

    def apply_recommendations(
        self,
        assessment_id: str,
        result: Union[RecommendationResult, Iterable[str]],
        reasoning: Optional[Dict[str, str]] = None,
    ) -> int:
        """Clear the assessment's existing recommendations, then apply the new set."""
        if isinstance(result, RecommendationResult):
            use_case_ids, reasoning = result.use_case_ids, result.reasoning_map
        else:
            use_case_ids = list(result)

        self.clear_recommendations(assessment_id)
        body = {
            "assessment_id": assessment_id,
            "use_case_ids": use_case_ids,
            "reasoning": reasoning or {},
        }
        return self._request("POST", "/recommendations/apply", json=body)["recommended_count"]

    def get_recommendations(self, assessment_id: str) -> RecommendedUseCasesResponse:
        return RecommendedUseCasesResponse(**self._request("GET", f"/recommendations/{assessment_id}"))

    # -------------------------
    # Survey configuration
    # -------------------------
    def get_survey_config(self, config_id: str) -> SurveyConfigResponse:
        return SurveyConfigResponse(**self._request("GET", f"/survey-config/{config_id}"))

    def put_survey_config(
        self, config_id: str, survey_config: Dict[str, Any], title: Optional[str] = None
    ) -> SurveyConfigResponse:
        body = {"title": title, "survey_config": survey_config}
        return SurveyConfigResponse(**self._request("PUT", f"/survey-config/{config_id}", json=body))


class AnswerAutoSaver:
    """
    Debounced answer persistence for one response session.

    queue() collects answers (latest per question_id wins) and restarts the
    timer; when the timer fires the batch is sent as one PUT. Restarting the
    timer never interrupts a PUT already in flight, and saves run one at a
    time. flush() sends immediately and raises on HTTP errors. A failed
    timed save keeps the batch for the next attempt and records the error
    in `last_error`.
    """

    def __init__(self, client: PortfolioClient, response_id: str, delay: Optional[float] = None):
        self.client = client
        self.response_id = response_id
        self.delay = settings.AUTOSAVE_DEBOUNCE_SECONDS if delay is None else delay
        self.save_count = 0
        self.last_error: Optional[httpx.HTTPError] = None
        self._pending: Dict[str, Payload] = {}
        self._timer: Optional[asyncio.Task] = None
        self._saving: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    @property
    def pending(self) -> int:
        return len(self._pending)

    @staticmethod
    def _question_id(answer: Payload) -> str:
        return answer.question_id if isinstance(answer, BaseModel) else answer["question_id"]

    def queue(self, *answers: Payload) -> None:
        """Add answers and (re)start the debounce timer. Needs a running event loop."""
        for answer in answers:
            self._pending[self._question_id(answer)] = answer
        if self._timer and not self._timer.done():
            self._timer.cancel()
        self._timer = asyncio.get_running_loop().create_task(self._flush_later())

    async def _flush_later(self) -> None:
        await asyncio.sleep(self.delay)
        # The save outlives this timer so a later queue() cannot cancel it
        self._saving = asyncio.get_running_loop().create_task(self._timed_save())

    async def _timed_save(self) -> None:
        try:
            await self.flush()
        except httpx.HTTPError as e:
            self.last_error = e
            logger.error("Auto-save for response %s failed: %s", self.response_id, e)

    async def flush(self) -> Optional[ResponseSession]:
        async with self._lock:
            if not self._pending:
                return None
            batch = self._pending
            self._pending = {}
            try:
                session = await asyncio.to_thread(
                    self.client.save_answers, self.response_id, list(batch.values())
                )
            except (httpx.HTTPError, asyncio.CancelledError):
                # Answers queued while saving are newer than the failed batch
                self._pending = {**batch, **self._pending}
                raise
            self.save_count += 1
            self.last_error = None
            return session

    async def close(self) -> Optional[ResponseSession]:
        """Cancel the timer, wait for any save in flight and save whatever is pending."""
        if self._timer and not self._timer.done():
            self._timer.cancel()
        if self._saving and not self._saving.done():
            await self._saving
        return await self.flush()
