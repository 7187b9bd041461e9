# tests/test_client.py
"""
Portfolio Client Tests
tests/test_client.py

Exercises PortfolioClient and AnswerAutoSaver against httpx.MockTransport.
"""

import asyncio
import json
import threading

import httpx
import pytest

from app.client import AnswerAutoSaver, PortfolioClient
from app.models.assessment import ScoreAnswer
from app.scoring.recommendation_engine import Recommendation, RecommendationResult
from app.state import PortfolioState


def use_case_json(use_case_id="uc-1", **overrides):
    data = {
        "id": use_case_id,
        "title": "Claims automation",
        "description": "Automates FNOL intake",
        "impact_score": 4.6,
        "effort_score": 1.8,
        "quadrant": "Quick Win",
        "effective_impact_score": 4.6,
        "effective_effort_score": 1.8,
        "effective_quadrant": "Quick Win",
    }
    data.update(overrides)
    return data


def session_json(answers=None, status="in_progress"):
    return {"id": "r-1", "questionnaire_id": "ai-maturity", "status": status, "answers": answers or []}


class Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, responder):
        self.requests = []
        self.responder = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def calls(self):
        return [(r.method, r.url.path) for r in self.requests]


def make_client(responder):
    recorder = Recorder(responder)
    client = PortfolioClient(base_url="http://portfolio.test", transport=httpx.MockTransport(recorder))
    return client, recorder


class TestPortfolioClient:

    def test_list_use_cases_drops_empty_filters(self):
        client, recorder = make_client(
            lambda r: httpx.Response(200, json={"items": [use_case_json()], "total": 1})
        )
        items = client.list_use_cases(quadrant="Quick Win", search=None)

        assert [uc.id for uc in items] == ["uc-1"]
        request = recorder.requests[0]
        assert request.url.path == "/api/use-cases"
        assert dict(request.url.params) == {"quadrant": "Quick Win"}

    def test_create_use_case(self):
        client, recorder = make_client(lambda r: httpx.Response(201, json=use_case_json()))
        created = client.create_use_case({"title": "Claims automation", "description": "d"})

        assert created.effective_quadrant == "Quick Win"
        assert recorder.calls == [("POST", "/api/use-cases")]
        assert json.loads(recorder.requests[0].content)["title"] == "Claims automation"

    def test_delete_returns_none_on_204(self):
        client, recorder = make_client(lambda r: httpx.Response(204))
        assert client.delete_use_case("uc-1") is None
        assert recorder.calls == [("DELETE", "/api/use-cases/uc-1")]

    def test_non_2xx_raises(self):
        client, _ = make_client(
            lambda r: httpx.Response(404, json={"detail": {"error_code": "USE_CASE_NOT_FOUND"}})
        )
        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            client.get_use_case("missing")
        assert exc_info.value.response.status_code == 404

    def test_override_round_trip(self):
        client, recorder = make_client(
            lambda r: httpx.Response(200, json=use_case_json(manual_quadrant="Watchlist", effective_quadrant="Watchlist"))
        )
        updated = client.set_override("uc-1", {"manual_quadrant": "Watchlist"})
        client.clear_override("uc-1")

        assert updated.effective_quadrant == "Watchlist"
        assert recorder.calls == [
            ("PUT", "/api/use-cases/uc-1/override"),
            ("DELETE", "/api/use-cases/uc-1/override"),
        ]

    def test_apply_recommendations_clears_first(self):
        def responder(request):
            if request.url.path.startswith("/api/recommendations/clear/"):
                return httpx.Response(200, json={"success": True, "message": "ok", "assessment_id": "a-1", "cleared": 3})
            return httpx.Response(200, json={"success": True, "message": "ok", "assessment_id": "a-1", "recommended_count": 2})

        client, recorder = make_client(responder)
        result = RecommendationResult(recommendations=[
            Recommendation("uc-1", "Claims automation", 1, "Matches focus", "Quick Win"),
            Recommendation("uc-2", "Fraud triage", 1, "Quick win", "Quick Win"),
        ])

        assert client.apply_recommendations("a-1", result) == 2
        assert recorder.calls == [
            ("POST", "/api/recommendations/clear/a-1"),
            ("POST", "/api/recommendations/apply"),
        ]
        body = json.loads(recorder.requests[1].content)
        assert body["use_case_ids"] == ["uc-1", "uc-2"]
        assert body["reasoning"] == {"uc-1": "Matches focus", "uc-2": "Quick win"}

    def test_load_state_keeps_filters(self):
        client, _ = make_client(
            lambda r: httpx.Response(200, json={"items": [use_case_json(), use_case_json("uc-2")], "total": 2})
        )
        state = PortfolioState().with_filters(search="claims")
        loaded = client.load_state(state)

        assert len(loaded.use_cases) == 2
        assert loaded.filters.search == "claims"

    def test_context_manager_closes(self):
        client, _ = make_client(lambda r: httpx.Response(200, json={}))
        with client:
            pass
        assert client._http.is_closed


class TestAnswerAutoSaver:

    def saver(self, status_code=200, delay=0.01):
        def responder(request):
            if status_code != 200:
                return httpx.Response(status_code, json={"detail": "boom"})
            answers = json.loads(request.content)["answers"]
            return httpx.Response(200, json=session_json(answers))

        client, recorder = make_client(responder)
        return AnswerAutoSaver(client, "r-1", delay=delay), recorder

    def test_debounce_coalesces_by_question(self):
        saver, recorder = self.saver()

        async def scenario():
            saver.queue(ScoreAnswer(question_id="s1", category="strategy", value=1))
            saver.queue(ScoreAnswer(question_id="s1", category="strategy", value=3))
            saver.queue({"type": "text", "question_id": "notes", "value": "hi"})
            await asyncio.sleep(0.2)

        asyncio.run(scenario())

        assert recorder.calls == [("PUT", "/api/responses/r-1/answers")]
        answers = json.loads(recorder.requests[0].content)["answers"]
        assert {a["question_id"]: a["value"] for a in answers} == {"s1": 3, "notes": "hi"}
        assert saver.save_count == 1
        assert saver.pending == 0

    def test_close_flushes_immediately(self):
        saver, recorder = self.saver(delay=10)

        async def scenario():
            saver.queue(ScoreAnswer(question_id="s1", category="strategy", value=2))
            return await saver.close()

        session = asyncio.run(scenario())

        assert len(recorder.calls) == 1
        assert session.answers[0].question_id == "s1"

    def test_flush_with_nothing_pending(self):
        saver, recorder = self.saver()
        assert asyncio.run(saver.flush()) is None
        assert recorder.calls == []

    def test_failed_flush_keeps_answers(self):
        saver, _ = self.saver(status_code=500, delay=10)

        async def scenario():
            saver.queue(ScoreAnswer(question_id="s1", category="strategy", value=2))
            await saver.close()

        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(scenario())
        assert saver.pending == 1

    def test_failed_timed_save_records_error(self):
        saver, _ = self.saver(status_code=503)

        async def scenario():
            saver.queue(ScoreAnswer(question_id="s1", category="strategy", value=2))
            await asyncio.sleep(0.2)

        asyncio.run(scenario())

        assert isinstance(saver.last_error, httpx.HTTPStatusError)
        assert saver.pending == 1

    def test_queue_during_failed_save_keeps_answers(self):
        release = threading.Event()
        statuses = iter([500, 200])

        def responder(request):
            if next(statuses) == 500:
                release.wait(timeout=5)
                return httpx.Response(500, json={"detail": "boom"})
            answers = json.loads(request.content)["answers"]
            return httpx.Response(200, json=session_json(answers))

        client, recorder = make_client(responder)
        saver = AnswerAutoSaver(client, "r-1", delay=0.01)

        async def scenario():
            saver.queue(ScoreAnswer(question_id="q1", category="strategy", value=2))
            while not recorder.requests:
                await asyncio.sleep(0.01)
            # First PUT is in flight; restarting the timer must not cancel it
            saver.queue(ScoreAnswer(question_id="q2", category="strategy", value=4))
            release.set()
            await asyncio.sleep(0.3)

        asyncio.run(scenario())

        assert len(recorder.calls) == 2
        retried = json.loads(recorder.requests[1].content)["answers"]
        assert {a["question_id"] for a in retried} == {"q1", "q2"}
        assert saver.pending == 0
        assert saver.save_count == 1
        assert saver.last_error is None

    def test_close_waits_for_timed_save(self):
        release = threading.Event()

        def responder(request):
            release.wait(timeout=5)
            answers = json.loads(request.content)["answers"]
            return httpx.Response(200, json=session_json(answers))

        client, recorder = make_client(responder)
        saver = AnswerAutoSaver(client, "r-1", delay=0.01)

        async def scenario():
            saver.queue(ScoreAnswer(question_id="q1", category="strategy", value=2))
            while not recorder.requests:
                await asyncio.sleep(0.01)
            saver.queue(ScoreAnswer(question_id="q2", category="strategy", value=4))
            closing = asyncio.ensure_future(saver.close())
            release.set()
            return await closing

        session = asyncio.run(scenario())

        assert len(recorder.calls) == 2
        assert session.answers[0].question_id == "q2"
        assert saver.save_count == 2
        assert saver.pending == 0
