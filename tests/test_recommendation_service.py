from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from backend.errors import RecommendationServiceError
from backend.services.recommendation_service import (
    NEW_COLLECTOR_CONTEXT,
    GeminiRecommendationClient,
    Recommendation,
    RecommendationController,
    build_context,
    parse_recommendations,
)
from conftest import make_record

PICK = {"album": "Blue Train", "artist": "John Coltrane", "year": "1957", "genre": "Jazz", "reason": "Hard bop"}


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


class StaticClient:
    def __init__(self, results=None, error=None):
        self.results = results or []
        self.error = error

    def recommend(self, query, context):
        if self.error is not None:
            raise self.error
        return self.results


def test_context_uses_top_rated_only():
    items = [make_record(str(i), title=f"T{i}", artist=f"A{i}", rating=5 if i % 2 else 2) for i in range(14)]
    assert build_context(items) == "User likes: T1 by A1, T3 by A3, T5 by A5, T7 by A7, T9 by A9"


def test_context_placeholder():
    assert build_context([make_record("x", rating=3)]) == NEW_COLLECTOR_CONTEXT


def test_parse():
    assert parse_recommendations(json.dumps([PICK])) == [Recommendation(**PICK)]
    assert parse_recommendations("") == []


@pytest.mark.parametrize("text", ["not json", '{"album": "x"}', '[{"album": "x"}]'])
def test_parse_rejects(text):
    with pytest.raises(RecommendationServiceError):
        parse_recommendations(text)


def test_client_sends_prompt_with_context():
    models = FakeModels(text=json.dumps([PICK]))
    client = GeminiRecommendationClient(api_key="k", model="m", client=SimpleNamespace(models=models))
    results = client.recommend("jazz please", "User likes: X by Y")
    assert results[0].album == "Blue Train"
    call = models.calls[0]
    assert call["model"] == "m"
    assert "jazz please" in call["contents"]
    assert "User likes: X by Y" in call["contents"]
    assert call["config"].response_mime_type == "application/json"


def test_client_wraps_api_errors():
    models = FakeModels(error=ConnectionError("refused"))
    client = GeminiRecommendationClient(api_key="k", client=SimpleNamespace(models=models))
    with pytest.raises(RecommendationServiceError) as excinfo:
        client.recommend("q", "c")
    assert "refused" in excinfo.value.detail


def test_missing_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    with pytest.raises(RecommendationServiceError, match="API Key is missing"):
        GeminiRecommendationClient().recommend("q", "c")


def test_controller_success(qapp, pool):
    expected = [Recommendation(**PICK)]
    controller = RecommendationController(client=StaticClient(expected), thread_pool=pool)
    loading, ready = [], []
    controller.loadingChanged.connect(loading.append)
    controller.resultsReady.connect(ready.append)
    assert controller.search("jazz", []) is True
    assert controller.loading is True
    pool.run_all()
    assert ready == [expected]
    assert loading == [True, False]
    assert controller.query == "jazz"


def test_controller_failure_shows_generic_message(qapp, pool):
    controller = RecommendationController(
        client=StaticClient(error=RecommendationServiceError("boom")), thread_pool=pool
    )
    failures = []
    controller.failed.connect(failures.append)
    controller.search("jazz", [])
    pool.run_all()
    assert failures == ["Connection refused. Verify API link."]
    assert controller.loading is False


def test_blank_query_ignored(qapp, pool):
    controller = RecommendationController(client=StaticClient(), thread_pool=pool)
    assert controller.search("   ", []) is False
    assert pool.tasks == []


def test_stale_results_ignored(qapp, pool):
    controller = RecommendationController(client=StaticClient([Recommendation(**PICK)]), thread_pool=pool)
    controller.search("first", [])
    controller.search("second", [])
    ready = []
    controller.resultsReady.connect(ready.append)
    first, second = pool.tasks
    first.run()
    assert ready == []
    second.run()
    assert len(ready) == 1
