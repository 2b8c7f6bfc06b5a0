"""Album recommendations from the Gemini API, run off the UI thread."""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

from google import genai
from google.genai import types
from PyQt6.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal

from backend.errors import RecommendationServiceError
from backend.models.vinyl import VinylData, display_label, rating
from common.log_utils import log_debug, log_error, log_warning
from config import get_config

NEW_COLLECTOR_CONTEXT = "User is new to collecting."
RECOMMENDATION_FIELDS = ("album", "artist", "year", "genre", "reason")

SUGGESTED_QUERIES = [
    "Highest rated albums of all time",
    "Jazz for a rainy Sunday",
    "Obscure 80s Synthpop",
    "Modern psychedelic rock",
]

PROMPT_TEMPLATE = """
You are a vinyl record expert.
User Query: "{query}"

Context (User's current top vinyls): {context}

Recommend 3-5 vinyl albums based on the query and context.
If the query is generic (like "recommend me something"), use the context to find similar vibes or contrasting gems.
If the query asks for "highest rated", provide generally critically acclaimed albums.

Return pure JSON.
"""


@dataclass(frozen=True)
class Recommendation:
    album: str
    artist: str
    year: str
    genre: str
    reason: str


def build_context(items: Sequence[VinylData]) -> str:
    """Up to five well-rated records as ``"User likes: Title by Artist, ..."``."""
    config = get_config()
    liked = [
        display_label(item)
        for item in items
        if rating(item) >= config.recommendation_min_rating
    ][: config.recommendation_context_limit]
    if not liked:
        return NEW_COLLECTOR_CONTEXT
    return f"User likes: {', '.join(liked)}"


def parse_recommendations(text: Optional[str]) -> List[Recommendation]:
    """Validate the model's JSON reply. Empty reply means no recommendations."""
    if not text:
        return []
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RecommendationServiceError(f"Malformed response: {exc}") from exc
    if not isinstance(data, list):
        raise RecommendationServiceError("Response is not a list")
    results: List[Recommendation] = []
    for entry in data:
        if not isinstance(entry, dict) or any(key not in entry for key in RECOMMENDATION_FIELDS):
            raise RecommendationServiceError(f"Incomplete recommendation: {entry!r}")
        results.append(Recommendation(**{key: str(entry[key]) for key in RECOMMENDATION_FIELDS}))
    return results


def _response_schema() -> types.Schema:
    properties: Dict[str, types.Schema] = {
        key: types.Schema(type=types.Type.STRING) for key in RECOMMENDATION_FIELDS
    }
    properties["reason"] = types.Schema(
        type=types.Type.STRING, description="Why this fits the request"
    )
    return types.Schema(
        type=types.Type.ARRAY,
        items=types.Schema(
            type=types.Type.OBJECT,
            properties=properties,
            required=list(RECOMMENDATION_FIELDS),
        ),
    )


class RecommendationClient(Protocol):
    def recommend(self, query: str, context: str) -> List[Recommendation]: ...


class GeminiRecommendationClient:
    """Calls Gemini with a JSON response schema."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, client: Any = None) -> None:
        config = get_config()
        self.api_key = config.recommendation_api_key if api_key is None else api_key
        self.model = model or config.recommendation_model
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def recommend(self, query: str, context: str) -> List[Recommendation]:
        if not self.api_key and self._client is None:
            raise RecommendationServiceError("API Key is missing")
        try:
            response = self._get_client().models.generate_content(
                model=self.model,
                contents=PROMPT_TEMPLATE.format(query=query, context=context),
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=_response_schema(),
                ),
            )
        except RecommendationServiceError:
            raise
        except Exception as exc:  # noqa: BLE001
            log_warning(f"Gemini API error: {exc}", "RECO")
            raise RecommendationServiceError(str(exc)) from exc
        return parse_recommendations(getattr(response, "text", None))


class RecommendationTaskSignals(QObject):
    succeeded = pyqtSignal(int, object)  # token, List[Recommendation]
    failed = pyqtSignal(int, str)

    def __init__(self) -> None:
        super().__init__()


class RecommendationTask(QRunnable):
    def __init__(self, token: int, client: RecommendationClient, query: str, context: str) -> None:
        super().__init__()
        self.token = token
        self.client = client
        self.query = query
        self.context = context
        self.signals = RecommendationTaskSignals()

    def run(self) -> None:
        try:
            results = self.client.recommend(self.query, self.context)
        except RecommendationServiceError as exc:
            self.signals.failed.emit(self.token, exc.detail or str(exc))
            return
        except Exception as exc:  # noqa: BLE001
            log_error(f"Unexpected recommendation failure: {exc!r}", "RECO")
            self.signals.failed.emit(self.token, str(exc))
            return
        self.signals.succeeded.emit(self.token, results)


class RecommendationController(QObject):
    """Runs searches on the pool and keeps the last query for retries."""

    loadingChanged = pyqtSignal(bool)
    resultsReady = pyqtSignal(object)  # List[Recommendation]
    failed = pyqtSignal(str)

    def __init__(
        self,
        client: Optional[RecommendationClient] = None,
        thread_pool: Optional[QThreadPool] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.client = client or GeminiRecommendationClient()
        self._thread_pool = thread_pool or QThreadPool.globalInstance()
        self._token = 0
        self._task: Optional[RecommendationTask] = None
        self.query = ""
        self.loading = False
        self.results: List[Recommendation] = []
        self.error = ""

    def search(self, query: str, items: Sequence[VinylData]) -> bool:
        """Start a search. Blank queries are ignored."""
        if not query.strip():
            return False
        self.query = query
        self.error = ""
        self.results = []
        self._token += 1
        task = RecommendationTask(self._token, self.client, query, build_context(items))
        task.signals.succeeded.connect(self._handle_succeeded)
        task.signals.failed.connect(self._handle_failed)
        self._task = task
        self._set_loading(True)
        self._thread_pool.start(task)
        return True

    def _handle_succeeded(self, token: int, results: List[Recommendation]) -> None:
        if token != self._token:
            return
        self.results = list(results)
        self._task = None
        self._set_loading(False)
        self.resultsReady.emit(self.results)

    def _handle_failed(self, token: int, detail: str) -> None:
        if token != self._token:
            return
        log_debug(f"Recommendation failed: {detail}", "RECO")
        self.error = RecommendationServiceError.USER_MESSAGE
        self._task = None
        self._set_loading(False)
        self.failed.emit(self.error)

    def _set_loading(self, loading: bool) -> None:
        if self.loading != loading:
            self.loading = loading
            self.loadingChanged.emit(loading)
