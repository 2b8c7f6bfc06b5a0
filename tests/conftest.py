"""Shared fixtures: a headless Qt application and a pool that only records tasks."""
from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtCore import QCoreApplication  # noqa: E402

from backend.models.vinyl import VinylData  # noqa: E402
from backend.utils.brightness import Brightness  # noqa: E402
from backend.services.contrast_controller import ContrastController  # noqa: E402
from backend.services.navigation_controller import NavigationStateMachine  # noqa: E402


class FakePool:
    """Stands in for QThreadPool; tasks run only when a test says so."""

    def __init__(self) -> None:
        self.tasks: List[Any] = []

    def start(self, task: Any) -> None:
        self.tasks.append(task)

    def run_all(self) -> None:
        tasks, self.tasks = self.tasks, []
        for task in tasks:
            task.run()


def make_record(item_id: str, **fields: Any) -> VinylData:
    record: VinylData = {
        "id": item_id,
        "title": f"Album {item_id}",
        "artist": f"Artist {item_id}",
        "year": 2000,
        "genre": "Rock",
        "rating": 3,
        "coverUrl": f"https://covers.example/{item_id}.jpg",
        "addedAt": 1_700_000_000_000,
    }
    record.update(fields)
    return record


def make_records(count: int) -> List[VinylData]:
    return [make_record(str(i)) for i in range(count)]


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def pool() -> FakePool:
    return FakePool()


@pytest.fixture
def make_machine(qapp, pool):
    """Factory for a state machine whose contrast sampling never leaves the test."""

    def _make(items: Optional[List[VinylData]] = None, **kwargs: Dict[str, Any]) -> NavigationStateMachine:
        contrast = kwargs.pop("contrast", None) or ContrastController(thread_pool=pool, estimator=lambda _ref: Brightness.DARK)
        return NavigationStateMachine(items, contrast=contrast, **kwargs)

    return _make
