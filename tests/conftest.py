"""
Shared pytest fixtures.

The HTTP task source is replaced by an in-memory fake so no task storage
API is required for endpoint tests.
"""
from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.routers.progress import get_task_source
from app.services.daily_aggregator import TaskRecord


class FakeTaskSource:
    """
    Serves tasks from a dict keyed by date.

    A day mapped to None simulates a failed fetch; unknown days have no tasks.
    """

    def __init__(self, by_day: Optional[dict] = None, error: Optional[Exception] = None):
        self.by_day: dict[date, Optional[list[TaskRecord]]] = by_day or {}
        self.error = error
        self.calls: list[tuple[str, list[date]]] = []

    async def fetch_window(self, user_id: str, days: Sequence[date]):
        self.calls.append((user_id, list(days)))
        if self.error is not None:
            raise self.error
        return [self.by_day.get(d, []) for d in days]


def _make_tasks(day: date, *specs: tuple[str, Optional[str]]) -> list[TaskRecord]:
    return [TaskRecord(day=day, description=desc, duration_text=dur) for desc, dur in specs]


@pytest.fixture()
def make_tasks():
    """Build task records from (description, duration) pairs."""
    return _make_tasks


@pytest.fixture()
def source_factory():
    return FakeTaskSource


@pytest.fixture()
def fake_source():
    return FakeTaskSource()


@pytest.fixture()
def client(fake_source):
    app.dependency_overrides[get_task_source] = lambda: fake_source
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
