"""
Tests for the per-day task fetch boundary: payload normalization,
fan-out ordering, partial-failure tolerance and the HTTP source.
"""
from __future__ import annotations

import asyncio
from datetime import date

import httpx

from app.services.daily_aggregator import TaskRecord
from app.services.task_source import HttpTaskSource, gather_days, normalize_payload

DAY = date(2024, 1, 1)
DAYS = [date(2024, 1, d) for d in range(1, 8)]


# ---------------------------------------------------------------------------
# normalize_payload
# ---------------------------------------------------------------------------

class TestNormalizePayload:
    def test_success(self):
        payload = {
            "success": True,
            "tasks": [
                {"task": "Solve problem", "duration": "1h", "icon": "x", "color": "red"},
                {"task": "Walk"},
            ],
        }
        assert normalize_payload(DAY, payload) == [
            TaskRecord(DAY, "Solve problem", "1h"),
            TaskRecord(DAY, "Walk", None),
        ]

    def test_empty_task_list(self):
        assert normalize_payload(DAY, {"success": True, "tasks": []}) == []

    def test_unsuccessful(self):
        assert normalize_payload(DAY, {"success": False, "tasks": []}) is None
        assert normalize_payload(DAY, {"tasks": []}) is None

    def test_malformed(self):
        assert normalize_payload(DAY, None) is None
        assert normalize_payload(DAY, []) is None
        assert normalize_payload(DAY, {"success": True, "tasks": "nope"}) is None

    def test_odd_items_are_tolerated(self):
        tasks = normalize_payload(DAY, {"success": True, "tasks": ["junk", {"duration": 30}]})
        assert tasks == [TaskRecord(DAY, "", None), TaskRecord(DAY, "", "30")]


# ---------------------------------------------------------------------------
# gather_days
# ---------------------------------------------------------------------------

class TestGatherDays:
    def test_results_keep_chronological_order(self):
        async def fetch(day):
            # later days finish first
            await asyncio.sleep(0.01 * (8 - day.day))
            return [TaskRecord(day, f"task {day.day}")]

        results = asyncio.run(gather_days(fetch, DAYS))
        assert [r[0].day for r in results] == DAYS

    def test_one_failure_does_not_discard_others(self):
        async def fetch(day):
            if day.day == 3:
                raise ConnectionError("boom")
            return [TaskRecord(day, "ok")]

        results = asyncio.run(gather_days(fetch, DAYS))
        assert results[2] is None
        assert all(r is not None for i, r in enumerate(results) if i != 2)

    def test_timeout_keeps_finished_days(self):
        async def fetch(day):
            if day.day == 7:
                await asyncio.sleep(5)
            return []

        results = asyncio.run(gather_days(fetch, DAYS, timeout=0.2))
        assert results[:6] == [[]] * 6
        assert results[6] is None

    def test_no_days(self):
        async def fetch(day):
            return []

        assert asyncio.run(gather_days(fetch, [])) == []


# ---------------------------------------------------------------------------
# HttpTaskSource
# ---------------------------------------------------------------------------

def _handler(request: httpx.Request) -> httpx.Response:
    day = request.url.params["date"]
    if day == "2024-01-02":
        return httpx.Response(500, json={"success": False})
    if day == "2024-01-03":
        return httpx.Response(200, content=b"<html>oops</html>")
    if day == "2024-01-04":
        return httpx.Response(200, json={"success": False, "message": "no session"})
    if day == "2024-01-05":
        raise httpx.ConnectError("connection refused", request=request)
    return httpx.Response(200, json={
        "success": True,
        "tasks": [{"task": f"Practice on {day}", "duration": "45m"}],
    })


class TestHttpTaskSource:
    def _source(self, handler=_handler):
        return HttpTaskSource(
            "http://tasks.test/",
            timeout=1.0,
            window_timeout=5.0,
            transport=httpx.MockTransport(handler),
        )

    def test_fetch_window_normalizes_every_day(self):
        results = asyncio.run(self._source().fetch_window("u1", DAYS))
        assert len(results) == 7
        assert results[0] == [TaskRecord(DAYS[0], "Practice on 2024-01-01", "45m")]
        assert results[1] is None   # HTTP 500
        assert results[2] is None   # not JSON
        assert results[3] is None   # success: false
        assert results[4] is None   # transport error
        assert results[5] is not None and results[6] is not None

    def test_sends_user_and_date(self):
        seen = []

        def handler(request):
            seen.append((request.url.path, dict(request.url.params)))
            return httpx.Response(200, json={"success": True, "tasks": []})

        asyncio.run(self._source(handler).fetch_window("user 42", [DAY]))
        assert seen == [("/api/get_tasks", {"user_id": "user 42", "date": "2024-01-01"})]
