"""
Task source: per-day task fetches from the task storage API.

Contract of the storage API
---------------------------
GET {TASK_API_URL}/api/get_tasks?user_id=<id>&date=YYYY-MM-DD
  -> {"success": true, "tasks": [{"task": str, "duration": str?, "icon", "color"}]}

Every failure of a day (transport error, non-2xx, non-JSON body,
`success` not true, malformed payload) becomes `None`, the fetch-failure
marker, for that day only. `gather_days` never raises and always returns
one slot per requested day, oldest first.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Awaitable, Callable, Optional, Sequence

import httpx

from app.core.errors import TaskSourceError
from app.services.daily_aggregator import TaskRecord

logger = logging.getLogger(__name__)

DayResult = Optional[list[TaskRecord]]
DayFetcher = Callable[[date], Awaitable[DayResult]]


# ---------------------------------------------------------------------------
# Payload normalization
# ---------------------------------------------------------------------------

def _task_from_item(day: date, item: Any) -> TaskRecord:
    if not isinstance(item, dict):
        return TaskRecord(day=day, description="")
    description = item.get("task")
    duration = item.get("duration")
    return TaskRecord(
        day=day,
        description=str(description) if description is not None else "",
        duration_text=str(duration) if duration is not None else None,
    )


def normalize_payload(day: date, payload: Any) -> DayResult:
    """Turn a get_tasks response body into task records, or None on failure."""
    if not isinstance(payload, dict) or payload.get("success") is not True:
        return None
    tasks = payload.get("tasks")
    if not isinstance(tasks, list):
        return None
    return [_task_from_item(day, item) for item in tasks]


# ---------------------------------------------------------------------------
# Fan-out
# ---------------------------------------------------------------------------

async def _guarded(fetch_day: DayFetcher, day: date) -> DayResult:
    try:
        return await fetch_day(day)
    except asyncio.CancelledError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.warning("Task fetch failed for %s: %s", day, exc)
        return None


async def gather_days(
    fetch_day: DayFetcher,
    days: Sequence[date],
    timeout: Optional[float] = None,
) -> list[DayResult]:
    """
    Fetch every day concurrently and return results indexed like `days`.

    Days still running when `timeout` expires are cancelled and reported
    as failed; completed days keep their data.
    """
    results: list[DayResult] = [None] * len(days)
    if not days:
        return results

    futures = {
        asyncio.ensure_future(_guarded(fetch_day, day)): index
        for index, day in enumerate(days)
    }
    done, pending = await asyncio.wait(futures, timeout=timeout)

    for future in pending:
        future.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
        logger.warning(
            "Window fetch timed out after %ss; %d day(s) treated as failed",
            timeout, len(pending),
        )

    for future in done:
        results[futures[future]] = future.result()
    return results


# ---------------------------------------------------------------------------
# HTTP implementation
# ---------------------------------------------------------------------------

class HttpTaskSource:
    """Reads tasks from the storage API over HTTP, one request per day."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        window_timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.window_timeout = window_timeout
        self._transport = transport

    async def _fetch_day(
        self, client: httpx.AsyncClient, user_id: str, day: date
    ) -> DayResult:
        try:
            response = await client.get(
                "/api/get_tasks",
                params={"user_id": user_id, "date": day.isoformat()},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise TaskSourceError(day, f"{type(exc).__name__}: {exc}") from exc
        except ValueError as exc:
            raise TaskSourceError(day, "response body is not valid JSON") from exc

        tasks = normalize_payload(day, payload)
        if tasks is None:
            raise TaskSourceError(day, "unsuccessful or malformed payload")
        return tasks

    async def fetch_window(self, user_id: str, days: Sequence[date]) -> list[DayResult]:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            return await gather_days(
                lambda day: self._fetch_day(client, user_id, day),
                days,
                timeout=self.window_timeout,
            )
