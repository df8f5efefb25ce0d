"""
Progress router: weekly focus, streak and performance analytics.

GET /progress           : rolling-window summary (default 7 days)
GET /progress/duration  : how a free-text duration is read, in minutes
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.config import settings
from app.schemas.common import ErrorResponse
from app.schemas.progress import (
    DailyStatResponse,
    DurationPreviewResponse,
    ProgressResponse,
    RadarPointResponse,
)
from app.services.daily_aggregator import DailyStat
from app.services.duration import parse_duration_minutes
from app.services.progress_service import ProgressReport, TaskSource, build_progress
from app.services.task_source import HttpTaskSource

router = APIRouter(prefix="/progress", tags=["progress"])

MAX_WINDOW_DAYS = 31


def get_task_source() -> TaskSource:
    return HttpTaskSource(
        settings.TASK_API_URL,
        timeout=settings.FETCH_TIMEOUT_SECONDS,
        window_timeout=settings.WINDOW_TIMEOUT_SECONDS,
    )


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _day_to_response(d: DailyStat) -> DailyStatResponse:
    return DailyStatResponse(
        day=str(d.day),
        label=d.label,
        focus_minutes=d.focus_minutes,
        focus_hours=d.focus_hours,
        practice_tasks=d.practice_task_count,
        task_count=d.task_count,
        had_any_task=d.had_any_task,
        fetch_failed=d.fetch_failed,
    )


def _report_to_response(report: ProgressReport, user_id: Optional[str]) -> ProgressResponse:
    summary = report.summary
    return ProgressResponse(
        reference_date=str(report.reference_date),
        user_id=user_id,
        window_days=len(report.days),
        total_focus_hours=float(summary.total_focus_hours),
        streak_days=summary.streak_days,
        productivity_percent=summary.productivity_percent,
        scores=dict(summary.scores),
        radar=[RadarPointResponse(category=p.category, value=p.value) for p in report.radar],
        failed_days=report.failed_days,
        days=[_day_to_response(d) for d in report.days],
    )


# ---------------------------------------------------------------------------
# GET /progress
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=ProgressResponse,
    summary="Progress summary for a rolling window",
    responses={
        200: {"description": "Focus hours, streak, productivity and radar scores."},
        422: {"model": ErrorResponse, "description": "VALIDATION_ERROR or INVALID_WINDOW."},
    },
)
async def progress(
    user_id: Optional[str] = Query(
        default=None,
        description="User whose tasks are fetched. Omit for an all-zero window.",
    ),
    reference_date: Optional[date] = Query(
        default=None,
        description="Last day (inclusive) of the window. Defaults to today (UTC).",
        examples=["2026-02-21"],
    ),
    window_days: Optional[int] = Query(
        default=None,
        ge=1,
        le=MAX_WINDOW_DAYS,
        description="Window length in days. Defaults to WINDOW_DAYS (7).",
    ),
    source: TaskSource = Depends(get_task_source),
):
    """
    Summarize the user's tasks over the window ending on `reference_date`.

    Tasks are fetched per day in parallel. A day whose fetch fails counts
    as a day without tasks and is flagged `fetch_failed`; the summary is
    still returned.

    ### Scores (0-100)
    | Category | Source |
    |---|---|
    | `focus`       | focus hours vs. 2 h/day |
    | `practice`    | coding-practice tasks vs. task-count proxy |
    | `planning`    | static default 75 |
    | `consistency` | 50 + 7 × streak days |
    | `wellness`    | static default 65 |
    """
    report = await build_progress(
        source=source,
        user_id=user_id,
        anchor=reference_date or _today(),
        length=window_days or settings.WINDOW_DAYS,
    )
    return _report_to_response(report, user_id)


# ---------------------------------------------------------------------------
# GET /progress/duration
# ---------------------------------------------------------------------------

@router.get(
    "/duration",
    response_model=DurationPreviewResponse,
    summary="Preview duration parsing",
)
def duration_preview(
    text: str = Query(default="", description='Free-text duration, e.g. "1.5h", "30 min", "90".'),
):
    """Return the number of minutes a task duration string counts for."""
    return DurationPreviewResponse(text=text, minutes=parse_duration_minutes(text))
