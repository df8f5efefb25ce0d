"""
Progress service: rolling-window analytics over daily task stats.

Definitions
-----------
  total_focus_hours     sum of focus minutes / 60, rounded to 2 decimals
  streak_days           consecutive days with >= 1 task, walking back from
                        the most recent day of the window
  productivity_percent  share of window days with >= 1 task
  scores                0-100 values for the radar chart:
                          focus        hours vs. a 2 h/day target
                          practice     practice tasks vs. a task-count proxy
                          planning     static default (75)
                          consistency  50 + 7 per streak day
                          wellness     static default (65)

The window is always `length` consecutive days ending on the anchor date,
oldest first. The anchor is supplied by the caller; nothing here reads
the clock. All rounding is half-up.

Public API
----------
build_window(anchor, length)                    -> list[date]
zero_window(anchor, length)                     -> list[DailyStat]
analyze_window(days)                            -> WindowSummary
radar_points(scores)                            -> list[RadarPoint]
build_progress(source, user_id, anchor, length) -> ProgressReport
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from types import MappingProxyType
from typing import Mapping, Optional, Protocol, Sequence

from app.core.errors import InvalidWindowError
from app.services.daily_aggregator import DailyStat, aggregate_day, zero_day
from app.services.duration import round_half_up
from app.services.task_source import DayResult

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Score categories
# ---------------------------------------------------------------------------

class Category:
    FOCUS       = "focus"
    PRACTICE    = "practice"
    PLANNING    = "planning"
    CONSISTENCY = "consistency"
    WELLNESS    = "wellness"


# Radar chart order and axis labels.
CATEGORY_LABELS = {
    Category.FOCUS:       "Focus",
    Category.PRACTICE:    "Practice",
    Category.PLANNING:    "Planning",
    Category.CONSISTENCY: "Consistency",
    Category.WELLNESS:    "Wellness",
}

# Categories without a data source yet.
STATIC_SCORES = {
    Category.PLANNING: 75,
    Category.WELLNESS: 65,
}

DAILY_FOCUS_TARGET_HOURS = 2
CONSISTENCY_BASE = 50
CONSISTENCY_PER_STREAK_DAY = 7
MAX_SCORE = 100


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WindowSummary:
    total_focus_hours: Decimal     # 2 decimal places
    streak_days: int
    productivity_percent: int      # 0-100
    scores: Mapping[str, int]      # read-only, CATEGORY_LABELS order


@dataclass(frozen=True)
class RadarPoint:
    category: str
    value: int


@dataclass(frozen=True)
class ProgressReport:
    reference_date: date
    summary: WindowSummary
    days: list[DailyStat]          # oldest first
    radar: list[RadarPoint] = field(default_factory=list)

    @property
    def failed_days(self) -> int:
        return sum(1 for d in self.days if d.fetch_failed)


class TaskSource(Protocol):
    async def fetch_window(self, user_id: str, days: Sequence[date]) -> list[DayResult]:
        ...


# ---------------------------------------------------------------------------
# Window construction
# ---------------------------------------------------------------------------

def build_window(anchor: date, length: int) -> list[date]:
    """Return `length` consecutive dates ending on `anchor`, oldest first."""
    if length < 1:
        raise InvalidWindowError(length)
    return [anchor - timedelta(days=i) for i in range(length - 1, -1, -1)]


def zero_window(anchor: date, length: int) -> list[DailyStat]:
    return [zero_day(d) for d in build_window(anchor, length)]


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

def _streak(days: Sequence[DailyStat]) -> int:
    streak = 0
    for day in reversed(days):
        if not day.had_any_task:
            break
        streak += 1
    return streak


def _practice_score(days: Sequence[DailyStat]) -> int:
    practice_total = sum(d.practice_task_count for d in days)
    # Task-count proxy: one per day with a visible focus bar, plus practice tasks.
    proxy = sum(1 for d in days if d.focus_hours > 0) + practice_total
    ratio = Decimal(100 * practice_total) / Decimal(max(1, proxy))
    return min(MAX_SCORE, round_half_up(ratio))


def _focus_score(total_focus_hours: Decimal, length: int) -> int:
    target = Decimal(length * DAILY_FOCUS_TARGET_HOURS)
    return min(MAX_SCORE, round_half_up(total_focus_hours * 100 / target))


def analyze_window(days: Sequence[DailyStat]) -> WindowSummary:
    """Combine the ordered daily stats of a window into a WindowSummary."""
    length = len(days)
    if length < 1:
        raise InvalidWindowError(length)

    total_minutes = sum(d.focus_minutes for d in days)
    total_hours = (Decimal(total_minutes) / Decimal(60)).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )
    streak = _streak(days)
    active_days = sum(1 for d in days if d.had_any_task)
    productivity = round_half_up(Decimal(100 * active_days) / Decimal(length))

    computed = {
        Category.FOCUS: _focus_score(total_hours, length),
        Category.PRACTICE: _practice_score(days),
        Category.CONSISTENCY: min(
            MAX_SCORE, CONSISTENCY_BASE + CONSISTENCY_PER_STREAK_DAY * streak
        ),
    }
    scores = {
        category: computed.get(category, STATIC_SCORES.get(category, 0))
        for category in CATEGORY_LABELS
    }

    return WindowSummary(
        total_focus_hours=total_hours,
        streak_days=streak,
        productivity_percent=productivity,
        scores=MappingProxyType(scores),
    )


def radar_points(scores: Mapping[str, int]) -> list[RadarPoint]:
    """Project scores into (label, value) pairs in fixed radar order."""
    return [
        RadarPoint(category=label, value=scores.get(category, 0))
        for category, label in CATEGORY_LABELS.items()
    ]


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

def _report(anchor: date, days: list[DailyStat]) -> ProgressReport:
    summary = analyze_window(days)
    return ProgressReport(
        reference_date=anchor,
        summary=summary,
        days=days,
        radar=radar_points(summary.scores),
    )


async def build_progress(
    source: TaskSource,
    user_id: Optional[str],
    anchor: date,
    length: int,
) -> ProgressReport:
    """
    Fetch the window for `user_id` and analyze it.

    Without a user the window is all zero days and nothing is fetched.
    Days whose fetch failed are zero days flagged `fetch_failed`.
    """
    if not user_id:
        return _report(anchor, zero_window(anchor, length))

    window = build_window(anchor, length)

    try:
        results = await source.fetch_window(user_id, window)
    except Exception:  # noqa: BLE001
        logger.exception("Task source unavailable for user=%s; using zero window", user_id)
        results = [None] * len(window)

    if len(results) != len(window):
        logger.warning(
            "Task source returned %d results for a %d-day window; "
            "missing days treated as failed", len(results), len(window),
        )
        results = (list(results) + [None] * len(window))[: len(window)]

    days = [aggregate_day(d, tasks) for d, tasks in zip(window, results)]
    report = _report(anchor, days)
    logger.debug(
        "Progress for user=%s ending %s: %sh, streak=%d, failed_days=%d",
        user_id, anchor, report.summary.total_focus_hours,
        report.summary.streak_days, report.failed_days,
    )
    return report
