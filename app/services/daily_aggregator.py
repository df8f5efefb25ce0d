"""
Daily aggregator: one calendar day's task list -> DailyStat.

A day whose fetch failed is passed as `None` (the fetch-failure marker)
and becomes a zero day; an empty list is a day with no tasks. Both break
the streak, only the former is flagged as `fetch_failed`.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Sequence

from app.services.duration import parse_duration_minutes, round_half_up

# Substrings that mark a task as skill practice (coding exercises).
PRACTICE_KEYWORDS = (
    "dsa",
    "leetcode",
    "problem",
    "algo",
    "algorithm",
    "practice",
    "code",
)

DurationParser = Callable[[Optional[str]], int]


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TaskRecord:
    day: date
    description: str
    duration_text: Optional[str] = None


@dataclass(frozen=True)
class DailyStat:
    day: date
    label: str               # short weekday name, bar-chart x-axis
    focus_minutes: int
    practice_task_count: int
    had_any_task: bool
    task_count: int = 0
    fetch_failed: bool = False

    @property
    def focus_hours(self) -> int:
        """Whole focus hours for the day, as drawn in the weekly bar chart."""
        return round_half_up(Decimal(self.focus_minutes) / 60)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def weekday_label(day: date) -> str:
    return day.strftime("%a")


def is_practice_task(description: Optional[str]) -> bool:
    text = (description or "").lower()
    return any(keyword in text for keyword in PRACTICE_KEYWORDS)


def zero_day(day: date, fetch_failed: bool = False) -> DailyStat:
    return DailyStat(
        day=day,
        label=weekday_label(day),
        focus_minutes=0,
        practice_task_count=0,
        had_any_task=False,
        task_count=0,
        fetch_failed=fetch_failed,
    )


def aggregate_day(
    day: date,
    tasks: Optional[Sequence[TaskRecord]],
    parse: DurationParser = parse_duration_minutes,
) -> DailyStat:
    """Sum focus minutes and count practice tasks for a single day."""
    if tasks is None:
        return zero_day(day, fetch_failed=True)

    focus_minutes = sum(parse(t.duration_text) for t in tasks)
    practice = sum(1 for t in tasks if is_practice_task(t.description))

    return DailyStat(
        day=day,
        label=weekday_label(day),
        focus_minutes=focus_minutes,
        practice_task_count=practice,
        had_any_task=len(tasks) > 0,
        task_count=len(tasks),
    )
