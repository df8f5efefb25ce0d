"""
Progress analytics schemas.

GET /progress          → ProgressResponse
GET /progress/duration → DurationPreviewResponse
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class DailyStatResponse(BaseModel):
    """One day of the window, as drawn in the weekly bar chart."""
    model_config = ConfigDict(from_attributes=True)

    day: str
    label: str = Field(description="Short weekday name, e.g. \"Mon\".")
    focus_minutes: int
    focus_hours: int = Field(description="Focus minutes rounded to whole hours.")
    practice_tasks: int = Field(
        description="Tasks whose description looks like coding practice."
    )
    task_count: int
    had_any_task: bool
    fetch_failed: bool = Field(
        description="True if the day's tasks could not be fetched (counted as empty)."
    )


class RadarPointResponse(BaseModel):
    category: str
    value: int = Field(ge=0, le=100)


class ProgressResponse(BaseModel):
    """Rolling-window progress summary ending on reference_date."""
    model_config = ConfigDict(from_attributes=True)

    reference_date: str = Field(
        description="Last day (inclusive) of the evaluation window."
    )
    user_id: Optional[str] = None
    window_days: int = Field(description="Number of days in the window.")
    total_focus_hours: float = Field(examples=[5.0])
    streak_days: int
    productivity_percent: int = Field(ge=0, le=100, examples=[71])
    scores: dict[str, int] = Field(
        description="focus, practice, planning, consistency, wellness (0-100)."
    )
    radar: list[RadarPointResponse] = Field(
        description="Scores in radar order: Focus, Practice, Planning, Consistency, Wellness."
    )
    failed_days: int = Field(description="Days whose fetch failed.")
    days: list[DailyStatResponse] = Field(description="Per-day breakdown, oldest first.")


class DurationPreviewResponse(BaseModel):
    text: str
    minutes: int
