"""Auto-schedule request models for taskcalendar.

An ``AutoScheduleRequest`` is a transient query: it is validated on
construction and never persisted.
"""

import calendar
from datetime import date, timedelta
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, Field, field_validator, model_validator

from taskcalendar.models.calendar_event import coerce_minute
from taskcalendar.models.constants import (
    ALL_WEEKDAYS,
    DEFAULT_WINDOW_END_MINUTE,
    DEFAULT_WINDOW_START_MINUTE,
    MINUTES_PER_DAY,
    WEEKDAYS_MON_FRI,
)
from taskcalendar.models.timegrid import format_time_12h, is_slot_aligned


class TimeWindow(BaseModel):
    """Daily time bounds, minutes since midnight (end exclusive)."""

    start: int = Field(DEFAULT_WINDOW_START_MINUTE, description="Window start ('9:00 AM', '09:00' or minutes)")
    end: int = Field(DEFAULT_WINDOW_END_MINUTE, description="Window end ('5:00 PM', '17:00' or minutes)")

    @field_validator("start", "end", mode="before")
    @classmethod
    def _coerce(cls, v):
        return coerce_minute(v)

    @model_validator(mode="after")
    def _validate_bounds(self):
        if not is_slot_aligned(self.start) or not is_slot_aligned(self.end):
            raise ValueError("time window must be aligned to the 30-minute grid")
        if self.start < 0 or self.end > MINUTES_PER_DAY:
            raise ValueError("time window must lie within a single day")
        if self.start >= self.end:
            raise ValueError("time window start must be before its end")
        return self

    @property
    def width_minutes(self) -> int:
        return self.end - self.start

    def describe(self) -> str:
        return f"{format_time_12h(self.start)} - {format_time_12h(self.end)}"


class AutoScheduleRequest(BaseModel):
    """Where and when the scheduler may place backlog tasks."""

    start_date: date = Field(..., description="First candidate day (inclusive)")
    end_date: date = Field(..., description="Last candidate day (inclusive)")
    time_window: TimeWindow = Field(default_factory=TimeWindow)
    allowed_weekdays: List[int] = Field(
        default_factory=lambda: list(WEEKDAYS_MON_FRI),
        description="Weekdays to schedule on (0 = Sunday ... 6 = Saturday)",
    )

    @field_validator("allowed_weekdays")
    @classmethod
    def _validate_weekdays(cls, v):
        if not v:
            raise ValueError("select at least one day of the week")
        if any(d < 0 or d > 6 for d in v):
            raise ValueError("weekday values must be in 0..6")
        return sorted(set(v))

    @model_validator(mode="after")
    def _validate_dates(self):
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class SchedulePreset(str, Enum):
    """Quick presets offered by the auto-schedule dialog."""
    THIS_WEEK = "this_week"
    NEXT_2_WEEKS = "next_2_weeks"
    THIS_MONTH = "this_month"


PRESET_LABELS = {
    SchedulePreset.THIS_WEEK: "This Week",
    SchedulePreset.NEXT_2_WEEKS: "Next 2 Weeks",
    SchedulePreset.THIS_MONTH: "This Month",
}


def build_preset(preset: SchedulePreset, today: date) -> AutoScheduleRequest:
    """Build the request a preset stands for, relative to ``today``."""
    preset = SchedulePreset(preset)
    if preset == SchedulePreset.THIS_WEEK:
        return AutoScheduleRequest(start_date=today, end_date=today + timedelta(days=7))
    if preset == SchedulePreset.NEXT_2_WEEKS:
        return AutoScheduleRequest(start_date=today, end_date=today + timedelta(days=14))
    last_day = calendar.monthrange(today.year, today.month)[1]
    return AutoScheduleRequest(
        start_date=today,
        end_date=today.replace(day=last_day),
        time_window=TimeWindow(start=8 * 60, end=18 * 60),
        allowed_weekdays=list(ALL_WEEKDAYS),
    )


def all_presets(today: date) -> Dict[str, AutoScheduleRequest]:
    return {preset.value: build_preset(preset, today) for preset in SchedulePreset}
