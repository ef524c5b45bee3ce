"""CalendarEvent data model for taskcalendar."""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from taskcalendar.models.constants import DEFAULT_EVENT_COLOR, MINUTES_PER_DAY, PLACEHOLDER_USER_ID
from taskcalendar.models.task import Priority
from taskcalendar.models.timegrid import format_time_12h, is_slot_aligned, parse_time, span_minutes


class RepeatType(str, Enum):
    """Repeat type enumeration (stored only, never expanded)."""
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"


class RepeatSettings(BaseModel):
    """Repeat settings as entered in the event editor."""

    type: RepeatType = RepeatType.NONE
    interval: int = Field(1, ge=1, description="Every N units (days/weeks/months/years)")
    days_of_week: Optional[List[int]] = Field(None, description="0 = Sunday ... 6 = Saturday")
    end_date: Optional[date] = None
    occurrences: Optional[int] = Field(None, ge=1)

    class Config:
        """Pydantic configuration."""
        use_enum_values = True

    @field_validator("days_of_week")
    @classmethod
    def _validate_days_of_week(cls, v):
        if v is None:
            return None
        if any(d < 0 or d > 6 for d in v):
            raise ValueError("days_of_week values must be in 0..6")
        return sorted(set(v))


def coerce_minute(v):
    """Accept minutes since midnight or a '9:00 AM' / '09:00' string."""
    if isinstance(v, str):
        return parse_time(v)
    return v


class CalendarEvent(BaseModel):
    """An occupied interval on a specific date.

    Times are slot-aligned minutes since midnight; ``end_minute`` may be 1440
    for an event that runs to the end of the day.
    """

    id: str = Field(..., description="Unique event identifier")
    user_id: str = Field(PLACEHOLDER_USER_ID, description="Owner (single placeholder user)")
    title: str = Field(..., description="Event title")
    event_date: date = Field(..., description="Calendar day of the event")
    start_minute: int = Field(..., description="Start, minutes since midnight")
    end_minute: int = Field(..., description="End (exclusive), minutes since midnight")
    color: str = Field(DEFAULT_EVENT_COLOR, description="Display color")
    is_task: bool = Field(False, description="Whether the event is a scheduled task")
    task_id: Optional[str] = Field(None, description="Originating task (non-owning back reference)")
    can_overlap: bool = Field(False, description="Whether other overlap-permitting items may share this time")
    priority: Optional[Priority] = Field(None, description="Priority copied from the originating task")
    description: Optional[str] = None
    location: Optional[str] = None
    attendees: List[str] = Field(default_factory=list)
    repeat: Optional[RepeatSettings] = None
    created_at: Optional[datetime] = None

    class Config:
        """Pydantic configuration."""
        use_enum_values = True

    @field_validator("start_minute", "end_minute", mode="before")
    @classmethod
    def _coerce_times(cls, v):
        return coerce_minute(v)

    @field_validator("title")
    @classmethod
    def _validate_title(cls, v):
        v = (v or "").strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @model_validator(mode="after")
    def _validate_interval(self):
        for name in ("start_minute", "end_minute"):
            value = getattr(self, name)
            if not is_slot_aligned(value):
                raise ValueError(f"{name} must be aligned to the 30-minute grid")
        if self.start_minute < 0 or self.end_minute > MINUTES_PER_DAY:
            raise ValueError("event must lie within a single day")
        if self.start_minute >= self.end_minute:
            raise ValueError("start_minute must be before end_minute")
        return self

    @computed_field
    @property
    def start_display(self) -> str:
        return format_time_12h(self.start_minute)

    @computed_field
    @property
    def end_display(self) -> str:
        return format_time_12h(self.end_minute)

    @property
    def duration_min(self) -> int:
        return span_minutes(self.start_minute, self.end_minute)
