"""Scheduling engine for taskcalendar."""

from taskcalendar.engine.availability import blocked_slots, is_range_free, find_conflicts
from taskcalendar.engine.calendar_views import ViewType, view_dates, week_dates, month_dates, to_weekday_index
from taskcalendar.engine.ranking import stack_rank
from taskcalendar.engine.scheduler import (
    schedule_tasks,
    SchedulingResult,
    SchedulingProgress,
    InvalidTaskError,
    SCHEDULING_GRANULARITY_MINUTES,
)

__all__ = [
    "blocked_slots",
    "is_range_free",
    "find_conflicts",
    "ViewType",
    "view_dates",
    "week_dates",
    "month_dates",
    "to_weekday_index",
    "stack_rank",
    "schedule_tasks",
    "SchedulingResult",
    "SchedulingProgress",
    "InvalidTaskError",
    "SCHEDULING_GRANULARITY_MINUTES",
]
