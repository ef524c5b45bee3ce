"""Data models for taskcalendar."""

from taskcalendar.models.task import Task, Priority, EstimatedEffort, PRIORITY_RANK
from taskcalendar.models.calendar_event import CalendarEvent, RepeatSettings, RepeatType
from taskcalendar.models.schedule_request import AutoScheduleRequest, TimeWindow, SchedulePreset
from taskcalendar.models.timegrid import TimeSlot

__all__ = [
    "Task",
    "Priority",
    "EstimatedEffort",
    "PRIORITY_RANK",
    "CalendarEvent",
    "RepeatSettings",
    "RepeatType",
    "AutoScheduleRequest",
    "TimeWindow",
    "SchedulePreset",
    "TimeSlot",
]
