"""Task and event creation factory for taskcalendar.

This module centralizes creation logic so that tasks and events are always
built through validated models with consistent default values.
"""

import uuid
from datetime import date, datetime
from typing import Optional, Dict, Any

from taskcalendar.models.task import Task, Priority
from taskcalendar.models.calendar_event import CalendarEvent
from taskcalendar.models.constants import (
    DEFAULT_DURATION_MINUTES,
    DEFAULT_EVENT_COLOR,
    DEFAULT_EVENT_DURATION_MINUTES,
    DEFAULT_EVENT_TITLE,
    DEFAULT_REMINDER_MINUTES,
    DEFAULT_TASK_COLOR,
    PLACEHOLDER_USER_ID,
    SLOT_MINUTES,
)
from taskcalendar.models.timegrid import slots_needed


def create_task_defaults() -> Dict[str, Any]:
    """Get default task values as a dictionary.

    Returns:
        Dictionary with default task field values using constants
    """
    return {
        "duration_min": DEFAULT_DURATION_MINUTES,
        "priority": Priority.MEDIUM,
        "can_overlap": False,
        "color": DEFAULT_TASK_COLOR,
        "reminder_minutes": DEFAULT_REMINDER_MINUTES,
        "scheduled": False,
    }


def create_task_base(
    title: str,
    duration_min: Optional[int] = None,
    priority: Optional[Priority] = None,
    can_overlap: Optional[bool] = None,
    color: Optional[str] = None,
    description: Optional[str] = None,
    location: Optional[str] = None,
    category: Optional[str] = None,
    estimated_effort: Optional[Any] = None,
    deadline: Optional[date] = None,
    reminder_minutes: Optional[int] = None,
    notes: Optional[str] = None,
    user_id: str = PLACEHOLDER_USER_ID,
) -> Task:
    """Create a backlog task with defaults, allowing overrides.

    The task starts unscheduled. Validation happens in the Task model, so an
    empty title or a non-positive duration is rejected here.

    Args:
        title: Task title (required, non-empty)
        duration_min: Duration in minutes (defaults to constant)
        priority: Scheduling priority (defaults to medium)
        can_overlap: Whether the task may share time with overlap-permitting events
        color: Display color
        description: Task description
        location: Task location
        category: Free-form category
        estimated_effort: Estimated effort (low/medium/high)
        deadline: Informational deadline
        reminder_minutes: Reminder lead time
        notes: Task notes
        user_id: Owner (placeholder user by default)

    Returns:
        Task object with defaults applied

    Raises:
        pydantic.ValidationError: If the title is empty or the duration is not positive
    """
    now = datetime.utcnow()
    defaults = create_task_defaults()

    return Task(
        id=str(uuid.uuid4()),
        user_id=user_id,
        title=title,
        duration_min=duration_min if duration_min is not None else defaults["duration_min"],
        priority=priority if priority is not None else defaults["priority"],
        can_overlap=can_overlap if can_overlap is not None else defaults["can_overlap"],
        color=color if color is not None else defaults["color"],
        description=description,
        location=location,
        category=category,
        estimated_effort=estimated_effort,
        deadline=deadline,
        reminder_minutes=reminder_minutes if reminder_minutes is not None else defaults["reminder_minutes"],
        notes=notes,
        scheduled=defaults["scheduled"],
        created_at=now,
        updated_at=now,
    )


def create_event_for_task(task: Task, event_date: date, start_minute: int) -> CalendarEvent:
    """Create the calendar event that places ``task`` at ``start_minute`` on ``event_date``.

    The event spans whole slots, so a 45-minute task occupies 9:00-10:00.
    """
    return CalendarEvent(
        id=str(uuid.uuid4()),
        user_id=task.user_id,
        title=task.title,
        event_date=event_date,
        start_minute=start_minute,
        end_minute=start_minute + slots_needed(task.duration_min) * SLOT_MINUTES,
        color=task.color,
        is_task=True,
        task_id=task.id,
        can_overlap=task.can_overlap,
        priority=task.priority,
        description=task.description,
        location=task.location,
        created_at=datetime.utcnow(),
    )


def create_manual_event(
    event_date: date,
    start_minute: int,
    end_minute: Optional[int] = None,
    title: str = DEFAULT_EVENT_TITLE,
    **fields: Any,
) -> CalendarEvent:
    """Create a free-standing event (e.g. a click on an empty slot).

    Without ``end_minute`` the event lasts one hour.
    """
    if end_minute is None:
        end_minute = start_minute + DEFAULT_EVENT_DURATION_MINUTES
    fields.setdefault("color", DEFAULT_EVENT_COLOR)
    return CalendarEvent(
        id=str(uuid.uuid4()),
        title=title,
        event_date=event_date,
        start_minute=start_minute,
        end_minute=end_minute,
        is_task=False,
        created_at=datetime.utcnow(),
        **fields,
    )
