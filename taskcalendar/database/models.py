"""SQLAlchemy database models for taskcalendar."""

from datetime import datetime
import uuid
from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, JSON, ForeignKey

from typing import Optional, Union, TypeVar, Type
from taskcalendar.database.database import Base
from taskcalendar.models.constants import DEFAULT_TASK_COLOR, PLACEHOLDER_USER_ID
from taskcalendar.models.task import Priority, EstimatedEffort

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T, None]) -> Optional[str]:
    """Convert enum to string value (handles both enum and string).

    Args:
        enum_obj: Enum instance, string value or None

    Returns:
        String value of the enum, the string itself, or None
    """
    if enum_obj is None:
        return None
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: Optional[str], enum_class: Type[T], default: Optional[T]) -> Optional[T]:
    """Convert string to enum with fallback to default.

    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails

    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError):
        return default


class TaskDB(Base):
    """Database model for Task."""

    __tablename__ = "tasks"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True, default=PLACEHOLDER_USER_ID)

    title = Column(String, nullable=False)
    duration_min = Column(Integer, nullable=False, default=30)
    priority = Column(String, nullable=False, default=Priority.MEDIUM.value)
    can_overlap = Column(Boolean, nullable=False, default=False)
    color = Column(String, nullable=False, default=DEFAULT_TASK_COLOR)

    description = Column(String, nullable=True)
    location = Column(String, nullable=True)
    category = Column(String, nullable=True)
    estimated_effort = Column(String, nullable=True)
    deadline = Column(Date, nullable=True)
    reminder_minutes = Column(Integer, nullable=True)
    notes = Column(String, nullable=True)

    scheduled = Column(Boolean, nullable=False, default=False, index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from taskcalendar.models.task import Task

        return Task(
            id=self.id,
            user_id=self.user_id,
            title=self.title,
            duration_min=self.duration_min,
            priority=value_to_enum(self.priority, Priority, Priority.MEDIUM),
            can_overlap=self.can_overlap,
            color=self.color,
            description=self.description,
            location=self.location,
            category=self.category,
            estimated_effort=value_to_enum(self.estimated_effort, EstimatedEffort, None),
            deadline=self.deadline,
            reminder_minutes=self.reminder_minutes,
            notes=self.notes,
            scheduled=self.scheduled,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, task):
        """Create database model from Pydantic model."""
        now = datetime.utcnow()
        return cls(
            id=task.id,
            user_id=task.user_id,
            title=task.title,
            duration_min=task.duration_min,
            priority=enum_to_value(task.priority),
            can_overlap=task.can_overlap,
            color=task.color,
            description=task.description,
            location=task.location,
            category=task.category,
            estimated_effort=enum_to_value(task.estimated_effort),
            deadline=task.deadline,
            reminder_minutes=task.reminder_minutes,
            notes=task.notes,
            scheduled=task.scheduled,
            created_at=task.created_at or now,
            updated_at=task.updated_at or now,
        )


class CalendarEventDB(Base):
    """Database model for CalendarEvent."""

    __tablename__ = "calendar_events"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True, default=PLACEHOLDER_USER_ID)

    title = Column(String, nullable=False)
    event_date = Column(Date, nullable=False, index=True)
    start_minute = Column(Integer, nullable=False)
    end_minute = Column(Integer, nullable=False)
    color = Column(String, nullable=False)

    is_task = Column(Boolean, nullable=False, default=False)
    # Back reference only; the task's scheduled flag is reset when this row is deleted.
    task_id = Column(String, ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True, index=True)
    can_overlap = Column(Boolean, nullable=False, default=False)
    priority = Column(String, nullable=True)

    description = Column(String, nullable=True)
    location = Column(String, nullable=True)
    attendees = Column(JSON, nullable=False, default=list)
    repeat = Column(JSON, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from taskcalendar.models.calendar_event import CalendarEvent

        return CalendarEvent(
            id=self.id,
            user_id=self.user_id,
            title=self.title,
            event_date=self.event_date,
            start_minute=self.start_minute,
            end_minute=self.end_minute,
            color=self.color,
            is_task=self.is_task,
            task_id=self.task_id,
            can_overlap=self.can_overlap,
            priority=value_to_enum(self.priority, Priority, None),
            description=self.description,
            location=self.location,
            attendees=self.attendees or [],
            repeat=self.repeat,
            created_at=self.created_at,
        )

    @classmethod
    def from_pydantic(cls, event):
        """Create database model from Pydantic model."""
        return cls(
            id=event.id,
            user_id=event.user_id,
            title=event.title,
            event_date=event.event_date,
            start_minute=event.start_minute,
            end_minute=event.end_minute,
            color=event.color,
            is_task=event.is_task,
            task_id=event.task_id,
            can_overlap=event.can_overlap,
            priority=enum_to_value(event.priority),
            description=event.description,
            location=event.location,
            attendees=list(event.attendees),
            repeat=event.repeat.model_dump(mode="json") if event.repeat else None,
            created_at=event.created_at or datetime.utcnow(),
        )
