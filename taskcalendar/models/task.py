"""Task data model for taskcalendar."""

from datetime import date, datetime
from typing import Optional
from enum import Enum
from pydantic import BaseModel, Field, field_validator

from taskcalendar.models.constants import (
    DEFAULT_DURATION_MINUTES,
    DEFAULT_TASK_COLOR,
    PLACEHOLDER_USER_ID,
)


class Priority(str, Enum):
    """Task priority enumeration."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# Scheduling precedence (higher rank = scheduled first)
PRIORITY_RANK = {
    Priority.LOW.value: 1,
    Priority.MEDIUM.value: 2,
    Priority.HIGH.value: 3,
    Priority.URGENT.value: 4,
}


class EstimatedEffort(str, Enum):
    """Estimated effort enumeration."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(BaseModel):
    """Backlog task that can be placed on the calendar."""

    id: str = Field(..., description="Unique task identifier (UUID v4)")
    user_id: str = Field(PLACEHOLDER_USER_ID, description="Owner (single placeholder user)")
    title: str = Field(..., description="Task title")
    duration_min: int = Field(DEFAULT_DURATION_MINUTES, description="Duration in minutes")
    priority: Priority = Field(Priority.MEDIUM, description="Scheduling priority")
    can_overlap: bool = Field(False, description="Whether the task may share time with overlap-permitting events")
    color: str = Field(DEFAULT_TASK_COLOR, description="Display color")
    description: Optional[str] = Field(None, description="Task description")
    location: Optional[str] = Field(None, description="Task location")
    category: Optional[str] = Field(None, description="Free-form category (e.g. 'Work', 'Meetings')")
    estimated_effort: Optional[EstimatedEffort] = Field(None, description="Estimated effort")
    deadline: Optional[date] = Field(None, description="Informational deadline")
    reminder_minutes: Optional[int] = Field(None, ge=0, description="Reminder lead time in minutes")
    notes: Optional[str] = Field(None, description="Task notes")
    scheduled: bool = Field(False, description="Whether the task currently has a calendar placement")
    created_at: Optional[datetime] = Field(None, description="Task creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Task last update timestamp")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True

    @field_validator("title")
    @classmethod
    def _validate_title(cls, v):
        v = (v or "").strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("duration_min")
    @classmethod
    def _validate_duration(cls, v):
        if v <= 0:
            raise ValueError("duration_min must be positive")
        return v
