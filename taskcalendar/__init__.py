"""taskcalendar: calendar and task planner with automatic task placement."""

__version__ = "0.1.0"
