"""Constants for taskcalendar.

This module centralizes all magic numbers and default values used throughout the application.
"""


# Time grid
SLOT_MINUTES = 30
MINUTES_PER_DAY = 24 * 60
SLOTS_PER_DAY = MINUTES_PER_DAY // SLOT_MINUTES  # 48

# Single-user placeholder (no authentication)
PLACEHOLDER_USER_ID = "00000000-0000-0000-0000-000000000000"

# Task defaults
DEFAULT_DURATION_MINUTES = 30
DEFAULT_TASK_COLOR = "#4285f4"
DEFAULT_EVENT_COLOR = "#4285f4"
DEFAULT_REMINDER_MINUTES = 15
COLOR_OPTIONS = [
    "#ea4335",
    "#fbbc04",
    "#34a853",
    "#4285f4",
    "#9aa0a6",
    "#ff6d01",
    "#9c27b0",
    "#795548",
]

# Manual event defaults (click on an empty slot)
DEFAULT_EVENT_TITLE = "New Event"
DEFAULT_EVENT_DURATION_MINUTES = 60

# Auto-schedule defaults
DEFAULT_WINDOW_START_MINUTE = 9 * 60  # 9:00 AM
DEFAULT_WINDOW_END_MINUTE = 17 * 60  # 5:00 PM
WEEKDAYS_MON_FRI = [1, 2, 3, 4, 5]  # 0 = Sunday ... 6 = Saturday
ALL_WEEKDAYS = [0, 1, 2, 3, 4, 5, 6]
WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
