"""Persistence layer for taskcalendar."""
