"""Tests for calendar view date ranges."""

from datetime import date

import pytest

from taskcalendar.engine.calendar_views import (
    ViewType,
    iter_dates,
    month_dates,
    to_weekday_index,
    view_dates,
    week_dates,
)


def test_weekday_index_starts_on_sunday():
    assert to_weekday_index(date(2025, 7, 6)) == 0  # Sunday
    assert to_weekday_index(date(2025, 7, 7)) == 1  # Monday
    assert to_weekday_index(date(2025, 7, 12)) == 6  # Saturday


def test_iter_dates_inclusive():
    assert list(iter_dates(date(2025, 7, 30), date(2025, 8, 1))) == [
        date(2025, 7, 30),
        date(2025, 7, 31),
        date(2025, 8, 1),
    ]
    assert list(iter_dates(date(2025, 7, 2), date(2025, 7, 1))) == []


def test_week_dates_sunday_to_saturday():
    week = week_dates(date(2025, 7, 2))

    assert week[0] == date(2025, 6, 29)
    assert week[-1] == date(2025, 7, 5)
    assert len(week) == 7


def test_month_dates_padded_to_whole_weeks():
    grid = month_dates(date(2025, 7, 15))

    assert grid[0] == date(2025, 6, 29)
    assert grid[-1] == date(2025, 8, 2)
    assert len(grid) % 7 == 0


@pytest.mark.parametrize("view,length", [(ViewType.DAY, 1), (ViewType.WEEK, 7), ("month", 35)])
def test_view_dates(view, length):
    assert len(view_dates(view, date(2025, 7, 2))) == length
