"""
Unit tests for the calendar helper: months, weekdays, Sundays and holidays.
"""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.calendar_helper import (
    Month, HolidayCalendar, DEFAULT_HOLIDAY_TABLE,
    days_in_month, holidays_in_month, is_leap_year, sundays_in_month, weekday_of
)


class TestMonth:
    """Tests for the Month enumeration."""

    def test_order_and_attributes(self):
        months = list(Month)
        assert len(months) == 12
        assert months[0] is Month.JAN
        assert months[-1] is Month.DEC
        assert Month.SEP.code == "Sep"
        assert Month.SEP.label == "September"
        assert Month.SEP.index == 9

    @pytest.mark.parametrize("value,expected", [
        ("Jan", Month.JAN),
        ("jan", Month.JAN),
        ("January", Month.JAN),
        (" dec ", Month.DEC),
        (3, Month.MAR),
        (Month.JUL, Month.JUL),
    ])
    def test_parse(self, value, expected):
        assert Month.parse(value) is expected

    @pytest.mark.parametrize("value", ["Foo", "", None, 0, 13])
    def test_parse_unknown(self, value):
        assert Month.parse(value) is None

    def test_from_index_out_of_range(self):
        assert Month.from_index(12) is Month.DEC
        with pytest.raises(ValueError):
            Month.from_index(13)


class TestDaysInMonth:
    """Tests for month lengths and the leap-year rule."""

    def test_leap_years(self):
        assert is_leap_year(2024)
        assert is_leap_year(2000)
        assert not is_leap_year(1900)
        assert not is_leap_year(2023)

    def test_february(self):
        assert days_in_month("Feb", 2024) == 29
        assert days_in_month("Feb", 2023) == 28
        assert days_in_month(Month.FEB, 1900) == 28

    def test_other_months(self):
        assert days_in_month("Apr", 2024) == 30
        assert days_in_month("Dec", 2024) == 31

    def test_unknown_month_defaults_to_31(self):
        assert days_in_month("Xyz", 2024) == 31


class TestWeekdays:
    """Tests for weekday_of and sundays_in_month (0 = Sunday)."""

    def test_weekday_of(self):
        # 1 Jan 2024 was a Monday, 7 Jan 2024 a Sunday
        assert weekday_of(1, "Jan", 2024) == 1
        assert weekday_of(7, "Jan", 2024) == 0
        assert weekday_of(6, "Jan", 2024) == 6

    def test_weekday_of_unknown_month(self):
        with pytest.raises(ValueError):
            weekday_of(1, "Xyz", 2024)

    def test_sundays(self):
        assert sundays_in_month("Jan", 2024) == [7, 14, 21, 28]
        assert sundays_in_month("Jun", 2024) == [2, 9, 16, 23, 30]
        assert sundays_in_month("Feb", 2023) == [5, 12, 19, 26]

    def test_sundays_unknown_month(self):
        assert sundays_in_month("Xyz", 2024) == []


class TestHolidayCalendar:
    """Tests for the holiday table."""

    def test_default_table(self):
        assert holidays_in_month("Jan", 2024) == [1, 26]
        assert holidays_in_month("Oct", 2024) == [2, 24]
        assert holidays_in_month("Feb", 2024) == []
        assert set(DEFAULT_HOLIDAY_TABLE) == {m.code for m in Month}

    def test_custom_table(self):
        calendar = HolidayCalendar({"jun": [17, 5, 5], "Bogus": [1]})
        assert calendar.days_for("Jun") == [5, 17]
        assert calendar.days_for("Jan") == []
        assert holidays_in_month(Month.JUN, 2024, calendar) == [5, 17]

    def test_to_table(self):
        calendar = HolidayCalendar({"Mar": [8]})
        assert calendar.to_table() == {"Mar": [8]}

    def test_unknown_month(self):
        assert HolidayCalendar().days_for("Xyz") == []
