"""
Unit tests for the pure record mutators.
"""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.attendance_codes import AttendanceCode as C
from domain.calendar_helper import HolidayCalendar, Month
from domain.entities import EmployeeSummary
from domain.record_mutators import (
    bulk_set, clear_attendance, create_employee, mark_holidays, mark_weekends,
    set_day, switch_month
)


@pytest.fixture
def june_record():
    return create_employee("QR-417", "Asha Verma", Month.JUN, 2024)


class TestCreateEmployee:
    """Tests for the empty-record factory."""

    def test_defaults(self):
        record = create_employee("QR-417", "Asha Verma")
        assert record.month is Month.JAN
        assert record.year == 2024
        assert record.attendance == {}
        assert record.summary == EmployeeSummary()

    def test_details(self):
        record = create_employee("QR-417", "Asha Verma", "Mar", 2025, department="Ops", sl_no=4)
        assert record.month is Month.MAR
        assert record.department == "Ops"
        assert record.sl_no == 4


class TestSetDay:
    """Tests for single-cell edits."""

    def test_sets_code_and_rederives(self, june_record):
        updated = set_day(june_record, 3, "p")
        assert updated.attendance == {3: C.P}
        assert updated.summary.total_present == 1
        assert updated.monthly_data["Jun"].attendance == {3: C.P}
        assert updated.monthly_data["Jun"].summary == updated.summary

    def test_input_is_not_modified(self, june_record):
        set_day(june_record, 3, "P")
        assert june_record.attendance == {}
        assert june_record.summary == EmployeeSummary()
        assert june_record.monthly_data == {}

    def test_blank_code_removes_day(self, june_record):
        record = set_day(june_record, 3, "P")
        cleared = set_day(record, 3, "")
        assert cleared.attendance == {}
        assert cleared.summary.total_present == 0

    def test_unknown_code_removes_day(self, june_record):
        record = set_day(june_record, 3, "P")
        assert set_day(record, 3, "X").attendance == {}

    @pytest.mark.parametrize("day", [0, 31, -1, "abc", None, 2.5, float("inf")])
    def test_out_of_range_day_dropped(self, june_record, day):
        updated = set_day(june_record, day, "P")
        assert updated.attendance == {}


class TestBulkSet:
    """Tests for multi-cell edits."""

    def test_applies_all_edits(self, june_record):
        updated = bulk_set(june_record, {3: "P", "4": "A", 5: "L", 40: "P"})
        assert updated.attendance == {3: C.P, 4: C.A, 5: C.L}
        assert updated.summary.total_present == 1
        assert updated.summary.total_absent == 1
        assert updated.summary.total_on_leave == 1

    def test_uses_holiday_calendar(self, june_record):
        calendar = HolidayCalendar({"Jun": [5]})
        updated = bulk_set(june_record, {5: "P"}, holidays=calendar)
        assert updated.summary.total_holy_day_working == 1


class TestMarkRestDays:
    """Tests for mark_weekends and mark_holidays."""

    def test_mark_weekends_fills_unmarked_sundays(self, june_record):
        record = set_day(june_record, 2, "P")
        marked = mark_weekends(record, "Jun", 2024)
        assert marked.attendance[2] is C.P
        for day in (9, 16, 23, 30):
            assert marked.attendance[day] is C.S
        assert marked.summary.total_sundays == 4
        assert marked.summary.total_holy_day_working == 1

    def test_mark_weekends_custom_code(self, june_record):
        marked = mark_weekends(june_record, "Jun", 2024, code="O")
        assert marked.summary.total_off == 5

    def test_mark_holidays(self):
        record = create_employee("QR-417", "Asha Verma", "Jan", 2024)
        marked = mark_holidays(record, "Jan", 2024)
        assert marked.attendance == {1: C.H, 26: C.H}
        assert marked.summary.total_holidays == 2

    def test_mark_holidays_custom_calendar(self, june_record):
        marked = mark_holidays(june_record, "Jun", 2024, holidays=HolidayCalendar({"Jun": [17]}))
        assert marked.attendance == {17: C.H}

    def test_blank_fill_code_marks_nothing(self, june_record):
        assert mark_weekends(june_record, "Jun", 2024, code="").attendance == {}

    def test_days_beyond_record_month_dropped(self):
        # Sundays of Mar 2024 are 3, 10, 17, 24 and 31
        feb_record = create_employee("QR-417", "Asha Verma", "Feb", 2024)
        marked = mark_weekends(feb_record, "Mar", 2024)
        assert marked.attendance == {3: C.S, 10: C.S, 17: C.S, 24: C.S}
        assert marked.monthly_data["Feb"].attendance == marked.attendance

    def test_holidays_beyond_record_month_dropped(self):
        feb_record = create_employee("QR-417", "Asha Verma", "Feb", 2023)
        calendar = HolidayCalendar({"Mar": [21, 30]})
        marked = mark_holidays(feb_record, "Mar", 2023, holidays=calendar)
        assert marked.attendance == {21: C.H}


class TestClearAttendance:
    """Tests for clear_attendance."""

    def test_clears(self, june_record):
        record = bulk_set(june_record, {3: "P", 4: "A"})
        cleared = clear_attendance(record)
        assert cleared.attendance == {}
        assert cleared.summary == EmployeeSummary()
        assert cleared.monthly_data["Jun"].attendance == {}
        assert record.attendance == {3: C.P, 4: C.A}


class TestSwitchMonth:
    """Tests for switch_month and per-month history."""

    def test_switch_and_back(self, june_record):
        june = bulk_set(june_record, {3: "P", 4: "P"})
        july = switch_month(june, "Jul", 2024)
        assert july.month is Month.JUL
        assert july.attendance == {}
        assert july.summary == EmployeeSummary()
        assert july.monthly_data["Jun"].attendance == {3: C.P, 4: C.P}

        back = switch_month(set_day(july, 1, "A"), Month.JUN, 2024)
        assert back.attendance == {3: C.P, 4: C.P}
        assert back.summary.total_present == 2
        assert back.monthly_data["Jul"].attendance == {1: C.A}

    def test_rederives_for_new_year(self):
        record = create_employee("QR-417", "Asha Verma", "Jun", 2024)
        record = set_day(record, 2, "P")   # Sunday in 2024
        moved = switch_month(switch_month(record, "Jul", 2024), "Jun", 2023)
        # 2 Jun 2023 was a Friday
        assert moved.attendance == {2: C.P}
        assert moved.summary.total_holy_day_working == 0

    def test_unknown_month(self, june_record):
        with pytest.raises(ValueError):
            switch_month(june_record, "Xyz", 2024)
