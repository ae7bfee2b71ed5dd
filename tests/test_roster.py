"""
Unit tests for the Roster aggregate.
"""

import pytest
from datetime import datetime
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.attendance_codes import AttendanceCode as C
from domain.calendar_helper import HolidayCalendar, Month
from domain.entities import EmployeeSummary
from domain.errors import (
    DuplicateEmployeeError, EmployeeNotFoundError, EmployeeValidationError
)
from domain.record_mutators import create_employee
from domain.roster import (
    EXPORT_HEADERS, SNAPSHOT_VERSION, ImportedEmployee, ImportedMonth, Roster,
    summary_differences
)


@pytest.fixture
def roster():
    r = Roster(Month.JUN, 2024)
    r.add_employee("QR-001", "Asha Verma")
    r.add_employee("QR-002", "Ben Okafor", department="Ops")
    r.add_employee("QR-003", "Chen Wei")
    return r


class TestMembership:
    """Tests for adding, editing and deleting employees."""

    def test_add_numbers_densely(self, roster):
        assert roster.employee_ids == ["QR-001", "QR-002", "QR-003"]
        assert [e.sl_no for e in roster] == [1, 2, 3]
        assert roster.get("QR-002").department == "Ops"
        assert roster.get("QR-002").month is Month.JUN

    def test_add_invalid_raises_with_messages(self, roster):
        with pytest.raises(EmployeeValidationError) as exc_info:
            roster.add_employee("bad", "Al")
        assert exc_info.value.errors == [
            "Employee ID must be in format like QR-417",
            "Employee name must be at least 3 characters",
        ]
        assert len(roster) == 3

    def test_add_duplicate(self, roster):
        with pytest.raises(EmployeeValidationError) as exc_info:
            roster.add_employee("QR-001", "Someone Else")
        assert "Employee ID already exists" in exc_info.value.errors
        assert len(roster) == 3

    def test_add_unknown_field(self, roster):
        with pytest.raises(ValueError):
            roster.add_employee("QR-004", "Dana Scully", salary=10)

    def test_constructor_rejects_duplicates(self):
        records = [create_employee("QR-001", "Asha Verma"), create_employee("QR-001", "Asha Verma")]
        with pytest.raises(DuplicateEmployeeError):
            Roster(employees=records)

    def test_update_details(self, roster):
        updated = roster.update_details("QR-002", employee_name="Ben O. Okafor", email="ben@example.com")
        assert updated.employee_name == "Ben O. Okafor"
        assert roster.get("QR-002").email == "ben@example.com"

    def test_update_details_invalid(self, roster):
        with pytest.raises(EmployeeValidationError):
            roster.update_details("QR-002", email="not-an-email")
        assert roster.get("QR-002").email == ""

    def test_update_details_to_existing_id(self, roster):
        with pytest.raises(EmployeeValidationError):
            roster.update_details("QR-002", emp_id="QR-001")

    def test_update_details_rejects_attendance(self, roster):
        with pytest.raises(ValueError):
            roster.update_details("QR-002", sl_no=9)

    def test_update_details_unknown_employee(self, roster):
        with pytest.raises(EmployeeNotFoundError):
            roster.update_details("QR-999", employee_name="Nobody Here")

    def test_delete_renumbers(self, roster):
        roster.delete_employee("QR-002")
        assert roster.employee_ids == ["QR-001", "QR-003"]
        assert [e.sl_no for e in roster] == [1, 2]

    def test_delete_many(self, roster):
        roster.delete_employees(["QR-001", "QR-003", "QR-999"])
        assert roster.employee_ids == ["QR-002"]
        assert roster.get("QR-002").sl_no == 1

    def test_clear(self, roster):
        roster.clear()
        assert len(roster) == 0


class TestAttendanceEdits:
    """Tests for attendance edits through the roster."""

    def test_update_attendance(self, roster):
        roster.update_attendance("QR-001", 3, "P")
        record = roster.get("QR-001")
        assert record.attendance == {3: C.P}
        assert record.summary.total_present == 1

    def test_update_attendance_unknown_employee(self, roster):
        with pytest.raises(EmployeeNotFoundError):
            roster.update_attendance("QR-999", 3, "P")

    def test_bulk_update_skips_unknown(self, roster):
        roster.bulk_update({
            "QR-001": {3: "P", 4: "A"},
            "QR-999": {3: "P"},
            "QR-003": {5: "L"},
        })
        assert roster.get("QR-001").summary.total_absent == 1
        assert roster.get("QR-003").summary.total_on_leave == 1
        assert len(roster) == 3

    def test_mark_weekends_everyone(self, roster):
        roster.mark_weekends()
        assert all(e.summary.total_sundays == 5 for e in roster)

    def test_mark_weekends_selected(self, roster):
        roster.mark_weekends(["QR-002"])
        assert roster.get("QR-002").summary.total_sundays == 5
        assert roster.get("QR-001").summary.total_sundays == 0

    def test_mark_holidays_uses_roster_calendar(self):
        roster = Roster(Month.JUN, 2024, holidays=HolidayCalendar({"Jun": [17]}))
        roster.add_employee("QR-001", "Asha Verma")
        roster.mark_holidays()
        assert roster.get("QR-001").attendance == {17: C.H}

    def test_clear_attendance(self, roster):
        roster.update_attendance("QR-001", 3, "P")
        roster.clear_attendance("QR-001")
        assert roster.get("QR-001").summary == EmployeeSummary()

    def test_change_month_year(self, roster):
        roster.update_attendance("QR-001", 3, "P")
        roster.change_month_year("Jul", 2024)
        assert roster.month is Month.JUL
        assert all(e.month is Month.JUL for e in roster)
        assert roster.get("QR-001").attendance == {}

        roster.change_month_year(Month.JUN, 2024)
        assert roster.get("QR-001").attendance == {3: C.P}

    def test_change_month_unknown(self, roster):
        with pytest.raises(ValueError):
            roster.change_month_year("Xyz", 2024)
        assert roster.month is Month.JUN


class TestExportRows:
    """Tests for export row shaping."""

    def test_headers(self):
        assert EXPORT_HEADERS[:4] == ["Sl#", "Emp ID", "Employee Name", "Month"]
        assert EXPORT_HEADERS[4] == 1
        assert EXPORT_HEADERS[34] == 31
        assert EXPORT_HEADERS[35] == "Total Present"
        assert EXPORT_HEADERS[-1] == "Total Working Days in this Month"
        assert len(EXPORT_HEADERS) == 45

    def test_rows(self):
        roster = Roster(Month.FEB, 2023)
        roster.add_employee("QR-001", "Asha Verma")
        roster.bulk_update({"QR-001": {1: "P", 2: "wfh"}})

        (row,) = roster.export_rows()
        assert len(row) == 45
        assert row[:4] == [1, "QR-001", "Asha Verma", "Feb"]
        assert row[4] == "P"
        assert row[5] == "WFH"
        assert row[6] == ""
        assert row[32:35] == ["", "", ""]
        assert row[35] == 2
        assert row[-1] == 2


class TestSnapshot:
    """Tests for snapshot serialization."""

    def test_round_trip(self, roster):
        roster.update_attendance("QR-001", 3, "P")
        saved_at = datetime(2024, 6, 30, 18, 0, 0)
        data = roster.to_snapshot(saved_at)

        assert data["month"] == "Jun"
        assert data["year"] == 2024
        assert data["version"] == SNAPSHOT_VERSION
        assert data["timestamp"] == "2024-06-30T18:00:00"
        assert data["employees"][0]["attendance"] == {"3": "P"}

        restored = Roster.from_snapshot(data)
        assert restored.month is Month.JUN
        assert restored.employee_ids == roster.employee_ids
        assert restored.get("QR-001").attendance == {3: C.P}
        assert restored.get("QR-002").department == "Ops"

    def test_stale_summary_rederived(self, roster):
        roster.update_attendance("QR-001", 3, "P")
        data = roster.to_snapshot()
        data["employees"][0]["summary"]["total_present"] = 17

        restored = Roster.from_snapshot(data)
        assert restored.get("QR-001").summary.total_present == 1

    def test_other_version_still_loads(self, roster):
        data = roster.to_snapshot()
        data["version"] = "0.9"
        assert len(Roster.from_snapshot(data)) == 3


class TestFromImported:
    """Tests for building a roster from parsed file rows."""

    def test_normalizes_and_rederives(self):
        imported = [
            ImportedEmployee("QR-001", "Asha Verma", {
                "Jun": ImportedMonth(
                    attendance={3: "p", 4: "X", 5: "wfh"},
                    summary=EmployeeSummary(total_present=2, total_working_days=2),
                ),
            }),
        ]
        roster = Roster.from_imported(imported, "Jun", 2024)

        record = roster.get("QR-001")
        assert record.attendance == {3: C.P, 5: C.WFH}
        assert record.summary.total_present == 2
        assert record.sl_no == 1
        assert roster.summary_mismatches == []

    def test_records_mismatch_and_uses_derived(self):
        imported = [
            ImportedEmployee("QR-001", "Asha Verma", {
                "Jun": ImportedMonth({3: "P"}, EmployeeSummary(total_present=5, total_working_days=1)),
            }),
        ]
        roster = Roster.from_imported(imported, "Jun", 2024)

        assert roster.get("QR-001").summary.total_present == 1
        (mismatch,) = roster.summary_mismatches
        assert mismatch.emp_id == "QR-001"
        assert mismatch.month == "Jun"
        assert mismatch.fields == ["total_present"]

    def test_keeps_other_months_as_history(self):
        imported = [
            ImportedEmployee("QR-001", "Asha Verma", {
                "May": ImportedMonth({2: "A"}),
                "Jun": ImportedMonth({3: "P"}),
                "Foo": ImportedMonth({1: "P"}),
            }),
        ]
        roster = Roster.from_imported(imported, "Jun", 2024)
        record = roster.get("QR-001")
        assert set(record.monthly_data) == {"May", "Jun"}
        assert record.monthly_data["May"].summary.total_absent == 1

    def test_missing_active_month_gives_empty_sheet(self):
        imported = [ImportedEmployee("QR-001", "Asha Verma", {"May": ImportedMonth({2: "A"})})]
        roster = Roster.from_imported(imported, "Jun", 2024)
        assert roster.get("QR-001").attendance == {}
        assert roster.get("QR-001").summary == EmployeeSummary()

    def test_duplicates_and_invalid_ids(self):
        imported = [
            ImportedEmployee("legacy7", "Old Format", {}),
            ImportedEmployee("QR-001", "Asha Verma", {}),
            ImportedEmployee("QR-001", "Asha Again", {}),
        ]
        roster = Roster.from_imported(imported, "Jun", 2024)
        assert roster.employee_ids == ["legacy7", "QR-001"]
        assert roster.get("QR-001").employee_name == "Asha Verma"


class TestSummaryDifferences:
    def test_differences(self):
        derived = EmployeeSummary(total_present=3, total_absent=1)
        stored = EmployeeSummary(total_present=3, total_absent=2, total_off=1)
        assert summary_differences(derived, stored) == ["total_off", "total_absent"]
