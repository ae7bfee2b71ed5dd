"""
Roster Module

Ordered collection of employee records for the active month. The roster is
the single owner and writer of its records: every edit builds a new record
through the record mutators and replaces the old one by employee ID.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from . import record_mutators as mutators
from .attendance_codes import AttendanceCode, normalize
from .calendar_helper import HolidayCalendar, Month, MonthLike, days_in_month
from .entities import (
    SUMMARY_COLUMNS, DayAttendance, EmployeeRecord, EmployeeSummary, MonthlyData, parse_day
)
from .errors import DuplicateEmployeeError, EmployeeNotFoundError, EmployeeValidationError
from .summary_engine import calculate_summary
from .validation import validate_employee
from infrastructure.logger import get_logger

logger = get_logger("Roster")

SNAPSHOT_VERSION = "1.0"

# Profile fields that may be edited directly; attendance goes through mutators
EDITABLE_FIELDS = frozenset({
    "emp_id", "employee_name", "department", "designation",
    "joining_date", "email", "phone",
})

EXPORT_HEADERS: List[Any] = (
    ["Sl#", "Emp ID", "Employee Name", "Month"]
    + list(range(1, 32))
    + [label for _, label in SUMMARY_COLUMNS]
)


# ==============================================================================
# Import Boundary Types
# ==============================================================================
@dataclass
class ImportedMonth:
    """One month of a parsed file row: raw codes and the optional stored summary."""
    attendance: Dict[int, Any] = field(default_factory=dict)
    summary: Optional[EmployeeSummary] = None


@dataclass
class ImportedEmployee:
    """An employee as read from a file, possibly spanning several months."""
    emp_id: str
    employee_name: str
    months: Dict[str, ImportedMonth] = field(default_factory=dict)


@dataclass
class SummaryMismatch:
    """A stored summary that differs from the freshly derived one."""
    emp_id: str
    month: str
    fields: List[str]


# ==============================================================================
# Roster Class
# ==============================================================================
class Roster:
    """
    Ordered, ID-unique employee records for one month.

    ``sl_no`` is positional: 1-based and dense, recomputed after deletions.
    """

    def __init__(
        self,
        month: MonthLike = Month.JAN,
        year: int = 2024,
        holidays: Optional[HolidayCalendar] = None,
        employees: Optional[Iterable[EmployeeRecord]] = None
    ):
        self.month: Month = Month.parse(month) or Month.JAN
        self.year = year
        self.holidays = holidays
        self._employees: List[EmployeeRecord] = []
        self.summary_mismatches: List[SummaryMismatch] = []

        for record in employees or []:
            if self.get(record.emp_id) is not None:
                raise DuplicateEmployeeError(record.emp_id)
            self._employees.append(record)
        self._renumber()

    # --------------------------------------------------------------------------
    # Access
    # --------------------------------------------------------------------------
    @property
    def employees(self) -> List[EmployeeRecord]:
        """Snapshot of the records in roster order."""
        return list(self._employees)

    @property
    def employee_ids(self) -> List[str]:
        return [e.emp_id for e in self._employees]

    def __len__(self) -> int:
        return len(self._employees)

    def __iter__(self) -> Iterator[EmployeeRecord]:
        return iter(list(self._employees))

    def get(self, emp_id: str) -> Optional[EmployeeRecord]:
        """Find employee by ID."""
        for employee in self._employees:
            if employee.emp_id == emp_id:
                return employee
        return None

    def _require(self, emp_id: str) -> EmployeeRecord:
        employee = self.get(emp_id)
        if employee is None:
            raise EmployeeNotFoundError(emp_id)
        return employee

    def _replace(self, emp_id: str, record: EmployeeRecord) -> EmployeeRecord:
        for index, employee in enumerate(self._employees):
            if employee.emp_id == emp_id:
                self._employees[index] = record
                return record
        raise EmployeeNotFoundError(emp_id)

    def _renumber(self) -> None:
        self._employees = [
            e if e.sl_no == index else replace(e, sl_no=index)
            for index, e in enumerate(self._employees, start=1)
        ]

    # --------------------------------------------------------------------------
    # Membership
    # --------------------------------------------------------------------------
    def add_employee(self, emp_id: str, employee_name: str, **details: Any) -> EmployeeRecord:
        """
        Validate and append a new employee with an empty sheet.

        Raises:
            EmployeeValidationError: With every validation message; the roster
                is left unchanged
        """
        unknown = set(details) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown employee fields: {sorted(unknown)}")

        fields = dict(details, emp_id=emp_id, employee_name=employee_name)
        errors = validate_employee(fields, self.employee_ids)
        if errors:
            raise EmployeeValidationError(errors)

        record = mutators.create_employee(
            emp_id, employee_name, self.month, self.year,
            sl_no=len(self._employees) + 1, **details
        )
        self._employees.append(record)
        logger.info(f"Added employee {emp_id} ({employee_name})")
        return record

    def update_details(self, emp_id: str, **changes: Any) -> EmployeeRecord:
        """
        Edit profile fields of an employee.

        Raises:
            EmployeeNotFoundError: If ``emp_id`` is not in the roster
            EmployeeValidationError: If the edited fields are invalid
            ValueError: If a non-editable field is passed
        """
        current = self._require(emp_id)
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be edited directly: {sorted(unknown)}")

        updated = replace(current, **changes)
        others = [i for i in self.employee_ids if i != emp_id]
        errors = validate_employee(updated, others)
        if errors:
            raise EmployeeValidationError(errors)
        return self._replace(emp_id, updated)

    def delete_employee(self, emp_id: str) -> None:
        """Remove an employee and renumber. Unknown IDs are ignored."""
        self.delete_employees([emp_id])

    def delete_employees(self, emp_ids: Iterable[str]) -> None:
        """Remove several employees and renumber the rest densely from 1."""
        doomed = set(emp_ids)
        before = len(self._employees)
        self._employees = [e for e in self._employees if e.emp_id not in doomed]
        self._renumber()
        logger.info(f"Deleted {before - len(self._employees)} employee(s)")

    def clear(self) -> None:
        """Remove every employee."""
        self._employees = []

    # --------------------------------------------------------------------------
    # Attendance Edits
    # --------------------------------------------------------------------------
    def update_attendance(self, emp_id: str, day: int, code: Any) -> EmployeeRecord:
        """Set one cell. A blank code clears the day."""
        record = mutators.set_day(self._require(emp_id), day, code, self.holidays)
        return self._replace(emp_id, record)

    def bulk_update(self, updates: Mapping[str, Mapping[Any, Any]]) -> None:
        """
        Apply ``{emp_id: {day: code}}`` edits, one derivation per employee.
        IDs not in the roster are skipped.
        """
        for emp_id, day_codes in updates.items():
            current = self.get(emp_id)
            if current is None:
                logger.warning(f"Bulk update skipped unknown employee {emp_id}")
                continue
            self._replace(emp_id, mutators.bulk_set(current, day_codes, self.holidays))

    def mark_weekends(
        self,
        emp_ids: Optional[Iterable[str]] = None,
        code: Any = AttendanceCode.S
    ) -> None:
        """Fill unmarked Sundays for the given employees (default: everyone)."""
        for employee in self._select(emp_ids):
            self._replace(employee.emp_id, mutators.mark_weekends(
                employee, self.month, self.year, code, self.holidays
            ))

    def mark_holidays(
        self,
        emp_ids: Optional[Iterable[str]] = None,
        code: Any = AttendanceCode.H
    ) -> None:
        """Fill unmarked listed holidays for the given employees (default: everyone)."""
        for employee in self._select(emp_ids):
            self._replace(employee.emp_id, mutators.mark_holidays(
                employee, self.month, self.year, code, self.holidays
            ))

    def clear_attendance(self, emp_id: str) -> EmployeeRecord:
        return self._replace(emp_id, mutators.clear_attendance(self._require(emp_id)))

    def change_month_year(self, month: MonthLike, year: int) -> None:
        """Switch every employee to another month, keeping per-month history."""
        target = Month.parse(month)
        if target is None:
            raise ValueError(f"Unknown month: {month!r}")

        self._employees = [
            mutators.switch_month(e, target, year, self.holidays)
            for e in self._employees
        ]
        self.month = target
        self.year = year
        logger.info(f"Active month changed to {target.code} {year}")

    def _select(self, emp_ids: Optional[Iterable[str]]) -> List[EmployeeRecord]:
        if emp_ids is None:
            return list(self._employees)
        return [self._require(emp_id) for emp_id in emp_ids]

    # --------------------------------------------------------------------------
    # Export Boundary
    # --------------------------------------------------------------------------
    def export_rows(self) -> List[List[Any]]:
        """
        One ordered row per employee: Sl#, ID, name, month, days 1..31
        (blank past month end or when unmarked), then the ten counters.
        """
        num_days = days_in_month(self.month, self.year)
        rows = []
        for employee in self._employees:
            row: List[Any] = [
                employee.sl_no,
                employee.emp_id,
                employee.employee_name,
                employee.month.code,
            ]
            for day in range(1, 32):
                code = employee.attendance.get(day) if day <= num_days else None
                row.append(code.value if code else "")
            row.extend(employee.summary.as_row())
            rows.append(row)
        return rows

    # --------------------------------------------------------------------------
    # Persistence Boundary
    # --------------------------------------------------------------------------
    def to_snapshot(self, saved_at: Optional[datetime] = None) -> Dict[str, Any]:
        """Plain JSON-compatible snapshot of the roster."""
        return {
            "employees": [e.to_dict() for e in self._employees],
            "month": self.month.code,
            "year": self.year,
            "timestamp": (saved_at or datetime.now()).isoformat(),
            "version": SNAPSHOT_VERSION,
        }

    @classmethod
    def from_snapshot(
        cls,
        data: Mapping[str, Any],
        holidays: Optional[HolidayCalendar] = None
    ) -> "Roster":
        """
        Rebuild a roster from ``to_snapshot`` output.

        Summaries are re-derived from the stored attendance so a hand-edited
        snapshot cannot carry a stale summary into the roster.
        """
        version = data.get("version")
        if version != SNAPSHOT_VERSION:
            logger.warning(f"Snapshot version {version!r} differs from {SNAPSHOT_VERSION}")

        month = Month.parse(data.get("month")) or Month.JAN
        year = int(data.get("year") or 2024)
        employees = []
        for item in data.get("employees") or []:
            record = EmployeeRecord.from_dict(item)
            summary = calculate_summary(record.attendance, record.month, record.year, holidays)
            history = dict(record.monthly_data)
            history[record.month.code] = MonthlyData(dict(record.attendance), summary)
            employees.append(replace(record, summary=summary, monthly_data=history))

        return cls(month=month, year=year, holidays=holidays, employees=employees)

    # --------------------------------------------------------------------------
    # Import Boundary
    # --------------------------------------------------------------------------
    @classmethod
    def from_imported(
        cls,
        imported: Iterable[ImportedEmployee],
        month: MonthLike,
        year: int,
        holidays: Optional[HolidayCalendar] = None
    ) -> "Roster":
        """
        Build a roster from parsed file rows.

        Every code is normalized, every month's summary re-derived and compared
        with the stored one (mismatches are logged and kept in
        ``summary_mismatches``; the derived summary wins). The requested month
        becomes active; employees without data for it get an empty sheet.
        """
        active = Month.parse(month) or Month.JAN
        roster = cls(month=active, year=year, holidays=holidays)

        for item in imported:
            if roster.get(item.emp_id) is not None:
                logger.warning(f"Duplicate employee {item.emp_id} in import, keeping first")
                continue

            errors = validate_employee(
                {"emp_id": item.emp_id, "employee_name": item.employee_name}
            )
            if errors:
                logger.warning(f"Imported employee {item.emp_id}: {', '.join(errors)}")

            history: Dict[str, MonthlyData] = {}
            for month_key, data in item.months.items():
                data_month = Month.parse(month_key)
                if data_month is None:
                    logger.warning(f"{item.emp_id}: skipping unknown month {month_key!r}")
                    continue
                attendance = _normalize_attendance(data.attendance, data_month, year)
                summary = calculate_summary(attendance, data_month, year, holidays)
                if data.summary is not None:
                    roster._check_summary(item.emp_id, data_month, summary, data.summary)
                history[data_month.code] = MonthlyData(attendance, summary)

            current = history.get(active.code) or MonthlyData(
                {}, calculate_summary({}, active, year, holidays)
            )
            roster._employees.append(EmployeeRecord(
                emp_id=item.emp_id,
                employee_name=item.employee_name,
                month=active,
                year=year,
                attendance=dict(current.attendance),
                summary=current.summary,
                monthly_data=history,
            ))

        roster._renumber()
        logger.info(f"Imported {len(roster)} employee(s) for {active.code} {year}")
        return roster

    def _check_summary(
        self,
        emp_id: str,
        month: Month,
        derived: EmployeeSummary,
        stored: EmployeeSummary
    ) -> None:
        differing = summary_differences(derived, stored)
        if differing:
            logger.warning(
                f"{emp_id} {month.code}: stored summary differs from derived "
                f"in {', '.join(differing)}; using derived values"
            )
            self.summary_mismatches.append(SummaryMismatch(emp_id, month.code, differing))


def summary_differences(derived: EmployeeSummary, stored: EmployeeSummary) -> List[str]:
    """Names of counters that differ between two summaries."""
    derived_values = derived.to_dict()
    stored_values = stored.to_dict()
    return [name for name in derived_values if derived_values[name] != stored_values[name]]


def _normalize_attendance(raw: Mapping[Any, Any], month: Month, year: int) -> DayAttendance:
    """Normalize raw codes, keeping only recognized codes on days of the month."""
    num_days = days_in_month(month, year)
    attendance: DayAttendance = {}
    for key, value in raw.items():
        day = parse_day(key)
        code = normalize(value)
        if code.is_set and day is not None and 1 <= day <= num_days:
            attendance[day] = code
    return attendance
