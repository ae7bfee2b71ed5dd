"""
Record Mutators Module

Pure transformations of an EmployeeRecord. Each returns a new record and
never touches its input. Every mutator ends in ``_rederive`` so a record's
summary always matches its attendance.
"""

from dataclasses import replace
from typing import Any, Dict, Mapping, Optional

from .attendance_codes import AttendanceCode, normalize
from .calendar_helper import (
    HolidayCalendar, Month, MonthLike, days_in_month, holidays_in_month, sundays_in_month
)
from .entities import DayAttendance, EmployeeRecord, EmployeeSummary, MonthlyData, parse_day
from .summary_engine import calculate_summary
from infrastructure.logger import get_logger

logger = get_logger("RecordMutators")


def create_employee(
    emp_id: str,
    employee_name: str,
    month: MonthLike = Month.JAN,
    year: int = 2024,
    **details: Any
) -> EmployeeRecord:
    """
    Create an employee with no attendance and an all-zero summary.

    Args:
        emp_id: Employee ID
        employee_name: Display name
        month: Active month
        year: Active year
        **details: Optional profile fields (sl_no, department, designation,
            joining_date, email, phone)
    """
    return EmployeeRecord(
        emp_id=emp_id,
        employee_name=employee_name,
        month=Month.parse(month) or Month.JAN,
        year=year,
        **details
    )


def set_day(
    record: EmployeeRecord,
    day: int,
    code: Any,
    holidays: Optional[HolidayCalendar] = None
) -> EmployeeRecord:
    """Set one day's code. A blank or unrecognized code removes the day."""
    return bulk_set(record, {day: code}, holidays=holidays)


def bulk_set(
    record: EmployeeRecord,
    updates: Mapping[Any, Any],
    holidays: Optional[HolidayCalendar] = None
) -> EmployeeRecord:
    """
    Apply many day edits, then derive the summary once.

    Args:
        record: Record to edit
        updates: Day -> raw code; blank or unrecognized codes remove the day
        holidays: Holiday calendar for derivation

    Returns:
        New EmployeeRecord
    """
    attendance = dict(record.attendance)
    num_days = days_in_month(record.month, record.year)

    for raw_day, raw_code in updates.items():
        day = parse_day(raw_day)
        if day is None:
            logger.warning(f"{record.emp_id}: ignoring edit for invalid day {raw_day!r}")
            continue
        if not 1 <= day <= num_days:
            logger.warning(
                f"{record.emp_id}: ignoring edit for day {day}, "
                f"{record.month.code} {record.year} has {num_days} days"
            )
            continue

        code = normalize(raw_code)
        if code.is_set:
            attendance[day] = code
        else:
            attendance.pop(day, None)

    return _rederive(record, attendance, holidays)


def mark_weekends(
    record: EmployeeRecord,
    month: MonthLike,
    year: int,
    code: Any = AttendanceCode.S,
    holidays: Optional[HolidayCalendar] = None
) -> EmployeeRecord:
    """Mark every Sunday of the month that has no code yet."""
    return _fill_unmarked(record, sundays_in_month(month, year), code, holidays)


def mark_holidays(
    record: EmployeeRecord,
    month: MonthLike,
    year: int,
    code: Any = AttendanceCode.H,
    holidays: Optional[HolidayCalendar] = None
) -> EmployeeRecord:
    """Mark every listed holiday of the month that has no code yet."""
    return _fill_unmarked(
        record, holidays_in_month(month, year, holidays), code, holidays
    )


def clear_attendance(record: EmployeeRecord) -> EmployeeRecord:
    """Remove all attendance and reset the summary to zero."""
    cleared = replace(
        record,
        attendance={},
        summary=EmployeeSummary(),
        monthly_data=dict(record.monthly_data),
    )
    cleared.monthly_data[record.month.code] = MonthlyData()
    return cleared


def switch_month(
    record: EmployeeRecord,
    month: MonthLike,
    year: int,
    holidays: Optional[HolidayCalendar] = None
) -> EmployeeRecord:
    """
    Make another month active.

    The current month is kept in ``monthly_data``; the target month's stored
    attendance is loaded (or an empty sheet) and its summary re-derived
    against the new month/year.
    """
    target = Month.parse(month)
    if target is None:
        raise ValueError(f"Unknown month: {month!r}")

    history: Dict[str, MonthlyData] = dict(record.monthly_data)
    history[record.month.code] = MonthlyData(
        attendance=dict(record.attendance),
        summary=record.summary,
    )
    stored = history.get(target.code)
    attendance = dict(stored.attendance) if stored else {}

    moved = replace(record, month=target, year=year, monthly_data=history)
    return _rederive(moved, attendance, holidays)


def _fill_unmarked(
    record: EmployeeRecord,
    days,
    code: Any,
    holidays: Optional[HolidayCalendar]
) -> EmployeeRecord:
    fill_code = normalize(code)
    attendance = dict(record.attendance)
    num_days = days_in_month(record.month, record.year)
    if fill_code.is_set:
        for day in days:
            if not 1 <= day <= num_days:
                logger.warning(
                    f"{record.emp_id}: not marking day {day}, "
                    f"{record.month.code} {record.year} has {num_days} days"
                )
                continue
            if day not in attendance:
                attendance[day] = fill_code
    return _rederive(record, attendance, holidays)


def _rederive(
    record: EmployeeRecord,
    attendance: DayAttendance,
    holidays: Optional[HolidayCalendar]
) -> EmployeeRecord:
    """New record with ``attendance``, its derived summary and updated month history."""
    summary = calculate_summary(attendance, record.month, record.year, holidays)
    history = dict(record.monthly_data)
    history[record.month.code] = MonthlyData(attendance=dict(attendance), summary=summary)
    return replace(record, attendance=attendance, summary=summary, monthly_data=history)
