"""
Roster Analytics Module

Cross-employee statistics and per-employee analysis: daily headcount,
absence runs and patterns, day-by-day trend, text report and month
comparison. All functions are pure; "today" is an explicit ``as_of`` date.
"""

import math
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, date
from typing import Any, Iterable, List, Mapping, Optional

from .attendance_codes import AttendanceCode, PRESENT_CODES, REST_DAY_CODES
from .calendar_helper import Month, MonthLike, days_in_month, weekday_of
from .entities import (
    DayAttendance, EmployeeRecord, EmployeeSummary, RateColorTier, attendance_from_dict
)


DEFAULT_WORKING_DAYS = 22
CRITICAL_THRESHOLD = 75
EXCELLENT_THRESHOLD = 95
HIGH_ABSENTEEISM_DAYS = 5

REPORT_RULE = "─" * 37


# ==============================================================================
# Result Types
# ==============================================================================
@dataclass
class MonthlyStatistics:
    """Roster headcount for one day plus month-level attendance figures."""
    total_strength: int = 0
    present_today: int = 0
    absent_today: int = 0
    on_leave_today: int = 0
    average_attendance: float = 0.0
    perfect_attendance_count: int = 0
    critical_attendance_count: int = 0


@dataclass
class AbsenceRun:
    """A closed run of consecutive absences."""
    start: int
    end: int
    count: int


@dataclass
class ConsecutiveAbsences:
    max_consecutive: int = 0
    total_instances: int = 0
    instances: List[AbsenceRun] = field(default_factory=list)


@dataclass
class AttendancePatterns:
    """Absences that fall on suspicious days."""
    monday_absences: int = 0
    friday_absences: int = 0
    after_holiday_absences: int = 0
    before_holiday_absences: int = 0


@dataclass
class TrendPoint:
    day: int
    code: AttendanceCode
    is_present: bool
    is_absent: bool
    is_leave: bool
    is_weekend: bool
    is_holiday: bool


@dataclass
class MonthComparison:
    present_diff: int
    absent_diff: int
    leave_diff: int
    improvement_percentage: float


@dataclass
class AttendanceStatistics:
    """Roster-wide averages of the summary counters."""
    total_employees: int = 0
    average_present: int = 0
    average_absent: int = 0
    average_leave: int = 0
    perfect_attendance: int = 0
    high_absenteeism: int = 0


@dataclass
class RangeSummary:
    """Code counts over a span of days. Night shift also counts as present."""
    present: int = 0
    absent: int = 0
    leave: int = 0
    off: int = 0
    holiday: int = 0
    sunday: int = 0
    night_shift: int = 0
    total: int = 0


# ==============================================================================
# Percentages
# ==============================================================================
def attendance_percentage(present: float, total: float) -> float:
    """
    Attendance percentage with 2 decimals.

    Returns:
        0 when ``total`` is zero, else present / total * 100
    """
    if not total:
        return 0
    return round(present / total * 100, 2)


def rate_tier(
    percentage: float,
    critical: float = CRITICAL_THRESHOLD,
    excellent: float = EXCELLENT_THRESHOLD
) -> RateColorTier:
    """Color tier for an attendance percentage."""
    if percentage < critical:
        return RateColorTier.RED
    elif percentage < excellent:
        return RateColorTier.YELLOW
    else:
        return RateColorTier.GREEN


def is_perfect_attendance(summary: EmployeeSummary) -> bool:
    return summary.total_absent == 0 and summary.total_on_leave == 0


# ==============================================================================
# Roster Aggregates
# ==============================================================================
def monthly_statistics(
    employees: Iterable[EmployeeRecord],
    as_of: date,
    default_working_days: int = DEFAULT_WORKING_DAYS,
    critical_threshold: float = CRITICAL_THRESHOLD
) -> MonthlyStatistics:
    """
    Calculate roster statistics.

    Today's headcount reads each employee's code for ``as_of.day`` directly.
    Per-employee percentage is present / working days, falling back to
    ``default_working_days`` when an employee has no working days.

    Args:
        employees: Roster records
        as_of: Date whose day-of-month counts as "today"
        default_working_days: Divisor for employees with zero working days
        critical_threshold: Percentage below which attendance is critical

    Returns:
        MonthlyStatistics
    """
    employees = list(employees)
    if not employees:
        return MonthlyStatistics()

    stats = MonthlyStatistics(total_strength=len(employees))
    total_percentage = 0.0

    for employee in employees:
        today_code = _code_at(employee.attendance, as_of.day)
        if today_code in PRESENT_CODES:
            stats.present_today += 1
        elif today_code is AttendanceCode.A:
            stats.absent_today += 1
        elif today_code is AttendanceCode.L:
            stats.on_leave_today += 1

        summary = employee.summary
        working_days = summary.total_working_days or default_working_days
        percentage = attendance_percentage(summary.total_present, working_days)
        total_percentage += percentage

        if is_perfect_attendance(summary):
            stats.perfect_attendance_count += 1
        if percentage < critical_threshold:
            stats.critical_attendance_count += 1

    stats.average_attendance = round(total_percentage / len(employees), 2)
    return stats


def attendance_statistics(
    employees: Iterable[EmployeeRecord],
    high_absenteeism_days: int = HIGH_ABSENTEEISM_DAYS
) -> AttendanceStatistics:
    """Average present/absent/leave counts (half-up rounded) and flag counts."""
    employees = list(employees)
    stats = AttendanceStatistics(total_employees=len(employees))
    if not employees:
        return stats

    total_present = total_absent = total_leave = 0
    for employee in employees:
        summary = employee.summary
        total_present += summary.total_present
        total_absent += summary.total_absent
        total_leave += summary.total_on_leave

        if is_perfect_attendance(summary):
            stats.perfect_attendance += 1
        if summary.total_absent > high_absenteeism_days:
            stats.high_absenteeism += 1

    count = len(employees)
    stats.average_present = _round_half_up(total_present / count)
    stats.average_absent = _round_half_up(total_absent / count)
    stats.average_leave = _round_half_up(total_leave / count)
    return stats


# ==============================================================================
# Per-Employee Analysis
# ==============================================================================
def consecutive_absences(attendance: Mapping[Any, Any]) -> ConsecutiveAbsences:
    """
    Find runs of absences over the marked days in ascending order.

    A run closes when the next marked day is not an absence or when the
    marked days run out. Unmarked days between two absences do not break
    a run.
    """
    codes = attendance_from_dict(attendance)
    days = sorted(codes)
    result = ConsecutiveAbsences()

    run_start: Optional[int] = None
    run_count = 0

    for index, day in enumerate(days):
        if codes[day] is not AttendanceCode.A:
            run_start, run_count = None, 0
            continue

        if run_start is None:
            run_start = day
        run_count += 1

        is_last = index == len(days) - 1
        if is_last or codes[days[index + 1]] is not AttendanceCode.A:
            result.instances.append(AbsenceRun(start=run_start, end=day, count=run_count))
            result.max_consecutive = max(result.max_consecutive, run_count)
            result.total_instances += 1
            run_start, run_count = None, 0

    return result


def attendance_patterns(
    attendance: Mapping[Any, Any],
    month: MonthLike,
    year: int
) -> AttendancePatterns:
    """
    Count absences on Mondays, Fridays and next to holidays/Sundays.

    A neighbour counts only when it is coded H or S; days at the month
    boundary have no neighbour on that side. Monday/Friday counts stay
    zero for an unknown month or a year outside the calendar range.
    """
    codes = attendance_from_dict(attendance)
    patterns = AttendancePatterns()
    has_weekdays = Month.parse(month) is not None and MINYEAR <= year <= MAXYEAR

    for day in range(1, days_in_month(month, year) + 1):
        if codes.get(day) is not AttendanceCode.A:
            continue

        if has_weekdays:
            weekday = weekday_of(day, month, year)
            if weekday == 1:
                patterns.monday_absences += 1
            if weekday == 5:
                patterns.friday_absences += 1

        if codes.get(day - 1) in REST_DAY_CODES:
            patterns.after_holiday_absences += 1
        if codes.get(day + 1) in REST_DAY_CODES:
            patterns.before_holiday_absences += 1

    return patterns


def attendance_trend(
    attendance: Mapping[Any, Any],
    month: MonthLike,
    year: int
) -> List[TrendPoint]:
    """One TrendPoint per day of the month, unmarked days included."""
    codes = attendance_from_dict(attendance)
    trend = []
    for day in range(1, days_in_month(month, year) + 1):
        code = codes.get(day, AttendanceCode.UNSET)
        trend.append(TrendPoint(
            day=day,
            code=code,
            is_present=code in PRESENT_CODES,
            is_absent=code is AttendanceCode.A,
            is_leave=code is AttendanceCode.L,
            is_weekend=code is AttendanceCode.S,
            is_holiday=code is AttendanceCode.H,
        ))
    return trend


def date_range_summary(
    attendance: Mapping[Any, Any],
    start_day: int,
    end_day: int
) -> RangeSummary:
    """Count codes for days ``start_day..end_day`` inclusive."""
    codes = attendance_from_dict(attendance)
    summary = RangeSummary()

    for day in range(start_day, end_day + 1):
        code = codes.get(day)
        if code is None:
            continue
        summary.total += 1

        if code in (AttendanceCode.P, AttendanceCode.WFH):
            summary.present += 1
        elif code is AttendanceCode.A:
            summary.absent += 1
        elif code is AttendanceCode.L:
            summary.leave += 1
        elif code is AttendanceCode.O:
            summary.off += 1
        elif code is AttendanceCode.H:
            summary.holiday += 1
        elif code is AttendanceCode.S:
            summary.sunday += 1
        elif code is AttendanceCode.N:
            summary.night_shift += 1
            summary.present += 1

    return summary


def weekly_summary(attendance: Mapping[Any, Any], week_number: int) -> RangeSummary:
    """Summary for week 1-5, where week n covers days 7n-6 to 7n (capped at 31)."""
    start_day = (week_number - 1) * 7 + 1
    end_day = min(week_number * 7, 31)
    return date_range_summary(attendance, start_day, end_day)


def compare_monthly_attendance(
    current: EmployeeSummary,
    previous: EmployeeSummary
) -> MonthComparison:
    """
    Compare two months' summaries.

    ``improvement_percentage`` is the present-day delta expressed as a
    percentage of the current month's working days, not a rate of change.
    """
    present_diff = current.total_present - previous.total_present
    return MonthComparison(
        present_diff=present_diff,
        absent_diff=current.total_absent - previous.total_absent,
        leave_diff=current.total_on_leave - previous.total_on_leave,
        improvement_percentage=attendance_percentage(
            present_diff, current.total_working_days
        ),
    )


# ==============================================================================
# Text Report
# ==============================================================================
def generate_report(
    employee: EmployeeRecord,
    month: MonthLike,
    year: int,
    excellent_threshold: float = EXCELLENT_THRESHOLD,
    critical_threshold: float = CRITICAL_THRESHOLD
) -> str:
    """
    Build the plain-text attendance report for one employee.

    Sections in order: header, summary, optional night-shift and
    holiday-working lines, absence patterns (only when there are
    absences), closing remark.
    """
    summary = employee.summary
    percentage = attendance_percentage(summary.total_present, summary.total_working_days)
    absences = consecutive_absences(employee.attendance)
    patterns = attendance_patterns(employee.attendance, month, year)
    resolved = Month.parse(month)
    month_label = resolved.code if resolved else str(month)

    lines = [
        f"Attendance Report for {employee.employee_name} ({employee.emp_id})",
        f"Month: {month_label} {year}",
        REPORT_RULE,
        "",
        "Summary:",
        f"• Total Present: {summary.total_present} days",
        f"• Total Absent: {summary.total_absent} days",
        f"• Total Leave: {summary.total_on_leave} days",
        f"• Attendance Percentage: {_format_number(percentage)}%",
        "",
    ]

    if summary.total_night_shift > 0:
        lines.append(f"• Night Shifts: {summary.total_night_shift} days")
    if summary.total_holy_day_working > 0:
        lines.append(f"• Holiday Working: {summary.total_holy_day_working} days")

    if absences.max_consecutive > 0:
        lines.append("")
        lines.append("Absence Patterns:")
        lines.append(f"• Maximum Consecutive Absences: {absences.max_consecutive} days")
        if patterns.monday_absences > 0 or patterns.friday_absences > 0:
            lines.append(f"• Monday Absences: {patterns.monday_absences}")
            lines.append(f"• Friday Absences: {patterns.friday_absences}")

    report = "\n".join(lines) + "\n"

    if percentage >= excellent_threshold:
        report += "\n✓ Excellent Attendance Record"
    elif percentage < critical_threshold:
        report += "\n⚠ Attendance Below Required Threshold"

    return report


def _code_at(attendance: Mapping[Any, Any], day: int) -> AttendanceCode:
    return attendance_from_dict(attendance).get(day, AttendanceCode.UNSET)


def _format_number(value: float) -> str:
    """95.0 -> '95', 95.5 -> '95.5'."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
