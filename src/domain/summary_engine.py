"""
Summary Engine Module

Derives the ten monthly counters of an employee from a day -> code mapping.

Pass 1 classifies each marked day into exactly one base counter.
Pass 2 counts the composite counters that depend on the calendar or on
the previous day. The weighted working-days total is computed from the
unfloored present count; only afterwards is the present count floored.
"""

import math
from typing import Any, Dict, Mapping, Optional, Tuple

from .attendance_codes import AttendanceCode, WORKING_CODES
from .calendar_helper import (
    HolidayCalendar, MonthLike, days_in_month, holidays_in_month, sundays_in_month
)
from .entities import DayAttendance, EmployeeSummary, attendance_from_dict


# Code -> (counter, contribution) for the first pass
BASE_CONTRIBUTIONS: Dict[AttendanceCode, Tuple[str, float]] = {
    AttendanceCode.P: ("total_present", 1),
    AttendanceCode.WFH: ("total_present", 1),
    AttendanceCode.HD: ("total_present", 0.5),
    AttendanceCode.A: ("total_absent", 1),
    AttendanceCode.O: ("total_off", 1),
    AttendanceCode.S: ("total_sundays", 1),
    AttendanceCode.H: ("total_holidays", 1),
    AttendanceCode.N: ("total_night_shift", 1),
    AttendanceCode.L: ("total_on_leave", 1),
}

HOLY_DAY_WEIGHT = 2
OFF_DAY_WEIGHT = 0.5


class SummaryCalculator:
    """
    Calculates employee summaries for a month.

    Holds the holiday calendar used to detect holy-day working, so callers
    can substitute their organization's table.
    """

    def __init__(self, holidays: Optional[HolidayCalendar] = None):
        self.holidays = holidays

    def calculate(
        self,
        attendance: Mapping[Any, Any],
        month: MonthLike,
        year: int
    ) -> EmployeeSummary:
        """
        Calculate the summary for one employee's month.

        Never raises for data content: unknown codes and days outside the
        month are ignored, and an empty mapping yields an all-zero summary.

        Args:
            attendance: Day -> code mapping (raw strings and string keys tolerated)
            month: Month of the sheet
            year: Year of the sheet

        Returns:
            EmployeeSummary with integer counters
        """
        codes = _coerce(attendance)
        num_days = days_in_month(month, year)

        counters: Dict[str, float] = {
            name: 0 for name in EmployeeSummary().to_dict()
        }

        # First pass: base counters
        for day in range(1, num_days + 1):
            code = codes.get(day)
            if code is None:
                continue
            counter, contribution = BASE_CONTRIBUTIONS[code]
            counters[counter] += contribution

        # Second pass: holy-day and off-day working
        rest_days = set(sundays_in_month(month, year))
        rest_days.update(holidays_in_month(month, year, self.holidays))

        for day in range(1, num_days + 1):
            code = codes.get(day)
            if code not in WORKING_CODES:
                continue
            if day in rest_days:
                counters["total_holy_day_working"] += 1
            if day > 1 and codes.get(day - 1) is AttendanceCode.O:
                counters["total_off_day_working"] += 1

        counters["total_working_days"] = math.floor(
            counters["total_present"]
            + counters["total_off"]
            + counters["total_sundays"]
            + counters["total_holidays"]
            + counters["total_night_shift"]
            + counters["total_holy_day_working"] * HOLY_DAY_WEIGHT
            + counters["total_off_day_working"] * OFF_DAY_WEIGHT
        )
        counters["total_present"] = math.floor(counters["total_present"])

        return EmployeeSummary(**{name: int(value) for name, value in counters.items()})


def calculate_summary(
    attendance: Mapping[Any, Any],
    month: MonthLike,
    year: int,
    holidays: Optional[HolidayCalendar] = None
) -> EmployeeSummary:
    """Single entry point for summary derivation. See SummaryCalculator.calculate."""
    return SummaryCalculator(holidays).calculate(attendance, month, year)


def _coerce(attendance: Mapping[Any, Any]) -> DayAttendance:
    """Int day keys and normalized codes; unset and unparsable entries dropped."""
    if not attendance:
        return {}
    return attendance_from_dict(attendance)
