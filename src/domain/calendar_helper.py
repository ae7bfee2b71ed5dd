"""
Calendar Helper Module

Pure date arithmetic for attendance sheets: month lengths, weekdays
(0 = Sunday), Sundays of a month and the organization holiday table.
"""

from datetime import date, MINYEAR, MAXYEAR
from enum import Enum
from typing import Dict, Iterable, List, Optional, Union


class Month(Enum):
    """Ordered month enumeration keyed by its short code."""
    JAN = ("Jan", 1, "January", 31)
    FEB = ("Feb", 2, "February", 28)
    MAR = ("Mar", 3, "March", 31)
    APR = ("Apr", 4, "April", 30)
    MAY = ("May", 5, "May", 31)
    JUN = ("Jun", 6, "June", 30)
    JUL = ("Jul", 7, "July", 31)
    AUG = ("Aug", 8, "August", 31)
    SEP = ("Sep", 9, "September", 30)
    OCT = ("Oct", 10, "October", 31)
    NOV = ("Nov", 11, "November", 30)
    DEC = ("Dec", 12, "December", 31)

    def __new__(cls, code: str, index: int, label: str, days: int):
        obj = object.__new__(cls)
        obj._value_ = code
        obj.index = index
        obj.label = label
        obj.days = days
        return obj

    @property
    def code(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Union["Month", str, int, None]) -> Optional["Month"]:
        """
        Resolve a month from a short code, full name, 1-based number or Month.

        Returns:
            The Month, or None when the value is not recognized
        """
        if isinstance(value, Month):
            return value
        if value is None:
            return None
        if isinstance(value, int):
            for month in cls:
                if month.index == value:
                    return month
            return None

        text = str(value).strip().lower()
        for month in cls:
            if text in (month.code.lower(), month.label.lower()):
                return month
        return None

    @classmethod
    def from_index(cls, index: int) -> "Month":
        """Get month by 1-based number. Raises ValueError when out of range."""
        month = cls.parse(index)
        if month is None:
            raise ValueError(f"Invalid month number: {index}")
        return month


MonthLike = Union[Month, str, int]


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(month: MonthLike, year: int) -> int:
    """
    Get the number of days in a month.

    Args:
        month: Month, short code ('Feb'), full name or 1-based number
        year: Year, used for the February leap-year rule

    Returns:
        Days in the month; 31 when the month is not recognized
    """
    resolved = Month.parse(month)
    if resolved is None:
        return 31
    if resolved is Month.FEB:
        return 29 if is_leap_year(year) else 28
    return resolved.days


def weekday_of(day: int, month: MonthLike, year: int) -> int:
    """
    Get the weekday of a date with 0 = Sunday .. 6 = Saturday.

    Raises:
        ValueError: If the month is not recognized or the day does not exist
    """
    resolved = Month.parse(month)
    if resolved is None:
        raise ValueError(f"Unknown month: {month!r}")
    # date.weekday() is 0 = Monday
    return (date(year, resolved.index, day).weekday() + 1) % 7


def sundays_in_month(month: MonthLike, year: int) -> List[int]:
    """
    Get all Sundays in a month as ascending day numbers.

    Returns an empty list when the month is not recognized or the year is
    outside the supported calendar range.
    """
    if Month.parse(month) is None or not MINYEAR <= year <= MAXYEAR:
        return []
    return [
        day for day in range(1, days_in_month(month, year) + 1)
        if weekday_of(day, month, year) == 0
    ]


# Organization holidays by month code, year independent
DEFAULT_HOLIDAY_TABLE: Dict[str, List[int]] = {
    "Jan": [1, 26],   # New Year, Republic Day
    "Feb": [],
    "Mar": [21],      # Holi
    "Apr": [14],      # Ambedkar Jayanti
    "May": [1],       # May Day
    "Jun": [],
    "Jul": [],
    "Aug": [15],      # Independence Day
    "Sep": [],
    "Oct": [2, 24],   # Gandhi Jayanti, Dussehra
    "Nov": [12],      # Diwali
    "Dec": [25],      # Christmas
}


class HolidayCalendar:
    """
    Fixed holiday table keyed by month.

    The default table is an editorial policy, not a computed calendar.
    Pass a custom table (month code -> day numbers) to substitute it.
    """

    def __init__(self, table: Optional[Dict[str, Iterable[int]]] = None):
        source = DEFAULT_HOLIDAY_TABLE if table is None else table
        self._table: Dict[Month, List[int]] = {}
        for key, days in source.items():
            month = Month.parse(key)
            if month is None:
                continue
            self._table[month] = sorted({int(d) for d in days})

    def days_for(self, month: MonthLike, year: Optional[int] = None) -> List[int]:
        """Get holiday day numbers for a month. Unlisted months yield []."""
        resolved = Month.parse(month)
        if resolved is None:
            return []
        return list(self._table.get(resolved, []))

    def to_table(self) -> Dict[str, List[int]]:
        """Plain month code -> days mapping, suitable for JSON."""
        return {month.code: list(days) for month, days in self._table.items()}


DEFAULT_HOLIDAYS = HolidayCalendar()


def holidays_in_month(
    month: MonthLike,
    year: int,
    calendar: Optional[HolidayCalendar] = None
) -> List[int]:
    """
    Get listed holidays for a month.

    Args:
        month: Month to look up
        year: Accepted for symmetry; the table is year independent
        calendar: Holiday table to use, defaults to the organization table

    Returns:
        Day numbers of holidays in the month
    """
    return (calendar or DEFAULT_HOLIDAYS).days_for(month, year)
