"""
Domain Entities Module

Core domain entities using dataclasses for the attendance sheet.
These entities represent the core business concepts independent of infrastructure.
"""

from dataclasses import dataclass, field, fields
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Tuple

from .attendance_codes import AttendanceCode, normalize
from .calendar_helper import Month


# Day of month -> code, only for explicitly marked days
DayAttendance = Dict[int, AttendanceCode]


class RateColorTier(Enum):
    """Color tier for attendance percentage display."""
    RED = auto()     # < critical threshold (default 75%)
    YELLOW = auto()  # >= critical and < excellent
    GREEN = auto()   # >= excellent threshold (default 95%)


@dataclass
class EmployeeSummary:
    """
    Ten derived monthly counters for one employee.

    ``total_working_days`` is weighted (holy-day working counts double,
    off-day working counts half extra) and is never set by hand; it comes
    out of the summary engine.
    """
    total_present: int = 0
    total_off: int = 0
    total_sundays: int = 0
    total_holidays: int = 0
    total_night_shift: int = 0
    total_holy_day_working: int = 0
    total_off_day_working: int = 0
    total_absent: int = 0
    total_on_leave: int = 0
    total_working_days: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def as_row(self) -> List[int]:
        """Counters in export column order."""
        return [getattr(self, attr) for attr, _ in SUMMARY_COLUMNS]

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "EmployeeSummary":
        """Build from a mapping, treating missing or unparsable values as 0."""
        data = data or {}
        return cls(**{f.name: _to_int(data.get(f.name)) for f in fields(cls)})

    @classmethod
    def from_row(cls, values: List[Any]) -> "EmployeeSummary":
        """Build from counters in export column order."""
        padded = list(values) + [None] * (len(SUMMARY_COLUMNS) - len(values))
        return cls(**{
            attr: _to_int(value)
            for (attr, _), value in zip(SUMMARY_COLUMNS, padded)
        })


# (attribute, export column label) in export order
SUMMARY_COLUMNS: List[Tuple[str, str]] = [
    ("total_present", "Total Present"),
    ("total_off", "Total Off"),
    ("total_sundays", "Total Sunday's"),
    ("total_holidays", "Total Holidays"),
    ("total_night_shift", "Total Night Shift"),
    ("total_holy_day_working", "Total Holy Day Working"),
    ("total_off_day_working", "Total Off Day Working"),
    ("total_absent", "Total Absent"),
    ("total_on_leave", "Total On Leave"),
    ("total_working_days", "Total Working Days in this Month"),
]


@dataclass
class MonthlyData:
    """Attendance and summary kept for one month of an employee's history."""
    attendance: DayAttendance = field(default_factory=dict)
    summary: EmployeeSummary = field(default_factory=EmployeeSummary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attendance": attendance_to_dict(self.attendance),
            "summary": self.summary.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MonthlyData":
        return cls(
            attendance=attendance_from_dict(data.get("attendance")),
            summary=EmployeeSummary.from_dict(data.get("summary")),
        )


@dataclass
class EmployeeRecord:
    """
    One employee's row on the attendance sheet.

    Attributes:
        emp_id: Employee ID, e.g. 'QR-417'
        employee_name: Display name (3-50 chars)
        month: Active month of the sheet
        year: Active year of the sheet
        attendance: Day -> code for the active month
        summary: Counters derived from ``attendance``
        sl_no: 1-based position in the roster
        monthly_data: Month code -> history kept when switching months
    """
    emp_id: str
    employee_name: str
    month: Month = Month.JAN
    year: int = 2024
    attendance: DayAttendance = field(default_factory=dict)
    summary: EmployeeSummary = field(default_factory=EmployeeSummary)
    sl_no: int = 0
    department: str = ""
    designation: str = ""
    joining_date: str = ""
    email: str = ""
    phone: str = ""
    monthly_data: Dict[str, MonthlyData] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sl_no": self.sl_no,
            "emp_id": self.emp_id,
            "employee_name": self.employee_name,
            "month": self.month.code,
            "year": self.year,
            "department": self.department,
            "designation": self.designation,
            "joining_date": self.joining_date,
            "email": self.email,
            "phone": self.phone,
            "attendance": attendance_to_dict(self.attendance),
            "summary": self.summary.to_dict(),
            "monthly_data": {
                key: data.to_dict() for key, data in self.monthly_data.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmployeeRecord":
        """Rebuild a record from ``to_dict`` output. Summaries are taken as stored."""
        return cls(
            emp_id=str(data.get("emp_id", "")),
            employee_name=str(data.get("employee_name", "")),
            month=Month.parse(data.get("month")) or Month.JAN,
            year=_to_int(data.get("year")) or 2024,
            attendance=attendance_from_dict(data.get("attendance")),
            summary=EmployeeSummary.from_dict(data.get("summary")),
            sl_no=_to_int(data.get("sl_no")),
            department=data.get("department", "") or "",
            designation=data.get("designation", "") or "",
            joining_date=data.get("joining_date", "") or "",
            email=data.get("email", "") or "",
            phone=data.get("phone", "") or "",
            monthly_data={
                key: MonthlyData.from_dict(value)
                for key, value in (data.get("monthly_data") or {}).items()
            },
        )


def attendance_to_dict(attendance: DayAttendance) -> Dict[str, str]:
    """JSON-friendly copy: string day keys, plain code strings, ascending days."""
    return {str(day): attendance[day].value for day in sorted(attendance)}


def parse_day(key: Any) -> Optional[int]:
    """
    Day number for a mapping key, or None when the key is not a whole number.

    Accepts ints and numeric strings ("3"). Non-integral numbers (1.9),
    infinities and NaN are rejected rather than truncated.
    """
    try:
        day = int(key)
    except (TypeError, ValueError, OverflowError):
        return None
    if not isinstance(key, str) and day != key:
        return None
    return day


def attendance_from_dict(data: Optional[Dict[Any, Any]]) -> DayAttendance:
    """Parse a stored day -> code mapping, dropping unparsable days and unknown codes."""
    attendance: DayAttendance = {}
    for key, raw in (data or {}).items():
        day = parse_day(key)
        if day is None:
            continue
        code = normalize(raw)
        if code.is_set:
            attendance[day] = code
    return attendance


def _to_int(value: Any) -> int:
    """Lenient integer parse: int('3'), int(3.7) -> 3; garbage -> 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            return 0
