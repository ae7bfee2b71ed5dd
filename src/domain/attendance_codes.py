"""
Attendance Codes Module

Closed catalog of attendance codes with display hints and the
normalization rule applied to every raw value entering the system.
"""

from enum import Enum
from typing import Any, FrozenSet, List


class AttendanceCode(str, Enum):
    """
    Attendance code for a single day.

    Each member carries a display label and foreground/background colour
    hints used only by presentation layers. ``UNSET`` stands for "no code"
    and is never stored in an attendance mapping.
    """
    P = ("P", "Present", "#4CAF50", "#E8F5E9")
    A = ("A", "Absent", "#F44336", "#FFEBEE")
    O = ("O", "Off", "#9E9E9E", "#F5F5F5")
    S = ("S", "Sunday", "#FF9800", "#FFF3E0")
    H = ("H", "Holiday", "#2196F3", "#E3F2FD")
    N = ("N", "Night Shift", "#9C27B0", "#F3E5F5")
    L = ("L", "Leave", "#00BCD4", "#E0F7FA")
    HD = ("HD", "Half Day", "#FFC107", "#FFF8E1")
    WFH = ("WFH", "Work From Home", "#607D8B", "#ECEFF1")
    UNSET = ("", "", "", "")

    def __new__(cls, code: str, label: str, color: str, bg_color: str):
        obj = str.__new__(cls, code)
        obj._value_ = code
        obj.label = label
        obj.color = color
        obj.bg_color = bg_color
        return obj

    @property
    def is_set(self) -> bool:
        return self is not AttendanceCode.UNSET


# Codes a user can pick, in display order
CODE_CHOICES: List[AttendanceCode] = [c for c in AttendanceCode if c.is_set]

# Presence for roster statistics and trends
PRESENT_CODES: FrozenSet[AttendanceCode] = frozenset({
    AttendanceCode.P, AttendanceCode.WFH, AttendanceCode.N,
})

# Codes that count as working a day for holy-day / off-day credit
WORKING_CODES: FrozenSet[AttendanceCode] = frozenset({
    AttendanceCode.P, AttendanceCode.N, AttendanceCode.WFH,
})

# Rest days that make a neighbouring absence suspicious
REST_DAY_CODES: FrozenSet[AttendanceCode] = frozenset({
    AttendanceCode.H, AttendanceCode.S,
})


def normalize(raw: Any) -> AttendanceCode:
    """
    Normalize a raw cell value to an attendance code.

    Case-insensitive (legacy lowercase 'a' becomes Absent). Anything outside
    the catalog, including None and blank text, becomes ``UNSET``.
    Idempotent: ``normalize(normalize(x)) == normalize(x)``.

    Args:
        raw: Raw value from a cell, a form field or a stored snapshot

    Returns:
        The matching AttendanceCode, or AttendanceCode.UNSET
    """
    if isinstance(raw, AttendanceCode):
        return raw
    if raw is None:
        return AttendanceCode.UNSET

    text = str(raw).strip().upper()
    if not text:
        return AttendanceCode.UNSET
    try:
        return AttendanceCode(text)
    except ValueError:
        return AttendanceCode.UNSET
