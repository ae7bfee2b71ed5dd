"""
Payroll Helper Calculations

Small figures derived from an employee summary for payroll-style reporting.
These are informational; the sheet itself stores only the ten counters.
"""

from .entities import EmployeeSummary


def overtime_hours(night_shifts: int, hours_per_shift: float = 2) -> float:
    """Extra hours earned through night shifts."""
    return night_shifts * hours_per_shift


def salary_deduction(absent_days: int, daily_salary: float) -> float:
    """Deduction for absent days at a flat daily rate."""
    return absent_days * daily_salary


def attendance_bonus(summary: EmployeeSummary, bonus_amount: float = 1000) -> float:
    """
    Bonus for perfect attendance.

    Returns:
        ``bonus_amount`` when there are no absences and no leave, else 0
    """
    if summary.total_absent == 0 and summary.total_on_leave == 0:
        return bonus_amount
    return 0


def leave_balance(total_leave_allowed: int = 21, leaves_taken: int = 0) -> int:
    """Remaining leave, never below zero."""
    return max(0, total_leave_allowed - leaves_taken)
