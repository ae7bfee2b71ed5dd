"""
Sorting Utilities Module

Provides sorting and filtering functions for roster display and export.
"""

from typing import Callable, Dict, Iterable, List, Optional

from domain.entities import EmployeeRecord


SORT_KEYS: Dict[str, Callable[[EmployeeRecord], object]] = {
    "sl_no": lambda e: e.sl_no,
    "emp_id": lambda e: e.emp_id,
    "name": lambda e: e.employee_name,
    "present": lambda e: e.summary.total_present,
    "absent": lambda e: e.summary.total_absent,
}


def sort_employees(
    employees: Iterable[EmployeeRecord],
    sort_by: str = "sl_no",
    order: str = "asc"
) -> List[EmployeeRecord]:
    """
    Sort employees by specified criteria.

    Args:
        employees: Records to sort
        sort_by: "sl_no", "emp_id", "name", "present" or "absent";
            unknown keys fall back to "sl_no"
        order: "asc" or "desc"

    Returns:
        Sorted list (new list, does not modify original)
    """
    key = SORT_KEYS.get(sort_by, SORT_KEYS["sl_no"])
    return sorted(employees, key=key, reverse=(order == "desc"))


def filter_employees(
    employees: Iterable[EmployeeRecord],
    name: Optional[str] = None,
    emp_id: Optional[str] = None,
    status: Optional[str] = None,
    min_present: Optional[int] = None
) -> List[EmployeeRecord]:
    """
    Filter employees by case-insensitive name/ID substring and attendance.

    Args:
        employees: Records to filter
        name: Substring of the employee name
        emp_id: Substring of the employee ID
        status: "perfect" (no absences) or "absent" (at least one absence)
        min_present: Minimum total present days

    Returns:
        Matching records in their original order
    """
    result = []
    for employee in employees:
        if name and name.lower() not in employee.employee_name.lower():
            continue
        if emp_id and emp_id.lower() not in employee.emp_id.lower():
            continue
        if status == "perfect" and employee.summary.total_absent > 0:
            continue
        if status == "absent" and employee.summary.total_absent == 0:
            continue
        if min_present and employee.summary.total_present < min_present:
            continue
        result.append(employee)
    return result
