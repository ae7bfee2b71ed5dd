"""
Employee Validation Module

Checks employee fields before a record is admitted to the roster.
Returns human-readable messages instead of raising, so callers can show
every problem at once.
"""

import re
from typing import Any, Iterable, List, Mapping, Union

from .entities import EmployeeRecord


EMP_ID_PATTERN = re.compile(r'^[A-Z]{2,3}-\d{3,5}$')
EMP_ID_EXAMPLE = "QR-417"
MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 50

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_PATTERN = re.compile(r'^\d{10}$')
PHONE_SEPARATORS = re.compile(r'[- ]')


def validate_employee(
    employee: Union[EmployeeRecord, Mapping[str, Any]],
    existing_ids: Iterable[str] = ()
) -> List[str]:
    """
    Validate employee identity and contact fields.

    Args:
        employee: Record, or mapping with emp_id / employee_name / email / phone
        existing_ids: IDs already in the roster (uniqueness check)

    Returns:
        List of error messages; empty when the employee is valid
    """
    fields = _as_fields(employee)
    errors: List[str] = []

    emp_id = fields.get("emp_id") or ""
    if not emp_id:
        errors.append("Employee ID is required")
    elif not EMP_ID_PATTERN.match(emp_id):
        errors.append(f"Employee ID must be in format like {EMP_ID_EXAMPLE}")
    elif emp_id in set(existing_ids):
        errors.append("Employee ID already exists")

    name = fields.get("employee_name") or ""
    if not name:
        errors.append("Employee name is required")
    elif len(name) < MIN_NAME_LENGTH:
        errors.append(f"Employee name must be at least {MIN_NAME_LENGTH} characters")
    elif len(name) > MAX_NAME_LENGTH:
        errors.append(f"Employee name must not exceed {MAX_NAME_LENGTH} characters")

    email = fields.get("email") or ""
    if email and not EMAIL_PATTERN.match(email):
        errors.append("Invalid email format")

    phone = fields.get("phone") or ""
    if phone and not PHONE_PATTERN.match(PHONE_SEPARATORS.sub('', phone)):
        errors.append("Phone must be 10 digits")

    return errors


def _as_fields(employee: Union[EmployeeRecord, Mapping[str, Any]]) -> Mapping[str, Any]:
    if isinstance(employee, EmployeeRecord):
        return {
            "emp_id": employee.emp_id,
            "employee_name": employee.employee_name,
            "email": employee.email,
            "phone": employee.phone,
        }
    return employee
