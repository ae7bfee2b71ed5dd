"""
Domain Errors Module

Exception hierarchy shared by the domain, infrastructure and application layers.
"""

from typing import List, Optional


class AttendanceError(Exception):
    """Base exception for attendance-related errors."""
    pass


class EmployeeValidationError(AttendanceError):
    """
    Raised when an employee record fails validation before admission.

    The roster is left unchanged. The UI layer should display ``errors``.
    """
    def __init__(self, errors: List[str], message: Optional[str] = None):
        self.errors = list(errors)
        self.message = message or ", ".join(self.errors)
        super().__init__(self.message)


class DuplicateEmployeeError(EmployeeValidationError):
    """Raised when an employee ID already exists in the roster."""
    def __init__(self, emp_id: str):
        self.emp_id = emp_id
        super().__init__([f"Employee ID '{emp_id}' already exists"])


class EmployeeNotFoundError(AttendanceError):
    """Raised when an operation targets an employee ID that is not in the roster."""
    def __init__(self, emp_id: str):
        self.emp_id = emp_id
        self.message = f"Employee '{emp_id}' not found in roster"
        super().__init__(self.message)


class ExcelFormatError(AttendanceError):
    """Raised when the Excel file format is unrecognized or invalid."""
    pass
