"""
Excel Parser Module

Reads attendance sheets exported by this application (or hand-maintained in
the same layout) into plain import records for the roster.

Layout of the first worksheet:
- Row 1: headers, Row 2: blank, data from Row 3
- Column A: Sl#, B: Emp ID, C: Employee Name, D: Month
- Columns E..AI: days 1..31
- Columns AJ..AS: the ten summary counters (optional)
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from domain.attendance_codes import normalize
from domain.entities import SUMMARY_COLUMNS, EmployeeSummary
from domain.errors import ExcelFormatError
from domain.roster import ImportedEmployee, ImportedMonth
from infrastructure.logger import get_logger

logger = get_logger("ExcelParser")


class ExcelParser:
    """
    Parses attendance sheet workbooks.

    Handles:
    - Skipping blank rows, stopping after a run of them
    - Skipping rows without an employee ID
    - Normalizing every day code, dropping unrecognized ones
    - Grouping rows by employee and month
    """

    SUPPORTED_SUFFIXES = (".xlsx", ".xlsm")
    FIRST_DATA_ROW = 3
    MAX_CONSECUTIVE_EMPTY_ROWS = 5

    EMP_ID_COL = 1
    NAME_COL = 2
    MONTH_COL = 3
    FIRST_DAY_COL = 4
    FIRST_SUMMARY_COL = FIRST_DAY_COL + 31

    def __init__(self):
        self._employees: Dict[str, ImportedEmployee] = {}
        self._skipped_codes = 0

    def parse_file(self, file_path: Path) -> List[ImportedEmployee]:
        """
        Parse an Excel file and extract employee attendance.

        Args:
            file_path: Path to the .xlsx file

        Returns:
            Employees in first-seen order; empty when the file does not exist

        Raises:
            ExcelFormatError: If the file is not a readable workbook
        """
        self._employees = {}
        self._skipped_codes = 0

        if not file_path.exists():
            logger.warning(f"Source file does not exist: {file_path}")
            return []

        if file_path.suffix.lower() not in self.SUPPORTED_SUFFIXES:
            raise ExcelFormatError(f"Not an Excel workbook (.xlsx): {file_path.name}")

        logger.info(f"Parsing Excel file: {file_path.name}")

        try:
            wb = load_workbook(file_path, data_only=True, read_only=True)
        except (InvalidFileException, BadZipFile, KeyError, OSError) as e:
            raise ExcelFormatError(f"Failed to read Excel file {file_path.name}: {e}") from e

        try:
            if not wb.worksheets:
                raise ExcelFormatError(f"Workbook {file_path.name} has no worksheets")
            self._parse_worksheet(wb.worksheets[0])
        finally:
            wb.close()

        if self._skipped_codes:
            logger.info(f"Ignored {self._skipped_codes} unrecognized attendance code(s)")
        logger.info(f"Parsed {len(self._employees)} unique employees from Excel")
        return list(self._employees.values())

    def _parse_worksheet(self, ws: Worksheet) -> None:
        """Read data rows until the sheet ends or too many blank rows follow."""
        consecutive_empty = 0

        for row_idx, row in enumerate(
            ws.iter_rows(min_row=self.FIRST_DATA_ROW, values_only=True),
            start=self.FIRST_DATA_ROW
        ):
            row = list(row) + [None] * (self.FIRST_SUMMARY_COL + len(SUMMARY_COLUMNS) - len(row))

            if self._is_blank(row[self.EMP_ID_COL]) and self._is_blank(row[self.NAME_COL]):
                consecutive_empty += 1
                if consecutive_empty >= self.MAX_CONSECUTIVE_EMPTY_ROWS:
                    break
                continue
            consecutive_empty = 0

            if self._is_blank(row[self.EMP_ID_COL]):
                logger.debug(f"Sheet '{ws.title}' row {row_idx}: no employee ID, skipped")
                continue

            self._parse_row(row)

    def _parse_row(self, row: Sequence[Any]) -> None:
        emp_id = str(row[self.EMP_ID_COL]).strip()
        name = row[self.NAME_COL]
        month_key = str(row[self.MONTH_COL]).strip() if not self._is_blank(row[self.MONTH_COL]) else "Jan"

        employee = self._employees.get(emp_id)
        if employee is None:
            employee = ImportedEmployee(
                emp_id=emp_id,
                employee_name=str(name).strip() if name is not None else "",
            )
            self._employees[emp_id] = employee

        month_data = employee.months.setdefault(month_key, ImportedMonth())

        for day in range(1, 32):
            value = row[self.FIRST_DAY_COL + day - 1]
            if self._is_blank(value):
                continue
            code = normalize(value)
            if code.is_set:
                month_data.attendance[day] = code
            else:
                self._skipped_codes += 1
                logger.debug(f"{emp_id} {month_key} day {day}: unrecognized code {value!r}")

        summary_values = row[self.FIRST_SUMMARY_COL:self.FIRST_SUMMARY_COL + len(SUMMARY_COLUMNS)]
        if any(v is not None for v in summary_values):
            month_data.summary = EmployeeSummary.from_row(summary_values)

    @staticmethod
    def _is_blank(value: Any) -> bool:
        return value is None or str(value).strip() == ""

    def get_employee_ids(self) -> List[str]:
        """Get IDs of employees found in the last parsed file."""
        return list(self._employees)

    def get_months_for(self, emp_id: str) -> List[str]:
        """Get month keys present for an employee in the last parsed file."""
        employee = self._employees.get(emp_id)
        return list(employee.months) if employee else []

    @property
    def skipped_codes(self) -> int:
        """Number of cells whose code was not recognized."""
        return self._skipped_codes
