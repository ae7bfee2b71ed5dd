"""
Excel Writer Module

Writes the roster back to a formatted attendance sheet.
The layout mirrors what ExcelParser reads, so an exported file can be
imported again unchanged.
"""

from pathlib import Path
from typing import Dict, Optional

from openpyxl import Workbook
from openpyxl.styles import (
    Font, PatternFill, Alignment, Border, Side
)
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from domain.attendance_codes import CODE_CHOICES, AttendanceCode, normalize
from domain.calendar_helper import HolidayCalendar, Month, MonthLike
from domain.roster import EXPORT_HEADERS, Roster
from infrastructure.logger import get_logger

logger = get_logger("ExcelWriter")


class ExcelWriter:
    """
    Generates formatted attendance sheets.

    Output format:
    - Row 1: Sl#, Emp ID, Employee Name, Month, days 1..31, ten totals
    - Row 2: left blank
    - Row 3 onward: one row per employee

    Styling:
    - Light cyan bold header with thin borders
    - Day cells filled with the background colour of their code
    - Panes frozen after the Month column and the header row
    - Autofilter over the whole table
    """

    HEADER_FILL = PatternFill(start_color='CCFFFF', end_color='CCFFFF', fill_type='solid')

    # One fill per code, keyed by the code value
    CODE_FILLS: Dict[str, PatternFill] = {
        code.value: PatternFill(
            start_color=code.bg_color.lstrip('#'),
            end_color=code.bg_color.lstrip('#'),
            fill_type='solid'
        )
        for code in CODE_CHOICES
    }
    CODE_FONTS: Dict[str, Font] = {
        code.value: Font(bold=True, color=code.color.lstrip('#'))
        for code in CODE_CHOICES
    }

    BORDER = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    # Sl#, Emp ID, Employee Name, Month, days, then each total
    COLUMN_WIDTHS = [5, 10, 25, 8] + [4] * 31 + [12, 10, 14, 14, 15, 20, 20, 12, 14, 25]

    FIRST_DATA_ROW = 3
    FREEZE_CELL = 'E2'
    SHEET_TITLE = 'Sheet1'

    TEMPLATE_EMP_ID = 'EMP-001'
    TEMPLATE_EMP_NAME = 'Sample Employee'

    def __init__(self):
        self.wb: Optional[Workbook] = None

    def export_roster(self, roster: Roster, output_path: Path) -> Path:
        """
        Write every roster employee to a new workbook.

        Args:
            roster: Roster to export, in its current order
            output_path: Path to save the Excel file

        Returns:
            Path to the created file
        """
        self.wb = Workbook()
        ws = self.wb.active
        ws.title = self.SHEET_TITLE

        self._write_sheet(ws, roster)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(output_path)
        logger.info(f"Exported {len(roster)} employee(s) to {output_path.name}")
        return output_path

    def create_template(
        self,
        month: MonthLike,
        year: int,
        output_path: Path,
        holidays: Optional[HolidayCalendar] = None
    ) -> Path:
        """
        Write an empty sheet holding one sample employee.

        Args:
            month: Month for the template
            year: Year for the template
            output_path: Path to save the Excel file
            holidays: Holiday calendar for the sample's summary

        Returns:
            Path to the created file
        """
        roster = Roster(month=Month.parse(month) or Month.JAN, year=year, holidays=holidays)
        roster.add_employee(self.TEMPLATE_EMP_ID, self.TEMPLATE_EMP_NAME)
        logger.info(f"Creating template for {roster.month.code} {year}")
        return self.export_roster(roster, output_path)

    def _write_sheet(self, ws: Worksheet, roster: Roster) -> None:
        """Write header, spacer row and employee rows to a worksheet."""
        last_col = len(EXPORT_HEADERS)

        for col, header in enumerate(EXPORT_HEADERS, start=1):
            cell = ws.cell(1, col, header)
            cell.font = Font(bold=True)
            cell.fill = self.HEADER_FILL
            cell.alignment = Alignment(horizontal='center', vertical='center')
            cell.border = self.BORDER

        # Row 2 stays blank
        for row_offset, values in enumerate(roster.export_rows()):
            row = self.FIRST_DATA_ROW + row_offset
            for col, value in enumerate(values, start=1):
                cell = ws.cell(row, col, value if value != "" else None)
                cell.border = self.BORDER
                if 5 <= col <= 35:
                    cell.alignment = Alignment(horizontal='center')
                    self._apply_code_style(cell, value)
                elif col > 35:
                    cell.alignment = Alignment(horizontal='center')

        last_row = max(len(roster) + 2, 2)
        ws.freeze_panes = self.FREEZE_CELL
        ws.auto_filter.ref = f"A1:{get_column_letter(last_col)}{last_row}"

        for col, width in enumerate(self.COLUMN_WIDTHS, start=1):
            ws.column_dimensions[get_column_letter(col)].width = width
        ws.row_dimensions[1].height = 30

    def _apply_code_style(self, cell, value) -> None:
        """Colour a day cell by its attendance code."""
        code = normalize(value)
        if code is AttendanceCode.UNSET:
            return
        cell.fill = self.CODE_FILLS[code.value]
        cell.font = self.CODE_FONTS[code.value]
