"""
Attendance Service Module

Application layer service that orchestrates the attendance sheet workflows:
import a workbook into a roster, then write the recomputed sheet, the
per-employee text reports, the roster PDF and the JSON snapshot.
"""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple

from config.config_manager import AppConfig, Payroll, Thresholds
from domain.analytics import (
    AttendanceStatistics, MonthlyStatistics, attendance_statistics, generate_report,
    monthly_statistics
)
from domain.calculations import attendance_bonus, leave_balance, overtime_hours, salary_deduction
from domain.calendar_helper import HolidayCalendar, Month, MonthLike
from domain.roster import Roster, SummaryMismatch
from domain.sorting import sort_employees
from infrastructure.logger import get_logger

logger = get_logger("AttendanceService")


@dataclass
class SheetProcessingParams:
    """
    Parameters for processing an attendance workbook.

    Decouples the service from the configuration file layout; see
    ``AttendanceSheetService.build_params_from_config``.
    """
    source_path: Path
    output_path: Path

    # Active month; None = read from the source filename, then the data
    month: Optional[MonthLike] = None
    year: Optional[int] = None
    default_month: MonthLike = Month.JAN
    default_year: int = 2024

    holidays: Optional[HolidayCalendar] = None
    thresholds: Thresholds = field(default_factory=Thresholds)

    # Output settings
    sort_by: str = "sl_no"
    write_reports: bool = False
    report_dir: Optional[Path] = None
    report_filename_pattern: str = "report_{emp_id}_{month}_{year}.txt"
    generate_pdf: bool = True
    pdf_output_dir: Optional[Path] = None
    pdf_filename_pattern: str = "attendance_report_{month}_{year}.pdf"
    custom_font_path: Optional[str] = None
    snapshot_path: Optional[Path] = None


@dataclass
class SheetProcessingResult:
    """Result of processing an attendance workbook."""
    success: bool
    output_path: Path
    month: Month = Month.JAN
    year: int = 0
    employee_count: int = 0
    summary_mismatches: List[SummaryMismatch] = field(default_factory=list)
    report_paths: List[Path] = field(default_factory=list)
    pdf_path: Optional[Path] = None
    snapshot_path: Optional[Path] = None
    warnings: List[str] = field(default_factory=list)


@dataclass
class PayrollFigures:
    """Payroll helper figures for one employee."""
    emp_id: str
    employee_name: str
    overtime_hours: float
    salary_deduction: float
    attendance_bonus: float
    leave_balance: int


class AttendanceSheetService:
    """
    Application service for attendance sheets.

    This service:
    - Orchestrates import, recomputation and every output format
    - Depends only on domain modules and infrastructure adapters
    - Logs each step of a run
    """

    def process_sheet(self, params: SheetProcessingParams) -> SheetProcessingResult:
        """
        Import a workbook, recompute every summary and write the outputs.

        Args:
            params: SheetProcessingParams describing inputs and outputs

        Returns:
            SheetProcessingResult describing what was written

        Raises:
            ValueError: If the source holds no employee data
            ExcelFormatError: If the source is not a readable workbook
            PermissionError: If the output workbook cannot be written
        """
        from infrastructure.excel_writer import ExcelWriter

        roster = self.import_roster(params)
        mismatches = list(roster.summary_mismatches)
        roster = self.sorted_roster(roster, params.sort_by)

        logger.info(f"Writing Excel: {params.output_path}")
        ExcelWriter().export_roster(roster, params.output_path)

        result = SheetProcessingResult(
            success=True,
            output_path=params.output_path,
            month=roster.month,
            year=roster.year,
            employee_count=len(roster),
            summary_mismatches=mismatches,
        )

        if params.write_reports:
            report_dir = params.report_dir or params.output_path.parent
            result.report_paths = self.write_reports(
                roster, report_dir, params.report_filename_pattern, params.thresholds
            )

        if params.generate_pdf:
            try:
                result.pdf_path = self.write_pdf(roster, params)
            except (OSError, RuntimeError, ValueError) as e:
                # The workbook is already written; report the PDF failure separately
                logger.error(f"PDF generation failed: {e}")
                result.warnings.append(f"PDF generation failed: {e}")

        if params.snapshot_path:
            from infrastructure.storage import SnapshotStore
            result.snapshot_path = SnapshotStore(params.snapshot_path).save(roster)

        logger.info(
            f"Processing complete: {result.employee_count} employee(s), "
            f"{len(mismatches)} summary mismatch(es)"
        )
        return result

    def import_roster(self, params: SheetProcessingParams) -> Roster:
        """
        Parse the source workbook into a roster for the resolved month.

        Raises:
            ValueError: If the source holds no employee data
        """
        from infrastructure.excel_parser import ExcelParser

        logger.info(f"Parsing source file: {params.source_path}")
        imported = ExcelParser().parse_file(params.source_path)
        if not imported:
            raise ValueError(f"No employee data found in {params.source_path.name}")

        month, year = self.resolve_month_year(params, imported[0].months.keys())
        return Roster.from_imported(imported, month, year, params.holidays)

    @staticmethod
    def resolve_month_year(
        params: SheetProcessingParams,
        data_months=()
    ) -> Tuple[Month, int]:
        """
        Pick the active month and year.

        Explicit parameters win, then the source filename (attendance_Mon_yyyy),
        then the first month found in the data, then the defaults.
        """
        from infrastructure.filename_parser import FilenameParser

        parsed = FilenameParser.try_parse_month_year(params.source_path.name)

        month = Month.parse(params.month) if params.month is not None else None
        if month is None and parsed:
            month = parsed[0]
        if month is None:
            for key in data_months:
                month = Month.parse(key)
                if month is not None:
                    break
        if month is None:
            month = Month.parse(params.default_month) or Month.JAN

        if params.year is not None:
            year = params.year
        elif parsed:
            year = parsed[1]
        else:
            year = params.default_year

        return month, year

    @staticmethod
    def sorted_roster(roster: Roster, sort_by: str, order: str = "asc") -> Roster:
        """Roster reordered by ``sort_by``; serial numbers follow the new order."""
        if sort_by == "sl_no" and order == "asc":
            return roster
        ordered = sort_employees(roster.employees, sort_by, order)
        return Roster(roster.month, roster.year, roster.holidays, ordered)

    def write_reports(
        self,
        roster: Roster,
        output_dir: Path,
        filename_pattern: str = "report_{emp_id}_{month}_{year}.txt",
        thresholds: Optional[Thresholds] = None
    ) -> List[Path]:
        """Write one plain-text report per employee."""
        from infrastructure.filename_parser import format_filename

        thresholds = thresholds or Thresholds()
        output_dir.mkdir(parents=True, exist_ok=True)

        paths = []
        for employee in roster:
            report = generate_report(
                employee, roster.month, roster.year,
                thresholds.excellent, thresholds.critical
            )
            path = output_dir / format_filename(
                filename_pattern, roster.month, roster.year, emp_id=employee.emp_id
            )
            path.write_text(report, encoding="utf-8")
            paths.append(path)

        logger.info(f"Wrote {len(paths)} report(s) to {output_dir}")
        return paths

    def write_pdf(self, roster: Roster, params: SheetProcessingParams) -> Optional[Path]:
        """Write the roster PDF; None when the roster is empty."""
        from infrastructure.filename_parser import format_filename
        from infrastructure.pdf_writer import PdfWriter

        if len(roster) == 0:
            return None

        pdf_dir = params.pdf_output_dir or params.output_path.parent
        pdf_path = pdf_dir / format_filename(params.pdf_filename_pattern, roster.month, roster.year)
        logger.info(f"Writing PDF: {pdf_path}")

        PdfWriter(
            excellent_threshold=params.thresholds.excellent,
            critical_threshold=params.thresholds.critical,
            custom_font_path=params.custom_font_path
        ).create_roster_report(roster, pdf_path)
        return pdf_path

    def create_template(
        self,
        month: MonthLike,
        year: int,
        output_path: Path,
        holidays: Optional[HolidayCalendar] = None
    ) -> Path:
        """Write an empty attendance sheet with one sample employee."""
        from infrastructure.excel_writer import ExcelWriter

        return ExcelWriter().create_template(month, year, output_path, holidays)

    @staticmethod
    def statistics(
        roster: Roster,
        as_of: date,
        thresholds: Optional[Thresholds] = None
    ) -> Tuple[MonthlyStatistics, AttendanceStatistics]:
        """Roster statistics for ``as_of`` and the roster-wide averages."""
        thresholds = thresholds or Thresholds()
        return (
            monthly_statistics(
                roster, as_of, thresholds.default_working_days, thresholds.critical
            ),
            attendance_statistics(roster, thresholds.high_absenteeism),
        )

    @staticmethod
    def payroll_figures(
        roster: Roster,
        payroll: Optional[Payroll] = None,
        daily_salary: float = 0
    ) -> List[PayrollFigures]:
        """Overtime, deduction, bonus and leave balance for every employee."""
        payroll = payroll or Payroll()
        figures = []
        for employee in roster:
            summary = employee.summary
            figures.append(PayrollFigures(
                emp_id=employee.emp_id,
                employee_name=employee.employee_name,
                overtime_hours=overtime_hours(
                    summary.total_night_shift, payroll.overtime_hours_per_shift
                ),
                salary_deduction=salary_deduction(summary.total_absent, daily_salary),
                attendance_bonus=attendance_bonus(summary, payroll.attendance_bonus),
                leave_balance=leave_balance(
                    payroll.annual_leave_allowance, summary.total_on_leave
                ),
            ))
        return figures

    @staticmethod
    def build_params_from_config(
        config: AppConfig,
        source_path: Path,
        output_path: Optional[Path] = None,
        generate_pdf: Optional[bool] = None
    ) -> SheetProcessingParams:
        """
        Build SheetProcessingParams from AppConfig.

        Args:
            config: Application configuration
            source_path: Path to the source workbook
            output_path: Path for the output workbook; None = configured
                output directory plus the configured filename pattern
            generate_pdf: Overrides the configured PDF setting when given

        Returns:
            SheetProcessingParams ready for process_sheet()
        """
        from infrastructure.filename_parser import FilenameParser, format_filename

        output_settings = config.output_settings
        if output_path is None:
            parsed = FilenameParser.try_parse_month_year(source_path.name)
            month, year = parsed or (
                Month.parse(config.defaults.month) or Month.JAN, config.defaults.year
            )
            output_dir = Path(config.paths.output_dir) if config.paths.output_dir else source_path.parent
            output_path = output_dir / format_filename(output_settings.filename_pattern, month, year)

        return SheetProcessingParams(
            source_path=source_path,
            output_path=output_path,
            default_month=config.defaults.month,
            default_year=config.defaults.year,
            holidays=config.holidays.to_calendar(),
            thresholds=config.thresholds,
            sort_by=output_settings.sort_by,
            report_filename_pattern=output_settings.report_filename_pattern,
            generate_pdf=output_settings.generate_pdf if generate_pdf is None else generate_pdf,
            pdf_filename_pattern=output_settings.pdf_filename_pattern,
            snapshot_path=Path(config.paths.snapshot_file) if config.paths.snapshot_file else None,
        )
