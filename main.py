"""
Attendance Sheet Engine

Command-line entry point: recompute an attendance workbook, create an
empty template, restore a saved snapshot or print roster statistics.
"""

import argparse
import sys
from datetime import date, datetime
from pathlib import Path

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from application.attendance_service import AttendanceSheetService
from config.config_manager import ConfigManager
from domain.calendar_helper import Month
from domain.errors import AttendanceError
from infrastructure.filename_parser import format_filename
from infrastructure.logger import configure_logging, get_logger
from infrastructure.storage import SnapshotStore

logger = get_logger("Main")


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Recompute and export monthly attendance sheets.")
    p.add_argument("--config", default=None, help="Path to config.json (default: next to src/).")
    p.add_argument("--log-file", default=None, help="Log file (default: attendance_sheet.log in the project root).")
    p.add_argument("-v", "--verbose", action="store_true", help="Show debug messages on the console.")
    sub = p.add_subparsers(dest="command", required=True)

    proc = sub.add_parser("process", help="Import a workbook, recompute summaries and export.")
    proc.add_argument("source", help="Path to the attendance workbook (.xlsx).")
    proc.add_argument("-o", "--output", default=None, help="Output workbook path.")
    proc.add_argument("--month", default=None, help="Active month (Jan..Dec or 1..12).")
    proc.add_argument("--year", type=int, default=None, help="Active year.")
    proc.add_argument("--sort-by", default=None, help="sl_no, emp_id, name, present or absent.")
    proc.add_argument("--reports", action="store_true", help="Write one text report per employee.")
    proc.add_argument("--report-dir", default=None, help="Directory for text reports.")
    proc.add_argument("--no-pdf", action="store_true", help="Skip the roster PDF.")
    proc.add_argument("--snapshot", default=None, help="Also save a JSON snapshot here.")

    tmpl = sub.add_parser("template", help="Create an empty sheet with a sample employee.")
    tmpl.add_argument("month", help="Month (Jan..Dec or 1..12).")
    tmpl.add_argument("year", type=int, help="Year.")
    tmpl.add_argument("-o", "--output", default=None, help="Output workbook path.")

    rest = sub.add_parser("restore", help="Export a saved JSON snapshot to a workbook.")
    rest.add_argument("snapshot", help="Path to the snapshot file.")
    rest.add_argument("-o", "--output", default=None, help="Output workbook path.")

    stats = sub.add_parser("stats", help="Print roster statistics for a workbook.")
    stats.add_argument("source", help="Path to the attendance workbook (.xlsx).")
    stats.add_argument("--as-of", default=None, help="Day counted as today (YYYY-MM-DD).")
    stats.add_argument("--daily-salary", type=float, default=0, help="Daily salary for deductions.")

    return p.parse_args(argv)


def _month_arg(value: str) -> Month:
    month = Month.parse(int(value) if value.isdigit() else value)
    if month is None:
        raise ValueError(f"Unknown month: {value}")
    return month


def run_process(args, config, service: AttendanceSheetService) -> int:
    source = Path(args.source)
    params = service.build_params_from_config(
        config, source,
        output_path=Path(args.output) if args.output else None,
        generate_pdf=False if args.no_pdf else None,
    )
    if args.month:
        params.month = _month_arg(args.month)
    if args.year is not None:
        params.year = args.year
    if args.sort_by:
        params.sort_by = args.sort_by
    if args.reports:
        params.write_reports = True
        params.report_dir = Path(args.report_dir) if args.report_dir else None
    if args.snapshot:
        params.snapshot_path = Path(args.snapshot)

    result = service.process_sheet(params)
    print(f"Wrote {result.output_path} ({result.employee_count} employees, "
          f"{result.month.code} {result.year})")
    for mismatch in result.summary_mismatches:
        print(f"  summary corrected for {mismatch.emp_id} {mismatch.month}: "
              f"{', '.join(mismatch.fields)}")
    if result.pdf_path:
        print(f"Wrote {result.pdf_path}")
    if result.report_paths:
        print(f"Wrote {len(result.report_paths)} report(s)")
    for warning in result.warnings:
        print(f"Warning: {warning}")
    return 0


def run_template(args, config, service: AttendanceSheetService) -> int:
    month = _month_arg(args.month)
    output = Path(args.output) if args.output else Path(
        format_filename("attendance_template_{month}_{year}.xlsx", month, args.year)
    )
    service.create_template(month, args.year, output, config.holidays.to_calendar())
    print(f"Wrote {output}")
    return 0


def run_restore(args, config, service: AttendanceSheetService) -> int:
    from infrastructure.excel_writer import ExcelWriter

    roster = SnapshotStore(Path(args.snapshot)).load(config.holidays.to_calendar())
    if roster is None:
        print(f"No usable snapshot at {args.snapshot}", file=sys.stderr)
        return 1
    output = Path(args.output) if args.output else Path(
        format_filename(config.output_settings.filename_pattern, roster.month, roster.year)
    )
    ExcelWriter().export_roster(roster, output)
    print(f"Wrote {output} ({len(roster)} employees)")
    return 0


def run_stats(args, config, service: AttendanceSheetService) -> int:
    params = service.build_params_from_config(config, Path(args.source), generate_pdf=False)
    roster = service.import_roster(params)
    as_of = datetime.strptime(args.as_of, "%Y-%m-%d").date() if args.as_of else date.today()

    monthly, averages = service.statistics(roster, as_of, config.thresholds)
    print(f"{roster.month.label} {roster.year}: {monthly.total_strength} employees")
    print(f"  Present on day {as_of.day}: {monthly.present_today}")
    print(f"  Absent on day {as_of.day}: {monthly.absent_today}")
    print(f"  On leave on day {as_of.day}: {monthly.on_leave_today}")
    print(f"  Average attendance: {monthly.average_attendance}%")
    print(f"  Perfect attendance: {monthly.perfect_attendance_count}")
    print(f"  Critical attendance: {monthly.critical_attendance_count}")
    print(f"  Average present/absent/leave: "
          f"{averages.average_present}/{averages.average_absent}/{averages.average_leave}")
    print(f"  High absenteeism: {averages.high_absenteeism}")

    for figures in service.payroll_figures(roster, config.payroll, args.daily_salary):
        print(f"  {figures.emp_id}: overtime {figures.overtime_hours}h, "
              f"deduction {figures.salary_deduction}, bonus {figures.attendance_bonus}, "
              f"leave left {figures.leave_balance}")
    return 0


COMMANDS = {
    "process": run_process,
    "template": run_template,
    "restore": run_restore,
    "stats": run_stats,
}


def main(argv=None) -> int:
    """Application entry point."""
    args = parse_args(argv)
    if args.log_file or args.verbose:
        configure_logging(args.log_file, verbose=args.verbose)
    config_manager = ConfigManager(Path(args.config) if args.config else None)
    config = config_manager.load()
    service = AttendanceSheetService()

    try:
        return COMMANDS[args.command](args, config, service)
    except (AttendanceError, ValueError, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
