"""
Configuration Manager Module

Handles loading, saving, and managing application configuration.
Provides bi-directional mapping between the config dataclasses and JSON persistence.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from domain.calendar_helper import DEFAULT_HOLIDAY_TABLE, HolidayCalendar
from infrastructure.logger import get_logger

logger = get_logger("ConfigManager")


def _default_holiday_table() -> Dict[str, List[int]]:
    return {month: list(days) for month, days in DEFAULT_HOLIDAY_TABLE.items()}


@dataclass
class Holidays:
    """Organization holiday table: month code -> day numbers."""
    table: Dict[str, List[int]] = field(default_factory=_default_holiday_table)

    def to_calendar(self) -> HolidayCalendar:
        return HolidayCalendar(self.table)


@dataclass
class Thresholds:
    """Attendance percentage thresholds used by statistics and reports."""
    excellent: float = 95
    critical: float = 75
    default_working_days: int = 22   # divisor when an employee has no working days
    high_absenteeism: int = 5        # absences above this count as high


@dataclass
class Payroll:
    """Inputs for the payroll helper figures."""
    overtime_hours_per_shift: float = 2
    attendance_bonus: float = 1000
    annual_leave_allowance: int = 21


@dataclass
class Paths:
    """File paths configuration."""
    last_source_file: str = ""
    snapshot_file: str = ""  # Empty = attendance_backup.json next to config
    output_dir: str = ""     # Empty = project root


@dataclass
class OutputSettings:
    """Output settings for generated files."""
    filename_pattern: str = "attendance_{month}_{year}.xlsx"
    report_filename_pattern: str = "report_{emp_id}_{month}_{year}.txt"
    pdf_filename_pattern: str = "attendance_report_{month}_{year}.pdf"
    generate_pdf: bool = True
    sort_by: str = "sl_no"


@dataclass
class Defaults:
    """Month and year a new sheet opens with."""
    month: str = "Jan"
    year: int = 2024


@dataclass
class AppConfig:
    """Main application configuration container."""
    holidays: Holidays = field(default_factory=Holidays)
    thresholds: Thresholds = field(default_factory=Thresholds)
    payroll: Payroll = field(default_factory=Payroll)
    paths: Paths = field(default_factory=Paths)
    output_settings: OutputSettings = field(default_factory=OutputSettings)
    defaults: Defaults = field(default_factory=Defaults)


class ConfigManager:
    """
    Manages application configuration with JSON persistence.

    Responsibilities:
    - Load configuration from JSON file
    - Save configuration to JSON file
    - Provide default configuration
    - Convert between dataclass and dict representations
    """

    DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.json"

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or self.DEFAULT_CONFIG_PATH
        self._config: AppConfig = AppConfig()

    @property
    def config(self) -> AppConfig:
        """Get current configuration."""
        return self._config

    def load(self) -> AppConfig:
        """Load configuration from JSON file, falling back to defaults."""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                self._config = self._dict_to_config(data)
            except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Failed to load config, using defaults. Error: {e}")
                self._config = AppConfig()
        else:
            self._config = AppConfig()
        return self._config

    def save(self) -> None:
        """Save current configuration to JSON file."""
        data = self._config_to_dict(self._config)
        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def update(self, **kwargs) -> None:
        """Update specific configuration sections and save."""
        for key, value in kwargs.items():
            if hasattr(self._config, key):
                setattr(self._config, key, value)
        self.save()

    def _config_to_dict(self, config: AppConfig) -> dict:
        """Convert AppConfig dataclass to dictionary."""
        return {
            "holidays": {
                "table": config.holidays.table
            },
            "thresholds": {
                "excellent": config.thresholds.excellent,
                "critical": config.thresholds.critical,
                "default_working_days": config.thresholds.default_working_days,
                "high_absenteeism": config.thresholds.high_absenteeism
            },
            "payroll": {
                "overtime_hours_per_shift": config.payroll.overtime_hours_per_shift,
                "attendance_bonus": config.payroll.attendance_bonus,
                "annual_leave_allowance": config.payroll.annual_leave_allowance
            },
            "paths": {
                "last_source_file": config.paths.last_source_file,
                "snapshot_file": config.paths.snapshot_file,
                "output_dir": config.paths.output_dir
            },
            "output_settings": {
                "filename_pattern": config.output_settings.filename_pattern,
                "report_filename_pattern": config.output_settings.report_filename_pattern,
                "pdf_filename_pattern": config.output_settings.pdf_filename_pattern,
                "generate_pdf": config.output_settings.generate_pdf,
                "sort_by": config.output_settings.sort_by
            },
            "defaults": {
                "month": config.defaults.month,
                "year": config.defaults.year
            }
        }

    def _dict_to_config(self, data: dict) -> AppConfig:
        """Convert dictionary to AppConfig dataclass."""
        holidays_data = data.get("holidays", {})
        thresholds_data = data.get("thresholds", {})
        payroll_data = data.get("payroll", {})
        paths_data = data.get("paths", {})
        output_settings_data = data.get("output_settings", {})
        defaults_data = data.get("defaults", {})

        # Build Holidays
        table = holidays_data.get("table")
        holidays = Holidays(
            table={k: [int(d) for d in v] for k, v in table.items()}
            if table is not None else _default_holiday_table()
        )

        # Build Thresholds
        thresholds = Thresholds(
            excellent=thresholds_data.get("excellent", 95),
            critical=thresholds_data.get("critical", 75),
            default_working_days=thresholds_data.get("default_working_days", 22),
            high_absenteeism=thresholds_data.get("high_absenteeism", 5)
        )

        # Build Payroll
        payroll = Payroll(
            overtime_hours_per_shift=payroll_data.get("overtime_hours_per_shift", 2),
            attendance_bonus=payroll_data.get("attendance_bonus", 1000),
            annual_leave_allowance=payroll_data.get("annual_leave_allowance", 21)
        )

        # Build Paths
        paths = Paths(
            last_source_file=paths_data.get("last_source_file", ""),
            snapshot_file=paths_data.get("snapshot_file", ""),
            output_dir=paths_data.get("output_dir", "")
        )

        # Build OutputSettings
        output_settings = OutputSettings(
            filename_pattern=output_settings_data.get(
                "filename_pattern", "attendance_{month}_{year}.xlsx"),
            report_filename_pattern=output_settings_data.get(
                "report_filename_pattern", "report_{emp_id}_{month}_{year}.txt"),
            pdf_filename_pattern=output_settings_data.get(
                "pdf_filename_pattern", "attendance_report_{month}_{year}.pdf"),
            generate_pdf=output_settings_data.get("generate_pdf", True),
            sort_by=output_settings_data.get("sort_by", "sl_no")
        )

        # Build Defaults
        defaults = Defaults(
            month=defaults_data.get("month", "Jan"),
            year=defaults_data.get("year", 2024)
        )

        return AppConfig(
            holidays=holidays,
            thresholds=thresholds,
            payroll=payroll,
            paths=paths,
            output_settings=output_settings,
            defaults=defaults
        )
