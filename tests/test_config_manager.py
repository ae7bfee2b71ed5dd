"""
Unit tests for ConfigManager and the configuration dataclasses.
"""

import pytest
import json
import tempfile
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from config.config_manager import (
    ConfigManager, AppConfig, Defaults, Holidays, OutputSettings, Paths, Payroll, Thresholds
)
from domain.calendar_helper import DEFAULT_HOLIDAY_TABLE, Month


class TestThresholds:
    """Tests for Thresholds and Payroll dataclasses."""

    def test_default_values(self):
        t = Thresholds()
        assert t.excellent == 95
        assert t.critical == 75
        assert t.default_working_days == 22
        assert t.high_absenteeism == 5

    def test_payroll_defaults(self):
        p = Payroll()
        assert p.overtime_hours_per_shift == 2
        assert p.attendance_bonus == 1000
        assert p.annual_leave_allowance == 21


class TestOutputSettings:
    """Tests for OutputSettings dataclass."""

    def test_default_values(self):
        os = OutputSettings()

        assert os.filename_pattern == "attendance_{month}_{year}.xlsx"
        assert os.report_filename_pattern == "report_{emp_id}_{month}_{year}.txt"
        assert os.pdf_filename_pattern == "attendance_report_{month}_{year}.pdf"
        assert os.generate_pdf is True
        assert os.sort_by == "sl_no"

    def test_defaults_and_paths(self):
        assert Defaults().month == "Jan"
        assert Defaults().year == 2024
        assert Paths().snapshot_file == ""


class TestHolidays:
    """Tests for the Holidays section."""

    def test_default_table_is_a_copy(self):
        holidays = Holidays()
        holidays.table["Jan"].append(15)
        assert DEFAULT_HOLIDAY_TABLE["Jan"] == [1, 26]

    def test_to_calendar(self):
        calendar = Holidays(table={"Jun": [5]}).to_calendar()
        assert calendar.days_for(Month.JUN) == [5]
        assert calendar.days_for(Month.JAN) == []


class TestConfigManager:
    """Tests for ConfigManager class."""

    def test_load_default_config(self):
        """Test loading default config when file doesn't exist."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"
            manager = ConfigManager(config_path)
            config = manager.load()

            assert isinstance(config, AppConfig)
            assert config.thresholds.excellent == 95
            assert config.holidays.table["Jan"] == [1, 26]

    def test_save_and_load_config(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"
            manager = ConfigManager(config_path)

            config = manager.load()
            config.thresholds.critical = 80
            config.holidays.table["Jun"] = [17]
            config.output_settings.generate_pdf = False
            config.paths.output_dir = "/custom/path"
            config.defaults.month = "Mar"
            manager.save()

            config2 = ConfigManager(config_path).load()

            assert config2.thresholds.critical == 80
            assert config2.holidays.table["Jun"] == [17]
            assert config2.output_settings.generate_pdf is False
            assert config2.paths.output_dir == "/custom/path"
            assert config2.defaults.month == "Mar"

    def test_partial_config_takes_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"
            with open(config_path, 'w', encoding='utf-8') as f:
                json.dump({"thresholds": {"excellent": 90}, "holidays": {"table": {"Dec": ["25", 31]}}}, f)

            config = ConfigManager(config_path).load()

            assert config.thresholds.excellent == 90
            assert config.thresholds.critical == 75
            assert config.holidays.table == {"Dec": [25, 31]}
            assert config.payroll.attendance_bonus == 1000
            assert config.output_settings.sort_by == "sl_no"

    def test_corrupt_file_falls_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"
            config_path.write_text("{not json", encoding="utf-8")

            config = ConfigManager(config_path).load()

            assert config.thresholds.excellent == 95

    def test_update_saves(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"
            manager = ConfigManager(config_path)
            manager.load()
            manager.update(thresholds=Thresholds(excellent=99), unknown_section=1)

            data = json.loads(config_path.read_text(encoding="utf-8"))
            assert data["thresholds"]["excellent"] == 99
            assert "unknown_section" not in data


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
