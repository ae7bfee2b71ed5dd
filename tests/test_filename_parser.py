"""
Unit tests for FilenameParser and format_filename.
"""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.calendar_helper import Month
from infrastructure.filename_parser import FilenameParser, format_filename


class TestParseMonthYear:
    """Tests for month/year extraction."""

    @pytest.mark.parametrize("filename,expected", [
        ("attendance_Feb_2024.xlsx", (Month.FEB, 2024)),
        ("attendance_template_Jan_2025.xlsx", (Month.JAN, 2025)),
        ("attendance-september-2023.xlsx", (Month.SEP, 2023)),
        ("Mar 2024.xlsx", (Month.MAR, 2024)),
        ("OCT_2022", (Month.OCT, 2022)),
    ])
    def test_valid(self, filename, expected):
        assert FilenameParser.parse_month_year(filename) == expected

    @pytest.mark.parametrize("filename", [
        "attendance.xlsx",
        "attendance_2024.xlsx",
        "attendance_Foo_2024.xlsx",
        "attendance_Feb_24.xlsx",
    ])
    def test_invalid(self, filename):
        with pytest.raises(ValueError):
            FilenameParser.parse_month_year(filename)
        assert FilenameParser.try_parse_month_year(filename) is None


class TestFormatFilename:
    """Tests for format_filename utility function."""

    def test_basic_formatting(self):
        assert format_filename("attendance_{month}_{year}.xlsx", Month.FEB, 2024) == "attendance_Feb_2024.xlsx"

    def test_extra_placeholders(self):
        result = format_filename("report_{emp_id}_{month}_{year}.txt", Month.JUN, 2024, emp_id="QR-417")
        assert result == "report_QR-417_Jun_2024.txt"

    def test_round_trip_default_pattern(self):
        name = format_filename("attendance_{month}_{year}.xlsx", Month.DEC, 2026)
        assert FilenameParser.parse_month_year(name) == (Month.DEC, 2026)
