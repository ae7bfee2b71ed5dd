"""
Filename Parser Module

Parses attendance sheet filenames to extract month and year, and formats
output filenames from configured patterns.
"""

import re
from typing import Optional, Tuple

from domain.calendar_helper import Month


class FilenameParser:
    """
    Parses attendance sheet filenames.

    Expected format: attendance_<Mon>_<yyyy> (e.g., attendance_Feb_2024.xlsx).
    Full month names and any case are accepted; the prefix is optional.
    """

    # Month token followed by a 4-digit year, separated by '_', '-' or space
    PATTERN = re.compile(r'(?:^|[_\-\s])([A-Za-z]{3,9})[_\-\s](\d{4})(?:\D|$)')

    @classmethod
    def parse_month_year(cls, filename: str) -> Tuple[Month, int]:
        """
        Parse month and year from a filename.

        Args:
            filename: The filename to parse (e.g., "attendance_Feb_2024.xlsx")

        Returns:
            Tuple of (Month, year)

        Raises:
            ValueError: If filename doesn't contain a month and year
        """
        for match in cls.PATTERN.finditer(filename):
            month = Month.parse(match.group(1))
            if month is not None:
                return month, int(match.group(2))
        raise ValueError(
            f"Invalid filename format: {filename}. Expected format: attendance_Mon_yyyy"
        )

    @classmethod
    def try_parse_month_year(cls, filename: str) -> Optional[Tuple[Month, int]]:
        """
        Try to parse month and year from filename, returning None on failure.
        """
        try:
            return cls.parse_month_year(filename)
        except ValueError:
            return None


def format_filename(pattern: str, month: Month, year: int, **extra: str) -> str:
    """Format filename pattern with {month}, {year} and any extra placeholders."""
    return pattern.format(month=month.code, year=year, **extra)
