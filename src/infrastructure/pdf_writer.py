"""
PDF Writer Module

Generates the roster PDF using fpdf2: a summary table with one row per
employee followed by each employee's text report.
"""

import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from fpdf import FPDF

from domain.analytics import (
    CRITICAL_THRESHOLD, EXCELLENT_THRESHOLD, attendance_percentage, generate_report, rate_tier
)
from domain.entities import EmployeeRecord, RateColorTier
from domain.roster import Roster
from infrastructure.logger import get_logger

logger = get_logger("PdfWriter")


# ==============================================================================
# Font Configuration
# ==============================================================================
WINDOWS_FONT_PATHS: List[Path] = [
    Path("C:/Windows/Fonts/seguisym.ttf"),   # Segoe UI Symbol
    Path("C:/Windows/Fonts/arialuni.ttf"),   # Arial Unicode MS
]

MACOS_FONT_PATHS: List[Path] = [
    Path("/Library/Fonts/Arial Unicode.ttf"),
    Path("/System/Library/Fonts/Supplemental/Arial Unicode.ttf"),
]

LINUX_FONT_PATHS: List[Path] = [
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
    Path("/usr/share/fonts/dejavu/DejaVuSans.ttf"),
    Path("/usr/share/fonts/TTF/DejaVuSans.ttf"),
]

FALLBACK_FONT = "Helvetica"

# Core fonts only cover latin-1
LATIN1_REPLACEMENTS: Dict[str, str] = {
    "•": "-",
    "─": "-",
    "✓": "*",
    "⚠": "!",
}


def find_unicode_font(custom_font_path: Optional[str] = None) -> Optional[Path]:
    """
    Search for a TrueType font that covers the report symbols.
    """
    if custom_font_path:
        custom_path = Path(custom_font_path)
        if custom_path.exists():
            logger.info(f"Using custom font: {custom_path}")
            return custom_path
        else:
            logger.warning(f"Custom font path does not exist: {custom_path}")

    for font_path in _get_platform_fonts():
        if font_path.exists():
            logger.debug(f"Found system font: {font_path}")
            return font_path

    return None


def _get_platform_fonts() -> List[Path]:
    """Get the font search list for the current platform."""
    if sys.platform == 'win32':
        return WINDOWS_FONT_PATHS
    elif sys.platform == 'darwin':
        return MACOS_FONT_PATHS
    else:
        return LINUX_FONT_PATHS


def to_latin1(text: str) -> str:
    """Replace characters a core PDF font cannot encode."""
    for char, replacement in LATIN1_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text.encode("latin-1", "replace").decode("latin-1")


# ==============================================================================
# AttendancePdf Class (A4 Landscape)
# ==============================================================================
class AttendancePdf(FPDF):
    """
    Custom FPDF class for A4 landscape attendance reports.

    Uses a Unicode TrueType font when one is available, otherwise the
    Helvetica core font with text reduced to latin-1.
    """

    _font_family: str = FALLBACK_FONT
    _font_loaded: bool = False

    def __init__(self, title: str = "", custom_font_path: Optional[str] = None):
        # A4 Landscape: 297mm x 210mm
        super().__init__(orientation='L', unit='mm', format='A4')
        self.title_text = title
        self._setup_font(custom_font_path)

    def _setup_font(self, custom_font_path: Optional[str] = None) -> None:
        """Load a Unicode font if available."""
        font_path = find_unicode_font(custom_font_path)

        if font_path:
            try:
                self.add_font("ReportFont", "", str(font_path))
                self._font_family = "ReportFont"
                self._font_loaded = True
                logger.info(f"Loaded font: {font_path.name}")
            except (OSError, RuntimeError, ValueError) as e:
                logger.warning(f"Could not load font {font_path}: {e}")
                self._font_family = FALLBACK_FONT
                self._font_loaded = False
        else:
            logger.debug("No Unicode font found, using Helvetica")
            self._font_family = FALLBACK_FONT
            self._font_loaded = False

    @property
    def font_family_name(self) -> str:
        return self._font_family

    @property
    def unicode_font(self) -> bool:
        return self._font_loaded

    def text_for_font(self, text: str) -> str:
        """Text safe to draw with the loaded font."""
        return text if self._font_loaded else to_latin1(text)

    def header(self) -> None:
        """Draw page header with centered title."""
        self.set_font(self._font_family, '', 14)
        self.set_text_color(0, 0, 0)
        self.cell(0, 10, self.text_for_font(self.title_text), align='C', new_x='LMARGIN', new_y='NEXT')
        self.ln(2)

    def footer(self) -> None:
        """Draw page footer with page number."""
        self.set_y(-12)
        self.set_font(self._font_family, '', 8)
        self.set_text_color(0, 0, 0)
        self.cell(0, 10, f'Page {self.page_no()}/{{nb}}', align='C')


# ==============================================================================
# PdfWriter Class
# ==============================================================================
class PdfWriter:
    """
    Generates the roster PDF.

    Features:
    - A4 Landscape summary table with the ten totals per employee
    - Attendance percentage cell coloured by rate tier
    - One text report per employee after the table
    """

    # RGB Color definitions
    COLORS: Dict[str, Tuple[int, int, int]] = {
        'green': (144, 238, 144),
        'red': (255, 107, 107),
        'yellow': (255, 215, 0),
        'header': (204, 255, 255),
        'white': (255, 255, 255),
    }

    TIER_COLORS: Dict[RateColorTier, str] = {
        RateColorTier.GREEN: 'green',
        RateColorTier.YELLOW: 'yellow',
        RateColorTier.RED: 'red',
    }

    # (header, width mm) in table order
    COLUMNS: List[Tuple[str, float]] = [
        ("Sl#", 10),
        ("Emp ID", 22),
        ("Employee Name", 52),
        ("Present", 16),
        ("Off", 14),
        ("Sundays", 16),
        ("Holidays", 16),
        ("Night", 14),
        ("Holy Wk", 16),
        ("Off Wk", 16),
        ("Absent", 16),
        ("Leave", 14),
        ("Working", 16),
        ("Rate %", 18),
    ]

    NAME_COLUMN = 2

    PAGE_WIDTH = 297
    PAGE_HEIGHT = 210
    MARGIN = 10
    BOTTOM_LIMIT = PAGE_HEIGHT - 20

    HEADER_ROW_HEIGHT = 8
    DATA_ROW_HEIGHT = 6
    REPORT_LINE_HEIGHT = 5

    THIN_LINE = 0.2

    def __init__(
        self,
        excellent_threshold: float = EXCELLENT_THRESHOLD,
        critical_threshold: float = CRITICAL_THRESHOLD,
        custom_font_path: Optional[str] = None
    ):
        self._excellent = excellent_threshold
        self._critical = critical_threshold
        self._custom_font_path = custom_font_path

    def create_roster_report(
        self,
        roster: Roster,
        output_path: Path,
        include_reports: bool = True
    ) -> None:
        """
        Create the roster PDF.

        Args:
            roster: Roster to render, in its current order
            output_path: Path to save the PDF
            include_reports: Append each employee's text report after the table

        Returns early without writing a file when the roster is empty.
        """
        if len(roster) == 0:
            return

        title = f"Attendance Report - {roster.month.label} {roster.year}"
        pdf = AttendancePdf(title=title, custom_font_path=self._custom_font_path)
        pdf.alias_nb_pages()
        pdf.set_margins(self.MARGIN, self.MARGIN, self.MARGIN)
        pdf.set_auto_page_break(auto=False)

        pdf.add_page()
        start_x = (self.PAGE_WIDTH - sum(w for _, w in self.COLUMNS)) / 2
        self._draw_header_row(pdf, start_x)
        for employee in roster:
            if pdf.get_y() + self.DATA_ROW_HEIGHT > self.BOTTOM_LIMIT:
                pdf.add_page()
                self._draw_header_row(pdf, start_x)
            self._draw_employee_row(pdf, employee, start_x)

        if include_reports:
            self._draw_reports(pdf, roster)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        pdf.output(str(output_path))
        logger.info(f"PDF report saved: {output_path}")

    def _draw_header_row(self, pdf: AttendancePdf, start_x: float) -> None:
        """Draw the table header."""
        pdf.set_font(pdf.font_family_name, '', 9)
        pdf.set_fill_color(*self.COLORS['header'])
        pdf.set_text_color(0, 0, 0)
        pdf.set_line_width(self.THIN_LINE)

        pdf.set_x(start_x)
        for label, width in self.COLUMNS:
            pdf.cell(width, self.HEADER_ROW_HEIGHT, label, border=1, align='C', fill=True)
        pdf.ln(self.HEADER_ROW_HEIGHT)

    def _draw_employee_row(self, pdf: AttendancePdf, employee: EmployeeRecord, start_x: float) -> None:
        """Draw one employee's totals and coloured attendance percentage."""
        summary = employee.summary
        percentage = attendance_percentage(summary.total_present, summary.total_working_days)
        tier = rate_tier(percentage, self._critical, self._excellent)

        values = [str(employee.sl_no), employee.emp_id, employee.employee_name]
        values += [str(v) for v in summary.as_row()]

        pdf.set_font(pdf.font_family_name, '', 8)
        pdf.set_text_color(0, 0, 0)
        pdf.set_x(start_x)
        for index, ((_, width), value) in enumerate(zip(self.COLUMNS, values)):
            align = 'L' if index == self.NAME_COLUMN else 'C'
            pdf.cell(width, self.DATA_ROW_HEIGHT, pdf.text_for_font(value), border=1, align=align)

        rate_width = self.COLUMNS[-1][1]
        pdf.set_fill_color(*self.COLORS[self.TIER_COLORS[tier]])
        pdf.cell(rate_width, self.DATA_ROW_HEIGHT, f"{percentage:.1f}", border=1, align='C', fill=True)
        pdf.ln(self.DATA_ROW_HEIGHT)

    def _draw_reports(self, pdf: AttendancePdf, roster: Roster) -> None:
        """Append the text report of every employee, flowing across pages."""
        pdf.set_auto_page_break(auto=True, margin=15)
        pdf.add_page()
        pdf.set_font(pdf.font_family_name, '', 10)
        pdf.set_text_color(0, 0, 0)

        for employee in roster:
            report = generate_report(
                employee, roster.month, roster.year, self._excellent, self._critical
            )
            pdf.multi_cell(0, self.REPORT_LINE_HEIGHT, pdf.text_for_font(report),
                           new_x='LMARGIN', new_y='NEXT')
            pdf.ln(self.REPORT_LINE_HEIGHT)
