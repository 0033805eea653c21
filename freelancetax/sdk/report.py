"""Income report export.

The report lists every record of a period (date, description, amount) and
a total. The total comes from the same aggregate_period() the tax summary
uses, so a report and the on-screen summary always reconcile for the same
period filter.

Amounts in the report are always EUR, whatever the display currency.

The built-in Helvetica has no Cyrillic glyphs. When a DejaVu Sans TTF is
installed (or a font file is passed in) it is embedded instead, so Bulgarian
names and descriptions survive export.
"""

import logging
import re
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Optional, Tuple
from xml.sax.saxutils import escape

import PyPDF2
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.fonts import addMapping
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .schemas import IncomeRecord, UserSettings
from .taxes.engine import aggregate_period

logger = logging.getLogger(__name__)

REPORT_TITLE = "Monthly Income Report"
TOTAL_PATTERN = re.compile(r"Total:\s*(-?[\d,]+\.\d{2})\s*EUR")

BUILTIN_FONT = "Helvetica"
BUILTIN_BOLD_FONT = "Helvetica-Bold"
FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/local/share/fonts/DejaVuSans.ttf",
    "/Library/Fonts/DejaVuSans.ttf",
)


def _period_label(year: Optional[int], month: Optional[int]) -> str:
    if year is None:
        return "All records"
    if month is None:
        return f"{year}"
    return f"{year}-{month:02d}"


def find_font_file() -> Optional[Path]:
    """First installed DejaVu Sans from FONT_CANDIDATES, or None."""
    for candidate in FONT_CANDIDATES:
        path = Path(candidate)
        if path.is_file():
            return path
    return None


@lru_cache(maxsize=None)
def _register_font(font_file: str) -> Tuple[str, str]:
    regular = Path(font_file)
    # DejaVuSans.ttf ships next to DejaVuSans-Bold.ttf
    bold = regular.with_name(f"{regular.stem}-Bold{regular.suffix}")
    if not bold.is_file():
        bold = regular

    font = f"Report-{regular.stem}"
    bold_font = f"{font}-Bold"
    pdfmetrics.registerFont(TTFont(font, str(regular)))
    pdfmetrics.registerFont(TTFont(bold_font, str(bold)))
    # <b> lookup; upright faces registered last
    addMapping(font, 0, 1, font)
    addMapping(font, 1, 1, bold_font)
    addMapping(font, 0, 0, font)
    addMapping(font, 1, 0, bold_font)
    logger.debug("Registered report font %s (bold: %s)", regular, bold)
    return font, bold_font


def resolve_report_fonts(font_path: Optional[Path] = None) -> Tuple[str, str]:
    """Regular and bold font names for the report.

    Args:
        font_path: TTF file to embed. None looks for an installed DejaVu Sans
            and uses the built-in Helvetica when there is none.

    Raises:
        ValueError: If font_path is given but is not a usable TTF file
    """
    if font_path is None:
        font_path = find_font_file()
        if font_path is None:
            logger.debug("No TTF report font found, using %s", BUILTIN_FONT)
            return BUILTIN_FONT, BUILTIN_BOLD_FONT

    font_path = Path(font_path).expanduser()
    if not font_path.is_file():
        raise ValueError(f"Report font not found: {font_path}")
    try:
        return _register_font(str(font_path.resolve()))
    except Exception as e:
        raise ValueError(f"Cannot load report font {font_path}: {e}") from e


def select_records(
    records: Iterable[IncomeRecord],
    year: Optional[int] = None,
    month: Optional[int] = None,
) -> List[IncomeRecord]:
    """Records of the period, in ledger order.

    Raises:
        ValueError: If month is given without year or outside 1-12
    """
    if month is not None:
        if year is None:
            raise ValueError("month filter requires a year")
        if not 1 <= month <= 12:
            raise ValueError(f"month must be 1-12, got: {month}")

    return [
        r for r in records
        if (year is None or r.date.year == year)
        and (month is None or r.date.month == month)
    ]


def report_total(
    records: Iterable[IncomeRecord],
    year: Optional[int] = None,
    month: Optional[int] = None,
) -> float:
    """Total for the period; identical to the summary's aggregation."""
    records = list(records)
    if year is None:
        return sum(r.amount for r in records)
    return aggregate_period(records, year, month)


def build_report_rows(
    records: Iterable[IncomeRecord],
    year: Optional[int] = None,
    month: Optional[int] = None,
) -> dict:
    """Table rows and total for the period.

    Returns:
        Dict with 'rows' (list of [date, description, amount] strings),
        'total' (float) and 'period' (label)
    """
    selected = select_records(records, year, month)
    rows = [
        [r.date.isoformat(), r.description, f"{r.amount:,.2f}"]
        for r in selected
    ]
    return {
        "rows": rows,
        "total": report_total(selected, year, month),
        "period": _period_label(year, month),
    }


def export_report_pdf(
    path: Path,
    records: Iterable[IncomeRecord],
    settings: Optional[UserSettings] = None,
    year: Optional[int] = None,
    month: Optional[int] = None,
    generated_on: Optional[date] = None,
    font_path: Optional[Path] = None,
) -> Path:
    """Write the income report as an A4 PDF.

    Args:
        path: Output file
        records: Ledger snapshot
        settings: Profile for the header (name, EIC); defaults shown as N/A
        year, month: Optional period filter (month is 1-12)
        generated_on: Date printed in the header (default: today)
        font_path: TTF file to embed (see resolve_report_fonts)

    Returns:
        Path to the written PDF
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if settings is None:
        settings = UserSettings()
    if generated_on is None:
        generated_on = date.today()

    report = build_report_rows(records, year, month)
    font, bold_font = resolve_report_fonts(font_path)

    doc = SimpleDocTemplate(
        str(path),
        pagesize=A4,
        rightMargin=40,
        leftMargin=40,
        topMargin=40,
        bottomMargin=40,
        title=REPORT_TITLE,
    )
    styles = getSampleStyleSheet()
    styles["Normal"].fontName = font
    for heading in ("Heading1", "Heading2"):
        styles[heading].fontName = bold_font

    elements = []
    elements.append(Paragraph(f"<b>{REPORT_TITLE}</b>", styles["Heading1"]))
    elements.append(Spacer(1, 10))
    elements.append(Paragraph(
        f"Generated on: {generated_on.isoformat()}<br/>"
        f"Period: {report['period']}<br/>"
        f"Name: {escape(settings.name or 'N/A')}<br/>"
        f"EIC: {escape(settings.eic or 'N/A')}",
        styles["Normal"]
    ))
    elements.append(Spacer(1, 20))

    table_data = [["Date", "Description", "Amount (EUR)"]]
    table_data.extend(report["rows"])

    # repeatRows keeps the header on every page
    table = Table(table_data, colWidths=[80, 300, 100], repeatRows=1)
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), font),
        ("FONTNAME", (0, 0), (-1, 0), bold_font),
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]))
    elements.append(table)
    elements.append(Spacer(1, 20))

    elements.append(Paragraph(f"<b>Total: {report['total']:,.2f} EUR</b>", styles["Heading2"]))

    doc.build(elements)
    logger.info("Exported %d record(s) to %s", len(report["rows"]), path)
    return path


def read_report_total(path: Path) -> float:
    """Extract the total line from a generated report.

    Raises:
        ValueError: If the PDF has no total line
    """
    with open(path, "rb") as f:
        reader = PyPDF2.PdfReader(f)
        text = "\n".join(page.extract_text() or "" for page in reader.pages)

    # The total line is printed last; descriptions may contain the same words
    totals = TOTAL_PATTERN.findall(text)
    if not totals:
        raise ValueError(f"No total found in report: {path}")
    return float(totals[-1].replace(",", ""))


def reconcile_report(
    path: Path,
    records: Iterable[IncomeRecord],
    year: Optional[int] = None,
    month: Optional[int] = None,
) -> dict:
    """Compare a report's printed total with the ledger for the same period.

    Returns:
        Dict with 'report_total', 'ledger_total' and 'match' (to the cent)
    """
    printed = read_report_total(path)
    expected = report_total(select_records(records, year, month), year, month)
    return {
        "report_total": printed,
        "ledger_total": expected,
        "match": round(printed, 2) == round(expected, 2),
    }
