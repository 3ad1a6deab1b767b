"""Paginated PDF table export.

Same columns as the spreadsheet export. The header row repeats on every page.
Helvetica cannot render non-Latin names; pass a TTF font path to embed one.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from io import BytesIO
from pathlib import Path

import structlog
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from scoremanager.core.models import Student
from scoremanager.export.spreadsheet import EXPORT_COLUMNS, score_rows

logger = structlog.get_logger(__name__)

DEFAULT_FONT = "Helvetica"
EMBEDDED_FONT = "ScoreReportFont"
COL_WIDTHS = [1.1 * inch, 1.0 * inch, 0.5 * inch, 1.0 * inch, 0.8 * inch, 1.8 * inch, 0.5 * inch]


def _register_font(font_path: str | None) -> str:
    """Register a TTF font if given, returning the font name to use."""
    if not font_path:
        return DEFAULT_FONT
    if not Path(font_path).exists():
        logger.warning("export.pdf_font_missing", path=font_path)
        return DEFAULT_FONT
    pdfmetrics.registerFont(TTFont(EMBEDDED_FONT, font_path))
    return EMBEDDED_FONT


def export_pdf(
    students: Iterable[Student],
    title: str = "Score Report",
    font_path: str | None = None,
) -> bytes:
    """Render every score as a paginated PDF table and return its bytes."""
    font = _register_font(font_path)
    rows = score_rows(students)

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=title,
        leftMargin=0.6 * inch,
        rightMargin=0.6 * inch,
        topMargin=0.6 * inch,
        bottomMargin=0.6 * inch,
    )

    styles = getSampleStyleSheet()
    title_style = styles["Title"]
    title_style.fontName = font if font != DEFAULT_FONT else "Helvetica-Bold"
    small = styles["Normal"]
    small.fontName = font

    generated = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    elements = [
        Paragraph(title, title_style),
        Paragraph(f"Generated: {generated} | Rows: {len(rows)}", small),
        Spacer(1, 0.2 * inch),
    ]

    data = [EXPORT_COLUMNS] + [[str(v) for v in row] for row in rows]
    table = Table(data, colWidths=COL_WIDTHS, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (-1, -1), font),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#DDEBF7")),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("ALIGN", (2, 1), (2, -1), "CENTER"),
                ("ALIGN", (6, 1), (6, -1), "RIGHT"),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F5F5F5")]),
            ]
        )
    )
    elements.append(table)

    doc.build(elements)
    logger.info("export.pdf", rows=len(rows), font=font)
    return buffer.getvalue()
