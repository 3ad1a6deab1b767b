"""Spreadsheet export (xlsx).

One row per (student, score) pair with a fixed column order. Students with no
scores produce no rows.
"""

from __future__ import annotations

from collections.abc import Iterable
from io import BytesIO

import openpyxl
import structlog
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from scoremanager.core.models import Student

logger = structlog.get_logger(__name__)

EXPORT_COLUMNS = ["name", "school", "grade", "teacher", "type", "period", "score"]
COLUMN_WIDTHS = [18, 16, 8, 18, 12, 30, 8]
HEADER_COLOR = "DDEBF7"


def score_rows(students: Iterable[Student]) -> list[list]:
    """Flatten students into export rows, in EXPORT_COLUMNS order."""
    return [
        [s.name, s.school, s.grade, s.teacher, sc.type, sc.date, sc.score]
        for s in students
        for sc in s.scores
    ]


def export_xlsx(students: Iterable[Student], sheet_title: str = "Scores") -> bytes:
    """Build an xlsx workbook of every score and return its bytes."""
    rows = score_rows(students)

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_title

    header_font = Font(bold=True)
    header_fill = PatternFill(start_color=HEADER_COLOR, end_color=HEADER_COLOR, fill_type="solid")

    for col, header in enumerate(EXPORT_COLUMNS, 1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")

    for row_idx, row in enumerate(rows, 2):
        for col, value in enumerate(row, 1):
            cell = ws.cell(row=row_idx, column=col, value=value)
            # Text like "=1+2" stays text, never a formula
            if isinstance(value, str):
                cell.data_type = "s"

    for col, width in enumerate(COLUMN_WIDTHS, 1):
        ws.column_dimensions[get_column_letter(col)].width = width
    ws.freeze_panes = "A2"

    buffer = BytesIO()
    wb.save(buffer)
    logger.info("export.xlsx", rows=len(rows))
    return buffer.getvalue()
