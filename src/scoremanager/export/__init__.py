"""Snapshot exports of the mirror: xlsx, PDF, PNG charts and plain text."""

from scoremanager.export.spreadsheet import EXPORT_COLUMNS, export_xlsx, score_rows
from scoremanager.export.text import dump_text

__all__ = ["EXPORT_COLUMNS", "dump_text", "export_xlsx", "score_rows"]
