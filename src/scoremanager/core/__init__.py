"""Core business logic.

Modules:
- models: Student and Score records
- periods: period label vocabularies and ordering keys
- scores: per-type filtering, averages, chart series
- search: display-time student search
- board: client state board (mirror + mutation protocol)
"""

__all__ = [
    "models",
    "periods",
    "scores",
    "search",
    "board",
]
