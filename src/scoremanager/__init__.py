"""Score Manager - student score tracker.

Packages:
- core: models, period ordering, score aggregation, client state board
- db: SQLite document store for the students collection
- auth: identity provider and allow-list access gate
- export: spreadsheet, PDF, chart and text exports
- web: FastAPI application
- cli: Typer command line
"""

__version__ = "0.1.0"
