"""Score filtering and aggregation.

Derived views over a student's score list. Everything here is pure and is
recomputed from the current mirror on every render.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from scoremanager.core.models import IN_SCHOOL, MOCK_EXAM, Score, Student
from scoremanager.core.periods import order_key

SERIES_COLORS = {IN_SCHOOL: "blue", MOCK_EXAM: "green"}


@dataclass(frozen=True)
class ScoreSummary:
    """Sorted scores of one type and their mean."""

    score_type: str
    scores: tuple[Score, ...]
    average: float
    # Positions of `scores` in the student's stored list
    indices: tuple[int, ...] = ()

    @property
    def average_display(self) -> str:
        return format_average(self.average)


@dataclass(frozen=True)
class ChartSeries:
    """Data for one line chart."""

    label: str
    labels: list[str]
    values: list[int]
    color: str


def filter_indexed_scores(
    scores: Iterable[Score], score_type: str
) -> list[tuple[int, Score]]:
    """Like filter_scores, keeping each score's position in the stored list."""
    matching = [(i, s) for i, s in enumerate(scores) if s.type == score_type]
    return sorted(matching, key=lambda pair: order_key(pair[1].date))


def filter_scores(scores: Iterable[Score], score_type: str) -> list[Score]:
    """Scores of the given type, ascending by period order (stable)."""
    return [s for _, s in filter_indexed_scores(scores, score_type)]


def average(values: Iterable[float]) -> float:
    """Arithmetic mean. An empty input averages to 0."""
    values = list(values)
    if not values:
        return 0
    return sum(values) / len(values)


def format_average(value: float) -> str:
    """Two-decimal display form of an average."""
    return f"{value:.2f}"


def summarize(student: Student, score_type: str) -> ScoreSummary:
    """Build the per-type summary shown under each student."""
    indexed = filter_indexed_scores(student.scores, score_type)
    return ScoreSummary(
        score_type=score_type,
        scores=tuple(s for _, s in indexed),
        average=average(s.score for _, s in indexed),
        indices=tuple(i for i, _ in indexed),
    )


def chart_series(student: Student, score_type: str) -> ChartSeries:
    """Line-chart data for one score type."""
    scores = filter_scores(student.scores, score_type)
    return ChartSeries(
        label=f"{score_type} scores",
        labels=[s.date for s in scores],
        values=[s.score for s in scores],
        color=SERIES_COLORS.get(score_type, "gray"),
    )
