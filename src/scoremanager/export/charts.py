"""Score trend line charts rendered to PNG."""

from __future__ import annotations

from io import BytesIO

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from scoremanager.core.models import Student  # noqa: E402
from scoremanager.core.scores import chart_series  # noqa: E402


def render_score_chart(student: Student, score_type: str) -> bytes:
    """Line chart of one score type for one student, sorted by period."""
    series = chart_series(student, score_type)

    fig, ax = plt.subplots(figsize=(6.0, 3.0))
    try:
        ax.plot(series.labels, series.values, color=series.color, marker="o", label=series.label)
        ax.set_title(f"{student.name} - {series.label}")
        ax.set_ylabel("Score")
        ax.tick_params(axis="x", labelsize=7, rotation=30)
        ax.tick_params(axis="y", labelsize=8)
        if series.values:
            ax.set_ylim(0, max(100, max(series.values)) * 1.05)
        ax.legend(loc="lower right", fontsize=8, frameon=False)
        fig.tight_layout()

        buffer = BytesIO()
        fig.savefig(buffer, format="png", dpi=120)
    finally:
        plt.close(fig)
    return buffer.getvalue()
