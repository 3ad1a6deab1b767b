"""Period label vocabularies and chronological ordering.

Labels follow the grammar "<level><grade> <period>", e.g.
"middle2 1st-semester-final" or "high3 September".

Ordering key:
    level_base(level) + grade * 100 + period_rank(period)

with level_base(middle) = 0 and level_base(high) = 1000, so every high-school
period sorts after every middle-school period. Labels that do not match the
grammar get SENTINEL_KEY and sort last.
"""

from __future__ import annotations

import re
from typing import Any

from scoremanager.core.models import IN_SCHOOL, MOCK_EXAM

# =============================================================================
# CONSTANTS
# =============================================================================

SENTINEL_KEY = 9999

LEVELS = ("middle", "high")
LEVEL_BASE = {"middle": 0, "high": 1000}

IN_SCHOOL_TERMS = (
    "1st-semester-midterm",
    "1st-semester-final",
    "2nd-semester-midterm",
    "2nd-semester-final",
)
MOCK_EXAM_MONTHS = ("March", "June", "September", "October")

# Terms rank 1-4, months rank 5-8
PERIOD_RANK = {
    name: rank
    for rank, name in enumerate(IN_SCHOOL_TERMS + MOCK_EXAM_MONTHS, start=1)
}

LABEL_PATTERN = re.compile(r"(middle|high)([123]) (.+)")


# =============================================================================
# VOCABULARIES
# =============================================================================


def in_school_labels() -> list[str]:
    """All 24 in-school labels, in chronological order."""
    return [
        f"{level}{grade} {term}"
        for level in LEVELS
        for grade in (1, 2, 3)
        for term in IN_SCHOOL_TERMS
    ]


def mock_exam_labels() -> list[str]:
    """All 12 mock-exam labels (high school only), in chronological order."""
    return [f"high{grade} {month}" for grade in (1, 2, 3) for month in MOCK_EXAM_MONTHS]


def period_labels(score_type: str) -> list[str]:
    """Label vocabulary for a score type. Unknown types have no vocabulary."""
    if score_type == IN_SCHOOL:
        return in_school_labels()
    if score_type == MOCK_EXAM:
        return mock_exam_labels()
    return []


def is_known_label(label: str) -> bool:
    """True if the label belongs to either vocabulary."""
    return label in in_school_labels() or label in mock_exam_labels()


# =============================================================================
# ORDERING
# =============================================================================


def order_key(label: Any) -> int:
    """Map a period label to an integer sort key.

    Never raises: anything that does not match the label grammar gets
    SENTINEL_KEY. A matching label with an unknown period name gets rank 0,
    sorting before all named periods of the same grade.
    """
    if not isinstance(label, str):
        return SENTINEL_KEY

    match = LABEL_PATTERN.fullmatch(label)
    if match is None:
        return SENTINEL_KEY

    level, grade, period = match.groups()
    return LEVEL_BASE[level] + int(grade) * 100 + PERIOD_RANK.get(period, 0)
