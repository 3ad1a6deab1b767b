"""Student and score records.

Documents in the students collection have the shape:

    {
        "name": "Kim",
        "school": "high school",
        "grade": 1,
        "teacher": "Lee",
        "scores": [
            {"type": "in-school", "date": "high1 1st-semester-midterm",
             "score": 95, "subject": "English"}
        ]
    }

The document id is assigned by the store and is not part of the body.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# =============================================================================
# CONSTANTS
# =============================================================================

MIDDLE_SCHOOL = "middle school"
HIGH_SCHOOL = "high school"
SCHOOLS = (MIDDLE_SCHOOL, HIGH_SCHOOL)

IN_SCHOOL = "in-school"
MOCK_EXAM = "mock-exam"
SCORE_TYPES = (IN_SCHOOL, MOCK_EXAM)

DEFAULT_SUBJECT = "English"


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass(frozen=True)
class Score:
    """A single score entry embedded in a student document."""

    type: str
    date: str
    score: int
    subject: str = DEFAULT_SUBJECT

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for document storage."""
        return {
            "type": self.type,
            "date": self.date,
            "score": self.score,
            "subject": self.subject,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Score:
        """Build a Score from a stored document fragment."""
        return cls(
            type=str(data.get("type", "")),
            date=str(data.get("date", "")),
            score=int(data.get("score", 0)),
            subject=str(data.get("subject", DEFAULT_SUBJECT)),
        )


@dataclass(frozen=True)
class Student:
    """A student document with its embedded score list."""

    id: str
    name: str
    school: str
    grade: int
    teacher: str = ""
    scores: tuple[Score, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the document body (without the id)."""
        return {
            "name": self.name,
            "school": self.school,
            "grade": self.grade,
            "teacher": self.teacher,
            "scores": [s.to_dict() for s in self.scores],
        }

    @classmethod
    def from_dict(cls, student_id: str, data: dict[str, Any]) -> Student:
        """Build a Student from a document id and body."""
        return cls(
            id=student_id,
            name=str(data.get("name", "")),
            school=str(data.get("school", "")),
            grade=int(data.get("grade", 0)),
            teacher=str(data.get("teacher", "")),
            scores=tuple(Score.from_dict(s) for s in data.get("scores", [])),
        )
