"""Pydantic schemas for the Web API.

Serialization models for students, scores, summaries and sessions.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

from scoremanager.core.models import DEFAULT_SUBJECT, Score, Student
from scoremanager.core.periods import is_known_label
from scoremanager.core.scores import ScoreSummary

SchoolName = Literal["middle school", "high school"]
ScoreType = Literal["in-school", "mock-exam"]


# =============================================================================
# AUTH SCHEMAS
# =============================================================================


class LoginRequest(BaseModel):
    """Request body for signing in."""

    email: str = Field(..., min_length=1, max_length=200)


class LoginResponse(BaseModel):
    """Response for a successful sign-in."""

    session_id: str
    email: str
    student_count: int


class SessionInfoResponse(BaseModel):
    """The current session."""

    session_id: str
    email: str
    created_at: str
    student_count: int


# =============================================================================
# STUDENT SCHEMAS
# =============================================================================


class StudentCreate(BaseModel):
    """Request body for creating a student."""

    name: str = Field(..., min_length=1, max_length=100)
    school: SchoolName = "middle school"
    grade: int = Field(default=1, ge=1, le=3)
    teacher: str = Field(default="", max_length=100)


class ScoreCreate(BaseModel):
    """Request body for adding a score."""

    type: ScoreType = "in-school"
    date: str = Field(default="", max_length=100)
    score: int
    subject: str = Field(default=DEFAULT_SUBJECT, max_length=50)


class ScoreResponse(BaseModel):
    """A score entry with its position in the student's list."""

    index: int
    type: str
    date: str
    score: int
    subject: str
    # False for free-text labels outside both vocabularies
    known_period: bool

    @classmethod
    def from_score(cls, index: int, score: Score) -> ScoreResponse:
        return cls(
            index=index,
            type=score.type,
            date=score.date,
            score=score.score,
            subject=score.subject,
            known_period=is_known_label(score.date),
        )


class StudentResponse(BaseModel):
    """Response for a student."""

    id: str
    name: str
    school: str
    grade: int
    teacher: str
    scores: list[ScoreResponse]

    @classmethod
    def from_student(cls, student: Student) -> StudentResponse:
        return cls(
            id=student.id,
            name=student.name,
            school=student.school,
            grade=student.grade,
            teacher=student.teacher,
            scores=[ScoreResponse.from_score(i, s) for i, s in enumerate(student.scores)],
        )


class StudentListResponse(BaseModel):
    """Response for list of students."""

    students: list[StudentResponse]
    count: int
    total: int


class ScoreSummaryResponse(BaseModel):
    """Sorted scores of one type plus their average."""

    student_id: str
    type: str
    scores: list[ScoreResponse]
    average: float
    average_display: str

    @classmethod
    def from_summary(cls, student: Student, summary: ScoreSummary) -> ScoreSummaryResponse:
        return cls(
            student_id=student.id,
            type=summary.score_type,
            scores=[
                ScoreResponse.from_score(i, s)
                for i, s in zip(summary.indices, summary.scores)
            ],
            average=summary.average,
            average_display=summary.average_display,
        )


class PeriodsResponse(BaseModel):
    """Period label vocabularies by score type."""

    in_school: list[str] = Field(serialization_alias="in-school")
    mock_exam: list[str] = Field(serialization_alias="mock-exam")


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
