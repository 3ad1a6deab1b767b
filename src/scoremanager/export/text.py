"""Plain-text dump of all students and their scores (clipboard surface)."""

from __future__ import annotations

from collections.abc import Iterable

from scoremanager.core.models import Student


def format_student(student: Student) -> str:
    header = f"{student.name} ({student.school} grade {student.grade}, {student.teacher})"
    lines = [
        f" - {sc.type} {sc.date} {sc.subject}: {sc.score} pts" for sc in student.scores
    ]
    return "\n".join([header] + lines)


def dump_text(students: Iterable[Student]) -> str:
    """One block per student, separated by a blank line."""
    return "\n\n".join(format_student(s) for s in students)
