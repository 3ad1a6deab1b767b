"""Display-time student search.

Text fields match by substring containment; the grade matches exactly or is
unset. Empty text fields match everything.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from scoremanager.core.models import Student


@dataclass(frozen=True)
class StudentFilter:
    """Current values of the search fields."""

    name: str = ""
    school: str = ""
    grade: int | None = None
    teacher: str = ""

    def matches(self, student: Student) -> bool:
        if self.name and self.name not in student.name:
            return False
        if self.school and self.school not in student.school:
            return False
        if self.grade is not None and student.grade != self.grade:
            return False
        if self.teacher and self.teacher not in student.teacher:
            return False
        return True


def filter_students(students: Iterable[Student], search: StudentFilter) -> list[Student]:
    """Students matching every set search field, in mirror order."""
    return [s for s in students if search.matches(s)]
