"""Client state board: the in-memory mirror of the students collection.

State lives in an immutable BoardState that only changes through reduce().
Every mutation follows the same protocol:

    remote write -> re-fetch the whole collection -> MirrorReplaced

A failed write leaves the mirror untouched and records the error. Nothing is
retried. Mutations are not serialized against each other: whichever re-fetch
completes last decides the visible state.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Callable, Protocol, Union

import structlog

from scoremanager.core.models import DEFAULT_SUBJECT, Score, Student
from scoremanager.core.search import StudentFilter, filter_students
from scoremanager.db.students_repository import StoreError

logger = structlog.get_logger(__name__)


class StudentStoreProtocol(Protocol):
    """Document-store operations the board relies on."""

    def list_students(self) -> list[Student]: ...

    def create_student(
        self, name: str, school: str, grade: int, teacher: str = ""
    ) -> Student: ...

    def replace_scores(self, student_id: str, scores: list[Score]) -> None: ...

    def delete_student(self, student_id: str) -> None: ...


# =============================================================================
# STATE AND ACTIONS
# =============================================================================


@dataclass(frozen=True)
class BoardState:
    """Snapshot of the client state."""

    students: tuple[Student, ...] = ()
    search: StudentFilter = field(default_factory=StudentFilter)
    loaded: bool = False
    refreshed_at: str | None = None
    last_error: str | None = None

    @property
    def visible_students(self) -> list[Student]:
        """Students passing the current search fields."""
        return filter_students(self.students, self.search)

    def get_student(self, student_id: str) -> Student | None:
        for student in self.students:
            if student.id == student_id:
                return student
        return None


@dataclass(frozen=True)
class MirrorReplaced:
    students: tuple[Student, ...]
    refreshed_at: str


@dataclass(frozen=True)
class SearchChanged:
    search: StudentFilter


@dataclass(frozen=True)
class OperationFailed:
    message: str


@dataclass(frozen=True)
class MirrorCleared:
    pass


Action = Union[MirrorReplaced, SearchChanged, OperationFailed, MirrorCleared]


def reduce(state: BoardState, action: Action) -> BoardState:
    """Return the next state for an action."""
    if isinstance(action, MirrorReplaced):
        return replace(
            state,
            students=tuple(action.students),
            loaded=True,
            refreshed_at=action.refreshed_at,
            last_error=None,
        )
    if isinstance(action, SearchChanged):
        return replace(state, search=action.search)
    if isinstance(action, OperationFailed):
        return replace(state, last_error=action.message)
    if isinstance(action, MirrorCleared):
        return BoardState(search=state.search)
    raise TypeError(f"Unknown action: {action!r}")


@dataclass
class MutationResult:
    """Outcome of a board operation."""

    success: bool
    message: str
    student_id: str | None = None
    skipped: bool = False


# =============================================================================
# BOARD
# =============================================================================


class ScoreBoard:
    """Owns the mirror and runs the mutation protocol against a store."""

    def __init__(self, store: StudentStoreProtocol, state: BoardState | None = None):
        self._store = store
        self._state = state or BoardState()

    @property
    def state(self) -> BoardState:
        return self._state

    def dispatch(self, action: Action) -> BoardState:
        self._state = reduce(self._state, action)
        return self._state

    def set_search(self, search: StudentFilter) -> BoardState:
        return self.dispatch(SearchChanged(search=search))

    def clear(self) -> BoardState:
        return self.dispatch(MirrorCleared())

    async def refresh(self) -> MutationResult:
        """Re-fetch the whole collection and replace the mirror."""
        try:
            students = await asyncio.to_thread(self._store.list_students)
        except StoreError as e:
            logger.warning("board.refresh_failed", error=str(e))
            self.dispatch(OperationFailed(message=str(e)))
            return MutationResult(success=False, message=str(e))

        self.dispatch(
            MirrorReplaced(
                students=tuple(students),
                refreshed_at=datetime.now(timezone.utc).isoformat(),
            )
        )
        logger.debug("board.refreshed", count=len(students))
        return MutationResult(success=True, message=f"Loaded {len(students)} students")

    async def _mutate(
        self,
        operation: str,
        write: Callable[..., Any],
        *args: Any,
        student_id: str | None = None,
    ) -> MutationResult:
        try:
            written = await asyncio.to_thread(write, *args)
        except StoreError as e:
            logger.warning("board.write_failed", operation=operation, error=str(e))
            self.dispatch(OperationFailed(message=str(e)))
            return MutationResult(success=False, message=str(e), student_id=student_id)

        if isinstance(written, Student):
            student_id = written.id

        refreshed = await self.refresh()
        if not refreshed.success:
            return MutationResult(
                success=False,
                message=f"{operation} saved, but reloading failed: {refreshed.message}",
                student_id=student_id,
            )

        logger.info("board.mutated", operation=operation, student_id=student_id)
        return MutationResult(success=True, message=f"{operation} done", student_id=student_id)

    def _skip(self, operation: str, student_id: str) -> MutationResult:
        logger.debug("board.skipped", operation=operation, student_id=student_id)
        return MutationResult(
            success=False,
            message=f"Student '{student_id}' not found",
            student_id=student_id,
            skipped=True,
        )

    async def add_student(
        self, name: str, school: str, grade: int, teacher: str = ""
    ) -> MutationResult:
        return await self._mutate(
            "add student", self._store.create_student, name, school, grade, teacher
        )

    async def add_score(
        self,
        student_id: str,
        score_type: str,
        date: str,
        score: int,
        subject: str = DEFAULT_SUBJECT,
    ) -> MutationResult:
        student = self._state.get_student(student_id)
        if student is None:
            return self._skip("add score", student_id)

        updated = list(student.scores) + [
            Score(type=score_type, date=date, score=score, subject=subject)
        ]
        return await self._mutate(
            "add score", self._store.replace_scores, student_id, updated,
            student_id=student_id,
        )

    async def delete_score(self, student_id: str, index: int) -> MutationResult:
        student = self._state.get_student(student_id)
        if student is None or not 0 <= index < len(student.scores):
            return self._skip("delete score", student_id)

        updated = [s for i, s in enumerate(student.scores) if i != index]
        return await self._mutate(
            "delete score", self._store.replace_scores, student_id, updated,
            student_id=student_id,
        )

    async def delete_student(self, student_id: str) -> MutationResult:
        if self._state.get_student(student_id) is None:
            return self._skip("delete student", student_id)

        return await self._mutate(
            "delete student", self._store.delete_student, student_id,
            student_id=student_id,
        )
