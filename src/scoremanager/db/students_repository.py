"""Students collection repository.

Document-store operations used by the application:
- list-all
- create-one (student with an empty score list)
- replace-scores-field-on-one (whole-array replace)
- delete-one

There is no field-level update of individual score entries: every score
add/delete rewrites the entire ``scores`` array.
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from pathlib import Path

import structlog

from scoremanager.core.models import Score, Student
from scoremanager.db.database import DEFAULT_DB_PATH, get_db, init_db

logger = structlog.get_logger(__name__)


class StoreError(Exception):
    """A store operation failed."""

    pass


class DocumentNotFoundError(StoreError):
    """Update targeted a document that does not exist."""

    def __init__(self, student_id: str):
        self.student_id = student_id
        super().__init__(f"Student document '{student_id}' not found")


# Unreadable database file or directory
STORE_BACKEND_ERRORS = (sqlite3.Error, OSError)
# Malformed document body
DOCUMENT_DECODE_ERRORS = (ValueError, TypeError, KeyError, AttributeError)


def _decode_document(student_id: str, raw: str) -> dict:
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise StoreError(f"Student document '{student_id}' is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise StoreError(f"Student document '{student_id}' is not an object")
    return data


def _decode_student(student_id: str, raw: str) -> Student:
    data = _decode_document(student_id, raw)
    try:
        return Student.from_dict(student_id, data)
    except DOCUMENT_DECODE_ERRORS as e:
        raise StoreError(f"Student document '{student_id}' is malformed: {e}") from e


def generate_document_id() -> str:
    """Opaque 20-character document id."""
    return uuid.uuid4().hex[:20]


class StudentStore:
    """SQLite-backed students collection."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or DEFAULT_DB_PATH
        self._initialized = False

    def _ensure_schema(self) -> None:
        if not self._initialized:
            init_db(self.db_path)
            self._initialized = True

    def list_students(self) -> list[Student]:
        """Fetch the whole collection, in creation order."""
        try:
            self._ensure_schema()
            with get_db(self.db_path) as conn:
                rows = conn.execute(
                    "SELECT id, data FROM students ORDER BY created_at, rowid"
                ).fetchall()
        except STORE_BACKEND_ERRORS as e:
            raise StoreError(f"Could not list students: {e}") from e

        students = [_decode_student(row["id"], row["data"]) for row in rows]
        logger.debug("students.listed", count=len(students))
        return students

    def create_student(
        self,
        name: str,
        school: str,
        grade: int,
        teacher: str = "",
    ) -> Student:
        """Insert a new student document with no scores.

        Returns:
            The created Student, with its store-assigned id
        """
        student = Student(
            id=generate_document_id(),
            name=name,
            school=school,
            grade=grade,
            teacher=teacher,
        )
        try:
            self._ensure_schema()
            with get_db(self.db_path) as conn:
                conn.execute(
                    "INSERT INTO students (id, data) VALUES (?, ?)",
                    (student.id, json.dumps(student.to_dict(), ensure_ascii=False)),
                )
        except STORE_BACKEND_ERRORS as e:
            raise StoreError(f"Could not create student: {e}") from e

        logger.info("students.created", student_id=student.id)
        return student

    def replace_scores(self, student_id: str, scores: list[Score]) -> None:
        """Overwrite the whole scores array of one document.

        Raises:
            DocumentNotFoundError: If the document does not exist
            StoreError: On any database failure
        """
        try:
            self._ensure_schema()
            with get_db(self.db_path) as conn:
                row = conn.execute(
                    "SELECT data FROM students WHERE id = ?", (student_id,)
                ).fetchone()
                if row is None:
                    raise DocumentNotFoundError(student_id)

                data = _decode_document(student_id, row["data"])
                data["scores"] = [s.to_dict() for s in scores]
                conn.execute(
                    "UPDATE students SET data = ? WHERE id = ?",
                    (json.dumps(data, ensure_ascii=False), student_id),
                )
        except STORE_BACKEND_ERRORS as e:
            raise StoreError(f"Could not update scores: {e}") from e

        logger.info("students.scores_replaced", student_id=student_id, count=len(scores))

    def delete_student(self, student_id: str) -> None:
        """Delete one document. Deleting a missing document is a no-op."""
        try:
            self._ensure_schema()
            with get_db(self.db_path) as conn:
                cursor = conn.execute("DELETE FROM students WHERE id = ?", (student_id,))
        except STORE_BACKEND_ERRORS as e:
            raise StoreError(f"Could not delete student: {e}") from e

        logger.info("students.deleted", student_id=student_id, existed=cursor.rowcount > 0)
