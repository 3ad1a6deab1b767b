"""Shared fixtures: isolated stores, configs and sample records."""

import pytest

from scoremanager.config.app_config import AccessConfig, AppConfig, StoreConfig, clear_config_cache
from scoremanager.core.models import Score, Student
from scoremanager.db.students_repository import StoreError, StudentStore

ALLOWED_EMAIL = "admin@example.com"
PADDED_EMAIL = " teacher@example.com "
OUTSIDER_EMAIL = "stranger@example.com"


@pytest.fixture(autouse=True)
def _fresh_config_cache():
    """Every test starts and ends without a cached config."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def store(tmp_path) -> StudentStore:
    """Empty SQLite store in a temp directory."""
    return StudentStore(tmp_path / "db" / "scores.db")


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    """Config pointing at a temp store with a small allow-list."""
    return AppConfig(
        store=StoreConfig(path=str(tmp_path / "db" / "scores.db")),
        access=AccessConfig(allowed_emails=[ALLOWED_EMAIL, PADDED_EMAIL]),
    )


@pytest.fixture
def sample_student() -> Student:
    """High-school student with one score of each type."""
    return Student(
        id="doc01",
        name="Kim",
        school="high school",
        grade=1,
        teacher="Lee",
        scores=(
            Score(type="in-school", date="high1 1st-semester-midterm", score=90),
            Score(type="mock-exam", date="high1 June", score=85),
        ),
    )


class FailingWriteStore(StudentStore):
    """Store whose writes always fail; reads still work."""

    def create_student(self, name, school, grade, teacher=""):
        raise StoreError("store unavailable")

    def replace_scores(self, student_id, scores):
        raise StoreError("store unavailable")

    def delete_student(self, student_id):
        raise StoreError("store unavailable")


class CountingStore(StudentStore):
    """Store that counts list calls."""

    def __init__(self, db_path=None):
        super().__init__(db_path)
        self.list_calls = 0

    def list_students(self):
        self.list_calls += 1
        return super().list_students()


@pytest.fixture
def failing_store(tmp_path) -> FailingWriteStore:
    return FailingWriteStore(tmp_path / "db" / "scores.db")


@pytest.fixture
def counting_store(tmp_path) -> CountingStore:
    return CountingStore(tmp_path / "db" / "scores.db")
