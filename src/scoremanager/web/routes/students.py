"""Student and score endpoints.

Reads are served from the session's mirror. Writes go through the board's
mutation protocol, which re-fetches the whole collection afterwards.
"""

import asyncio

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from scoremanager.core.board import MutationResult
from scoremanager.core.models import Student
from scoremanager.core.scores import summarize
from scoremanager.core.search import StudentFilter
from scoremanager.export.charts import render_score_chart
from scoremanager.utils.validators import parse_grade
from scoremanager.web.dependencies import get_current_session
from scoremanager.web.schemas import (
    ScoreCreate,
    ScoreSummaryResponse,
    ScoreType,
    StudentCreate,
    StudentListResponse,
    StudentResponse,
)
from scoremanager.web.sessions import Session

router = APIRouter(prefix="/api/students", tags=["students"])


def _get_student_or_404(session: Session, student_id: str) -> Student:
    student = session.board.state.get_student(student_id)
    if student is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Student '{student_id}' not found",
        )
    return student


def _raise_for_result(result: MutationResult) -> None:
    """Map a failed board operation to an HTTP error."""
    if result.success:
        return
    if result.skipped:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.message)
    raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result.message)


@router.get("", response_model=StudentListResponse)
async def list_students(
    name: str = "",
    school: str = "",
    grade: str = "",
    teacher: str = "",
    refresh: bool = False,
    session: Session = Depends(get_current_session),
) -> StudentListResponse:
    """List students in the mirror matching the search fields."""
    board = session.board
    if refresh:
        _raise_for_result(await board.refresh())

    board.set_search(
        StudentFilter(name=name, school=school, grade=parse_grade(grade), teacher=teacher)
    )
    visible = board.state.visible_students
    return StudentListResponse(
        students=[StudentResponse.from_student(s) for s in visible],
        count=len(visible),
        total=len(board.state.students),
    )


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student(
    student_id: str,
    session: Session = Depends(get_current_session),
) -> StudentResponse:
    """Get a specific student by ID."""
    return StudentResponse.from_student(_get_student_or_404(session, student_id))


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    student_data: StudentCreate,
    session: Session = Depends(get_current_session),
) -> StudentResponse:
    """Create a new student with an empty score list."""
    result = await session.board.add_student(
        name=student_data.name,
        school=student_data.school,
        grade=student_data.grade,
        teacher=student_data.teacher,
    )
    _raise_for_result(result)
    return StudentResponse.from_student(_get_student_or_404(session, result.student_id))


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(
    student_id: str,
    session: Session = Depends(get_current_session),
) -> None:
    """Delete a student by ID."""
    _raise_for_result(await session.board.delete_student(student_id))


@router.post(
    "/{student_id}/scores",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_score(
    student_id: str,
    score_data: ScoreCreate,
    session: Session = Depends(get_current_session),
) -> StudentResponse:
    """Append a score to a student's list."""
    result = await session.board.add_score(
        student_id,
        score_type=score_data.type,
        date=score_data.date,
        score=score_data.score,
        subject=score_data.subject,
    )
    _raise_for_result(result)
    return StudentResponse.from_student(_get_student_or_404(session, student_id))


@router.delete("/{student_id}/scores/{index}", response_model=StudentResponse)
async def delete_score(
    student_id: str,
    index: int,
    session: Session = Depends(get_current_session),
) -> StudentResponse:
    """Remove the score at a position in the student's list."""
    _raise_for_result(await session.board.delete_score(student_id, index))
    return StudentResponse.from_student(_get_student_or_404(session, student_id))


@router.get("/{student_id}/summary", response_model=ScoreSummaryResponse)
async def score_summary(
    student_id: str,
    type: ScoreType = Query(default="in-school"),
    session: Session = Depends(get_current_session),
) -> ScoreSummaryResponse:
    """Scores of one type in period order, with their average."""
    student = _get_student_or_404(session, student_id)
    return ScoreSummaryResponse.from_summary(student, summarize(student, type))


@router.get("/{student_id}/chart.png")
async def score_chart(
    student_id: str,
    type: ScoreType = Query(default="in-school"),
    session: Session = Depends(get_current_session),
) -> Response:
    """Line chart of one score type as PNG."""
    student = _get_student_or_404(session, student_id)
    content = await asyncio.to_thread(render_score_chart, student, type)
    return Response(content=content, media_type="image/png")
