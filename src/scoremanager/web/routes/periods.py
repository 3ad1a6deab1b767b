"""Period label vocabulary endpoint."""

from fastapi import APIRouter

from scoremanager.core.periods import in_school_labels, mock_exam_labels
from scoremanager.web.schemas import PeriodsResponse

router = APIRouter(prefix="/api/periods", tags=["periods"])


@router.get("", response_model=PeriodsResponse)
async def list_periods() -> PeriodsResponse:
    """Selectable period labels for each score type."""
    return PeriodsResponse(in_school=in_school_labels(), mock_exam=mock_exam_labels())
