"""Snapshot export endpoints. Exports cover the whole mirror, not the search.

Rendering runs in a worker thread.
"""

import asyncio
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, Response

from scoremanager.config.app_config import AppConfig
from scoremanager.export.pdf import export_pdf
from scoremanager.export.spreadsheet import export_xlsx
from scoremanager.export.text import dump_text
from scoremanager.web.dependencies import get_config, get_current_session
from scoremanager.web.sessions import Session

router = APIRouter(prefix="/api/export", tags=["export"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _attachment(filename: str) -> dict[str, str]:
    ts = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    stem, ext = filename.rsplit(".", 1)
    return {"Content-Disposition": f'attachment; filename="{stem}_{ts}.{ext}"'}


@router.get("/xlsx")
async def export_spreadsheet(
    session: Session = Depends(get_current_session),
    config: AppConfig = Depends(get_config),
) -> Response:
    """All scores as an xlsx workbook."""
    content = await asyncio.to_thread(
        export_xlsx, session.board.state.students, sheet_title=config.export.sheet_title
    )
    return Response(content=content, media_type=XLSX_MEDIA_TYPE, headers=_attachment("scores.xlsx"))


@router.get("/pdf")
async def export_report(
    session: Session = Depends(get_current_session),
    config: AppConfig = Depends(get_config),
) -> Response:
    """All scores as a paginated PDF table."""
    content = await asyncio.to_thread(
        export_pdf,
        session.board.state.students,
        title=config.export.pdf_title,
        font_path=config.export.pdf_font_path,
    )
    return Response(content=content, media_type="application/pdf", headers=_attachment("scores.pdf"))


@router.get("/text", response_class=PlainTextResponse)
async def export_text(session: Session = Depends(get_current_session)) -> PlainTextResponse:
    """Plain-text dump for copying to the clipboard."""
    return PlainTextResponse(dump_text(session.board.state.students))
