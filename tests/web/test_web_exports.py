"""Tests for export endpoints."""

import asyncio
from io import BytesIO
from unittest.mock import patch

import openpyxl
import pytest

from scoremanager.core.models import Score
from scoremanager.export.charts import render_score_chart
from scoremanager.export.spreadsheet import export_xlsx


@pytest.fixture
def seeded_headers(client, store):
    """Two students in the store, one with a score, then a fresh sign-in."""
    kim = store.create_student("Kim", "high school", 1, "Lee")
    store.create_student("Park", "middle school", 2, "Choi")
    store.replace_scores(kim.id, [Score(type="mock-exam", date="high1 March", score=77)])
    response = client.post("/api/auth/login", json={"email": "admin@example.com"})
    return {"X-Session-Id": response.json()["session_id"]}


class TestExportXlsx:
    """Tests for GET /api/export/xlsx."""

    def test_workbook(self, client, seeded_headers):
        response = client.get("/api/export/xlsx", headers=seeded_headers)
        assert response.status_code == 200
        assert "attachment" in response.headers["content-disposition"]
        assert ".xlsx" in response.headers["content-disposition"]
        ws = openpyxl.load_workbook(BytesIO(response.content)).active
        rows = list(ws.iter_rows(values_only=True))
        assert rows[1] == ("Kim", "high school", 1, "Lee", "mock-exam", "high1 March", 77)
        assert len(rows) == 2

    def test_ignores_search(self, client, seeded_headers):
        """Exports cover the whole mirror."""
        client.get("/api/students", params={"name": "Park"}, headers=seeded_headers)
        response = client.get("/api/export/xlsx", headers=seeded_headers)
        ws = openpyxl.load_workbook(BytesIO(response.content)).active
        assert ws.max_row == 2

    def test_requires_session(self, client):
        assert client.get("/api/export/xlsx").status_code == 401


class TestExportPdf:
    """Tests for GET /api/export/pdf."""

    def test_pdf(self, client, seeded_headers):
        response = client.get("/api/export/pdf", headers=seeded_headers)
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")


class TestExportText:
    """Tests for GET /api/export/text."""

    def test_text(self, client, seeded_headers):
        response = client.get("/api/export/text", headers=seeded_headers)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == (
            "Kim (high school grade 1, Lee)\n"
            " - mock-exam high1 March English: 77 pts\n"
            "\n"
            "Park (middle school grade 2, Choi)"
        )


def _has_running_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class TestRenderingThread:
    """Renderers run outside the event loop."""

    def test_xlsx_rendered_in_worker_thread(self, client, seeded_headers):
        seen = []

        def recording_export(*args, **kwargs):
            seen.append(_has_running_loop())
            return export_xlsx(*args, **kwargs)

        with patch("scoremanager.web.routes.exports.export_xlsx", recording_export):
            response = client.get("/api/export/xlsx", headers=seeded_headers)
        assert response.status_code == 200
        assert seen == [False]

    def test_chart_rendered_in_worker_thread(self, client, seeded_headers):
        student_id = client.get("/api/students", headers=seeded_headers).json()["students"][0]["id"]
        seen = []

        def recording_render(*args, **kwargs):
            seen.append(_has_running_loop())
            return render_score_chart(*args, **kwargs)

        with patch("scoremanager.web.routes.students.render_score_chart", recording_render):
            response = client.get(
                f"/api/students/{student_id}/chart.png",
                params={"type": "mock-exam"},
                headers=seeded_headers,
            )
        assert response.status_code == 200
        assert seen == [False]
