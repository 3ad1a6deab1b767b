"""Tests for xlsx, PDF, chart and text exports."""

from io import BytesIO
from unittest.mock import patch

import matplotlib.pyplot as plt
import openpyxl
import pytest
from matplotlib.figure import Figure

from scoremanager.core.models import Score, Student
from scoremanager.export.charts import render_score_chart
from scoremanager.export.pdf import export_pdf
from scoremanager.export.spreadsheet import EXPORT_COLUMNS, export_xlsx, score_rows
from scoremanager.export.text import dump_text


@pytest.fixture
def students(sample_student) -> list[Student]:
    empty = Student(id="doc02", name="Park", school="middle school", grade=3, teacher="Choi")
    return [sample_student, empty]


class TestScoreRows:
    """Tests for row flattening."""

    def test_column_order(self):
        assert EXPORT_COLUMNS == ["name", "school", "grade", "teacher", "type", "period", "score"]

    def test_one_row_per_score(self, students):
        rows = score_rows(students)
        assert rows == [
            ["Kim", "high school", 1, "Lee", "in-school", "high1 1st-semester-midterm", 90],
            ["Kim", "high school", 1, "Lee", "mock-exam", "high1 June", 85],
        ]


class TestExportXlsx:
    """Tests for the spreadsheet export."""

    def test_workbook_contents(self, students):
        content = export_xlsx(students, sheet_title="Grades")
        wb = openpyxl.load_workbook(BytesIO(content))
        ws = wb["Grades"]
        values = [list(row) for row in ws.iter_rows(values_only=True)]
        assert values[0] == EXPORT_COLUMNS
        assert values[1] == ["Kim", "high school", 1, "Lee", "in-school", "high1 1st-semester-midterm", 90]
        assert len(values) == 3

    def test_formula_like_text_stays_text(self):
        student = Student(
            id="x",
            name="=1+2",
            school="high school",
            grade=1,
            teacher="=HYPERLINK(\"http://example.com\")",
            scores=(Score(type="mock-exam", date="=high1 March", score=50),),
        )
        wb = openpyxl.load_workbook(BytesIO(export_xlsx([student])))
        ws = wb.active
        for ref, expected in [("A2", "=1+2"), ("D2", "=HYPERLINK(\"http://example.com\")"), ("F2", "=high1 March")]:
            assert ws[ref].value == expected
            assert ws[ref].data_type == "s"
        assert ws["G2"].value == 50
        assert ws["G2"].data_type == "n"

    def test_empty_collection_has_header_only(self):
        wb = openpyxl.load_workbook(BytesIO(export_xlsx([])))
        assert wb.active.max_row == 1


class TestExportPdf:
    """Tests for the PDF export."""

    def test_pdf_bytes(self, students):
        content = export_pdf(students, title="Report")
        assert content.startswith(b"%PDF")

    def test_long_table(self):
        many = [
            Student(
                id=f"s{i}",
                name=f"Student {i}",
                school="high school",
                grade=2,
                teacher="Lee",
                scores=tuple(Score(type="mock-exam", date="high2 March", score=i) for _ in range(3)),
            )
            for i in range(60)
        ]
        content = export_pdf(many)
        assert content.startswith(b"%PDF")
        assert content.rstrip().endswith(b"%%EOF")

    def test_missing_font_falls_back(self, students, tmp_path):
        content = export_pdf(students, font_path=str(tmp_path / "missing.ttf"))
        assert content.startswith(b"%PDF")


class TestRenderChart:
    """Tests for chart rendering."""

    def test_png_bytes(self, sample_student):
        content = render_score_chart(sample_student, "mock-exam")
        assert content.startswith(b"\x89PNG")

    def test_figure_closed_when_saving_fails(self, sample_student):
        plt.close("all")
        with patch.object(Figure, "savefig", side_effect=RuntimeError("disk full")):
            with pytest.raises(RuntimeError):
                render_score_chart(sample_student, "mock-exam")
        assert plt.get_fignums() == []

    def test_empty_series_still_renders(self):
        student = Student(id="x", name="Park", school="middle school", grade=1)
        assert render_score_chart(student, "in-school").startswith(b"\x89PNG")


class TestDumpText:
    """Tests for the plain-text dump."""

    def test_format(self, students):
        text = dump_text(students)
        assert text == (
            "Kim (high school grade 1, Lee)\n"
            " - in-school high1 1st-semester-midterm English: 90 pts\n"
            " - mock-exam high1 June English: 85 pts\n"
            "\n"
            "Park (middle school grade 3, Choi)"
        )

    def test_empty(self):
        assert dump_text([]) == ""
