"""
Tests for core/sheet_export.py — Excel workbook layout.
"""

import os
import sys

from openpyxl import load_workbook

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.records import records_from_payload
from core.sheet_export import HEADERS, generate_sheet_excel
from core.sheet_view import build_sheet_view


def _column_a(ws):
    return [row[0].value for row in ws.iter_rows()]


class TestGenerateSheetExcel:

    def test_creates_workbook(self, tmp_path, bulletin_subjects):
        path = tmp_path / "sheet.xlsx"
        view = build_sheet_view(records_from_payload(bulletin_subjects))
        generate_sheet_excel(str(path), view, title="Form 4")
        assert path.exists()
        assert path.stat().st_size > 0

    def test_groups_then_summary(self, tmp_path, bulletin_subjects):
        path = tmp_path / "sheet.xlsx"
        view = build_sheet_view(records_from_payload(bulletin_subjects))
        generate_sheet_excel(str(path), view, title="Form 4")

        ws = load_workbook(path).active
        assert ws.title == "Form 4"
        assert [c.value for c in ws[1]] == HEADERS
        assert _column_a(ws) == [
            "Subject",
            "MAXIMA", "Religion", "Civics",
            "MAXIMA", "French",
            "MAXIMA", "Physics",
            "MAXIMA", "AGGREGATES", "PERCENTAGE",
        ]
        # Overall maximum of the 40/80/160 group
        assert ws["J7"].value == 320
        assert ws["E9"].value == 320

    def test_unsafe_title_is_cleaned(self, tmp_path):
        path = tmp_path / "sheet.xlsx"
        generate_sheet_excel(str(path), build_sheet_view([]), title="Term 1/2")
        assert load_workbook(path).active.title == "Term 1 2"
