"""
sheet_export.py — Excel export of the grouped grade sheet (openpyxl).

One MAXIMA row opens each scoring-scale group, followed by its subjects;
the MAXIMA / AGGREGATES / PERCENTAGE summary block closes the sheet.
"""

import logging
import re
from typing import Any, Dict

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from core.totals import SUMMARY_COLUMNS

logger = logging.getLogger(__name__)

HEADERS = [
    "Subject",
    "1st P.", "2nd P.", "Exam", "Total",
    "3rd P.", "4th P.", "Exam", "Total",
    "Overall",
]

SUMMARY_LABELS = [
    ("maxima", "MAXIMA"),
    ("obtained", "AGGREGATES"),
    ("percentage", "PERCENTAGE"),
]


def _row_values(subject: Dict[str, Any]) -> list:
    first = subject["firstSemester"]
    second = subject["secondSemester"]
    return [
        subject.get("subject") or "",
        first["period1"], first["period2"], first["exam"], first["total"],
        second["period3"], second["period4"], second["exam"], second["total"],
        subject["overallTotal"],
    ]


def _maxima_values(maxima: Dict[str, int]) -> list:
    period = maxima["periodMaxima"]
    exam = maxima["examMaxima"]
    total = maxima["totalMaxima"]
    return ["MAXIMA", period, period, exam, total, period, period, exam, total, total * 2]


def generate_sheet_excel(output_path: str, view: Dict[str, Any], title: str = "Grade Sheet"):
    """Write a sheet view (see ``build_sheet_view``) to an .xlsx workbook."""
    header_font = Font(bold=True, color="FFFFFF", size=11)
    header_fill = PatternFill(start_color="1a1a2e", end_color="1a1a2e", fill_type="solid")
    maxima_fill = PatternFill(start_color="d6eaf8", end_color="d6eaf8", fill_type="solid")
    summary_fill = PatternFill(start_color="fef9e7", end_color="fef9e7", fill_type="solid")
    bold = Font(bold=True)
    thin_border = Border(
        left=Side(style="thin"), right=Side(style="thin"),
        top=Side(style="thin"), bottom=Side(style="thin"),
    )

    wb = Workbook()
    ws = wb.active
    # Sheet titles may not contain []:*?/\ and are capped at 31 chars
    ws.title = re.sub(r"[\[\]:*?/\\]+", " ", title).strip()[:31] or "Grade Sheet"
    ws.sheet_properties.tabColor = "1a1a2e"

    ws.append(HEADERS)
    for cell in ws[1]:
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")
        cell.border = thin_border

    # ── Groups ──────────────────────────────────────────────────────
    for group in view["groups"]:
        ws.append(_maxima_values(group["maxima"]))
        for cell in ws[ws.max_row]:
            cell.font = bold
            cell.fill = maxima_fill
        for subject in group["subjects"]:
            ws.append(_row_values(subject))

    # ── Summary rows ────────────────────────────────────────────────
    summary = view["summary"]
    for key, label in SUMMARY_LABELS:
        values = summary[key]
        ws.append([label] + [values.get(col) for col in SUMMARY_COLUMNS])
        for cell in ws[ws.max_row]:
            cell.font = bold
            cell.fill = summary_fill

    for row in ws.iter_rows(min_row=2, max_row=ws.max_row):
        for cell in row:
            cell.border = thin_border
            if cell.column > 1:
                cell.alignment = Alignment(horizontal="center")

    ws.freeze_panes = "B2"

    # Auto-width columns
    for col_cells in ws.columns:
        max_len = max(len(str(cell.value or "")) for cell in col_cells)
        ws.column_dimensions[col_cells[0].column_letter].width = min(max_len + 4, 40)

    wb.save(output_path)
    logger.info("Wrote grade sheet workbook %s (%d rows)", output_path, ws.max_row)
