"""Spreadsheet export of a form's submissions."""
from __future__ import annotations

import io
import logging
import re
from typing import Any

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from formify.answers import answer_to_text
from formify.utils import format_date

logger = logging.getLogger(__name__)

DATE_COLUMN = "Submission Date"
SHEET_TITLE = "Submissions"
_UNSAFE_FILENAME = re.compile(r'[\\/:*?"<>|\r\n]+')


def _cell_text(value: str) -> str:
    return ILLEGAL_CHARACTERS_RE.sub("", value)


def export_filename(form: dict[str, Any]) -> str:
    title = _UNSAFE_FILENAME.sub("_", str(form.get("title") or "form")).strip() or "form"
    return f"{title}-submissions.xlsx"


def submission_table(
    submissions: list[dict[str, Any]],
    tz_name: str = "UTC",
    date_format: str = "%m/%d/%Y",
) -> tuple[list[str], list[list[str]]]:
    """Flatten submissions into a header row plus one row per submission.

    Columns are the submission date followed by every answer key in the order
    it is first seen across the submissions.
    """
    headers: list[str] = [DATE_COLUMN]
    flattened: list[dict[str, str]] = []
    for submission in submissions:
        answers = submission.get("answers") or {}
        row = {DATE_COLUMN: format_date(submission.get("submitted_at"), tz_name, date_format)}
        for key, value in answers.items():
            if key not in headers:
                headers.append(key)
            row[key] = _cell_text(answer_to_text(value))
        flattened.append(row)
    rows = [[row.get(header, "") for header in headers] for row in flattened]
    return headers, rows


def _style_header(ws, num_cols: int) -> None:
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="16A34A", end_color="16A34A", fill_type="solid")
    for col in range(1, num_cols + 1):
        cell = ws.cell(row=1, column=col)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")


def _auto_width(ws) -> None:
    for column in ws.columns:
        max_length = max((len(str(cell.value)) for cell in column if cell.value), default=0)
        # Cap width at 50 characters
        ws.column_dimensions[get_column_letter(column[0].column)].width = min(max_length + 2, 50)


def build_workbook(
    submissions: list[dict[str, Any]],
    tz_name: str = "UTC",
    date_format: str = "%m/%d/%Y",
) -> bytes:
    headers, rows = submission_table(submissions, tz_name, date_format)
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    # answers and question ids are literal text, never formulas
    for row in [[_cell_text(header) for header in headers], *rows]:
        ws.append(row)
        for cell in ws[ws.max_row]:
            cell.data_type = "s"
    _style_header(ws, len(headers))
    _auto_width(ws)

    buffer = io.BytesIO()
    wb.save(buffer)
    logger.info("Built workbook with %d rows", len(rows))
    return buffer.getvalue()
