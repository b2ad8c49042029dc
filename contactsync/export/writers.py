"""
Export file writers.

Both writers take an ordered field list and rows keyed by field name and
return the finished file as bytes.
"""

import csv
import io
from collections.abc import Iterable, Sequence
from typing import Any

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

SHEET_TITLE = "Contacts"

MEDIA_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def _cell(value: Any) -> Any:
    return "" if value is None else value


def _xlsx_cell(value: Any) -> Any:
    # worksheets reject ASCII control characters other than tab, LF and CR
    value = _cell(value)
    return ILLEGAL_CHARACTERS_RE.sub("", value) if isinstance(value, str) else value


def write_csv(fields: Sequence[str], rows: Iterable[dict[str, Any]]) -> bytes:
    """UTF-8 CSV with a header row."""
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(fields)
    for row in rows:
        writer.writerow([_cell(row.get(f)) for f in fields])
    return buf.getvalue().encode("utf-8")


def write_xlsx(fields: Sequence[str], rows: Iterable[dict[str, Any]]) -> bytes:
    """Single-sheet workbook with a bold header row."""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.append([_xlsx_cell(f) for f in fields])
    for cell in ws[1]:
        cell.font = Font(bold=True)
    ws.freeze_panes = "A2"

    widths = [len(f) for f in fields]
    for row in rows:
        values = [_xlsx_cell(row.get(f)) for f in fields]
        ws.append(values)
        for i, v in enumerate(values):
            widths[i] = max(widths[i], len(str(v)))

    for i, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(i)].width = min(max(10, width + 2), 60)

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


WRITERS = {
    "csv": write_csv,
    "xlsx": write_xlsx,
}
