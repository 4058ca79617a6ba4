from __future__ import annotations

import io
from collections.abc import Sequence
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

"""openpyxl rendering of report grids.

Strings starting with "=" are stored by openpyxl as formulas, so the
report totals stay live in the written workbook.
"""

__all__ = [
    "SHEET_TITLE",
    "write_workbook",
    "workbook_to_bytes",
]

SHEET_TITLE = "Sheet1"
HEADER_FONT = Font(bold=True, size=12)
HEADER_FILL = PatternFill(start_color="E0E0E0", end_color="E0E0E0", fill_type="solid")
COLUMN_WIDTH = 20


def write_workbook(grid: Sequence[Sequence[Any]]) -> Workbook:
    """Write grid rows into a fresh workbook; the first row is styled as header."""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    for row in grid:
        ws.append(list(row))

    if grid:
        for cell in ws[1]:
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL
        for idx in range(1, len(grid[0]) + 1):
            ws.column_dimensions[get_column_letter(idx)].width = COLUMN_WIDTH
    return wb


def workbook_to_bytes(wb: Workbook) -> bytes:
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
