from __future__ import annotations

import io
import math
from datetime import date, datetime
from pathlib import Path
from typing import Any, Protocol

import numpy as np
import pandas as pd

from ..models.row_data import RawRow

"""Excel sheet reader.

The pipeline only depends on the SheetReader protocol (list_sheets /
read_rows). ExcelSheetReader implements it with pandas + openpyxl and turns
every cell into a string the way the report shows it: integral numbers
without ".0", blanks as "", trailing empty cells trimmed so short rows stay
short.
"""

__all__ = [
    "SheetReadError",
    "SheetReader",
    "ExcelSheetReader",
    "cell_to_str",
]


class SheetReadError(Exception):
    """Raised when the workbook cannot be opened or a sheet cannot be read."""


class SheetReader(Protocol):
    def list_sheets(self) -> list[str]: ...

    def read_rows(self, sheet_name: str) -> list[RawRow]: ...


def cell_to_str(value: Any) -> str:
    """Render a raw cell value as report text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        # positional, never scientific: "1e-05" would read back as 105
        return np.format_float_positional(value, trim="-")
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value)


def _trim_trailing(cells: list[str]) -> tuple[str, ...]:
    end = len(cells)
    while end > 0 and cells[end - 1].strip() == "":
        end -= 1
    return tuple(cells[:end])


class ExcelSheetReader:
    """SheetReader over an .xlsx file path or in-memory workbook bytes."""

    def __init__(self, source: Path | str | bytes) -> None:
        self._source = source

    def _open(self) -> pd.ExcelFile:
        src: Any = io.BytesIO(self._source) if isinstance(self._source, bytes) else self._source
        try:
            return pd.ExcelFile(src, engine="openpyxl")
        except Exception as e:
            raise SheetReadError(f"cannot open workbook: {e}") from e

    def list_sheets(self) -> list[str]:
        with self._open() as xls:
            return [str(name) for name in xls.sheet_names]

    def read_rows(self, sheet_name: str) -> list[RawRow]:
        with self._open() as xls:
            try:
                # Raw grid: no header, no NA coercion, values kept as objects
                df = xls.parse(sheet_name, header=None, dtype=object, keep_default_na=False)
            except Exception as e:
                raise SheetReadError(f"cannot read sheet '{sheet_name}': {e}") from e

        rows: list[RawRow] = []
        for idx, values in enumerate(df.itertuples(index=False, name=None), start=1):
            cells = [cell_to_str(v) for v in values]
            rows.append(RawRow(row_number=idx, cells=_trim_trailing(cells)))
        return rows
