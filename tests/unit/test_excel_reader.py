from __future__ import annotations

import math
from datetime import datetime
from pathlib import Path

import pytest

from conftest import stock_row
from stock_sender.excel.reader import ExcelSheetReader, SheetReadError, cell_to_str
from stock_sender.services.normalizer import parse_decimal


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, ""),
        (math.nan, ""),
        ("  text ", "  text "),
        (1234, "1234"),
        (1234.0, "1234"),
        (2581.5, "2581.5"),
        (1e-05, "0.00001"),
        (1.5e-20, "0.000000000000000000015"),
        (datetime(2024, 1, 2, 3, 4, 5), "2024-01-02T03:04:05"),
    ],
)
def test_cell_to_str(value, expected):
    assert cell_to_str(value) == expected


def test_read_rows_numbers_and_trims(temp_workdir: Path, make_report_xlsx):
    path = make_report_xlsx(
        temp_workdir / "data" / "stock.xlsx",
        [
            stock_row("Pirelli P Zero", "Pirelli лето", 1001, 5001, "205/55R16", 10, 5200.5),
            ["Итого", None, None, None, None, None],
        ],
    )
    reader = ExcelSheetReader(path)
    assert reader.list_sheets() == ["TDSheet"]

    rows = reader.read_rows("TDSheet")
    assert len(rows) == 13
    assert rows[0].row_number == 1
    assert rows[0].cells == ("Остатки товаров",)
    assert rows[4].cells == ()

    data = rows[11]
    assert data.row_number == 12
    assert data.cells == (
        "Pirelli P Zero", "Pirelli лето", "", "", "", "1001", "5001", "205/55R16", "10", "5200.5",
    )
    # trailing empty cells are trimmed
    assert rows[12].cells == ("Итого",)


def test_reader_accepts_bytes(temp_workdir: Path, make_report_xlsx):
    path = make_report_xlsx(temp_workdir / "data" / "stock.xlsx", [])
    reader = ExcelSheetReader(path.read_bytes())
    assert reader.list_sheets() == ["TDSheet"]


def test_unreadable_workbook(temp_workdir: Path):
    bad = temp_workdir / "data" / "broken.xlsx"
    bad.write_bytes(b"not a zip")
    with pytest.raises(SheetReadError, match="cannot open workbook"):
        ExcelSheetReader(bad).list_sheets()


def test_unknown_sheet(temp_workdir: Path, make_report_xlsx):
    path = make_report_xlsx(temp_workdir / "data" / "stock.xlsx", [])
    with pytest.raises(SheetReadError, match="Missing"):
        ExcelSheetReader(path).read_rows("Missing")


def test_small_float_cell_keeps_its_value():
    assert parse_decimal(cell_to_str(1e-05)) == pytest.approx(1e-05)
