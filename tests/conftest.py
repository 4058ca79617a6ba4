# Shared pytest fixtures
from __future__ import annotations

import re
import tempfile
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pandas as pd
import pytest
from openpyxl.utils import column_index_from_string, get_column_letter

from stock_sender.logging.init import reset_logging

START_ROW = 12


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "data" / "uploads").mkdir()
        (p / "logs").mkdir()
        for var in ("VENDOR_API_LOGIN", "VENDOR_API_TOKEN", "VENDOR_API_URL", "VENDOR_CUSTOMER_CODE"):
            monkeypatch.delenv(var, raising=False)
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """inbox_directory: ./data/uploads
processed_directory: ./data/processed
logs_directory: ./logs
vendor:
  customer_code: "100200"
  brands: [Pirelli, Formula]
  api:
    base_url: https://vendor.example/api.php
    timeout_seconds: 5
report:
  company_name: Ikon
  customer_code: "100200"
  summer_groups:
    B: [Nokian]
    C: [Hakka]
    D: [Bars]
    E: [Attar]
  winter_groups:
    G: [Nordman]
    H: [Nokian]
    I: [Attar]
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "stock.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def stock_row(
    name: str,
    brand: str,
    code: Any,
    sku: Any,
    size: str,
    qty: Any,
    price: Any,
) -> list[Any]:
    """One data row in the report layout (A name, B brand, F..J fields)."""
    return [name, brand, None, None, None, code, sku, size, qty, price]


def report_rows(data: list[list[Any]], start_row: int = START_ROW) -> list[list[Any]]:
    """Title block (rows 1..start_row-1) followed by data rows."""
    rows: list[list[Any]] = [[None] for _ in range(start_row - 1)]
    rows[0] = ["Остатки товаров"]
    rows[start_row - 2] = ["Номенклатура", "Бренд"]
    return rows + data


@pytest.fixture()
def make_report_xlsx() -> Callable[..., Path]:
    """Factory writing a real .xlsx stock report with pandas/openpyxl."""

    def _make(path: Path, data: list[list[Any]], start_row: int = START_ROW, sheet_name: str = "TDSheet") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            pd.DataFrame(report_rows(data, start_row)).to_excel(
                writer, sheet_name=sheet_name, header=False, index=False
            )
        return path

    return _make


@pytest.fixture()
def sample_stock_data() -> list[list[Any]]:
    return [
        stock_row("Pirelli P Zero 205/55R16", "Pirelli лето", 1001, 5001, "205/55R16", 10, "5 200,50"),
        stock_row("Formula Ice 195/65R15", "FORMULA ЗИМА*", 1002, 5002, "195/65R15", 4, 4100),
        stock_row("Nokian Hakka 2021 год", "Nokian лето", 1003, None, "215/60R16", 7, 6300),
        stock_row("No code tire", "Pirelli лето", None, 5004, "225/45R17", 2, 7000),
    ]


_SUM_RE = re.compile(r"^=SUM\((?P<args>[A-Z0-9:,]+)\)$")


def _row2_columns(arg: str) -> list[str]:
    first, _, last = arg.partition(":")
    start = column_index_from_string(first.rstrip("2"))
    end = column_index_from_string((last or first).rstrip("2"))
    return [get_column_letter(i) for i in range(start, end + 1)]


def evaluate_report_row(grid: Sequence[Sequence[Any]]) -> dict[str, float]:
    """Recompute the =SUM(...) cells of the report data row, keyed by column."""
    data = grid[1]

    def value(col: str) -> float:
        cell = data[column_index_from_string(col) - 1]
        if isinstance(cell, str):
            m = _SUM_RE.match(cell)
            assert m, f"unsupported formula: {cell}"
            return sum(value(c) for arg in m.group("args").split(",") for c in _row2_columns(arg))
        return cell or 0

    return {
        get_column_letter(i): value(get_column_letter(i))
        for i, cell in enumerate(data, start=1)
        if isinstance(cell, str) and cell.startswith("=")
    }
