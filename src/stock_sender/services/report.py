from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from openpyxl import Workbook
from openpyxl.utils import column_index_from_string

from ..excel.report_writer import write_workbook
from ..models.config_models import SUMMER_GROUP_COLUMNS, WINTER_GROUP_COLUMNS, ReportConfig
from ..models.group_sums import VendorGroupSums
from ..models.stock_record import StockRecord
from .aggregator import aggregate

"""Summary stock report (one header row, one data row).

Layout (row 1 labels / row 2 values):
  A: company name        B-E: summer group sums     F: =SUM(B2:E2)
  G-I: winter group sums J: =SUM(G2:I2)             K: =SUM(F2,J2)
  L: grand total of all matched stock
The three totals are live formulas, computed by the spreadsheet on open.
"""

__all__ = [
    "REPORT_LABELS",
    "SUMMER_TOTAL_FORMULA",
    "WINTER_TOTAL_FORMULA",
    "TOTAL_FORMULA",
    "build_report_grid",
    "generate_report",
]

REPORT_LABELS: dict[str, str] = {
    "B": "Summer A",
    "C": "Summer B",
    "D": "Bars",
    "E": "Attar",
    "F": "SUMMER total",
    "G": "Winter A",
    "H": "Winter B",
    "I": "Attar",
    "J": "WINTER total",
    "K": "TOTAL",
    "L": "Все остатки клиента (по всем конкурентам и Нокиан в том числе)",
}
SUMMER_TOTAL_FORMULA = "=SUM(B2:E2)"
WINTER_TOTAL_FORMULA = "=SUM(G2:I2)"
TOTAL_FORMULA = "=SUM(F2,J2)"
LAST_COLUMN = "L"


def build_report_grid(sums: VendorGroupSums, company_name: str) -> list[list[Any]]:
    """Lay out group sums as [header_row, data_row] (columns A..L)."""
    width = column_index_from_string(LAST_COLUMN)
    header: list[Any] = [None] * width
    data: list[Any] = [None] * width

    header[0] = company_name
    for col, label in REPORT_LABELS.items():
        header[column_index_from_string(col) - 1] = label

    for col in SUMMER_GROUP_COLUMNS:
        data[column_index_from_string(col) - 1] = sums.summer.get(col, 0)
    for col in WINTER_GROUP_COLUMNS:
        data[column_index_from_string(col) - 1] = sums.winter.get(col, 0)

    data[column_index_from_string("F") - 1] = SUMMER_TOTAL_FORMULA
    data[column_index_from_string("J") - 1] = WINTER_TOTAL_FORMULA
    data[column_index_from_string("K") - 1] = TOTAL_FORMULA
    data[column_index_from_string("L") - 1] = sums.grand_total
    return [header, data]


def generate_report(records: Sequence[StockRecord], report_config: ReportConfig) -> Workbook:
    """Aggregate records and render the summary report workbook."""
    sums = aggregate(records, report_config.summer_groups, report_config.winter_groups)
    grid = build_report_grid(sums, report_config.company_name)
    return write_workbook(grid)
