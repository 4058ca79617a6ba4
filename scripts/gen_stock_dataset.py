#!/usr/bin/env python3
"""Synthetic stock report generator.

Writes a workbook in the distributor's fixed report layout:
- Rows 1..(start_row - 1): title / header block (ignored by the parser)
- Row start_row+: one stock item per row
  A name, B brand/season field, F internal code, G vendor SKU,
  H tire size, I quantity, J price

A share of rows is deliberately broken (missing code or size, short rows)
so that row-level diagnostics show up in the SUMMARY line.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

WIDTH = 10  # columns A..J
BRANDS = ["Pirelli", "Formula", "Nokian", "Hakka", "Nordman", "Bars", "Attar", "Michelin"]
SEASON_TAGS = ["лето", "зима", "зима шип", "Winter", "Summer", "*", ""]
SIZES = ["185/65R15", "195/65R15", "205/55R16", "215/60R16", "225/45R17", "235/55R18"]


def generate_rows(rows: int, broken_ratio: float = 0.05, seed: int = 42) -> list[list[Any]]:
    """Generate data rows (lists of WIDTH cells, some shorter or incomplete)."""
    rng = np.random.default_rng(seed)
    data: list[list[Any]] = []
    for i in range(rows):
        brand = str(rng.choice(BRANDS))
        tag = str(rng.choice(SEASON_TAGS))
        size = str(rng.choice(SIZES))
        name = f"{brand} {size} model {i % 50}"
        if rng.random() < 0.1:
            name += " 2021 год"
        row: list[Any] = [""] * WIDTH
        row[0] = name
        row[1] = f"{brand} {tag}".strip()
        row[5] = int(100000 + i)
        row[6] = f"SKU{int(rng.integers(1000, 9999))}" if rng.random() < 0.8 else ""
        row[7] = size
        row[8] = int(rng.integers(0, 40))
        row[9] = float(np.round(rng.uniform(3000, 25000), 2))

        if rng.random() < broken_ratio:
            kind = int(rng.integers(0, 3))
            if kind == 0:
                row[5] = ""
            elif kind == 1:
                row[7] = ""
            else:
                row = row[:6]
        data.append(row)
    return data


def create_report_file(
    output_path: Path,
    rows: int,
    start_row: int = 12,
    title: str = "Остатки товаров на складе",
    broken_ratio: float = 0.05,
    seed: int = 42,
) -> None:
    """Create a stock report workbook at output_path."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    sheet_data: list[list[Any]] = [[""] * WIDTH for _ in range(start_row - 1)]
    sheet_data[0][0] = title
    sheet_data[start_row - 2] = [
        "Номенклатура", "Бренд", "", "", "", "Код", "Артикул", "Размер", "Количество", "Цена",
    ]
    for row in generate_rows(rows, broken_ratio, seed):
        sheet_data.append(row + [None] * (WIDTH - len(row)))

    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        pd.DataFrame(sheet_data).to_excel(writer, sheet_name="TDSheet", header=False, index=False)

    print(f"Created stock report: {output_path}")
    print(f"  Data rows: {rows} (from row {start_row})")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic tire stock report (.xlsx)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/uploads/stock.xlsx
  %(prog)s big.xlsx --rows 50000 --broken-ratio 0.01 --seed 7
        """,
    )
    parser.add_argument("output", type=Path, help="Output Excel file path")
    parser.add_argument("--rows", type=int, default=1_000, help="Number of stock rows (default: 1,000)")
    parser.add_argument("--start-row", type=int, default=12, help="First data row, 1-based (default: 12)")
    parser.add_argument("--broken-ratio", type=float, default=0.05, help="Share of broken rows (default: 0.05)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if args.start_row < 2:
        print("Error: --start-row must be at least 2", file=sys.stderr)
        return 1
    if not 0 <= args.broken_ratio <= 1:
        print("Error: --broken-ratio must be within [0, 1]", file=sys.stderr)
        return 1

    try:
        create_report_file(args.output, args.rows, args.start_row, broken_ratio=args.broken_ratio, seed=args.seed)
    except OSError as e:
        print(f"Error generating dataset: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
