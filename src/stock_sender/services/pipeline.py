from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..excel.reader import SheetReader, SheetReadError
from ..models.config_models import DEFAULT_YEAR_MARKERS, ColumnMap, ParserConfig, VendorConfig
from ..models.processing_result import ParseOutcome
from ..models.row_data import RawRow
from ..models.stock_record import StockRecord
from .record_parser import parse_row

logger = logging.getLogger(__name__)

"""Sheet pipeline: rows of the first sheet -> ParseOutcome.

Structural problems (no sheets, no rows, fewer rows than the data start
row, unreadable workbook) abort the parse with a ParseError. Row-level
validation failures are counted and reported as "row <n>: <reasons>"
diagnostics while parsing continues.
"""

__all__ = [
    "ParseError",
    "NoSheetsError",
    "EmptySheetError",
    "InsufficientRowsError",
    "UnreadableSheetError",
    "run",
    "parse",
]


class ParseError(Exception):
    """Base exception for fatal (structural) parse errors."""
    pass


class NoSheetsError(ParseError):
    pass


class EmptySheetError(ParseError):
    pass


class InsufficientRowsError(ParseError):
    pass


class UnreadableSheetError(ParseError):
    pass


def run(
    rows: Sequence[RawRow],
    start_row: int,
    column_map: ColumnMap,
    vendor_brands: Iterable[str],
    year_markers: Iterable[str] = DEFAULT_YEAR_MARKERS,
) -> ParseOutcome:
    """Parse all data rows of a sheet starting at the 1-based start_row.

    Raises:
        EmptySheetError: the sheet has no rows at all
        InsufficientRowsError: the sheet has fewer rows than start_row
    """
    if not rows:
        raise EmptySheetError("sheet contains no rows")
    if len(rows) < start_row:
        raise InsufficientRowsError(
            f"sheet has {len(rows)} rows, data starts at row {start_row}"
        )

    brands = tuple(vendor_brands)
    markers = tuple(year_markers)
    valid = 0
    invalid = 0
    errors: list[str] = []
    all_items: list[StockRecord] = []
    vendor_items: list[StockRecord] = []

    for raw in rows[start_row - 1:]:
        # blank or truncated rows never reach the price column
        if len(raw) < column_map.min_columns:
            continue

        record, error = parse_row(raw, column_map, brands, markers)
        if error is not None:
            invalid += 1
            errors.append(f"row {raw.row_number}: {error}")
            logger.warning(
                f"row {raw.row_number} rejected ({error}): name={record.name!r} "
                f"brand={record.raw_brand_field!r}"
            )
            continue

        valid += 1
        all_items.append(record)
        if record.is_vendor_exportable:
            vendor_items.append(record)

    return ParseOutcome(
        total=valid + invalid,
        valid=valid,
        invalid=invalid,
        errors=errors,
        all_items=all_items,
        vendor_items=vendor_items,
    )


def parse(sheet_reader: SheetReader, parser_config: ParserConfig, vendor_config: VendorConfig) -> ParseOutcome:
    """Parse the first sheet offered by sheet_reader.

    Raises:
        ParseError: any structural problem; no partial outcome is produced
    """
    try:
        sheets = sheet_reader.list_sheets()
        if not sheets:
            raise NoSheetsError("workbook contains no sheets")
        rows = sheet_reader.read_rows(sheets[0])
    except SheetReadError as e:
        raise UnreadableSheetError(str(e)) from e

    return run(
        rows,
        parser_config.start_row,
        parser_config.columns,
        vendor_config.brands,
        parser_config.year_markers,
    )
