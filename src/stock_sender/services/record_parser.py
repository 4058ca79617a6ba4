from __future__ import annotations

from collections.abc import Iterable

from ..models.config_models import DEFAULT_YEAR_MARKERS, ColumnMap
from ..models.row_data import RawRow
from ..models.stock_record import StockRecord
from .classifier import classify_brand_season, is_vendor_brand, is_year_old
from .normalizer import collapse_whitespace, digits_only, parse_decimal, parse_quantity

"""Record parser: one RawRow -> one StockRecord.

The record is always fully populated, even when it fails validation, so the
caller can log its fields. Numeric cells never fail a row: unparseable
quantity/price become 0.
"""

__all__ = [
    "MISSING_INTERNAL_CODE",
    "MISSING_TIRE_SIZE",
    "parse_row",
]

MISSING_INTERNAL_CODE = "missing internal code"
MISSING_TIRE_SIZE = "missing tire size"


def parse_row(
    raw_row: RawRow,
    column_map: ColumnMap,
    vendor_brands: Iterable[str],
    year_markers: Iterable[str] = DEFAULT_YEAR_MARKERS,
) -> tuple[StockRecord, str | None]:
    """Parse a raw report row.

    Returns:
        (record, error) where error is None for a valid record, otherwise all
        violated rules joined with "; ".
    """
    name = collapse_whitespace(raw_row.cell(column_map.name))
    year_old = is_year_old(name, year_markers)

    brand_field = collapse_whitespace(raw_row.cell(column_map.brand))
    clean_brand, season = classify_brand_season(brand_field)
    vendor_eligible = is_vendor_brand(clean_brand, vendor_brands)

    internal_code = digits_only(raw_row.cell(column_map.internal_code))
    vendor_sku = digits_only(raw_row.cell(column_map.vendor_sku))
    tire_size = collapse_whitespace(raw_row.cell(column_map.tire_size))

    quantity = parse_quantity(raw_row.cell(column_map.quantity))
    unit_price = parse_decimal(raw_row.cell(column_map.price))

    record = StockRecord(
        row_number=raw_row.row_number,
        name=name,
        raw_brand_field=brand_field,
        clean_brand=clean_brand,
        season=season,
        internal_code=internal_code,
        vendor_sku=vendor_sku,
        tire_size=tire_size,
        quantity=quantity,
        unit_price=unit_price,
        is_year_old=year_old,
        is_vendor_eligible=vendor_eligible,
    )

    if record.is_valid:
        return record, None

    problems: list[str] = []
    if not internal_code:
        problems.append(MISSING_INTERNAL_CODE)
    if not tire_size:
        problems.append(MISSING_TIRE_SIZE)

    return record, "; ".join(problems)
