from __future__ import annotations

import csv
import io
from datetime import datetime

import pytest

from stock_sender.models.config_models import VendorConfig
from stock_sender.models.processing_result import ParseOutcome
from stock_sender.models.stock_record import Season, StockRecord
from stock_sender.services.export import (
    EXPORT_HEADER,
    ExportError,
    ExportValidationError,
    artifact_filename,
    generate_export,
    validate_for_upload,
)

VENDOR = VendorConfig(customer_code="100200", brands=("Pirelli",))


def _rec(code: str, sku: str = "5001", qty: int = 4, name: str = "Pirelli P Zero") -> StockRecord:
    return StockRecord(
        row_number=12,
        name=name,
        raw_brand_field="Pirelli",
        clean_brand="Pirelli",
        season=Season.SUMMER,
        internal_code=code,
        vendor_sku=sku,
        tire_size="205/55R16",
        quantity=qty,
        unit_price=1.0,
        is_vendor_eligible=True,
    )


def test_generate_export_layout():
    content = generate_export([_rec("1001"), _rec("1002", "5002", 7, "Шина, зимняя")], VENDOR, datetime(2024, 3, 5))
    rows = list(csv.reader(io.StringIO(content.decode("utf-8"))))

    assert rows[0] == EXPORT_HEADER
    assert rows[1] == ["100200", "1001", "5001", "Pirelli P Zero", "4", "20240305"]
    # the comma inside the description is quoted, not split
    assert rows[2] == ["100200", "1002", "5002", "Шина, зимняя", "7", "20240305"]
    assert len(rows) == 3


def test_generate_export_empty_has_header_only():
    content = generate_export([], VENDOR, datetime(2024, 3, 5))
    assert content.decode("utf-8") == ",".join(EXPORT_HEADER) + "\n"


def test_scenario_e_zero_quantity_fails_validation():
    with pytest.raises(ExportValidationError, match="item 1002") as exc:
        validate_for_upload([_rec("1001"), _rec("1002", qty=0)])
    assert "zero quantity" in str(exc.value)
    assert isinstance(exc.value, ExportError)


def test_validation_requires_vendor_sku():
    with pytest.raises(ExportValidationError, match="item 1003 .* no vendor SKU"):
        validate_for_upload([_rec("1003", sku="")])


def test_validation_passes_for_good_records():
    validate_for_upload([_rec("1001"), _rec("1002")])


def test_artifact_filename():
    assert artifact_filename("IR", "100200", "csv", datetime(2024, 3, 5, 23, 59)) == "IR_100200_20240305.csv"


def test_outcome_round_trip_keeps_vendor_subset():
    outcome = ParseOutcome(total=1, valid=1, invalid=0, all_items=[_rec("1")], vendor_items=[_rec("1")])
    restored = ParseOutcome.from_dict(outcome.to_dict())
    assert restored.vendor_items == outcome.vendor_items
    assert restored.vendor_count == 1
