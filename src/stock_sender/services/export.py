from __future__ import annotations

import csv
import io
import logging
from collections.abc import Sequence
from datetime import datetime

from ..models.config_models import VendorConfig
from ..models.processing_result import ParseOutcome
from ..models.stock_record import StockRecord
from ..vendor.upload import UploadResponse, VendorUploadClient

logger = logging.getLogger(__name__)

"""Vendor CSV export and upload.

The CSV layout is the vendor's stock interface: one header row, then one
line per stock record with the customer code and a single stock date for
the whole file.
"""

__all__ = [
    "EXPORT_HEADER",
    "STOCK_DATE_FMT",
    "ExportError",
    "ExportValidationError",
    "artifact_filename",
    "generate_export",
    "validate_for_upload",
    "send_to_vendor",
]

EXPORT_HEADER = [
    "Vendor Customer Code",
    "Customer Material Code",
    "Vendor Material Code",
    "Material Description",
    "Stock Quantity",
    "Stock Date",
]
STOCK_DATE_FMT = "%Y%m%d"


class ExportError(Exception):
    pass


class ExportValidationError(ExportError):
    pass


def artifact_filename(prefix: str, customer_code: str, ext: str, now: datetime | None = None) -> str:
    """<prefix>_<customer_code>_<YYYYMMDD>.<ext>; same-day names overwrite each other."""
    stamp = (now or datetime.now()).strftime(STOCK_DATE_FMT)
    return f"{prefix}_{customer_code}_{stamp}.{ext}"


def validate_for_upload(records: Sequence[StockRecord]) -> None:
    """Reject records the vendor would refuse.

    Raises:
        ExportValidationError: naming the first offending record's internal code
    """
    for record in records:
        if record.quantity <= 0:
            raise ExportValidationError(
                f"item {record.internal_code} (row {record.row_number}) has zero quantity"
            )
        if record.vendor_sku == "":
            raise ExportValidationError(
                f"item {record.internal_code} (row {record.row_number}) has no vendor SKU"
            )


def generate_export(
    records: Sequence[StockRecord],
    vendor_config: VendorConfig,
    stock_date: datetime | None = None,
) -> bytes:
    """Render records as the vendor CSV (UTF-8)."""
    stamp = (stock_date or datetime.now()).strftime(STOCK_DATE_FMT)
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    try:
        writer.writerow(EXPORT_HEADER)
    except csv.Error as e:
        raise ExportError(f"cannot write header: {e}") from e

    for record in records:
        try:
            writer.writerow([
                vendor_config.customer_code,
                record.internal_code,
                record.vendor_sku,
                record.name,
                str(record.quantity),
                stamp,
            ])
        except csv.Error as e:
            raise ExportError(
                f"cannot write item {record.internal_code} (row {record.row_number}): {e}"
            ) from e
    return buf.getvalue().encode("utf-8")


def send_to_vendor(
    outcome: ParseOutcome,
    vendor_config: VendorConfig,
    client: VendorUploadClient,
    now: datetime | None = None,
) -> UploadResponse:
    """Validate, render and upload the vendor subset of a parse outcome."""
    if not outcome.vendor_items:
        raise ExportError(f"no vendor items in {outcome.result_key or 'result'}")

    validate_for_upload(outcome.vendor_items)
    now = now or datetime.now()
    content = generate_export(outcome.vendor_items, vendor_config, stock_date=now)
    filename = artifact_filename(vendor_config.file_prefix, vendor_config.customer_code, "csv", now)

    response = client.upload(content, filename)
    if response.status:
        logger.info(f"sent {filename} ({outcome.vendor_count} items): {response.message}")
    else:
        logger.error(f"vendor rejected {filename}: code={response.code} {response.message}")
    return response
