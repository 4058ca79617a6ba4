from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .stock_record import StockRecord

"""Processing result models for the stock report pipeline.

ParseOutcome is the per-sheet result of the pipeline and the document that
is persisted in the result store. FileStat / ProcessingResult aggregate a
batch run over several uploaded files for the SUMMARY line.
"""


@dataclass(frozen=True)
class ParseOutcome:
    """Result of parsing one stock report sheet.

    total == valid + invalid; rows skipped for having too few cells are not
    part of total.
    """
    total: int
    valid: int
    invalid: int
    errors: list[str] = field(default_factory=list)  # "row <n>: <reasons>"
    all_items: list[StockRecord] = field(default_factory=list)
    vendor_items: list[StockRecord] = field(default_factory=list)
    result_key: str | None = None  # file name in the result store
    original_file: str | None = None  # uploaded report name
    upload_date: str | None = None  # "YYYY-MM-DD HH:MM:SS"

    @property
    def vendor_count(self) -> int:
        return len(self.vendor_items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "result_key": self.result_key,
            "original_file": self.original_file,
            "upload_date": self.upload_date,
            "stats": {
                "total_rows": self.total,
                "valid_rows": self.valid,
                "invalid_rows": self.invalid,
                "vendor_count": self.vendor_count,
                "errors": list(self.errors),
            },
            "vendor_items": [r.to_dict() for r in self.vendor_items],
            "all_items": [r.to_dict() for r in self.all_items],
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> ParseOutcome:
        stats = data.get("stats", {})
        return ParseOutcome(
            total=int(stats.get("total_rows", 0)),
            valid=int(stats.get("valid_rows", 0)),
            invalid=int(stats.get("invalid_rows", 0)),
            errors=list(stats.get("errors") or []),
            all_items=[StockRecord.from_dict(r) for r in data.get("all_items") or []],
            vendor_items=[StockRecord.from_dict(r) for r in data.get("vendor_items") or []],
            result_key=data.get("result_key"),
            original_file=data.get("original_file"),
            upload_date=data.get("upload_date"),
        )


@dataclass(frozen=True)
class FileStat:
    """Per-file statistics of a batch run."""
    file_name: str
    status: str  # success/failed
    total_rows: int
    valid_rows: int
    invalid_rows: int
    vendor_rows: int
    elapsed_seconds: float
    result_key: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of processing a batch of uploaded reports."""
    success_files: int
    failed_files: int
    total_rows: int
    valid_rows: int
    invalid_rows: int
    vendor_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None
