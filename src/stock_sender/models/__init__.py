"""Domain models for the tire stock report tool.

This package contains the domain model classes used throughout the
application: configuration, raw rows, stock records, parse outcomes,
group sums and error records.
"""

from .config_models import (
    COLUMN_MAP,
    AppConfig,
    ColumnMap,
    ParserConfig,
    ReportConfig,
    VendorAPIConfig,
    VendorConfig,
)
from .error_record import ErrorRecord
from .group_sums import VendorGroupSums
from .processing_result import FileStat, ParseOutcome, ProcessingResult
from .row_data import RawRow
from .stock_record import Season, StockRecord

__all__ = [
    # Configuration models
    "COLUMN_MAP",
    "AppConfig",
    "ColumnMap",
    "ParserConfig",
    "ReportConfig",
    "VendorAPIConfig",
    "VendorConfig",
    # Processing models
    "ErrorRecord",
    "FileStat",
    "ParseOutcome",
    "ProcessingResult",
    "RawRow",
    "Season",
    "StockRecord",
    "VendorGroupSums",
]
