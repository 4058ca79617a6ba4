from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the stock report tool.

These are the typed configuration objects built once by
stock_sender.config.loader and passed explicitly into the pipeline,
export and report services. Nothing in the core reads the environment.
"""


@dataclass(frozen=True)
class ColumnMap:
    """0-based positions of the fields in a report row.

    The distributor report layout is fixed, so the map is a constant
    (COLUMN_MAP) rather than a user setting.
    """
    name: int
    brand: int
    internal_code: int
    vendor_sku: int
    tire_size: int
    quantity: int
    price: int

    @property
    def min_columns(self) -> int:
        """Cells a row needs to reach the price column; shorter rows are blank."""
        return self.price + 1


# A: name, B: brand+season, F: internal (1C) code, G: vendor SKU,
# H: tire size, I: quantity, J: price
COLUMN_MAP = ColumnMap(
    name=0,
    brand=1,
    internal_code=5,
    vendor_sku=6,
    tire_size=7,
    quantity=8,
    price=9,
)

DEFAULT_START_ROW = 12
DEFAULT_YEAR_MARKERS: tuple[str, ...] = ("год",)

# Report columns that may hold group sums
SUMMER_GROUP_COLUMNS: tuple[str, ...] = ("B", "C", "D", "E")
WINTER_GROUP_COLUMNS: tuple[str, ...] = ("G", "H", "I")


@dataclass(frozen=True)
class ParserConfig:
    start_row: int = DEFAULT_START_ROW  # 1-based first data row
    columns: ColumnMap = COLUMN_MAP
    year_markers: tuple[str, ...] = DEFAULT_YEAR_MARKERS


@dataclass(frozen=True)
class VendorAPIConfig:
    """Credentials and endpoint of the vendor upload API.

    Only built when both login and token are available.
    """
    base_url: str
    login: str
    token: str
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class VendorConfig:
    """Vendor export settings (brand list, customer code, CSV naming)."""
    customer_code: str
    brands: tuple[str, ...]
    file_prefix: str = "IR"
    api: VendorAPIConfig | None = None


@dataclass(frozen=True)
class ReportConfig:
    """Summary report settings.

    Group mappings are keyed by the report column that receives the sum;
    mapping order is the order groups are tried for a record.
    """
    company_name: str
    customer_code: str
    summer_groups: dict[str, tuple[str, ...]] = field(default_factory=dict)
    winter_groups: dict[str, tuple[str, ...]] = field(default_factory=dict)
    file_prefix: str = "Ikon_Report"


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object for the stock report tool."""
    inbox_directory: str  # uploaded .xlsx reports
    processed_directory: str  # persisted ParseOutcome documents
    vendor: VendorConfig
    parser: ParserConfig = field(default_factory=ParserConfig)
    report: ReportConfig | None = None  # report generator is optional
    logs_directory: str = "./logs"
