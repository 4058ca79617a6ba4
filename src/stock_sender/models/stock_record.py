from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

"""StockRecord domain model and Season enum.

A StockRecord is the normalized unit produced by the record parser from one
RawRow. It is created once and never mutated afterwards; the persisted
result document stores it as a plain dict (see to_dict / from_dict).
"""

__all__ = [
    "Season",
    "StockRecord",
]


class Season(Enum):
    """Tire season inferred from the brand field keywords.

    - SUMMER: a summer keyword matched
    - WINTER: a winter keyword matched (wins over summer)
    - UNKNOWN: no season keyword present
    """
    SUMMER = "summer"
    WINTER = "winter"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class StockRecord:
    """Normalized stock line of a distributor report."""
    row_number: int  # sheet row, provenance for diagnostics
    name: str  # description, whitespace collapsed
    raw_brand_field: str  # brand + season cell, case preserved
    clean_brand: str  # brand without season keywords and '*'
    season: Season
    internal_code: str  # digits only
    vendor_sku: str  # digits only
    tire_size: str
    quantity: int  # >= 0, 0 when unparseable
    unit_price: float  # >= 0, 0.0 when unparseable
    is_year_old: bool = False
    is_vendor_eligible: bool = False

    @property
    def is_valid(self) -> bool:
        """Both the internal code and the tire size are present."""
        return bool(self.internal_code) and bool(self.tire_size)

    @property
    def is_vendor_exportable(self) -> bool:
        """True when the record belongs in a vendor export."""
        return self.is_vendor_eligible and self.quantity > 0 and self.vendor_sku != ""

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["season"] = self.season.value
        return data

    @staticmethod
    def from_dict(data: dict[str, Any]) -> StockRecord:
        return StockRecord(
            row_number=int(data["row_number"]),
            name=data["name"],
            raw_brand_field=data["raw_brand_field"],
            clean_brand=data["clean_brand"],
            season=Season(data["season"]),
            internal_code=data["internal_code"],
            vendor_sku=data["vendor_sku"],
            tire_size=data["tire_size"],
            quantity=int(data["quantity"]),
            unit_price=float(data["unit_price"]),
            is_year_old=bool(data.get("is_year_old", False)),
            is_vendor_eligible=bool(data.get("is_vendor_eligible", False)),
        )
