from __future__ import annotations

import re
from collections.abc import Iterable

from ..models.stock_record import Season
from .normalizer import collapse_whitespace

"""Brand / season classification of report rows.

The distributor writes brand and season into one free-text cell
("PIRELLI ЗИМА*", "Nokian лето"). Classification is substring based:
season keywords are matched case-insensitively, winter before summer. Every
matched keyword of either season is removed from the brand together with
the '*' marker.

Vendor membership uses bidirectional containment, so both abbreviated and
padded spellings match. Short configured brands can therefore match
unrelated strings.
"""

__all__ = [
    "WINTER_KEYWORDS",
    "SUMMER_KEYWORDS",
    "MARKER_CHAR",
    "detect_season",
    "classify_brand_season",
    "is_vendor_brand",
    "is_year_old",
]

WINTER_KEYWORDS: tuple[str, ...] = ("зима", "шип", "ice", "winter")
SUMMER_KEYWORDS: tuple[str, ...] = ("лето", "summer")
MARKER_CHAR = "*"


def _matched(field_lower: str, keywords: Iterable[str]) -> list[str]:
    return [kw for kw in keywords if kw in field_lower]


def detect_season(field: str) -> Season:
    """Infer the season of a brand field; winter wins when both are present."""
    lowered = field.lower()
    if _matched(lowered, WINTER_KEYWORDS):
        return Season.WINTER
    if _matched(lowered, SUMMER_KEYWORDS):
        return Season.SUMMER
    return Season.UNKNOWN


def classify_brand_season(field: str) -> tuple[str, Season]:
    """Split a brand+season cell into (clean_brand, season).

    >>> classify_brand_season("PIRELLI ЗИМА*")
    ('PIRELLI', <Season.WINTER: 'winter'>)
    """
    lowered = field.lower()
    brand = field
    for kw in _matched(lowered, WINTER_KEYWORDS + SUMMER_KEYWORDS):
        brand = re.sub(re.escape(kw), "", brand, flags=re.IGNORECASE)
    brand = brand.replace(MARKER_CHAR, "")
    return collapse_whitespace(brand), detect_season(field)


def is_vendor_brand(clean_brand: str, vendor_brands: Iterable[str]) -> bool:
    """Case-insensitive bidirectional containment test against a brand list."""
    brand = clean_brand.strip().lower()
    if not brand:
        return False
    for candidate in vendor_brands:
        c = candidate.strip().lower()
        if not c:
            continue
        if c in brand or brand in c:
            return True
    return False


def is_year_old(name: str, markers: Iterable[str]) -> bool:
    """True when the description carries a "year" marker (last season stock)."""
    lowered = name.lower()
    return any(m.lower() in lowered for m in markers if m)
