from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from ..models.group_sums import VendorGroupSums
from ..models.stock_record import Season, StockRecord
from .classifier import is_vendor_brand

"""Vendor aggregator: per-group stock sums for the summary report.

Season gates which mapping is consulted: summer records are only tried
against summer groups, winter records only against winter groups, records
of unknown season contribute nothing. Within a mapping the first matching
group (mapping order) takes the whole quantity.
"""

__all__ = [
    "aggregate",
]


def _first_matching_group(brand: str, groups: Mapping[str, Sequence[str]]) -> str | None:
    for label, brands in groups.items():
        if is_vendor_brand(brand, brands):
            return label
    return None


def aggregate(
    records: Iterable[StockRecord],
    summer_groups: Mapping[str, Sequence[str]],
    winter_groups: Mapping[str, Sequence[str]],
) -> VendorGroupSums:
    """Sum positive quantities per group label.

    Example:
        >>> from stock_sender.models.stock_record import StockRecord, Season
        >>> rec = StockRecord(1, "x", "Nokian зима", "Nokian", Season.WINTER,
        ...                   "1", "2", "205/55R16", 7, 0.0)
        >>> sums = aggregate([rec], {"B": ["Nokian"]}, {"G": ["Nokian"]})
        >>> sums.winter, sums.summer, sums.grand_total
        ({'G': 7}, {'B': 0}, 7)
    """
    summer = {label: 0 for label in summer_groups}
    winter = {label: 0 for label in winter_groups}
    grand_total = 0

    for record in records:
        if record.quantity <= 0:
            continue
        if record.season is Season.SUMMER:
            sums, groups = summer, summer_groups
        elif record.season is Season.WINTER:
            sums, groups = winter, winter_groups
        else:
            continue

        label = _first_matching_group(record.clean_brand, groups)
        if label is None:
            continue
        sums[label] += record.quantity
        grand_total += record.quantity

    return VendorGroupSums(summer=summer, winter=winter, grand_total=grand_total)
