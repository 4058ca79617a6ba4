from __future__ import annotations

from dataclasses import dataclass, field

"""VendorGroupSums model: per-group quantity sums for the summary report."""

__all__ = [
    "VendorGroupSums",
]


@dataclass(frozen=True)
class VendorGroupSums:
    """Summed quantities per group label, split by season.

    Every configured label is present (0 when nothing matched).
    grand_total is the sum over both seasons and all groups.
    """
    summer: dict[str, int] = field(default_factory=dict)
    winter: dict[str, int] = field(default_factory=dict)
    grand_total: int = 0
