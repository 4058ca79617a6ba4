from __future__ import annotations

from dataclasses import dataclass

"""RawRow model for the stock report pipeline.

RawRow represents a single sheet row as delivered by a sheet reader: the
cells are already converted to strings, trailing empty cells may be
missing and are treated as empty.
"""

__all__ = [
    "RawRow",
]


@dataclass(frozen=True)
class RawRow:
    """Ordered cell strings of one sheet row.

    The row_number refers to the original 1-based row number in the sheet
    and is used as provenance in diagnostics.
    """
    row_number: int  # 1-based sheet row number
    cells: tuple[str, ...]  # cell strings, trailing empties may be trimmed

    def __len__(self) -> int:
        return len(self.cells)

    def cell(self, index: int) -> str:
        """Return the cell at a 0-based index, or "" past the end of the row."""
        if 0 <= index < len(self.cells):
            return self.cells[index]
        return ""
