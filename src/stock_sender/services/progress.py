from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress bar for batch processing of uploaded reports.

A single tqdm bar, shown only when stdout is a TTY so that CI logs and
redirected output stay free of control sequences.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Report-level progress (one tick per parsed workbook)."""

    def __init__(self, total_files: int, *, description: str = "Parsing reports") -> None:
        self.total_files = total_files
        self.description = description
        self.current_file = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None = None
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="report",
                leave=True,
                ncols=80,
                ascii=True,
            )

    def start_file(self, file_path: Path) -> None:
        self.current_file += 1
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_path.name})")

    def finish_file(self, success: bool = True) -> None:
        if self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_description(self.description)

    def set_postfix(self, **kwargs: Any) -> None:
        """Show running counters (valid/invalid/vendor) next to the bar."""
        if self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
