from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON Lines error log.

Row-level validation failures and file-level parse failures of a stock
report are written as one ErrorRecord each. row=-1 is the sentinel for
file-level errors where no specific row applies (no sheets, too few rows,
unreadable workbook).
"""

__all__ = [
    "ErrorRecord",
    "ROW_VALIDATION",
    "PARSE_ERROR",
]

ROW_VALIDATION = "ROW_VALIDATION"
PARSE_ERROR = "PARSE_ERROR"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: uploaded report file name
        sheet: sheet name within the file ("" when unknown)
        row: 1-based row number, -1 for file-level errors
        error_type: classification in UPPER_SNAKE_CASE
        message: human-readable reason
    """
    timestamp: str
    file: str
    sheet: str
    row: int
    error_type: str
    message: str

    @staticmethod
    def create(file: str, sheet: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # Cyrillic diagnostics stay readable in the log file
        return json.dumps(asdict(self), ensure_ascii=False)
