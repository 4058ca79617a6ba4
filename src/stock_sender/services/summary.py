from __future__ import annotations

from ..models.processing_result import ParseOutcome, ProcessingResult

"""SUMMARY line rendering.

Format:
SUMMARY files={n}/{n} success={s} failed={f} rows={total} valid={v}
invalid={i} vendor={p} elapsed_sec={elapsed}
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small numbers
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)


def render_summary_line(total_files: int, result: ProcessingResult) -> str:
    """Render the SUMMARY line of a batch run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=1, failed_files=0, total_rows=120, valid_rows=118,
        ...     invalid_rows=2, vendor_rows=15, start_time=start, end_time=end,
        ...     elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(1, result)
        'SUMMARY files=1/1 success=1 failed=0 rows=120 valid=118 invalid=2 vendor=15 elapsed_sec=2'
    """
    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_rows} "
        f"valid={result.valid_rows} "
        f"invalid={result.invalid_rows} "
        f"vendor={result.vendor_rows} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )


def render_outcome_line(file_name: str, outcome: ParseOutcome) -> str:
    """One-line description of a single parsed report."""
    return (
        f"{file_name}: rows={outcome.total} valid={outcome.valid} "
        f"invalid={outcome.invalid} vendor={outcome.vendor_count}"
    )
