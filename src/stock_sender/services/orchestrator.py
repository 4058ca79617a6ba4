from __future__ import annotations

import logging
import re
import shutil
from datetime import UTC, datetime
from pathlib import Path

from ..excel.reader import ExcelSheetReader
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import AppConfig
from ..models.error_record import PARSE_ERROR, ROW_VALIDATION, ErrorRecord
from ..models.processing_result import FileStat, ParseOutcome, ProcessingResult
from ..storage.result_store import ResultStore, ResultStoreError
from .pipeline import ParseError, parse
from .progress import ProgressTracker
from .summary import render_outcome_line

logger = logging.getLogger(__name__)

"""Service orchestration for uploaded stock reports.

process_all() scans the inbox (or takes explicit files), parses each
workbook, stores every outcome in the result store, writes row and file
errors to the JSON Lines error log and returns aggregated metrics for the
SUMMARY line. A failing file never stops the batch.
"""

UPLOAD_TIMESTAMP_FMT = "%Y%m%d_%H%M%S"
REPORT_SUFFIX = ".xlsx"

_DIAGNOSTIC_RE = re.compile(r"^row (?P<row>\d+): (?P<reason>.*)$")


class ProcessingError(Exception):
    """Fatal batch-level error (inbox missing, unreadable directory)."""
    pass


def scan_report_files(directory: Path) -> list[Path]:
    """List .xlsx reports of a directory (non-recursive, sorted by name).

    Raises:
        ProcessingError: directory missing or unreadable
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")

    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")

    try:
        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() == REPORT_SUFFIX and not p.name.startswith("~$")
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def stage_upload(source: Path, inbox: Path, now: datetime | None = None) -> Path:
    """Copy a report into the inbox as <YYYYMMDD_HHMMSS>_<name>.

    Raises:
        ProcessingError: not an .xlsx file, or the copy failed
    """
    if source.suffix.lower() != REPORT_SUFFIX:
        raise ProcessingError(f"only .xlsx reports can be uploaded: {source.name}")
    stamp = (now or datetime.now()).strftime(UPLOAD_TIMESTAMP_FMT)
    target = inbox / f"{stamp}_{source.name}"
    try:
        inbox.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)
    except OSError as e:
        raise ProcessingError(f"cannot store upload {source.name}: {e}") from e
    logger.info(f"upload stored: {target.name} ({target.stat().st_size} bytes)")
    return target


def _record_row_errors(error_log: ErrorLogBuffer, file_name: str, outcome: ParseOutcome) -> None:
    for diagnostic in outcome.errors:
        m = _DIAGNOSTIC_RE.match(diagnostic)
        row = int(m.group("row")) if m else -1
        reason = m.group("reason") if m else diagnostic
        error_log.append(ErrorRecord.create(file_name, "", row, ROW_VALIDATION, reason))


def process_file(
    path: Path,
    config: AppConfig,
    store: ResultStore,
    error_log: ErrorLogBuffer | None = None,
    now: datetime | None = None,
) -> ParseOutcome:
    """Parse one uploaded report and persist the outcome.

    Raises:
        ParseError: structural problem with the workbook (nothing is stored)
    """
    now = now or datetime.now()
    outcome = parse(ExcelSheetReader(path), config.parser, config.vendor)

    key = ResultStore.new_key(now, label=path.stem)
    stored = ParseOutcome(
        total=outcome.total,
        valid=outcome.valid,
        invalid=outcome.invalid,
        errors=outcome.errors,
        all_items=outcome.all_items,
        vendor_items=outcome.vendor_items,
        result_key=key,
        original_file=path.name,
        upload_date=now.strftime("%Y-%m-%d %H:%M:%S"),
    )
    store.save(stored, key)

    if error_log is not None:
        _record_row_errors(error_log, path.name, stored)
    logger.info(f"{render_outcome_line(path.name, stored)} -> {key}")
    return stored


def process_all(config: AppConfig, files: list[Path] | None = None) -> ProcessingResult:
    """Parse every report of the inbox (or the given files).

    Raises:
        ProcessingError: the inbox cannot be scanned
    """
    start_time = datetime.now(UTC)
    error_log = ErrorLogBuffer(config.logs_directory)
    store = ResultStore(config.processed_directory)

    file_paths = files if files is not None else scan_report_files(Path(config.inbox_directory))

    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    total_rows = valid_rows = invalid_rows = vendor_rows = 0

    with ProgressTracker(len(file_paths)) as progress:
        for path in file_paths:
            progress.start_file(path)
            file_start = datetime.now(UTC)
            try:
                outcome = process_file(path, config, store, error_log)
            except (ParseError, ResultStoreError, OSError) as e:
                failed_count += 1
                logger.error(f"{path.name}: {e}")
                error_log.append(ErrorRecord.create(path.name, "", -1, PARSE_ERROR, str(e)))
                file_stats.append(FileStat(
                    file_name=path.name,
                    status="failed",
                    total_rows=0,
                    valid_rows=0,
                    invalid_rows=0,
                    vendor_rows=0,
                    elapsed_seconds=(datetime.now(UTC) - file_start).total_seconds(),
                    error=str(e),
                ))
                progress.finish_file(success=False)
                continue

            success_count += 1
            total_rows += outcome.total
            valid_rows += outcome.valid
            invalid_rows += outcome.invalid
            vendor_rows += outcome.vendor_count
            file_stats.append(FileStat(
                file_name=path.name,
                status="success",
                total_rows=outcome.total,
                valid_rows=outcome.valid,
                invalid_rows=outcome.invalid,
                vendor_rows=outcome.vendor_count,
                elapsed_seconds=(datetime.now(UTC) - file_start).total_seconds(),
                result_key=outcome.result_key,
            ))
            progress.set_postfix(valid=valid_rows, invalid=invalid_rows, vendor=vendor_rows)
            progress.finish_file(success=True)

    try:
        log_path = error_log.flush()
        if log_path is not None:
            logger.info(f"error log written: {log_path}")
    except OSError as e:
        logger.warning(f"cannot write error log: {e}")

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_rows=total_rows,
        valid_rows=valid_rows,
        invalid_rows=invalid_rows,
        vendor_rows=vendor_rows,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )


def clear_workspace(config: AppConfig) -> tuple[int, int]:
    """Delete staged uploads and stored results; returns (uploads, results) removed."""
    uploads_removed = 0
    inbox = Path(config.inbox_directory)
    if inbox.is_dir():
        for p in inbox.iterdir():
            if p.is_file():
                try:
                    p.unlink()
                    uploads_removed += 1
                except FileNotFoundError:
                    continue
                logger.debug(f"upload removed: {p.name}")
    results_removed = ResultStore(config.processed_directory).clear()
    logger.info(f"cleared {uploads_removed} uploads, {results_removed} results")
    return uploads_removed, results_removed
