from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..excel.reader import ExcelSheetReader, SheetReadError
from ..excel.report_writer import workbook_to_bytes
from ..logging.init import log_summary, set_debug, setup_logging
from ..models.config_models import AppConfig
from ..services.export import ExportError, artifact_filename, generate_export, send_to_vendor
from ..services.orchestrator import ProcessingError, clear_workspace, process_all, stage_upload
from ..services.record_parser import parse_row
from ..services.report import generate_report
from ..services.summary import render_outcome_line, render_summary_line
from ..storage.result_store import ResultStore, ResultStoreError
from ..vendor.upload import VendorUploadClient, VendorUploadError

"""CLI entrypoint.

Subcommands:
- process [FILES...]  parse the inbox (or the given reports) into the result store
- upload FILE         stage a report into the inbox, then process it
- inspect FILE        print the sheets and the first data rows of a report
- export KEY          write the vendor CSV of a stored result
- report KEY          write the summary report workbook of a stored result
- send KEY            upload the vendor CSV of a stored result
- list / clear        show / drop stored results and staged uploads

Exit codes: 0 success, 2 some files failed, 1 fatal.
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

INSPECT_SAMPLE_ROWS = 3


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env (vendor credentials) with python-dotenv; values override the process env."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="stock-sender", description="Tire stock report -> vendor CSV / summary report")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command")

    sp = sub.add_parser("process", help="Parse uploaded reports (default)")
    sp.add_argument("files", nargs="*", type=Path, help="Reports to parse instead of the inbox")

    sp = sub.add_parser("upload", help="Copy a report into the inbox and parse it")
    sp.add_argument("file", type=Path)

    sp = sub.add_parser("inspect", help="Print sheets and first data rows of a report")
    sp.add_argument("file", type=Path)

    sp = sub.add_parser("export", help="Write the vendor CSV of a stored result")
    sp.add_argument("key")
    sp.add_argument("-o", "--output", type=Path, help="Output path (default: generated file name)")

    sp = sub.add_parser("report", help="Write the summary report of a stored result")
    sp.add_argument("key")
    sp.add_argument("-o", "--output", type=Path, help="Output path (default: generated file name)")

    sp = sub.add_parser("send", help="Upload the vendor CSV of a stored result")
    sp.add_argument("key")

    sub.add_parser("list", help="List stored results")
    sub.add_parser("clear", help="Delete staged uploads and stored results")

    args = p.parse_args(argv)
    if args.command is None:
        args.command = "process"
        args.files = []
    return args


def _exit_code(failed_files: int) -> int:
    if failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def _cmd_process(cfg: AppConfig, args: argparse.Namespace, logger: logging.Logger) -> int:
    files = list(args.files) or None
    if files is None:
        inbox = Path(cfg.inbox_directory)
        if not inbox.exists():
            logger.error(f"directory not found: {inbox}")
            return EXIT_FATAL
        logger.info(f"Processing files from: {inbox}")
    else:
        missing = [f for f in files if not f.is_file()]
        if missing:
            logger.error(f"file not found: {', '.join(str(f) for f in missing)}")
            return EXIT_FATAL

    try:
        result = process_all(cfg, files=files)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    total_files = result.success_files + result.failed_files
    summary_line = render_summary_line(total_files, result)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line[len("SUMMARY "):])
    return _exit_code(result.failed_files)


def _cmd_upload(cfg: AppConfig, args: argparse.Namespace, logger: logging.Logger) -> int:
    if not args.file.is_file():
        logger.error(f"file not found: {args.file}")
        return EXIT_FATAL
    try:
        staged = stage_upload(args.file, Path(cfg.inbox_directory))
    except ProcessingError as e:
        logger.error(f"upload: {e}")
        return EXIT_FATAL
    args.files = [staged]
    return _cmd_process(cfg, args, logger)


def _cmd_inspect(cfg: AppConfig, args: argparse.Namespace, logger: logging.Logger) -> int:
    if not args.file.is_file():
        print(f"inspect: file not found: {args.file}")
        return EXIT_FATAL
    reader = ExcelSheetReader(args.file)
    try:
        sheets = reader.list_sheets()
        print(f"FILE: {args.file.name} sheets={sheets}")
        if not sheets:
            return EXIT_SUCCESS_ALL
        rows = reader.read_rows(sheets[0])
    except SheetReadError as e:
        print(f"  read_error: {e}")
        return EXIT_FATAL

    start = cfg.parser.start_row
    data_rows = rows[start - 1:]
    print(f"  SHEET: {sheets[0]} rows={len(rows)} data_rows={len(data_rows)} start_row={start}")
    for raw in data_rows[:INSPECT_SAMPLE_ROWS]:
        record, error = parse_row(raw, cfg.parser.columns, cfg.vendor.brands, cfg.parser.year_markers)
        print(f"    row {raw.row_number}: cells={list(raw.cells)}")
        print(
            f"      -> brand={record.clean_brand!r} season={record.season.value} "
            f"code={record.internal_code!r} sku={record.vendor_sku!r} size={record.tire_size!r} "
            f"qty={record.quantity} vendor={record.is_vendor_exportable} error={error}"
        )
    return EXIT_SUCCESS_ALL


def _write_output(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


def _cmd_export(cfg: AppConfig, args: argparse.Namespace, logger: logging.Logger) -> int:
    outcome = ResultStore(cfg.processed_directory).load(args.key)
    if not outcome.vendor_items:
        logger.error(f"export: no vendor items in {args.key}")
        return EXIT_FATAL
    content = generate_export(outcome.vendor_items, cfg.vendor)
    out = args.output or Path(artifact_filename(cfg.vendor.file_prefix, cfg.vendor.customer_code, "csv"))
    _write_output(out, content)
    logger.info(f"export written: {out} ({outcome.vendor_count} items)")
    return EXIT_SUCCESS_ALL


def _cmd_report(cfg: AppConfig, args: argparse.Namespace, logger: logging.Logger) -> int:
    if cfg.report is None:
        logger.error("report: no report section in config")
        return EXIT_FATAL
    outcome = ResultStore(cfg.processed_directory).load(args.key)
    wb = generate_report(outcome.all_items, cfg.report)
    out = args.output or Path(artifact_filename(cfg.report.file_prefix, cfg.report.customer_code, "xlsx"))
    _write_output(out, workbook_to_bytes(wb))
    logger.info(f"report written: {out} ({outcome.valid} items)")
    return EXIT_SUCCESS_ALL


def _cmd_send(cfg: AppConfig, args: argparse.Namespace, logger: logging.Logger) -> int:
    if cfg.vendor.api is None:
        logger.error("send: vendor API credentials not configured (VENDOR_API_LOGIN / VENDOR_API_TOKEN)")
        return EXIT_FATAL
    outcome = ResultStore(cfg.processed_directory).load(args.key)
    try:
        response = send_to_vendor(outcome, cfg.vendor, VendorUploadClient(cfg.vendor.api))
    except VendorUploadError as e:
        logger.error(f"send: {e}")
        return EXIT_FATAL
    return EXIT_SUCCESS_ALL if response.status else EXIT_FATAL


def _cmd_list(cfg: AppConfig, args: argparse.Namespace, logger: logging.Logger) -> int:
    store = ResultStore(cfg.processed_directory)
    keys = store.keys()
    if not keys:
        print("no stored results")
    for key in keys:
        try:
            outcome = store.load(key)
        except ResultStoreError as e:
            logger.warning(f"{key}: {e}")
            continue
        print(f"{key}  {render_outcome_line(outcome.original_file or '-', outcome)}  uploaded={outcome.upload_date or '-'}")
    return EXIT_SUCCESS_ALL


def _cmd_clear(cfg: AppConfig, args: argparse.Namespace, logger: logging.Logger) -> int:
    clear_workspace(cfg)
    return EXIT_SUCCESS_ALL


COMMANDS: dict[str, Callable[[AppConfig, argparse.Namespace, logging.Logger], int]] = {
    "process": _cmd_process,
    "upload": _cmd_upload,
    "inspect": _cmd_inspect,
    "export": _cmd_export,
    "report": _cmd_report,
    "send": _cmd_send,
    "list": _cmd_list,
    "clear": _cmd_clear,
}


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # only None reads sys.argv; an explicit [] means "no arguments"
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        return COMMANDS[args.command](cfg, args, logger)
    except (ResultStoreError, ExportError, OSError) as e:
        logger.error(f"{args.command}: {e}")
        return EXIT_FATAL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
