from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pytest

from stock_sender.config.loader import load_config
from stock_sender.models.processing_result import ProcessingResult
from stock_sender.services.orchestrator import (
    ProcessingError,
    clear_workspace,
    process_all,
    process_file,
    scan_report_files,
    stage_upload,
)
from stock_sender.storage.result_store import ResultStore


def test_scan_report_files(temp_workdir: Path) -> None:
    inbox = temp_workdir / "data" / "uploads"
    (inbox / "b.xlsx").write_bytes(b"x")
    (inbox / "a.XLSX").write_bytes(b"x")
    (inbox / "~$a.xlsx").write_bytes(b"lock")
    (inbox / "old.xls").write_bytes(b"x")
    (inbox / "readme.txt").write_text("ignore")
    (inbox / "nested.xlsx").mkdir()

    assert [p.name for p in scan_report_files(inbox)] == ["a.XLSX", "b.xlsx"]


def test_scan_report_files_directory_not_found() -> None:
    with pytest.raises(ProcessingError, match="Directory not found"):
        scan_report_files(Path("/non/existent/path"))


def test_scan_report_files_not_a_directory(temp_workdir: Path) -> None:
    f = temp_workdir / "file.txt"
    f.write_text("x")
    with pytest.raises(ProcessingError, match="not a directory"):
        scan_report_files(f)


def test_process_all_empty_inbox(write_config: Path) -> None:
    result = process_all(load_config(write_config, env={}))

    assert isinstance(result, ProcessingResult)
    assert result.success_files == 0
    assert result.failed_files == 0
    assert result.total_rows == 0
    assert result.file_stats == []
    assert result.elapsed_seconds >= 0


def test_process_file_persists_outcome(temp_workdir, write_config, make_report_xlsx, sample_stock_data) -> None:
    cfg = load_config(write_config, env={})
    path = make_report_xlsx(temp_workdir / "data" / "uploads" / "stock.xlsx", sample_stock_data)
    store = ResultStore(cfg.processed_directory)

    outcome = process_file(path, cfg, store, now=datetime(2024, 3, 5, 10, 0, 0))

    assert outcome.result_key == "20240305_100000_stock_processed.json"
    assert outcome.original_file == "stock.xlsx"
    assert outcome.upload_date == "2024-03-05 10:00:00"
    assert (outcome.total, outcome.valid, outcome.invalid) == (4, 3, 1)
    assert [r.internal_code for r in outcome.vendor_items] == ["1001", "1002"]
    assert store.load(outcome.result_key) == outcome


def test_process_all_partial_failure(temp_workdir, write_config, make_report_xlsx, sample_stock_data) -> None:
    cfg = load_config(write_config, env={})
    inbox = temp_workdir / "data" / "uploads"
    make_report_xlsx(inbox / "a_good.xlsx", sample_stock_data)
    make_report_xlsx(inbox / "b_short.xlsx", [], start_row=3)  # only 2 title rows < start row 12
    (inbox / "c_broken.xlsx").write_bytes(b"not a workbook")

    result = process_all(cfg)

    assert result.success_files == 1
    assert result.failed_files == 2
    assert result.total_rows == 4
    assert result.valid_rows == 3
    assert result.invalid_rows == 1
    assert result.vendor_rows == 2
    stats = {s.file_name: s for s in result.file_stats}
    assert stats["a_good.xlsx"].status == "success"
    assert stats["a_good.xlsx"].result_key.endswith("_a_good_processed.json")
    assert stats["b_short.xlsx"].status == "failed"
    assert "data starts at row 12" in stats["b_short.xlsx"].error
    assert stats["c_broken.xlsx"].status == "failed"

    # one stored result, failures store nothing
    assert len(ResultStore(cfg.processed_directory).keys()) == 1

    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    records = [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]
    by_type = {}
    for r in records:
        by_type.setdefault(r["error_type"], []).append(r)
    assert [(r["file"], r["row"], r["message"]) for r in by_type["ROW_VALIDATION"]] == [
        ("a_good.xlsx", 15, "missing internal code")
    ]
    assert {r["file"] for r in by_type["PARSE_ERROR"]} == {"b_short.xlsx", "c_broken.xlsx"}
    assert all(r["row"] == -1 for r in by_type["PARSE_ERROR"])


def test_process_all_explicit_files(temp_workdir, write_config, make_report_xlsx, sample_stock_data) -> None:
    cfg = load_config(write_config, env={})
    other = make_report_xlsx(temp_workdir / "elsewhere" / "stock.xlsx", sample_stock_data)
    make_report_xlsx(temp_workdir / "data" / "uploads" / "ignored.xlsx", sample_stock_data)

    result = process_all(cfg, files=[other])
    assert result.success_files == 1
    assert [s.file_name for s in result.file_stats] == ["stock.xlsx"]


def test_process_all_missing_inbox(temp_workdir, write_config) -> None:
    cfg = load_config(write_config, env={})
    (temp_workdir / "data" / "uploads").rmdir()
    with pytest.raises(ProcessingError):
        process_all(cfg)


def test_stage_upload(temp_workdir: Path) -> None:
    src = temp_workdir / "stock.xlsx"
    src.write_bytes(b"xlsx-bytes")
    inbox = temp_workdir / "new_inbox"

    staged = stage_upload(src, inbox, now=datetime(2024, 3, 5, 9, 8, 7))
    assert staged == inbox / "20240305_090807_stock.xlsx"
    assert staged.read_bytes() == b"xlsx-bytes"


def test_stage_upload_rejects_other_formats(temp_workdir: Path) -> None:
    src = temp_workdir / "stock.xls"
    src.write_bytes(b"x")
    with pytest.raises(ProcessingError, match="only .xlsx"):
        stage_upload(src, temp_workdir / "inbox")


def test_clear_workspace(temp_workdir, write_config, make_report_xlsx, sample_stock_data) -> None:
    cfg = load_config(write_config, env={})
    make_report_xlsx(temp_workdir / "data" / "uploads" / "stock.xlsx", sample_stock_data)
    process_all(cfg)

    assert clear_workspace(cfg) == (1, 1)
    assert list((temp_workdir / "data" / "uploads").iterdir()) == []
    assert ResultStore(cfg.processed_directory).keys() == []
