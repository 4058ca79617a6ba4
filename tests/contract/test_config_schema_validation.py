from __future__ import annotations

from pathlib import Path

import pytest

from stock_sender.config.loader import ConfigError, load_config

"""Config schema contract: unknown keys and missing required sections are rejected."""

BASE = """inbox_directory: ./data/uploads
processed_directory: ./data/processed
vendor:
  customer_code: "1"
  brands: [Pirelli]
"""


def _write(temp_workdir: Path, text: str) -> Path:
    p = temp_workdir / "config" / "stock.yml"
    p.write_text(text, encoding="utf-8")
    return p


def test_minimal_config_accepted(temp_workdir: Path):
    assert load_config(_write(temp_workdir, BASE), env={}).vendor.brands == ("Pirelli",)


def test_unknown_top_level_key(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(_write(temp_workdir, BASE + "admin_password: x\n"), env={})


def test_missing_vendor_section(temp_workdir: Path):
    text = "inbox_directory: a\nprocessed_directory: b\n"
    with pytest.raises(ConfigError, match="vendor"):
        load_config(_write(temp_workdir, text), env={})


def test_vendor_requires_brands(temp_workdir: Path):
    text = "inbox_directory: a\nprocessed_directory: b\nvendor:\n  customer_code: '1'\n"
    with pytest.raises(ConfigError, match="brands"):
        load_config(_write(temp_workdir, text), env={})


def test_report_group_column_outside_range(temp_workdir: Path):
    text = BASE + "report:\n  company_name: Ikon\n  customer_code: '1'\n  summer_groups:\n    F: [Nokian]\n"
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(_write(temp_workdir, text), env={})


def test_start_row_must_be_positive(temp_workdir: Path):
    text = BASE + "parser:\n  start_row: 0\n"
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(_write(temp_workdir, text), env={})
