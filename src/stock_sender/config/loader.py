from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_START_ROW,
    DEFAULT_YEAR_MARKERS,
    AppConfig,
    ParserConfig,
    ReportConfig,
    VendorAPIConfig,
    VendorConfig,
)

"""Config loader.

Responsibilities:
- Load the YAML config (config/stock.yml by default)
- Validate it against config_schema.json (unknown keys rejected)
- Apply defaults and environment overrides for the vendor credentials
- Build the frozen AppConfig passed into the services
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/stock.yml")
DEFAULT_VENDOR_API_URL = "https://reports.pirelli.ru/local/templates/dealer/ajax/api.php"

ENV_API_LOGIN = "VENDOR_API_LOGIN"
ENV_API_TOKEN = "VENDOR_API_TOKEN"
ENV_API_URL = "VENDOR_API_URL"
ENV_CUSTOMER_CODE = "VENDOR_CUSTOMER_CODE"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing/invalid, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _groups(raw: Mapping[str, Any] | None) -> dict[str, tuple[str, ...]]:
    # YAML mapping order is kept: it decides which group wins for a record
    return {str(col): tuple(str(b) for b in brands or []) for col, brands in (raw or {}).items()}


def _build_vendor(raw: dict[str, Any], env: Mapping[str, str]) -> VendorConfig:
    api_raw = raw.get("api") or {}
    login = env.get(ENV_API_LOGIN, "")
    token = env.get(ENV_API_TOKEN, "")
    api = None
    # upload stays disabled until both credentials are present
    if login and token:
        api = VendorAPIConfig(
            base_url=env.get(ENV_API_URL) or api_raw.get("base_url") or DEFAULT_VENDOR_API_URL,
            login=login,
            token=token,
            timeout_seconds=float(api_raw.get("timeout_seconds", 30)),
        )
    return VendorConfig(
        customer_code=env.get(ENV_CUSTOMER_CODE) or str(raw["customer_code"]),
        brands=tuple(raw["brands"]),
        file_prefix=raw.get("file_prefix", "IR"),
        api=api,
    )


def _build_report(raw: dict[str, Any] | None) -> ReportConfig | None:
    if not raw:
        return None
    return ReportConfig(
        company_name=raw["company_name"],
        customer_code=str(raw["customer_code"]),
        summer_groups=_groups(raw.get("summer_groups")),
        winter_groups=_groups(raw.get("winter_groups")),
        file_prefix=raw.get("file_prefix", "Ikon_Report"),
    )


def load_config(path: Path = DEFAULT_CONFIG_PATH, env: Mapping[str, str] | None = None) -> AppConfig:
    if env is None:
        env = os.environ
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    parser_raw = data.get("parser") or {}
    parser = ParserConfig(
        start_row=parser_raw.get("start_row", DEFAULT_START_ROW),
        year_markers=tuple(parser_raw.get("year_markers", DEFAULT_YEAR_MARKERS)),
    )
    return AppConfig(
        inbox_directory=data["inbox_directory"],
        processed_directory=data["processed_directory"],
        logs_directory=data.get("logs_directory", "./logs"),
        parser=parser,
        vendor=_build_vendor(data["vendor"], env),
        report=_build_report(data.get("report")),
    )
