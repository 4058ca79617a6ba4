from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from pathlib import Path

from ..models.processing_result import ParseOutcome

logger = logging.getLogger(__name__)

"""File-based result store.

Parse outcomes are written once as JSON documents named
<YYYYMMDD_HHMMSS>[_<label>]_processed.json and read back by the export / report /
send commands. Documents are never rewritten; a key deleted between two
commands surfaces as ResultNotFoundError.
"""

__all__ = [
    "RESULT_SUFFIX",
    "KEY_TIMESTAMP_FMT",
    "ResultStoreError",
    "ResultNotFoundError",
    "ResultStore",
]

RESULT_SUFFIX = "_processed.json"
KEY_TIMESTAMP_FMT = "%Y%m%d_%H%M%S"


class ResultStoreError(Exception):
    pass


class ResultNotFoundError(ResultStoreError):
    pass


class ResultStore:
    """key (file name) -> ParseOutcome mapping on a directory."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not key or Path(key).name != key or key in (".", ".."):
            raise ResultStoreError(f"invalid result key: {key!r}")
        return self.directory / key

    @staticmethod
    def new_key(now: datetime | None = None, label: str | None = None) -> str:
        """<YYYYMMDD_HHMMSS>[_<label>]_processed.json"""
        stamp = (now or datetime.now()).strftime(KEY_TIMESTAMP_FMT)
        if label:
            safe = re.sub(r"[^\w.-]+", "_", label).strip("._")
            if safe:
                stamp = f"{stamp}_{safe}"
        return stamp + RESULT_SUFFIX

    def save(self, outcome: ParseOutcome, key: str | None = None) -> str:
        """Persist outcome and return its key (the outcome's own key when set)."""
        key = key or outcome.result_key or self.new_key()
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        data = outcome.to_dict()
        data["result_key"] = key
        try:
            path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as e:
            raise ResultStoreError(f"cannot write result {key}: {e}") from e
        logger.debug(f"result saved: {path}")
        return key

    def load(self, key: str) -> ParseOutcome:
        path = self._path(key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ResultNotFoundError(f"result not found: {key}") from e
        except OSError as e:
            raise ResultStoreError(f"cannot read result {key}: {e}") from e
        try:
            data = json.loads(text)
            return ParseOutcome.from_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise ResultStoreError(f"corrupt result {key}: {e}") from e

    def keys(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(p.name for p in self.directory.iterdir() if p.is_file() and p.name.endswith(RESULT_SUFFIX))

    def clear(self) -> int:
        """Delete every stored result; returns the number of removed files."""
        removed = 0
        for key in self.keys():
            try:
                (self.directory / key).unlink()
                removed += 1
            except FileNotFoundError:
                continue
        return removed
