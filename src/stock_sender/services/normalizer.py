from __future__ import annotations

import math
import re

"""Cell normalization helpers.

Pure, total functions over cell strings. Spreadsheet exports from the
distributor mix NBSP/tab padding, thousand separators and comma decimals;
every helper here returns a usable value instead of raising.
"""

__all__ = [
    "collapse_whitespace",
    "digits_only",
    "parse_decimal",
    "parse_quantity",
]

_WHITESPACE_RE = re.compile(r"\s+")
_NON_DIGIT_RE = re.compile(r"[^0-9]")


def collapse_whitespace(value: str) -> str:
    """Trim and collapse internal whitespace runs to one ASCII space.

    Non-ASCII text is kept as-is:

    >>> collapse_whitespace("  Шина\\t  летняя \\r\\n")
    'Шина летняя'
    """
    return _WHITESPACE_RE.sub(" ", value).strip()


def digits_only(value: str) -> str:
    """Keep ASCII digits only ("" when there are none).

    >>> digits_only(" 00-12 34 ")
    '001234'
    """
    return _NON_DIGIT_RE.sub("", value)


def parse_decimal(value: str) -> float:
    """Parse a localized non-negative decimal, 0.0 when nothing usable remains.

    A single comma is read as the decimal separator when no point is
    present; every other character (spaces, currency, signs) is dropped.

    >>> parse_decimal("2 581,00")
    2581.0
    >>> parse_decimal("n/a")
    0.0
    """
    s = _WHITESPACE_RE.sub("", value)
    if "." not in s and s.count(",") == 1:
        s = s.replace(",", ".")

    kept: list[str] = []
    seen_point = False
    for ch in s:
        if "0" <= ch <= "9":
            kept.append(ch)
        elif ch == "." and not seen_point:
            kept.append(ch)
            seen_point = True

    cleaned = "".join(kept)
    if not cleaned or cleaned == ".":
        return 0.0
    try:
        result = float(cleaned)
    except ValueError:
        return 0.0
    # overlong digit runs overflow to inf
    if not math.isfinite(result):
        return 0.0
    return result


def parse_quantity(value: str) -> int:
    """Parse a stock quantity; fractional parts are truncated, failures give 0."""
    return int(parse_decimal(value))
