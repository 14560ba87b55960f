"""A1 reference helpers and number parsing/formatting for cell values."""

from __future__ import annotations

import math
import re

_A1_RE = re.compile(r"^([A-Z])([1-9][0-9]*)$")

# Decimal literal with optional fraction and exponent: "42", "-3.5", ".5", "1e3".
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_INT_RE = re.compile(r"^[+-]?\d+$")

# Floats at or above this lose integer precision and are left as floats.
_MAX_EXACT = 2.0**53


def a1_to_rowcol(ref: str, columns: str) -> tuple[int, int]:
    """``"B3"`` -> ``(3, 2)`` (1-based) for the given column set.

    Raises ValueError if *ref* is not a single-letter A1 reference or the
    column is not part of *columns*.
    """
    m = _A1_RE.match(ref)
    if not m:
        raise ValueError(f"Invalid cell reference: {ref!r}")
    col = columns.find(m.group(1))
    if col < 0:
        raise ValueError(f"Column {m.group(1)!r} is not in the grid")
    return int(m.group(2)), col + 1


def rowcol_to_a1(row: int, col: int, columns: str) -> str:
    """``(3, 2)`` -> ``"B3"`` (1-based) for the given column set."""
    if row < 1 or not 1 <= col <= len(columns):
        raise ValueError(f"Position out of range: ({row}, {col})")
    return f"{columns[col - 1]}{row}"


def parse_number(text: str) -> int | float | None:
    """Parse literal cell text as a number, or return None.

    Integer text gives an ``int``, anything else a ``float``.  Surrounding
    whitespace is ignored; empty text, ``inf``/``nan`` and hex are not numbers.
    """
    stripped = text.strip()
    if not _NUMBER_RE.match(stripped):
        return None
    if _INT_RE.match(stripped):
        return int(stripped)
    value = float(stripped)
    if not math.isfinite(value):
        return None
    return value


def normalize_number(value: int | float) -> int | float:
    """Collapse integral floats to ``int`` (``6.0`` -> ``6``)."""
    if isinstance(value, float) and value.is_integer() and abs(value) < _MAX_EXACT:
        return int(value)
    return value


def format_value(value: int | float | str) -> str:
    """Render a cell value as display text."""
    if isinstance(value, float):
        return repr(normalize_number(value))
    return str(value)
