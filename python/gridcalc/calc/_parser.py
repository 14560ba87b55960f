"""Formula parser: formula detection, reference extraction and tokenizing."""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass

from gridcalc._config import DEFAULT_GRID, GridConfig
from gridcalc.calc._errors import FormulaSyntaxError

# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# A letter with optional digits ("Z9", "a1", "f").  Only reached where no
# in-grid reference starts, so it never hides a dependency.
_NAME_RE = re.compile(r"[A-Za-z_][0-9]*")

# Any name made of letters followed by digits ("Z9", "a1").
_REF_SHAPE_RE = re.compile(r"^[A-Za-z]+[0-9]+$")

# Plain decimals only.  No exponent form, so "1E5" reads as 1 then cell E5.
_NUMBER_RE = re.compile(r"\d+\.?\d*|\.\d+")

_WS_RE = re.compile(r"\s+")
_OPS = frozenset("+-*/()")


@functools.lru_cache(maxsize=None)
def reference_pattern(config: GridConfig) -> re.Pattern[str]:
    """Regex matching one grid column letter followed by one grid row number.

    Matches anywhere in the text, so ``A10`` on a 5x5 grid yields ``A1`` and
    ``AB1`` yields ``B1``.  Longer row numbers are tried first.
    """
    columns = "".join(re.escape(col) for col in config.columns)
    rows = sorted((str(r) for r in range(1, config.rows + 1)), key=len, reverse=True)
    return re.compile(rf"[{columns}](?:{'|'.join(rows)})")


# ---------------------------------------------------------------------------
# Classification and reference extraction
# ---------------------------------------------------------------------------


def is_formula(raw: str) -> bool:
    """A formula is any raw text starting with ``=``."""
    return raw.startswith("=")


def is_reference_shaped(name: str) -> bool:
    """True for names that look like a cell reference, in the grid or not."""
    return _REF_SHAPE_RE.match(name) is not None


def extract_dependencies(formula: str, config: GridConfig = DEFAULT_GRID) -> list[str]:
    """Cell ids referenced by *formula*, in first-occurrence order.

    Every in-grid match counts, wherever it sits in the text; references
    outside the grid (``Z9``, lowercase ``a1``) are left for the evaluator
    to reject.
    """
    refs: list[str] = []
    seen: set[str] = set()
    for m in reference_pattern(config).finditer(formula):
        ref = m.group()
        if ref not in seen:
            refs.append(ref)
            seen.add(ref)
    return refs


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Token:
    kind: str  # "number", "ref", "name" or "op"
    text: str
    pos: int


def tokenize(expression: str, config: GridConfig = DEFAULT_GRID) -> list[Token]:
    """Split an expression (no leading ``=``) into tokens.

    In-grid references are tried first at every position, using the same
    pattern as :func:`extract_dependencies`, so every dependency becomes a
    ``ref`` token.  Raises FormulaSyntaxError on any character outside the
    grammar.
    """
    ref_re = reference_pattern(config)
    tokens: list[Token] = []
    pos = 0
    length = len(expression)
    while pos < length:
        if (m := _WS_RE.match(expression, pos)) is not None:
            pos = m.end()
            continue
        if (m := ref_re.match(expression, pos)) is not None:
            kind = "ref"
        elif (m := _NUMBER_RE.match(expression, pos)) is not None:
            kind = "number"
        elif (m := _NAME_RE.match(expression, pos)) is not None:
            kind = "name"
        elif expression[pos] in _OPS:
            tokens.append(Token("op", expression[pos], pos))
            pos += 1
            continue
        else:
            raise FormulaSyntaxError(
                f"Unexpected character {expression[pos]!r} at position {pos}"
            )
        tokens.append(Token(kind, m.group(), pos))
        pos = m.end()
    return tokens


# ---------------------------------------------------------------------------
# FormulaParser: the above, bound to a grid
# ---------------------------------------------------------------------------


class FormulaParser:
    """Classifies raw cell input and extracts in-grid references."""

    __slots__ = ("config",)

    def __init__(self, config: GridConfig = DEFAULT_GRID) -> None:
        self.config = config

    @staticmethod
    def is_formula(raw: str) -> bool:
        return is_formula(raw)

    def parse_refs(self, formula: str) -> list[str]:
        """Extract the dependency list of *formula* for this grid."""
        return extract_dependencies(formula, self.config)
