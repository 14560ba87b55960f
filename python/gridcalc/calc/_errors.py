"""Error sentinels written into cells, and the exceptions that produce them.

Evaluation failures never leave the evaluator as exceptions: each
:class:`FormulaError` carries the sentinel string stored as the cell value.
"""

from __future__ import annotations

from typing import Any

ERROR = "ERROR"
REF_ERROR = "#REF!"
CIRCULAR_ERROR = "#CIRCULAR!"

ERROR_VALUES: frozenset[str] = frozenset({ERROR, REF_ERROR, CIRCULAR_ERROR})


def is_error_value(value: Any) -> bool:
    """Return True if *value* is one of the error sentinels."""
    return isinstance(value, str) and value in ERROR_VALUES


class FormulaError(Exception):
    """Base for all evaluation failures. ``code`` is the cell value to store."""

    code: str = ERROR

    def __init__(self, message: str = "", code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class FormulaSyntaxError(FormulaError):
    """Malformed expression: bad character, missing operand or paren."""


class DivisionByZero(FormulaError):
    """Division whose result is not a finite number."""


class NonNumericOperand(FormulaError):
    """A referenced cell holds text that cannot take part in arithmetic."""


class InvalidReference(FormulaError):
    """A reference-shaped name that lies outside the grid."""
