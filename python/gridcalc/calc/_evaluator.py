"""FormulaEvaluator: recursive descent evaluator for arithmetic formulas.

The grammar is closed; nothing in a formula ever reaches the host
interpreter::

    expr  := term (('+' | '-') term)*
    term  := unary (('*' | '/') unary)*
    unary := ('+' | '-') unary | atom
    atom  := NUMBER | REF | '(' expr ')'

Numbers are plain decimals.  Text that only partly matches a reference
("A10" on a 5x5 grid is ``A1`` then ``0``) leaves adjacent atoms behind and
fails as a syntax error.

References are resolved to the current value of the cell when the atom is
evaluated, so a negative or fractional value never has to survive a round
trip through formula text.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from gridcalc._cell import Cell
from gridcalc._config import DEFAULT_GRID, GridConfig
from gridcalc._utils import normalize_number
from gridcalc.calc._errors import (
    ERROR,
    REF_ERROR,
    DivisionByZero,
    FormulaError,
    FormulaSyntaxError,
    InvalidReference,
    NonNumericOperand,
    is_error_value,
)
from gridcalc.calc._parser import Token, is_reference_shaped, tokenize
from gridcalc.calc._protocol import ValueLookup

logger = logging.getLogger(__name__)

# Parenthesis/unary nesting beyond this is rejected instead of recursing.
MAX_DEPTH = 100

Number = int | float


# ---------------------------------------------------------------------------
# Operand helpers
# ---------------------------------------------------------------------------


def _to_number(value: Any, ref: str) -> Number:
    """Coerce a referenced cell value to a number for arithmetic.

    Error codes propagate only when they were computed; sentinel text typed
    into a literal cell is just text.
    """
    typed_text = False
    if isinstance(value, Cell):
        typed_text = value.formula is None
        value = value.value
    if value is None or value == "":
        return 0
    if isinstance(value, (int, float)):
        return value
    if is_error_value(value) and not typed_text:
        # Upstream error: carry its code forward unchanged.
        raise FormulaError(f"{ref} holds {value}", code=value)
    raise NonNumericOperand(f"{ref} holds non-numeric text {value!r}")


def _parse_number(text: str) -> Number:
    if "." in text:
        value = float(text)
        if not math.isfinite(value):
            raise FormulaSyntaxError(f"Number out of range: {text}")
        return value
    return int(text)


def _checked(value: Number) -> Number:
    if isinstance(value, float) and not math.isfinite(value):
        raise FormulaError(f"Result is not finite: {value}")
    return value


def _binary_op(left: Number, op: str, right: Number) -> Number:
    if op == "+":
        return _checked(left + right)
    if op == "-":
        return _checked(left - right)
    if op == "*":
        return _checked(left * right)
    if right == 0:
        raise DivisionByZero(f"{left} / 0")
    return _checked(left / right)


# ---------------------------------------------------------------------------
# Recursive descent over a token list
# ---------------------------------------------------------------------------


class _ExpressionParser:
    __slots__ = ("_tokens", "_pos", "_lookup", "_config", "_depth")

    def __init__(self, tokens: list[Token], lookup: ValueLookup, config: GridConfig) -> None:
        self._tokens = tokens
        self._pos = 0
        self._lookup = lookup
        self._config = config
        self._depth = 0

    def _peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _advance(self) -> Token:
        tok = self._peek()
        if tok is None:
            raise FormulaSyntaxError("Unexpected end of formula")
        self._pos += 1
        return tok

    def _at_op(self, *ops: str) -> bool:
        tok = self._peek()
        return tok is not None and tok.kind == "op" and tok.text in ops

    def parse(self) -> Number:
        if not self._tokens:
            raise FormulaSyntaxError("Empty formula")
        value = self._expr()
        tok = self._peek()
        if tok is not None:
            raise FormulaSyntaxError(f"Unexpected {tok.text!r} at position {tok.pos}")
        return value

    def _expr(self) -> Number:
        value = self._term()
        while self._at_op("+", "-"):
            op = self._advance().text
            value = _binary_op(value, op, self._term())
        return value

    def _term(self) -> Number:
        value = self._unary()
        while self._at_op("*", "/"):
            op = self._advance().text
            value = _binary_op(value, op, self._unary())
        return value

    def _unary(self) -> Number:
        if self._at_op("+", "-"):
            op = self._advance().text
            self._enter()
            operand = self._unary()
            self._depth -= 1
            return -operand if op == "-" else operand
        return self._atom()

    def _atom(self) -> Number:
        tok = self._advance()
        if tok.kind == "number":
            return _parse_number(tok.text)
        if tok.kind == "ref":
            return _to_number(self._lookup.get(tok.text), tok.text)
        if tok.kind == "name":
            return self._resolve(tok.text)
        if tok.text == "(":
            self._enter()
            value = self._expr()
            if not self._at_op(")"):
                raise FormulaSyntaxError(f"Missing ')' for '(' at position {tok.pos}")
            self._advance()
            self._depth -= 1
            return value
        raise FormulaSyntaxError(f"Unexpected {tok.text!r} at position {tok.pos}")

    def _enter(self) -> None:
        self._depth += 1
        if self._depth > MAX_DEPTH:
            raise FormulaSyntaxError("Formula nested too deeply")

    def _resolve(self, name: str) -> Number:
        if is_reference_shaped(name):
            code = REF_ERROR if self._config.reference_errors else ERROR
            raise InvalidReference(f"{name} is outside the grid", code=code)
        raise FormulaSyntaxError(f"Unknown name {name!r}")


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


class FormulaEvaluator:
    """Evaluates formulas against a value lookup for one grid shape.

    Usage::

        evaluator = FormulaEvaluator(config)
        evaluator.evaluate("=A1*(B1+2)", grid)   # -> number or "ERROR"
    """

    __slots__ = ("config",)

    def __init__(self, config: GridConfig = DEFAULT_GRID) -> None:
        self.config = config

    def evaluate(self, formula: str, lookup: ValueLookup) -> Number | str:
        """Evaluate *formula* (with or without the leading ``=``).

        Returns the numeric result, or an error sentinel string when
        evaluation fails.  Never raises for bad formula content.
        """
        body = formula[1:] if formula.startswith("=") else formula
        try:
            tokens = tokenize(body, self.config)
            result = _ExpressionParser(tokens, lookup, self.config).parse()
        except FormulaError as e:
            logger.debug("Cannot evaluate formula %r: %s", formula, e)
            return e.code
        except (OverflowError, ValueError) as e:
            logger.debug("Arithmetic failure in formula %r: %s", formula, e)
            return ERROR
        return normalize_number(result)


def evaluate(
    formula: str,
    lookup: ValueLookup,
    config: GridConfig = DEFAULT_GRID,
) -> Number | str:
    """Module-level shortcut for ``FormulaEvaluator(config).evaluate(...)``."""
    return FormulaEvaluator(config).evaluate(formula, lookup)
