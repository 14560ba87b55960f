"""Tests for gridcalc.calc FormulaEvaluator."""

from __future__ import annotations

from typing import Any

import pytest

from gridcalc import Cell, GridConfig
from gridcalc.calc._errors import CIRCULAR_ERROR, ERROR, REF_ERROR
from gridcalc.calc._evaluator import FormulaEvaluator, evaluate


def _lookup(**values: Any) -> dict[str, Any]:
    return dict(values)


class TestArithmetic:
    @pytest.mark.parametrize(
        ("formula", "expected"),
        [
            ("=1+2*3", 7),
            ("=(1+2)*3", 9),
            ("=10-4-3", 3),
            ("=24/4/2", 3),
            ("=7/2", 3.5),
            ("=-3+5", 2),
            ("=--2", 2),
            ("=2*-3", -6),
            ("=+4", 4),
            ("=2-(3-4)", 3),
            ("= 1 +  2 ", 3),
            ("=.5*4", 2),
            ("=42", 42),
        ],
    )
    def test_precedence_and_associativity(self, formula: str, expected: float) -> None:
        assert evaluate(formula, {}) == expected

    def test_integral_result_is_int(self) -> None:
        result = evaluate("=1.5+1.5", {})
        assert result == 3
        assert isinstance(result, int)

    def test_fractional_result_stays_float(self) -> None:
        result = evaluate("=1/4", {})
        assert result == 0.25
        assert isinstance(result, float)

    def test_without_leading_equals(self) -> None:
        assert FormulaEvaluator().evaluate("2*(3+4)", {}) == 14


class TestReferences:
    def test_numeric_values(self) -> None:
        assert evaluate("=A1*B2", _lookup(A1=5, B2=2.5)) == 12.5

    def test_negative_value_substitution(self) -> None:
        # "2-A1" with A1=-5 must not turn into "2--5" text.
        assert evaluate("=2-A1", _lookup(A1=-5)) == 7

    def test_missing_ref_counts_as_zero(self) -> None:
        assert evaluate("=C3+1", {}) == 1

    def test_empty_cell_counts_as_zero(self) -> None:
        assert evaluate("=A1+1", _lookup(A1="")) == 1

    def test_cell_records(self) -> None:
        lookup = {"A1": Cell("A1", raw="4", value=4)}
        assert evaluate("=A1*2", lookup) == 8

    def test_same_ref_twice(self) -> None:
        assert evaluate("=A1*A1", _lookup(A1=3)) == 9


class TestErrors:
    @pytest.mark.parametrize(
        "formula",
        [
            "=1/",
            "=",
            "=(1+2",
            "=1+2)",
            "=1 2",
            "=*3",
            "=foo",
            "=1/0",
            "=A1/0",
            "=1e3",
            "=2E1",
            "=__import__('os').system('true')",
            "=A1^2",
        ],
    )
    def test_error_sentinel(self, formula: str) -> None:
        assert evaluate(formula, {}) == ERROR

    def test_non_numeric_operand(self) -> None:
        assert evaluate("=A1+1", _lookup(A1="foo")) == ERROR

    def test_error_operand(self) -> None:
        assert evaluate("=A1+1", _lookup(A1=ERROR)) == ERROR

    def test_upstream_code_propagates(self) -> None:
        assert evaluate("=A1*2", _lookup(A1=CIRCULAR_ERROR)) == CIRCULAR_ERROR
        assert evaluate("=A1*2", _lookup(A1=REF_ERROR)) == REF_ERROR

    def test_typed_sentinel_text_is_not_an_error_code(self) -> None:
        lookup = {"A1": Cell("A1", raw=CIRCULAR_ERROR, value=CIRCULAR_ERROR)}
        assert evaluate("=A1+1", lookup) == ERROR
        lookup = {"A1": Cell("A1", raw=REF_ERROR, value=REF_ERROR)}
        assert evaluate("=A1*2", lookup) == ERROR

    def test_computed_sentinel_still_propagates(self) -> None:
        lookup = {"A1": Cell("A1", raw="=B1", value=REF_ERROR, formula="=B1", deps=("B1",))}
        assert evaluate("=A1*2", lookup) == REF_ERROR

    def test_out_of_grid_reference(self) -> None:
        assert evaluate("=Z9+1", {}) == ERROR

    def test_partial_reference_is_a_syntax_error(self) -> None:
        # "A10" reads as A1 followed by 0.
        assert evaluate("=A10", _lookup(A1=3)) == ERROR
        assert evaluate("=A10", _lookup(A1=3), GridConfig(reference_errors=True)) == ERROR

    def test_exponent_text_reads_as_reference(self) -> None:
        # "1E5" is 1 followed by cell E5, not 100000.
        assert evaluate("=1E5", _lookup(E5=3)) == ERROR
        assert evaluate("=E5", _lookup(E5=3)) == 3

    def test_non_finite_literal(self) -> None:
        assert evaluate("=" + "9" * 400 + ".0", {}) == ERROR

    def test_out_of_grid_reference_with_ref_errors(self) -> None:
        config = GridConfig(reference_errors=True)
        assert evaluate("=Z9+1", {}, config) == REF_ERROR
        # Non-reference names are still plain syntax errors.
        assert evaluate("=foo", {}, config) == ERROR

    def test_reasonable_nesting(self) -> None:
        formula = "=" + "(" * 50 + "1" + ")" * 50
        assert evaluate(formula, {}) == 1

    def test_excessive_nesting(self) -> None:
        formula = "=" + "(" * 500 + "1" + ")" * 500
        assert evaluate(formula, {}) == ERROR

    def test_excessive_unary_chain(self) -> None:
        assert evaluate("=" + "-" * 500 + "1", {}) == ERROR

    def test_never_raises(self) -> None:
        for formula in ("=)", "=((", "=A1+", "=.", "=1..2", "=e5"):
            assert evaluate(formula, {}) == ERROR


class TestCustomGrid:
    def test_bigger_grid_refs(self) -> None:
        config = GridConfig(columns="ABCDEFGHIJ", rows=20)
        assert evaluate("=J20+A11", {"J20": 1, "A11": 2}, config) == 3

    def test_ref_outside_custom_grid(self) -> None:
        config = GridConfig(columns="AB", rows=2)
        assert evaluate("=C1", {"C1": 5}, config) == ERROR
