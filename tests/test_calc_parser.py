"""Tests for gridcalc.calc formula classification, references and tokens."""

from __future__ import annotations

import pytest

from gridcalc import DEFAULT_GRID, GridConfig
from gridcalc.calc._errors import FormulaSyntaxError
from gridcalc.calc._parser import (
    FormulaParser,
    extract_dependencies,
    is_formula,
    is_reference_shaped,
    reference_pattern,
    tokenize,
)


class TestIsFormula:
    @pytest.mark.parametrize("raw", ["=A1", "=", "=5+5", "==1"])
    def test_leading_equals(self, raw: str) -> None:
        assert is_formula(raw)

    @pytest.mark.parametrize("raw", ["", "42", "A1", " =A1", "foo=bar"])
    def test_everything_else_is_literal(self, raw: str) -> None:
        assert not is_formula(raw)


class TestExtractDependencies:
    def test_simple_refs(self) -> None:
        assert extract_dependencies("=A1+B2") == ["A1", "B2"]

    def test_no_duplicates(self) -> None:
        assert extract_dependencies("=A1+A1") == ["A1"]

    def test_no_refs(self) -> None:
        assert extract_dependencies("=5+5") == []

    def test_first_occurrence_order(self) -> None:
        assert extract_dependencies("=B2*A1+B2-C3") == ["B2", "A1", "C3"]

    def test_parenthesized(self) -> None:
        assert extract_dependencies("=A1*(E5-C3)") == ["A1", "E5", "C3"]

    def test_out_of_grid_not_captured(self) -> None:
        # F and Z are not columns, row 0 does not exist on a 5x5 grid.
        assert extract_dependencies("=F1+B0+Z9") == []

    def test_lowercase_not_captured(self) -> None:
        assert extract_dependencies("=a1+B1") == ["B1"]

    def test_in_grid_prefix_of_longer_row(self) -> None:
        # Row 10 is off the grid, but its "A1" prefix is a reference.
        assert extract_dependencies("=A10") == ["A1"]

    def test_in_grid_tail_of_longer_name(self) -> None:
        assert extract_dependencies("=AB1") == ["B1"]
        assert extract_dependencies("=AA1+XA2+A1B") == ["A1", "A2"]

    def test_exponent_text_is_a_reference(self) -> None:
        assert extract_dependencies("=1E5") == ["E5"]

    def test_custom_grid_bounds(self) -> None:
        config = GridConfig(columns="ABCDEFGH", rows=12)
        # Longest in-grid row wins; A13 falls back to its A1 prefix.
        assert extract_dependencies("=H12+A10+I1+A13", config) == ["H12", "A10", "A1"]


class TestReferencePattern:
    def test_default_grid(self) -> None:
        pattern = reference_pattern(DEFAULT_GRID)
        assert pattern.findall("A1+E5*F1-C0") == ["A1", "E5"]

    def test_cached_per_config(self) -> None:
        assert reference_pattern(GridConfig(rows=3)) is reference_pattern(GridConfig(rows=3))


class TestReferenceShape:
    @pytest.mark.parametrize("name", ["A1", "Z9", "AA10", "a1"])
    def test_reference_shaped(self, name: str) -> None:
        assert is_reference_shaped(name)

    @pytest.mark.parametrize("name", ["A", "foo", "A1B", "_A1"])
    def test_not_reference_shaped(self, name: str) -> None:
        assert not is_reference_shaped(name)


class TestTokenize:
    def test_kinds(self) -> None:
        tokens = tokenize("1 + A1*(2.5)")
        assert [t.kind for t in tokens] == [
            "number", "op", "ref", "op", "op", "number", "op",
        ]
        assert [t.text for t in tokens] == ["1", "+", "A1", "*", "(", "2.5", ")"]

    @pytest.mark.parametrize(
        ("expr", "expected"),
        [
            ("A10", [("ref", "A1"), ("number", "0")]),
            ("1E5", [("number", "1"), ("ref", "E5")]),
            ("AB1", [("name", "A"), ("ref", "B1")]),
            ("Z9", [("name", "Z9")]),
            ("a1", [("name", "a1")]),
        ],
    )
    def test_references_take_priority(self, expr: str, expected: list[tuple[str, str]]) -> None:
        assert [(t.kind, t.text) for t in tokenize(expr)] == expected

    def test_custom_grid(self) -> None:
        config = GridConfig(columns="AB", rows=12)
        assert [t.kind for t in tokenize("A12+C1", config)] == ["ref", "op", "name"]

    def test_positions(self) -> None:
        tokens = tokenize("A1 - 2")
        assert [t.pos for t in tokens] == [0, 3, 5]

    def test_leading_dot_number(self) -> None:
        assert [t.text for t in tokenize(".5*2")] == [".5", "*", "2"]

    def test_empty(self) -> None:
        assert tokenize("   ") == []

    @pytest.mark.parametrize("expr", ["1 $ 2", "A1^2", "'x'", "1,2", "__import__('os')"])
    def test_unknown_character(self, expr: str) -> None:
        with pytest.raises(FormulaSyntaxError):
            tokenize(expr)


class TestFormulaParser:
    def test_bound_to_config(self) -> None:
        parser = FormulaParser(GridConfig(columns="XYZ", rows=3))
        assert parser.parse_refs("=X1+A1+Z3+Z4") == ["X1", "Z3"]

    def test_is_formula(self) -> None:
        parser = FormulaParser()
        assert parser.is_formula("=1")
        assert not parser.is_formula("1")
