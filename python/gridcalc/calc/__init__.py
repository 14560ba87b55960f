"""gridcalc.calc - Formula parsing, evaluation and recompute engine."""

from gridcalc.calc._engine import RecomputeEngine
from gridcalc.calc._errors import (
    CIRCULAR_ERROR,
    ERROR,
    REF_ERROR,
    DivisionByZero,
    FormulaError,
    FormulaSyntaxError,
    InvalidReference,
    NonNumericOperand,
    is_error_value,
)
from gridcalc.calc._evaluator import FormulaEvaluator, evaluate
from gridcalc.calc._graph import DependencyIndex, find_dependents
from gridcalc.calc._parser import FormulaParser, extract_dependencies, is_formula, tokenize
from gridcalc.calc._protocol import CellDelta, UpdateResult, ValueLookup

__all__ = [
    "CIRCULAR_ERROR",
    "CellDelta",
    "DependencyIndex",
    "DivisionByZero",
    "ERROR",
    "FormulaError",
    "FormulaEvaluator",
    "FormulaParser",
    "FormulaSyntaxError",
    "InvalidReference",
    "NonNumericOperand",
    "REF_ERROR",
    "RecomputeEngine",
    "UpdateResult",
    "ValueLookup",
    "evaluate",
    "extract_dependencies",
    "find_dependents",
    "is_error_value",
    "is_formula",
    "tokenize",
]
