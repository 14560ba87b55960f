"""RecomputeEngine: the single mutation entry point for a grid.

An edit replaces one cell's raw text, re-classifies and re-evaluates it, then
walks the cells that depend on it depth-first and re-evaluates each reachable
formula cell once, inputs before readers.  A visited set scoped to the walk
guarantees termination even when formulas form a cycle.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import replace
from typing import TYPE_CHECKING

from gridcalc._cell import Cell, CellValue
from gridcalc._config import CyclePolicy
from gridcalc._utils import parse_number
from gridcalc.calc._errors import CIRCULAR_ERROR
from gridcalc.calc._evaluator import FormulaEvaluator
from gridcalc.calc._graph import DependencyIndex
from gridcalc.calc._parser import FormulaParser
from gridcalc.calc._protocol import CellDelta, UpdateResult

if TYPE_CHECKING:
    from gridcalc._grid import Grid

logger = logging.getLogger(__name__)


def _values_differ(a: CellValue, b: CellValue) -> bool:
    """Exact comparison that also tells ``5`` apart from ``"5"``."""
    return type(a) is not type(b) or a != b


class RecomputeEngine:
    """Applies edits to a :class:`Grid` and propagates them to dependents.

    Usage::

        grid = Grid()
        engine = RecomputeEngine(grid)
        engine.update_cell("A1", "5")
        engine.update_cell("B1", "=A1+1")
        engine.update_cell("A1", "10")   # B1 is now 11
    """

    __slots__ = ("_grid", "_parser", "_evaluator", "_index")

    def __init__(self, grid: Grid) -> None:
        self._grid = grid
        self._parser = FormulaParser(grid.config)
        self._evaluator = FormulaEvaluator(grid.config)
        self._index = DependencyIndex(grid)

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def index(self) -> DependencyIndex:
        return self._index

    def update_cell(self, cell_id: str, raw: str) -> UpdateResult:
        """Set the raw text of *cell_id* and recompute everything downstream.

        Formula problems end up as error sentinels in cell values; the only
        exception raised is KeyError for an id outside the grid, before any
        state changes.
        """
        cell = self._grid[cell_id]
        old_values: dict[str, CellValue] = {cell_id: cell.value}

        if self._parser.is_formula(raw):
            deps = tuple(self._parser.parse_refs(raw))
            # Evaluated against the grid as it stands, so a self-reference
            # sees this cell's previous value.
            value = self._evaluator.evaluate(raw, self._grid)
            updated = Cell(cell_id, raw=raw, value=value, formula=raw, deps=deps)
        else:
            number = parse_number(raw)
            updated = Cell(cell_id, raw=raw, value=raw if number is None else number)

        self._grid._put(updated)  # noqa: SLF001
        self._index.set_dependencies(cell_id, updated.deps)

        order, cycle = self._propagate(cell_id, old_values)

        deltas: list[CellDelta] = []
        for cid in order:
            old_val = old_values.get(cid)
            if old_val is None:
                continue
            current = self._grid[cid]
            if _values_differ(old_val, current.value):
                deltas.append(CellDelta(
                    cell_id=cid,
                    old_value=old_val,
                    new_value=current.value,
                    formula=current.formula,
                ))

        if cycle:
            logger.warning("Circular reference involving: %s", ", ".join(cycle))
        logger.debug(
            "update %s=%r: visited %d cells, %d changed", cell_id, raw, len(order), len(deltas),
        )
        return UpdateResult(
            cell_id=cell_id,
            raw=raw,
            deltas=tuple(deltas),
            visited=len(order),
            cycle=tuple(cycle),
        )

    def load(self, raws: Mapping[str, str]) -> list[UpdateResult]:
        """Apply several edits in order, e.g. to populate a fresh grid.

        All ids are checked up front, so an unknown id changes nothing.
        """
        missing = [cid for cid in raws if cid not in self._grid]
        if missing:
            raise KeyError(f"Cells not in the grid: {', '.join(missing)}")
        return [self.update_cell(cid, raw) for cid, raw in raws.items()]

    # ------------------------------------------------------------------
    # Recompute walk
    # ------------------------------------------------------------------

    def _propagate(
        self, start: str, old_values: dict[str, CellValue],
    ) -> tuple[list[str], list[str]]:
        """Refresh every cell reachable from *start* over dependents.

        The depth-first walk (explicit stack of iterators, visited set scoped
        to this call) only collects the reachable cells.  They are then
        re-evaluated once each in dependency order, so in a diamond the join
        cell sees all of its refreshed inputs.  Cells on a cycle fall back to
        visit order.

        Returns the cells in visit order and the formula cells found on a
        cycle.
        """
        visited: set[str] = set()
        order: list[str] = []
        stack: list[Iterator[str]] = [iter((start,))]

        while stack:
            cid = next(stack[-1], None)
            if cid is None:
                stack.pop()
                continue
            if cid in visited:
                continue
            visited.add(cid)
            order.append(cid)
            stack.append(iter(self._index.dependents_of(cid)))

        cycle = self._index.cycle_members(order)
        on_cycle = set(cycle)
        for cid in self._index.evaluation_order(order):
            self._refresh(cid, old_values, cid in on_cycle)

        return order, cycle

    def _refresh(self, cell_id: str, old_values: dict[str, CellValue], on_cycle: bool) -> None:
        """Re-evaluate one formula cell in place; literals are left alone."""
        cell = self._grid[cell_id]
        if cell.formula is None:
            return
        old_values.setdefault(cell_id, cell.value)

        if on_cycle and self._grid.config.cycle_policy is CyclePolicy.ERROR:
            value: CellValue = CIRCULAR_ERROR
        else:
            value = self._evaluator.evaluate(cell.formula, self._grid)

        if _values_differ(value, cell.value):
            self._grid._put(replace(cell, value=value))  # noqa: SLF001
