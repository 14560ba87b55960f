"""Sheet: a grid plus the engine that edits it, behind one object."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from gridcalc._cell import Cell, CellValue
from gridcalc._config import DEFAULT_GRID, GridConfig
from gridcalc._grid import Grid
from gridcalc.calc._engine import RecomputeEngine
from gridcalc.calc._protocol import UpdateResult


class Sheet:
    """A single spreadsheet: ``sheet["A1"] = "=B1*2"`` and read back cells."""

    __slots__ = ("_grid", "_engine")

    def __init__(self, config: GridConfig = DEFAULT_GRID) -> None:
        self._grid = Grid(config)
        self._engine = RecomputeEngine(self._grid)

    @property
    def config(self) -> GridConfig:
        return self._grid.config

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def engine(self) -> RecomputeEngine:
        return self._engine

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def update_cell(self, cell_id: str, raw: str) -> UpdateResult:
        return self._engine.update_cell(cell_id, raw)

    def __setitem__(self, cell_id: str, raw: str) -> None:
        """``sheet['A1'] = '42'`` - shorthand for :meth:`update_cell`."""
        self._engine.update_cell(cell_id, raw)

    def load(self, raws: Mapping[str, str]) -> list[UpdateResult]:
        return self._engine.load(raws)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def __getitem__(self, cell_id: str) -> Cell:
        return self._grid[cell_id]

    def __contains__(self, cell_id: object) -> bool:
        return cell_id in self._grid

    def __iter__(self) -> Iterator[str]:
        return iter(self._grid)

    def __len__(self) -> int:
        return len(self._grid)

    def values(self) -> dict[str, CellValue]:
        return self._grid.values()

    def snapshot(self) -> dict[str, dict[str, object]]:
        return self._grid.snapshot()

    def display(self, cell_id: str, editing: bool = False, hovered: bool = False) -> str:
        return self._grid[cell_id].display(editing=editing, hovered=hovered)

    def __repr__(self) -> str:
        cfg = self.config
        return f"<Sheet {cfg.columns[0]}1:{cfg.columns[-1]}{cfg.rows}>"
