"""Grid: the cell store, single source of truth for every cell record."""

from __future__ import annotations

from collections.abc import Iterator

from gridcalc._cell import Cell, CellValue
from gridcalc._config import DEFAULT_GRID, GridConfig
from gridcalc._utils import a1_to_rowcol, rowcol_to_a1


class Grid:
    """Fixed mapping of cell id -> :class:`Cell`, in row-major order.

    All cells exist from construction on and are never removed.  Readers get
    immutable :class:`Cell` records; only the recompute engine writes, via
    :meth:`_put`.
    """

    __slots__ = ("_config", "_cells", "_order")

    def __init__(self, config: GridConfig = DEFAULT_GRID) -> None:
        self._config = config
        self._cells: dict[str, Cell] = {cid: Cell(cid) for cid in config.cell_ids()}
        # id -> position in row-major order, used to sort dependents.
        self._order: dict[str, int] = {cid: i for i, cid in enumerate(self._cells)}

    @property
    def config(self) -> GridConfig:
        return self._config

    @property
    def ids(self) -> list[str]:
        return list(self._cells)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def __getitem__(self, cell_id: str) -> Cell:
        try:
            return self._cells[cell_id]
        except KeyError:
            raise KeyError(f"Cell '{cell_id}' is not in the grid") from None

    def __contains__(self, cell_id: object) -> bool:
        return cell_id in self._cells

    def __iter__(self) -> Iterator[str]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def get(self, cell_id: str) -> Cell | None:
        return self._cells.get(cell_id)

    def cell(self, row: int, column: int) -> Cell:
        """Cell at 1-based (row, column)."""
        return self[rowcol_to_a1(row, column, self._config.columns)]

    def position(self, cell_id: str) -> tuple[int, int]:
        """1-based (row, column) of *cell_id*."""
        if cell_id not in self._cells:
            raise KeyError(f"Cell '{cell_id}' is not in the grid")
        return a1_to_rowcol(cell_id, self._config.columns)

    def index(self, cell_id: str) -> int:
        """Row-major position of *cell_id* (0 for A1)."""
        return self._order[cell_id]

    def cells(self) -> list[Cell]:
        return list(self._cells.values())

    def values(self) -> dict[str, CellValue]:
        return {cid: cell.value for cid, cell in self._cells.items()}

    def snapshot(self) -> dict[str, dict[str, object]]:
        """Plain-data copy of every cell, for rendering or comparison."""
        return {cid: cell.as_dict() for cid, cell in self._cells.items()}

    # ------------------------------------------------------------------
    # Engine-only mutation
    # ------------------------------------------------------------------

    def _put(self, cell: Cell) -> None:
        if cell.id not in self._cells:
            raise KeyError(f"Cell '{cell.id}' is not in the grid")
        self._cells[cell.id] = cell

    def __repr__(self) -> str:
        cfg = self._config
        return f"<Grid {cfg.columns[0]}1:{cfg.columns[-1]}{cfg.rows} cells={len(self._cells)}>"
