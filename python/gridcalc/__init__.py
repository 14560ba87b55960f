"""gridcalc - a small spreadsheet kernel with automatic recomputation.

Usage::

    from gridcalc import Sheet

    sheet = Sheet()                 # 5x5 grid, A1..E5
    sheet["A1"] = "5"
    sheet["B1"] = "=A1+1"
    sheet["A1"] = "10"
    print(sheet["B1"].value)        # 11
    print(sheet.display("B1", hovered=True))   # "=A1+1 (11)"
"""

from gridcalc._cell import Cell
from gridcalc._config import DEFAULT_GRID, CyclePolicy, GridConfig
from gridcalc._grid import Grid
from gridcalc._sheet import Sheet
from gridcalc.calc import CIRCULAR_ERROR, ERROR, REF_ERROR, RecomputeEngine, UpdateResult

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CIRCULAR_ERROR",
    "Cell",
    "CyclePolicy",
    "DEFAULT_GRID",
    "ERROR",
    "Grid",
    "GridConfig",
    "REF_ERROR",
    "RecomputeEngine",
    "Sheet",
    "UpdateResult",
]
