"""Lookup protocol and update result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ValueLookup(Protocol):
    """Anything that maps a cell id to a Cell (or a bare value).

    ``Grid`` and a plain ``dict`` both qualify.  Missing ids return None.
    """

    def get(self, key: str, /) -> Any:
        ...


@dataclass(frozen=True)
class CellDelta:
    """A single cell's value change from one update."""

    cell_id: str
    old_value: int | float | str
    new_value: int | float | str
    formula: str | None = None  # the formula that produced new_value


@dataclass(frozen=True)
class UpdateResult:
    """What one ``update_cell`` call changed."""

    cell_id: str
    raw: str
    deltas: tuple[CellDelta, ...]
    visited: int = 0  # cells touched by the recompute walk
    cycle: tuple[str, ...] = ()  # formula cells found on a dependency cycle

    @property
    def changed(self) -> list[str]:
        return [d.cell_id for d in self.deltas]

    @property
    def has_cycle(self) -> bool:
        return bool(self.cycle)
