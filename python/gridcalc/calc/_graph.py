"""Dependency index: reverse lookup from a cell to the cells that read it."""

from __future__ import annotations

import heapq
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gridcalc._grid import Grid


def find_dependents(target_id: str, grid: Grid) -> list[str]:
    """Every cell whose deps contain *target_id*, in grid order.

    Full scan over the grid; :class:`DependencyIndex` gives the same answer
    without rescanning.
    """
    return [cell.id for cell in grid.cells() if target_id in cell.deps]


class DependencyIndex:
    """Incrementally maintained dependency edges for one grid.

    ``dependencies`` maps a formula cell to the cells it reads;
    ``dependents`` holds the reverse edges.  Callers must report every deps
    change through :meth:`set_dependencies`.
    """

    __slots__ = ("_grid", "dependencies", "dependents")

    def __init__(self, grid: Grid) -> None:
        self._grid = grid
        # cell -> cells it reads from
        self.dependencies: dict[str, tuple[str, ...]] = {}
        # cell -> cells that read from it (reverse edges)
        self.dependents: dict[str, set[str]] = {}
        self.rebuild()

    def rebuild(self) -> None:
        """Recompute all edges from the grid's current deps."""
        self.dependencies.clear()
        self.dependents.clear()
        for cell in self._grid.cells():
            if cell.deps:
                self.set_dependencies(cell.id, cell.deps)

    def set_dependencies(self, cell_id: str, deps: Iterable[str]) -> None:
        """Replace the outgoing edges of *cell_id*."""
        for old in self.dependencies.pop(cell_id, ()):
            readers = self.dependents.get(old)
            if readers is not None:
                readers.discard(cell_id)
                if not readers:
                    del self.dependents[old]

        new = tuple(deps)
        if not new:
            return
        self.dependencies[cell_id] = new
        for ref in new:
            self.dependents.setdefault(ref, set()).add(cell_id)

    def dependencies_of(self, cell_id: str) -> tuple[str, ...]:
        return self.dependencies.get(cell_id, ())

    def dependents_of(self, target_id: str) -> list[str]:
        """Cells that reference *target_id*, in grid order."""
        readers = self.dependents.get(target_id)
        if not readers:
            return []
        return sorted(readers, key=self._grid.index)

    def in_cycle(self, cell_id: str) -> bool:
        """True if *cell_id* can reach itself through its dependencies."""
        stack = list(self.dependencies_of(cell_id))
        seen: set[str] = set()
        while stack:
            ref = stack.pop()
            if ref == cell_id:
                return True
            if ref in seen:
                continue
            seen.add(ref)
            stack.extend(self.dependencies_of(ref))
        return False

    def cycle_members(self, cell_ids: Iterable[str]) -> list[str]:
        """The subset of *cell_ids* that sit on a dependency cycle, in input order."""
        return [cid for cid in cell_ids if self.in_cycle(cid)]

    def evaluation_order(self, cell_ids: list[str]) -> list[str]:
        """Order *cell_ids* so every cell follows its dependencies (Kahn's algorithm).

        Only edges between the given cells count.  Ties, and cells left
        waiting on a cycle, go in input order: when nothing is ready the
        earliest pending cell is released, so each cell appears exactly once.
        """
        position = {cid: i for i, cid in enumerate(cell_ids)}

        in_degree: dict[str, int] = {}
        for cid in cell_ids:
            in_degree[cid] = sum(1 for dep in self.dependencies_of(cid) if dep in position)

        ready = [position[cid] for cid in cell_ids if in_degree[cid] == 0]
        heapq.heapify(ready)
        done: set[str] = set()
        order: list[str] = []
        pending = 0  # first input index not yet emitted

        while len(order) < len(cell_ids):
            if not ready:
                while cell_ids[pending] in done:
                    pending += 1
                ready.append(pending)
            cid = cell_ids[heapq.heappop(ready)]
            if cid in done:
                continue
            done.add(cid)
            order.append(cid)
            for reader in self.dependents.get(cid, ()):
                if reader in position and reader not in done:
                    in_degree[reader] -= 1
                    if in_degree[reader] == 0:
                        heapq.heappush(ready, position[reader])

        return order
