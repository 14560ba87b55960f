"""Cell record: raw text, computed value, formula and dependency list."""

from __future__ import annotations

from dataclasses import dataclass

from gridcalc._utils import format_value

CellValue = int | float | str


@dataclass(frozen=True)
class Cell:
    """One addressable grid location.

    Cells are immutable; the engine replaces the record on every change so
    readers never see a half-applied update.
    """

    id: str
    raw: str = ""
    value: CellValue = ""
    formula: str | None = None
    deps: tuple[str, ...] = ()

    @property
    def is_formula(self) -> bool:
        return self.formula is not None

    def display(self, editing: bool = False, hovered: bool = False) -> str:
        """Text a grid view shows for this cell.

        The raw text while editing, ``"raw (value)"`` for a hovered formula
        cell, the formatted value otherwise.
        """
        if editing:
            return self.raw
        if hovered and self.formula is not None:
            return f"{self.raw} ({format_value(self.value)})"
        return format_value(self.value)

    def as_dict(self) -> dict[str, object]:
        """Plain read surface: ``{raw, value, formula, deps}``."""
        return {
            "raw": self.raw,
            "value": self.value,
            "formula": self.formula,
            "deps": list(self.deps),
        }

    def __repr__(self) -> str:
        if self.formula is not None:
            return f"<Cell {self.id} {self.formula!r} -> {self.value!r}>"
        return f"<Cell {self.id} value={self.value!r}>"
