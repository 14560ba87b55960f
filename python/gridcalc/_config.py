"""Grid configuration: shape of the sheet and error/cycle policies."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class CyclePolicy(str, enum.Enum):
    """What the recompute walk does with cells that depend on themselves."""

    # Evaluate every cycle member once and stop (values are one pass deep).
    SINGLE_PASS = "single_pass"
    # Give every cycle member the "#CIRCULAR!" sentinel.
    ERROR = "error"


@dataclass(frozen=True)
class GridConfig:
    """Fixed grid shape plus evaluation policies.

    ``columns`` is a string of distinct uppercase letters in display order,
    ``rows`` the number of 1-based rows.  Cell ids are ``column + row``.
    """

    columns: str = "ABCDE"
    rows: int = 5
    reference_errors: bool = False
    cycle_policy: CyclePolicy = CyclePolicy.SINGLE_PASS

    def __post_init__(self) -> None:
        if not self.columns:
            raise ValueError("GridConfig needs at least one column")
        for col in self.columns:
            if not ("A" <= col <= "Z"):
                raise ValueError(f"Invalid column {col!r}: expected a letter A-Z")
        if len(set(self.columns)) != len(self.columns):
            raise ValueError(f"Duplicate columns in {self.columns!r}")
        if isinstance(self.rows, bool) or not isinstance(self.rows, int) or self.rows < 1:
            raise ValueError(f"rows must be a positive integer, got {self.rows!r}")
        # Accept plain strings for the policy ("error") as well as the enum.
        object.__setattr__(self, "cycle_policy", CyclePolicy(self.cycle_policy))

    def contains(self, ref: str) -> bool:
        """True if *ref* (e.g. ``"C3"``) names a cell inside this grid."""
        if len(ref) < 2 or ref[0] not in self.columns:
            return False
        digits = ref[1:]
        if not digits.isdigit() or digits[0] == "0":
            return False
        return int(digits) <= self.rows

    def cell_ids(self) -> list[str]:
        """All cell ids in row-major order (A1, B1, ..., A2, ...)."""
        return [f"{col}{row}" for row in range(1, self.rows + 1) for col in self.columns]

    @property
    def size(self) -> int:
        return len(self.columns) * self.rows


DEFAULT_GRID = GridConfig()
