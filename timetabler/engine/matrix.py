"""
Day x period availability matrix.

Cells hold 0 (free / preferred) or 1 (busy / not preferred). Reads
outside the grid return 1 so an unknown slot is always treated as
blocked; writes outside the grid are ignored.
"""

from __future__ import annotations

FREE = 0
BUSY = 1


class AvailabilityMatrix:
    """A rows x columns grid of 0/1 cells (rows are days, columns are periods)."""

    def __init__(self, rows: int, columns: int, fill: int = FREE):
        self.rows = 0
        self.columns = 0
        self._cells: list[list[int]] = []
        self.reset(rows, columns, fill)

    def reset(self, rows: int, columns: int, fill: int = FREE) -> None:
        """Replace the whole grid with a new one of the given size."""
        self.rows = max(rows, 0)
        self.columns = max(columns, 0)
        self._cells = [[fill] * self.columns for _ in range(self.rows)]

    def in_bounds(self, row: int, column: int) -> bool:
        return 0 <= row < self.rows and 0 <= column < self.columns

    def get(self, row: int, column: int) -> int:
        if not self.in_bounds(row, column):
            return BUSY
        return self._cells[row][column]

    def set(self, row: int, column: int, value: int) -> None:
        if not self.in_bounds(row, column):
            return
        self._cells[row][column] = value

    def busy_cells(self) -> list[tuple[int, int]]:
        """All (row, column) cells set to BUSY, in row-major order."""
        return [
            (row, column)
            for row in range(self.rows)
            for column in range(self.columns)
            if self._cells[row][column] == BUSY
        ]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AvailabilityMatrix):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        return f"AvailabilityMatrix({self.rows}x{self.columns}, busy={len(self.busy_cells())})"

    def __str__(self) -> str:
        return "\n".join(" ".join(str(cell) for cell in row) for row in self._cells)
