"""
Passage grid for shaped mazes.

Each cell stores a 4-bit passage value: bit 0 = up, bit 1 = right,
bit 2 = down, bit 3 = left. A set bit means the wall on that side is open.

Passages are always recorded from both sides: opening ``RIGHT`` on cell A
also opens ``LEFT`` on the cell to its right. All writes go through
``PassageGrid.open_passage`` / ``PassageGrid.close_passage`` so the two
sides never drift out of sync.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Iterator

    from numpy.typing import NDArray


class Direction(Enum):
    """Cardinal directions in fixed bit order (up, right, down, left)."""

    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @property
    def bit(self) -> int:
        return 1 << self.value

    @property
    def dx(self) -> int:
        return _DX[self.value]

    @property
    def dy(self) -> int:
        return _DY[self.value]

    @property
    def opposite(self) -> Direction:
        return Direction((self.value + 2) % 4)

    @classmethod
    def from_delta(cls, dx: int, dy: int) -> Direction | None:
        """Direction for a unit cardinal step, or None for anything else."""
        for direction in cls:
            if direction.dx == dx and direction.dy == dy:
                return direction
        return None


_DX = (0, 1, 0, -1)
_DY = (-1, 0, 1, 0)


@dataclass(frozen=True, order=True)
class Cell:
    """
    Grid cell addressed purely by position.

    Attributes:
        x: Column index
        y: Row index
    """

    x: int
    y: int

    def step(self, direction: Direction) -> Cell:
        """Neighbouring cell in the given direction (may lie outside the grid)."""
        return Cell(self.x + direction.dx, self.y + direction.dy)

    def direction_to(self, other: Cell) -> Direction | None:
        """Direction leading to ``other`` if it is 4-adjacent, else None."""
        return Direction.from_delta(other.x - self.x, other.y - self.y)


class PassageGrid:
    """
    4-bit-per-cell passage grid of shape (rows, cols).

    Args:
        cols: Number of columns
        rows: Number of rows
    """

    def __init__(self, cols: int, rows: int):
        self.cols = cols
        self.rows = rows
        self._bits = np.zeros((rows, cols), dtype=np.uint8)

    @classmethod
    def from_array(cls, values: NDArray) -> PassageGrid:
        """Wrap a copy of an existing (rows, cols) passage array."""
        values = np.asarray(values, dtype=np.uint8)
        rows, cols = values.shape
        grid = cls(cols, rows)
        grid._bits = values.copy()
        return grid

    def copy(self) -> PassageGrid:
        return PassageGrid.from_array(self._bits)

    def in_bounds(self, cell: Cell) -> bool:
        return 0 <= cell.x < self.cols and 0 <= cell.y < self.rows

    def neighbors(self, cell: Cell) -> Iterator[tuple[Direction, Cell]]:
        """In-bounds 4-neighbours of ``cell`` with the direction leading to each."""
        for direction in Direction:
            neighbor = cell.step(direction)
            if self.in_bounds(neighbor):
                yield direction, neighbor

    def value(self, cell: Cell) -> int:
        """Raw 4-bit passage value of a cell (0 = fully walled)."""
        return int(self._bits[cell.y, cell.x])

    def has_passage(self, cell: Cell, direction: Direction) -> bool:
        if not self.in_bounds(cell):
            return False
        return bool(self._bits[cell.y, cell.x] & direction.bit)

    def open_passage(self, cell: Cell, direction: Direction) -> Cell:
        """
        Open the wall between ``cell`` and its neighbour in ``direction``.

        Returns:
            The neighbouring cell

        Raises:
            ValueError: If either cell lies outside the grid
        """
        neighbor = cell.step(direction)
        if not (self.in_bounds(cell) and self.in_bounds(neighbor)):
            raise ValueError(f"Cannot open passage {direction.name} from {cell}: leaves the grid")
        self._bits[cell.y, cell.x] |= direction.bit
        self._bits[neighbor.y, neighbor.x] |= direction.opposite.bit
        return neighbor

    def close_passage(self, cell: Cell, direction: Direction) -> None:
        neighbor = cell.step(direction)
        if self.in_bounds(cell):
            self._bits[cell.y, cell.x] &= ~direction.bit & 0xF
        if self.in_bounds(neighbor):
            self._bits[neighbor.y, neighbor.x] &= ~direction.opposite.bit & 0xF

    def connect(self, a: Cell, b: Cell) -> None:
        """Open the passage between two 4-adjacent cells."""
        direction = a.direction_to(b)
        if direction is None:
            raise ValueError(f"Cells {a} and {b} are not adjacent")
        self.open_passage(a, direction)

    def isolate(self, cell: Cell) -> None:
        """Close every passage of ``cell`` on both sides."""
        for direction in Direction:
            if self.has_passage(cell, direction):
                self.close_passage(cell, direction)

    def open_neighbors(self, cell: Cell) -> Iterator[Cell]:
        """Neighbours reachable from ``cell`` through an open passage."""
        for direction, neighbor in self.neighbors(cell):
            if self._bits[cell.y, cell.x] & direction.bit:
                yield neighbor

    def carve_path(self, path: list[Cell]) -> None:
        """Open passages along consecutive cells of ``path``."""
        for a, b in zip(path, path[1:]):
            self.connect(a, b)

    def passage_count(self) -> int:
        """Number of open passages, each counted once."""
        up = np.count_nonzero(self._bits & Direction.UP.bit)
        left = np.count_nonzero(self._bits & Direction.LEFT.bit)
        return int(up + left)

    def is_symmetric(self) -> bool:
        """True if every open bit is mirrored by the neighbour's opposite bit."""
        bits = self._bits
        right = (bits[:, :-1] & Direction.RIGHT.bit) > 0
        left_of_next = (bits[:, 1:] & Direction.LEFT.bit) > 0
        down = (bits[:-1, :] & Direction.DOWN.bit) > 0
        up_of_next = (bits[1:, :] & Direction.UP.bit) > 0
        # Nothing may point out of the grid either
        edges_closed = (
            not np.any(bits[0, :] & Direction.UP.bit)
            and not np.any(bits[-1, :] & Direction.DOWN.bit)
            and not np.any(bits[:, 0] & Direction.LEFT.bit)
            and not np.any(bits[:, -1] & Direction.RIGHT.bit)
        )
        return bool(np.array_equal(right, left_of_next) and np.array_equal(down, up_of_next) and edges_closed)

    def to_array(self) -> NDArray[np.uint8]:
        """Read-only copy of the raw passage values."""
        values = self._bits.copy()
        values.flags.writeable = False
        return values

    def __repr__(self) -> str:
        return f"PassageGrid(cols={self.cols}, rows={self.rows}, passages={self.passage_count()})"
