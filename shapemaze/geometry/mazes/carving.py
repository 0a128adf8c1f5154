"""
Recursive backtracking restricted to a shape mask.

The carver grows a spanning tree over the 4-connected component of the shape
that contains the start cell. Cells of the shape in other components keep a
zero passage value; ``ConnectivityRepair`` stitches them in afterwards.

The depth-first search keeps its own stack, so component size is bounded by
memory rather than by the interpreter's recursion limit.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

import numpy as np

from shapemaze.utils.exceptions import ShapeError

from .passages import Cell, PassageGrid

if TYPE_CHECKING:
    from numpy.typing import NDArray


class MazeCarver:
    """
    Randomized depth-first maze carver over a shape mask.

    Args:
        rng: Random source for neighbour selection
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng if rng is not None else random.Random()

    def carve(self, mask: NDArray[np.bool_], start: Cell) -> PassageGrid:
        """
        Carve a perfect maze over the component of ``mask`` containing ``start``.

        Args:
            mask: Boolean shape mask of shape (rows, cols)
            start: Cell the search starts from

        Returns:
            New passage grid; cells outside the start component stay at zero

        Raises:
            ShapeError: If ``start`` lies outside the grid or the shape
        """
        rows, cols = mask.shape
        grid = PassageGrid(cols, rows)
        if not grid.in_bounds(start) or not mask[start.y, start.x]:
            raise ShapeError(
                "Start cell must lie inside the shape",
                component="MazeCarver",
                cell=start,
                grid_shape=mask.shape,
            )

        visited = np.zeros_like(mask, dtype=bool)
        self.carve_region(grid, mask, start, visited)
        return grid

    def carve_region(
        self,
        grid: PassageGrid,
        mask: NDArray[np.bool_],
        start: Cell,
        visited: NDArray[np.bool_],
    ) -> int:
        """
        Extend ``grid`` with a spanning tree over unvisited shape cells from ``start``.

        Algorithm:
        1. Mark start as visited and push it
        2. While the stack is not empty:
           - Pick a random unvisited in-shape neighbour of the top cell
           - Open the passage, mark the neighbour visited, push it
        3. Pop when the top cell has no unvisited neighbours left

        Args:
            grid: Passage grid to carve into (modified in place)
            mask: Shape mask limiting the search
            start: Entry cell; marked visited even if already carved
            visited: Visited flags (modified in place)

        Returns:
            Number of cells newly marked visited
        """
        newly_visited = 0 if visited[start.y, start.x] else 1
        visited[start.y, start.x] = True
        stack = [start]

        while stack:
            current = stack[-1]
            unvisited = [
                (direction, neighbor)
                for direction, neighbor in grid.neighbors(current)
                if mask[neighbor.y, neighbor.x] and not visited[neighbor.y, neighbor.x]
            ]

            if unvisited:
                direction, neighbor = unvisited[self.rng.randrange(len(unvisited))]
                grid.open_passage(current, direction)
                visited[neighbor.y, neighbor.x] = True
                newly_visited += 1
                stack.append(neighbor)
            else:
                stack.pop()

        return newly_visited
