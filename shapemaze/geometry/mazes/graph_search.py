"""
Breadth-first search helpers over shape masks and passage grids.

Three kinds of adjacency are used by the pipeline:
- shape adjacency: 4-neighbours that are both inside the shape mask
  (endpoint distances, independent of walls)
- passage adjacency: 4-neighbours joined by an open passage (reachability)
- raw grid adjacency: any in-bounds 4-neighbour (bridging paths for repair)
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

import numpy as np

from .passages import Cell, Direction

if TYPE_CHECKING:
    from collections.abc import Iterable

    from numpy.typing import NDArray

    from .passages import PassageGrid

UNREACHABLE = -1


def _grid_neighbors(cell: Cell, cols: int, rows: int):
    for direction in Direction:
        nx, ny = cell.x + direction.dx, cell.y + direction.dy
        if 0 <= nx < cols and 0 <= ny < rows:
            yield Cell(nx, ny)


def shape_distances(mask: NDArray[np.bool_], start: Cell) -> NDArray[np.int64]:
    """
    Shortest 4-adjacency distance from ``start`` to every cell of the shape.

    Args:
        mask: Boolean shape mask of shape (rows, cols)
        start: Source cell (must lie inside the mask)

    Returns:
        Integer array of shape (rows, cols); UNREACHABLE (-1) for cells outside
        the shape or in another component
    """
    rows, cols = mask.shape
    distances = np.full((rows, cols), UNREACHABLE, dtype=np.int64)
    if not mask[start.y, start.x]:
        return distances

    distances[start.y, start.x] = 0
    queue = deque([start])
    while queue:
        current = queue.popleft()
        next_distance = distances[current.y, current.x] + 1
        for neighbor in _grid_neighbors(current, cols, rows):
            if mask[neighbor.y, neighbor.x] and distances[neighbor.y, neighbor.x] == UNREACHABLE:
                distances[neighbor.y, neighbor.x] = next_distance
                queue.append(neighbor)

    return distances


def shape_distance(mask: NDArray[np.bool_], start: Cell, end: Cell) -> int:
    """Shape-adjacency distance between two cells (UNREACHABLE if disconnected)."""
    return int(shape_distances(mask, start)[end.y, end.x])


def reachable_mask(grid: PassageGrid, start: Cell) -> NDArray[np.bool_]:
    """Cells reachable from ``start`` through open passages."""
    reached = np.zeros((grid.rows, grid.cols), dtype=bool)
    if not grid.in_bounds(start):
        return reached

    reached[start.y, start.x] = True
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for neighbor in grid.open_neighbors(current):
            if not reached[neighbor.y, neighbor.x]:
                reached[neighbor.y, neighbor.x] = True
                queue.append(neighbor)

    return reached


def passage_path(grid: PassageGrid, start: Cell, end: Cell) -> list[Cell] | None:
    """Shortest path from ``start`` to ``end`` through open passages, or None."""
    parents: dict[Cell, Cell | None] = {start: None}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        if current == end:
            return _reconstruct(parents, end)
        for neighbor in grid.open_neighbors(current):
            if neighbor not in parents:
                parents[neighbor] = current
                queue.append(neighbor)
    return None


def nearest_path(
    sources: Iterable[Cell],
    targets: NDArray[np.bool_],
    allowed: NDArray[np.bool_] | None = None,
) -> list[Cell] | None:
    """
    Multi-source BFS over raw grid adjacency to the nearest target cell.

    Walls are ignored. Every source starts at distance zero, so the result is
    the shortest bridge between the source set and the target set.

    Args:
        sources: Cells the search starts from
        targets: Boolean mask of acceptable destination cells
        allowed: Optional mask of cells the path may pass through
            (None = the whole grid)

    Returns:
        Path from one source to the nearest target, both ends included,
        or None when no target is reachable
    """
    rows, cols = targets.shape
    parents: dict[Cell, Cell | None] = {}
    queue: deque[Cell] = deque()
    for source in sources:
        if source not in parents:
            parents[source] = None
            queue.append(source)

    while queue:
        current = queue.popleft()
        if targets[current.y, current.x]:
            return _reconstruct(parents, current)
        for neighbor in _grid_neighbors(current, cols, rows):
            if neighbor in parents:
                continue
            if allowed is not None and not allowed[neighbor.y, neighbor.x] and not targets[neighbor.y, neighbor.x]:
                continue
            parents[neighbor] = current
            queue.append(neighbor)

    return None


def _reconstruct(parents: dict[Cell, Cell | None], end: Cell) -> list[Cell]:
    """Walk parent links back from ``end``; returned path runs root -> end."""
    path = [end]
    parent = parents[end]
    while parent is not None:
        path.append(parent)
        parent = parents[parent]
    path.reverse()
    return path
