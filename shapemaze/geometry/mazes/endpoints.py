"""
Start/end selection with a minimum traversal distance.

The end must lie at least ``ceil(target / 2)`` steps from the start, measured
over 4-adjacency inside the shape (walls are not carved yet). Shapes that
cannot offer such a pair are grown in 10% steps; when that still fails the
farthest reachable cell is used instead. The fallback is best effort and may
leave the pair below the nominal distance.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from shapemaze.utils.exceptions import ShapeError
from shapemaze.utils.maze_logging import get_logger, log_fallback

from .graph_search import shape_distances
from .passages import Cell
from .shapes import count_cells, expand_shape, grid_center

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = get_logger(__name__)


@dataclass
class EndpointSelection:
    """Chosen endpoints together with the (possibly expanded) shape."""

    start: Cell
    end: Cell
    mask: NDArray[np.bool_]
    distance: int
    min_distance: int
    expansions: int = 0
    seeded: bool = False
    used_farthest_fallback: bool = False

    @property
    def meets_min_distance(self) -> bool:
        return self.distance >= self.min_distance


def min_required_distance(target_count: int) -> int:
    return math.ceil(target_count / 2)


def seed_pair(rows: int, cols: int) -> NDArray[np.bool_]:
    """Mask holding exactly two adjacent cells at the grid center."""
    if rows * cols < 2:
        raise ShapeError("A grid needs at least two cells for distinct endpoints", grid_shape=(rows, cols))

    mask = np.zeros((rows, cols), dtype=bool)
    center = grid_center(rows, cols)
    mask[center.y, center.x] = True
    for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
        x, y = center.x + dx, center.y + dy
        if 0 <= x < cols and 0 <= y < rows:
            mask[y, x] = True
            break
    return mask


class EndpointSelector:
    """
    Picks start and end cells far enough apart inside a shape.

    Args:
        rng: Random source
        max_expansion_attempts: Bound on 10% shape expansions
        expansion_fraction: Fraction of the current cell count added per expansion
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        max_expansion_attempts: int = 10,
        expansion_fraction: float = 0.1,
    ):
        self.rng = rng if rng is not None else random.Random()
        self.max_expansion_attempts = max_expansion_attempts
        self.expansion_fraction = expansion_fraction

    def select(self, mask: NDArray[np.bool_], target_count: int) -> EndpointSelection:
        """
        Choose endpoints, growing the shape when it is too small or too compact.

        Args:
            mask: Shape mask (not modified; the selection carries its own copy)
            target_count: Target cell count the distance floor is derived from

        Returns:
            EndpointSelection with distinct start and end inside the returned mask
        """
        rows, cols = mask.shape
        min_distance = min_required_distance(target_count)
        selection_floor = max(min_distance, 1)
        mask = mask.copy()
        seeded = False

        if count_cells(mask) < 2:
            log_fallback(logger, "seed_pair", f"shape has {count_cells(mask)} cells, seeding two at the center")
            mask = seed_pair(rows, cols)
            seeded = True

        if count_cells(mask) < min_distance:
            mask = expand_shape(mask, min_distance, self.rng)
            logger.debug(f"Expanded shape to {count_cells(mask)} cells to fit distance {min_distance}")

        occupied = np.argwhere(mask)
        y, x = occupied[self.rng.randrange(len(occupied))]
        start = Cell(int(x), int(y))

        distances = shape_distances(mask, start)
        candidates = np.argwhere(distances >= selection_floor)

        expansions = 0
        while len(candidates) == 0 and expansions < self.max_expansion_attempts:
            count = count_cells(mask)
            grow = max(1, math.ceil(count * self.expansion_fraction))
            mask = expand_shape(mask, count + grow, self.rng)
            expansions += 1
            if count_cells(mask) == count:
                break
            distances = shape_distances(mask, start)
            candidates = np.argwhere(distances >= selection_floor)

        if expansions:
            logger.info(f"Expanded shape {expansions} times searching for an end {min_distance} steps away")

        if len(candidates):
            y, x = candidates[self.rng.randrange(len(candidates))]
            end = Cell(int(x), int(y))
            return EndpointSelection(
                start=start,
                end=end,
                mask=mask,
                distance=int(distances[end.y, end.x]),
                min_distance=min_distance,
                expansions=expansions,
                seeded=seeded,
            )

        end = self._farthest(mask, distances, start)
        log_fallback(
            logger,
            "farthest_end",
            f"no cell {min_distance} steps from {start}; using {end} at distance {distances[end.y, end.x]}",
        )
        return EndpointSelection(
            start=start,
            end=end,
            mask=mask,
            distance=int(distances[end.y, end.x]),
            min_distance=min_distance,
            expansions=expansions,
            seeded=seeded,
            used_farthest_fallback=True,
        )

    def _farthest(self, mask: NDArray[np.bool_], distances: NDArray[np.int64], start: Cell) -> Cell:
        """Farthest reachable cell; any other shape cell when the start is cut off."""
        farthest = int(distances.max())
        if farthest > 0:
            y, x = np.argwhere(distances == farthest)[0]
            return Cell(int(x), int(y))

        others = [Cell(int(x), int(y)) for y, x in np.argwhere(mask) if (x, y) != (start.x, start.y)]
        return others[self.rng.randrange(len(others))]
