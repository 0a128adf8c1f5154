"""
Property checks for shaped mazes.

A valid shaped maze must satisfy:
1. Connectivity: every shape cell reachable from start through open passages
2. Symmetry: every open bit mirrored by the neighbour's opposite bit
3. Containment: no passage bits outside the shape
4. No dead cells: every shape cell has at least one exit
5. Solvability: a passage path from start to end

A shaped maze is additionally *perfect* when it has no loops, i.e. exactly
(n - 1) passages for n cells. Repair bridges may add loops, so perfection is
reported but not required.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from .graph_search import passage_path, reachable_mask

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from .passages import Cell, PassageGrid


def verify_shaped_maze(
    mask: NDArray[np.bool_],
    grid: PassageGrid,
    start: Cell,
    end: Cell,
) -> dict[str, Any]:
    """
    Verify the structural guarantees of a shaped maze.

    Args:
        mask: Final shape mask
        grid: Final passage grid
        start: Start cell
        end: End cell

    Returns:
        Dictionary with verification results including:
        - is_valid: All required properties hold
        - is_connected: Every shape cell reachable from start
        - is_symmetric: Passage bits mirrored on both sides
        - in_shape_only: No passage bits outside the shape
        - no_dead_cells: Every shape cell has an exit
        - is_solvable: Path from start to end exists
        - endpoints_valid: Start and end distinct and inside the shape
        - is_perfect: Connected and loop free
        - reachable_cells: Shape cells reachable from start
        - total_cells: Number of shape cells
        - passage_count: Number of open passages
    """
    values = grid.to_array()
    reached = reachable_mask(grid, start)

    total_cells = int(np.count_nonzero(mask))
    reachable_cells = int(np.count_nonzero(reached & mask))
    is_connected = reachable_cells == total_cells and total_cells > 0

    in_shape_only = not np.any(values[~mask])
    no_dead_cells = bool(np.all(values[mask] > 0))
    is_symmetric = grid.is_symmetric()
    is_solvable = passage_path(grid, start, end) is not None
    endpoints_valid = bool(mask[start.y, start.x] and mask[end.y, end.x] and start != end)

    passage_count = grid.passage_count()
    is_perfect = is_connected and passage_count == total_cells - 1

    return {
        "is_valid": bool(
            is_connected and is_symmetric and in_shape_only and no_dead_cells and is_solvable and endpoints_valid
        ),
        "is_connected": is_connected,
        "is_symmetric": is_symmetric,
        "in_shape_only": bool(in_shape_only),
        "no_dead_cells": no_dead_cells,
        "is_solvable": is_solvable,
        "endpoints_valid": endpoints_valid,
        "is_perfect": is_perfect,
        "reachable_cells": reachable_cells,
        "total_cells": total_cells,
        "passage_count": passage_count,
    }
