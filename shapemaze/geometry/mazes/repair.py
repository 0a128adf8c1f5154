"""
Connectivity repair for carved shaped mazes.

The carver only reaches the shape component containing the start cell.
``ConnectivityRepair`` turns its output into a maze where every cell of the
(final) shape is reachable from the start and the end is reachable too.

Repair ladder, each rung re-checked against the connectivity predicate
(BFS over open passages from start reaches every shape cell):

1. Cluster merge (bounded rounds): label the orphan clusters, bridge each one
   to the connected part by the shortest raw-grid path and carve the island
2. Fallback stitch: bridge every remaining orphan cell individually
3. Dead cells: give every fully walled shape cell one exit to a shape neighbour
4. Reachability trim: drop shape cells still unreachable from start
5. Path guarantee: carve a direct start-end path if the end is unreachable
6. Endpoint validity: pick a new end if the old one left the shape
7. Distance floor: bridges may add shortcuts, so the end is re-checked
   against the floor on the final shape and redrawn when it falls short

Bridging paths may cross cells outside the shape; those cells join the shape
so passages never lead out of it.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from scipy.ndimage import label

from shapemaze.utils.maze_logging import get_logger, log_fallback

from .carving import MazeCarver
from .graph_search import nearest_path, passage_path, reachable_mask, shape_distances
from .passages import Cell

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from .passages import PassageGrid

logger = get_logger(__name__)

# 4-connectivity for cluster labelling
_CROSS = np.array([[0, 1, 0], [1, 1, 1], [0, 1, 0]], dtype=bool)


@dataclass
class RepairReport:
    """What the repair ladder had to do."""

    cluster_merge_rounds: int = 0
    clusters_merged: int = 0
    bridged_cells: int = 0
    stitched_cells: int = 0
    dead_cells_opened: int = 0
    trimmed_cells: int = 0
    forced_path_length: int = 0
    end_reselected: bool = False
    end_redrawn: bool = False
    used_farthest_end: bool = False
    end_distance: int = 0
    fallbacks: list[str] = field(default_factory=list)


@dataclass
class RepairResult:
    """Repaired maze state."""

    grid: PassageGrid
    mask: NDArray[np.bool_]
    start: Cell
    end: Cell
    report: RepairReport


def is_fully_connected(mask: NDArray[np.bool_], grid: PassageGrid, start: Cell) -> bool:
    """True when BFS over passages from ``start`` reaches every shape cell."""
    reached = reachable_mask(grid, start)
    return int(np.count_nonzero(reached & mask)) == int(np.count_nonzero(mask))


class ConnectivityRepair:
    """
    Multi-pass repair guaranteeing a fully reachable, solvable maze.

    Args:
        rng: Random source for dead-cell exits, island carving and end reselection
        max_cluster_attempts: Bound on cluster-merge rounds before the fallback stitch
    """

    def __init__(self, rng: random.Random | None = None, max_cluster_attempts: int = 10):
        self.rng = rng if rng is not None else random.Random()
        self.max_cluster_attempts = max_cluster_attempts
        self.carver = MazeCarver(self.rng)

    def repair(
        self,
        mask: NDArray[np.bool_],
        grid: PassageGrid,
        start: Cell,
        end: Cell,
        min_distance: int = 0,
    ) -> RepairResult:
        """
        Run the full repair ladder on copies of ``mask`` and ``grid``.

        Args:
            mask: Shape mask the grid was carved on
            grid: Carved passage grid
            start: Start cell (inside the shape)
            end: End cell
            min_distance: Shape distance the final end must keep from ``start``

        Returns:
            RepairResult with the corrected grid, the final shape mask and the
            final endpoints
        """
        mask = mask.copy()
        grid = grid.copy()
        report = RepairReport()

        if not self.merge_clusters(mask, grid, start, report):
            log_fallback(
                logger,
                "fallback_stitch",
                f"cluster merge did not converge in {self.max_cluster_attempts} rounds",
            )
            report.fallbacks.append("fallback_stitch")
            self.stitch_orphans(mask, grid, start, report)

        self.open_dead_cells(mask, grid, report)
        self.trim_unreachable(mask, grid, start, report)
        self.ensure_path(mask, grid, start, end, report)
        end = self.ensure_end(mask, start, end, report)
        end = self.ensure_distance(mask, start, end, min_distance, report)

        return RepairResult(grid=grid, mask=mask, start=start, end=end, report=report)

    def merge_clusters(
        self,
        mask: NDArray[np.bool_],
        grid: PassageGrid,
        start: Cell,
        report: RepairReport,
    ) -> bool:
        """
        Bridge orphan clusters into the connected part, one bounded round at a time.

        A single multi-source BFS per cluster finds the nearest connected cell,
        so each round costs O(clusters x cells) instead of one search per orphan.

        Returns:
            True once the maze is fully connected
        """
        for _ in range(self.max_cluster_attempts):
            connected = reachable_mask(grid, start)
            orphans = mask & ~connected
            if not orphans.any():
                return True

            labels, num_clusters = label(orphans, structure=_CROSS)
            report.cluster_merge_rounds += 1
            if report.cluster_merge_rounds == 1:
                report.fallbacks.append("cluster_merge")
            logger.info(f"Cluster merge round {report.cluster_merge_rounds}: {num_clusters} orphan clusters")

            for cluster_id in range(1, num_clusters + 1):
                cluster = (labels == cluster_id) & ~connected
                if not cluster.any():
                    continue

                sources = [Cell(int(x), int(y)) for y, x in np.argwhere(cluster)]
                path = nearest_path(sources, connected)
                if path is None:
                    continue

                grid.carve_path(path)
                report.bridged_cells += self._absorb(mask, connected, path)

                # Grow a sub-maze over the rest of the island from its entry cell
                self.carver.carve_region(grid, mask, path[0], connected)
                report.clusters_merged += 1

        return is_fully_connected(mask, grid, start)

    def stitch_orphans(
        self,
        mask: NDArray[np.bool_],
        grid: PassageGrid,
        start: Cell,
        report: RepairReport,
    ) -> None:
        """Bridge each remaining orphan cell to its nearest connected cell, ignoring the shape."""
        connected = reachable_mask(grid, start)
        for y, x in np.argwhere(mask & ~connected):
            cell = Cell(int(x), int(y))
            if connected[cell.y, cell.x]:
                continue
            path = nearest_path([cell], connected)
            if path is None:
                continue
            grid.carve_path(path)
            report.bridged_cells += self._absorb(mask, connected, path)
            report.stitched_cells += 1

    def open_dead_cells(self, mask: NDArray[np.bool_], grid: PassageGrid, report: RepairReport) -> None:
        """Open one passage from every fully walled shape cell toward a random shape neighbour."""
        for y, x in np.argwhere(mask):
            cell = Cell(int(x), int(y))
            if grid.value(cell) != 0:
                continue
            options = [direction for direction, neighbor in grid.neighbors(cell) if mask[neighbor.y, neighbor.x]]
            if not options:
                continue
            grid.open_passage(cell, options[self.rng.randrange(len(options))])
            report.dead_cells_opened += 1

        if report.dead_cells_opened:
            log_fallback(logger, "dead_cell_exit", f"opened exits for {report.dead_cells_opened} walled-in cells")
            report.fallbacks.append("dead_cell_exit")

    def trim_unreachable(
        self,
        mask: NDArray[np.bool_],
        grid: PassageGrid,
        start: Cell,
        report: RepairReport,
    ) -> None:
        """Demote shape cells that are still unreachable from ``start``."""
        reached = reachable_mask(grid, start)
        demoted = np.argwhere(mask & ~reached)
        for y, x in demoted:
            cell = Cell(int(x), int(y))
            grid.isolate(cell)
            mask[cell.y, cell.x] = False

        if len(demoted):
            report.trimmed_cells = len(demoted)
            log_fallback(logger, "reachability_trim", f"removed {len(demoted)} unreachable cells from the shape")
            report.fallbacks.append("reachability_trim")

    def ensure_path(
        self,
        mask: NDArray[np.bool_],
        grid: PassageGrid,
        start: Cell,
        end: Cell,
        report: RepairReport,
    ) -> None:
        """Carve a direct start-end path through walls if the end is unreachable."""
        if passage_path(grid, start, end) is not None:
            return

        targets = np.zeros_like(mask)
        targets[end.y, end.x] = True
        path = nearest_path([start], targets)
        if path is None:
            return

        grid.carve_path(path)
        for cell in path:
            mask[cell.y, cell.x] = True
        report.forced_path_length = len(path) - 1
        log_fallback(logger, "forced_path", f"carved a {len(path) - 1}-step path from {start} to {end}")
        report.fallbacks.append("forced_path")

    def ensure_end(self, mask: NDArray[np.bool_], start: Cell, end: Cell, report: RepairReport) -> Cell:
        """Return ``end`` if still valid, otherwise a random shape cell other than ``start``."""
        if mask[end.y, end.x] and end != start:
            return end

        candidates = [Cell(int(x), int(y)) for y, x in np.argwhere(mask)]
        others = [cell for cell in candidates if cell != start]
        pool = others or candidates
        new_end = pool[self.rng.randrange(len(pool))]

        report.end_reselected = True
        log_fallback(logger, "end_reselected", f"end {end} left the shape, using {new_end}")
        report.fallbacks.append("end_reselected")
        return new_end

    def ensure_distance(
        self,
        mask: NDArray[np.bool_],
        start: Cell,
        end: Cell,
        min_distance: int,
        report: RepairReport,
    ) -> Cell:
        """
        Keep ``end`` at least ``min_distance`` shape steps from ``start``.

        Cells absorbed by bridges can shorten the route between the endpoints.
        When that happens a new end is drawn from the final shape cells that
        still meet the floor; if none does, the farthest cell is used unless
        the current end is already as far.

        Every shape cell is reachable once the earlier rungs ran, so any
        redrawn end stays solvable.
        """
        distances = shape_distances(mask, start)
        current = int(distances[end.y, end.x])
        if current >= min_distance:
            report.end_distance = current
            return end

        candidates = np.argwhere(distances >= max(min_distance, 1))
        if len(candidates):
            y, x = candidates[self.rng.randrange(len(candidates))]
            new_end = Cell(int(x), int(y))
            report.end_redrawn = True
            report.fallbacks.append("end_redrawn")
            log_fallback(
                logger,
                "end_redrawn",
                f"end {end} is {current} steps from start after repair, using {new_end}",
            )
        else:
            farthest = int(distances.max())
            if farthest <= current:
                new_end = end
            else:
                y, x = np.argwhere(distances == farthest)[0]
                new_end = Cell(int(x), int(y))
            report.used_farthest_end = True
            report.fallbacks.append("repair_farthest_end")
            log_fallback(
                logger,
                "repair_farthest_end",
                f"no cell {min_distance} steps from {start} after repair; using {new_end} at distance {farthest}",
            )

        report.end_distance = int(distances[new_end.y, new_end.x])
        return new_end

    @staticmethod
    def _absorb(mask: NDArray[np.bool_], connected: NDArray[np.bool_], path: list[Cell]) -> int:
        """Mark path cells as shape and connected; return how many joined the shape."""
        added = 0
        for cell in path:
            if not mask[cell.y, cell.x]:
                mask[cell.y, cell.x] = True
                added += 1
            connected[cell.y, cell.x] = True
        return added
