"""
Shaped maze facade.

``ShapedMaze`` runs the whole generation pipeline for one board and exposes
the frozen result: shape mask, passage grid, start and end, plus the move
legality and wall queries used by movement code.

A maze is never mutated after construction. A new level or a board resize
builds a new ``ShapedMaze``.
"""

from __future__ import annotations

import random
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np

from shapemaze.config import MazeConfig
from shapemaze.geometry.mazes import (
    ConnectivityRepair,
    Direction,
    EndpointSelector,
    MazeCarver,
    ShapeGenerator,
    ShapeKind,
    count_cells,
    verify_shaped_maze,
)
from shapemaze.geometry.mazes.passages import Cell
from shapemaze.geometry.mazes.repair import RepairReport
from shapemaze.utils.exceptions import InvalidDimensionsError, validate_parameter_value
from shapemaze.utils.maze_logging import LoggedOperation, get_logger, log_generation_summary

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from shapemaze.geometry.mazes import PassageGrid

logger = get_logger(__name__)


def _all_ints(*values) -> bool:
    return all(isinstance(v, (int, np.integer)) and not isinstance(v, bool) for v in values)


@dataclass
class GenerationReport:
    """
    Record of how a maze was produced.

    Cell counts are taken after each stage: straight out of the region
    generator, after size normalization, after endpoint selection and in the
    final (repaired, trimmed) maze. ``endpoint_distance`` is measured when the
    endpoints are chosen and ``final_distance`` on the returned shape.
    """

    shape_kind: ShapeKind
    radius: float
    target_count: int
    raw_shape_cells: int
    normalized_shape_cells: int
    selected_shape_cells: int
    final_shape_cells: int
    endpoint_distance: int
    min_distance: int
    final_distance: int = 0
    endpoint_expansions: int = 0
    seeded_pair: bool = False
    used_farthest_fallback: bool = False
    repair: RepairReport = field(default_factory=RepairReport)
    fallbacks: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["shape_kind"] = self.shape_kind.value
        return data


class ShapedMaze:
    """
    Maze restricted to an organic region of a rectangular board.

    Args:
        width: Board width in pixels
        height: Board height in pixels
        target_cell_count: Desired number of maze cells (0 = every cell of the board)
        config: Generation parameters (defaults to ``MazeConfig()``)
        rng: Random source for the whole pipeline (defaults to ``config.create_rng()``)
        kind: Force a specific shape kind instead of drawing one from ``config.shape_kinds``

    Raises:
        InvalidDimensionsError: If the board floors to fewer than two cells
        ConfigurationError: If ``target_cell_count`` is negative

    Example:
        >>> maze = ShapedMaze(640, 480, 400, config=MazeConfig(seed=1))
        >>> start = maze.get_start()
        >>> maze.is_move_allowed(start.x, start.y, 1, 0)
    """

    def __init__(
        self,
        width: int,
        height: int,
        target_cell_count: int = 0,
        *,
        config: MazeConfig | None = None,
        rng: random.Random | None = None,
        kind: ShapeKind | str | None = None,
    ):
        self.config = config if config is not None else MazeConfig()
        validate_parameter_value(
            target_cell_count,
            "target_cell_count",
            expected_type=int,
            valid_range=(0, float("inf")),
            component="ShapedMaze",
        )

        cell_size = self.config.cell_size
        if width <= 0 or height <= 0 or (width // cell_size) * (height // cell_size) < 2:
            raise InvalidDimensionsError(width, height, cell_size, component="ShapedMaze")

        self.width = width
        self.height = height
        self.cols = width // cell_size
        self.rows = height // cell_size
        total_cells = self.cols * self.rows
        self.target_cell_count = min(target_cell_count, total_cells) if target_cell_count else total_cells

        self._rng = rng if rng is not None else self.config.create_rng()
        self._generate(ShapeKind(kind) if kind is not None else None)

    @classmethod
    def from_grid(
        cls,
        cols: int,
        rows: int,
        target_cell_count: int = 0,
        *,
        config: MazeConfig | None = None,
        rng: random.Random | None = None,
        kind: ShapeKind | str | None = None,
    ) -> ShapedMaze:
        """Build a maze from cell dimensions instead of pixels."""
        config = config if config is not None else MazeConfig()
        return cls(
            cols * config.cell_size,
            rows * config.cell_size,
            target_cell_count,
            config=config,
            rng=rng,
            kind=kind,
        )

    def _generate(self, kind: ShapeKind | None) -> None:
        config = self.config
        rng = self._rng
        target = self.target_cell_count

        with LoggedOperation(logger, f"shaped maze generation ({self.cols}x{self.rows}, target={target})"):
            shapes = ShapeGenerator(
                rng,
                spiral_turns=config.spiral_turns,
                donut_inner_ratio=config.donut_inner_ratio,
                size_tolerance=config.size_tolerance,
                min_radius=config.min_radius,
            )
            shape = shapes.generate_for_target(self.rows, self.cols, target, [kind] if kind else config.shape_kinds)

            selector = EndpointSelector(
                rng,
                max_expansion_attempts=config.endpoint_expansion_attempts,
                expansion_fraction=config.endpoint_expansion_fraction,
            )
            selection = selector.select(shape.mask, target)

            grid = MazeCarver(rng).carve(selection.mask, selection.start)

            repair = ConnectivityRepair(rng, max_cluster_attempts=config.cluster_merge_attempts)
            result = repair.repair(
                selection.mask, grid, selection.start, selection.end, min_distance=selection.min_distance
            )

        mask = result.mask
        mask.flags.writeable = False
        self._mask = mask
        self._grid = result.grid
        self._start = result.start
        self._end = result.end

        fallbacks = []
        if selection.seeded:
            fallbacks.append("seed_pair")
        if selection.used_farthest_fallback:
            fallbacks.append("farthest_end")
        fallbacks.extend(result.report.fallbacks)

        self.report = GenerationReport(
            shape_kind=shape.kind,
            radius=shape.radius,
            target_count=target,
            raw_shape_cells=shape.raw_count,
            normalized_shape_cells=shape.count,
            selected_shape_cells=count_cells(selection.mask),
            final_shape_cells=count_cells(mask),
            endpoint_distance=selection.distance,
            min_distance=selection.min_distance,
            final_distance=result.report.end_distance,
            endpoint_expansions=selection.expansions,
            seeded_pair=selection.seeded,
            used_farthest_fallback=selection.used_farthest_fallback or result.report.used_farthest_end,
            repair=result.report,
            fallbacks=fallbacks,
        )

        log_generation_summary(
            logger,
            {
                "shape": shape.kind.value,
                "cells": self.report.final_shape_cells,
                "target": target,
                "distance": result.report.end_distance,
                "fallbacks": len(fallbacks),
            },
        )

    # Frozen state

    @property
    def start(self) -> Cell:
        return self._start

    @property
    def end(self) -> Cell:
        return self._end

    def get_start(self) -> Cell:
        return self._start

    def get_end(self) -> Cell:
        return self._end

    @property
    def shape_mask(self) -> NDArray[np.bool_]:
        """Read-only (rows, cols) mask of maze cells."""
        return self._mask

    @property
    def passages(self) -> NDArray[np.uint8]:
        """Read-only (rows, cols) array of 4-bit passage values."""
        return self._grid.to_array()

    @property
    def passage_grid(self) -> PassageGrid:
        """Copy of the passage grid."""
        return self._grid.copy()

    @property
    def occupied_count(self) -> int:
        return count_cells(self._mask)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.cols and 0 <= y < self.rows

    def is_in_shape(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and bool(self._mask[y, x])

    # Movement queries

    def is_move_allowed(self, x: int, y: int, dx: int, dy: int) -> bool:
        """
        Whether a unit step from (x, y) by (dx, dy) is legal.

        True iff (dx, dy) is a unit cardinal vector, the destination is inside
        the grid and the shape, and the passage between the cells is open.
        Non-integer coordinates or deltas are never legal.
        """
        if not _all_ints(x, y, dx, dy):
            return False
        direction = Direction.from_delta(dx, dy)
        if direction is None or not self.in_bounds(x, y):
            return False
        if not self.is_in_shape(x + dx, y + dy):
            return False
        return self._grid.has_passage(Cell(x, y), direction)

    def has_wall(self, from_x: int, from_y: int, to_x: int, to_y: int) -> bool:
        """True if the cells are not 4-adjacent or the passage between them is closed."""
        if not _all_ints(from_x, from_y, to_x, to_y):
            return True
        direction = Direction.from_delta(to_x - from_x, to_y - from_y)
        if direction is None or not self.in_bounds(from_x, from_y) or not self.in_bounds(to_x, to_y):
            return True
        return not self._grid.has_passage(Cell(from_x, from_y), direction)

    # Inspection and export

    def verify(self) -> dict[str, Any]:
        """Structural property report, see ``verify_shaped_maze``."""
        return verify_shaped_maze(self._mask, self._grid, self._start, self._end)

    def to_numpy_array(self, wall_thickness: int = 1) -> NDArray[np.int32]:
        """
        Convert the maze to a raster where 1 = wall and 0 = open.

        Every cell is a ``wall_thickness`` square separated by wall strips of
        the same thickness; cells outside the shape stay solid.

        Args:
            wall_thickness: Thickness of walls and cells in raster pixels

        Returns:
            Array of shape (2 * rows * t + t, 2 * cols * t + t)
        """
        t = wall_thickness
        pitch = 2 * t
        raster = np.ones((self.rows * pitch + t, self.cols * pitch + t), dtype=np.int32)

        for y, x in np.argwhere(self._mask):
            r0 = y * pitch + t
            c0 = x * pitch + t
            raster[r0 : r0 + t, c0 : c0 + t] = 0

            cell = Cell(int(x), int(y))
            if self._grid.has_passage(cell, Direction.UP):
                raster[r0 - t : r0, c0 : c0 + t] = 0
            if self._grid.has_passage(cell, Direction.LEFT):
                raster[r0 : r0 + t, c0 - t : c0] = 0

        return raster

    def to_text(self, wall: str = "#", floor: str = " ") -> str:
        """ASCII rendering with ``S`` and ``E`` marking the endpoints."""
        raster = self.to_numpy_array(wall_thickness=1)
        chars = np.where(raster == 1, wall, floor)
        chars[2 * self._start.y + 1, 2 * self._start.x + 1] = "S"
        chars[2 * self._end.y + 1, 2 * self._end.x + 1] = "E"
        return "\n".join("".join(row) for row in chars)

    def __repr__(self) -> str:
        return (
            f"ShapedMaze(cols={self.cols}, rows={self.rows}, cells={self.occupied_count}, "
            f"shape={self.report.shape_kind.value}, start={self._start}, end={self._end})"
        )
