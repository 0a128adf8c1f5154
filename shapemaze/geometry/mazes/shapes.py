"""
Organic shape masks for mazes.

A shape is a boolean mask of shape (rows, cols) carving a region out of the
rectangular board. Every kind is a closed-form inclusion test around a center
point:

- **blob**: noisy disk, ``distance <= radius + U(0, 0.3 radius)``
- **parabola**: band under an inverted parabola ``y <= -a (x - cx)^2 + cy + radius``
- **heart**: ``(nx^2 + ny^2 - 1)^3 - nx^2 ny^3 < 0`` with coordinates scaled by radius/2
- **spiral**: cells near the Archimedean spiral ``r = b theta``
- **random**: disk with 3-7 random protrusions
- **donut**: noisy annulus

Generated masks are normalized toward a target cell count: too small masks
grow at random border cells (``expand_shape``), too large ones lose random
border cells (``shrink_shape``). Exact counts are not required; anything within
the tolerance band is kept as is.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np
from scipy.ndimage import binary_dilation, binary_erosion

from shapemaze.utils.maze_logging import get_logger, log_fallback

from .passages import Cell

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from numpy.typing import NDArray

logger = get_logger(__name__)

_EIGHT_NEIGHBORHOOD = np.ones((3, 3), dtype=bool)


class ShapeKind(Enum):
    """Available region generators."""

    BLOB = "blob"
    PARABOLA = "parabola"
    HEART = "heart"
    SPIRAL = "spiral"
    RANDOM = "random"
    DONUT = "donut"


@dataclass
class ShapeResult:
    """Mask produced for a target size, with how it was produced."""

    mask: NDArray[np.bool_]
    kind: ShapeKind
    radius: float
    raw_count: int

    @property
    def count(self) -> int:
        return count_cells(self.mask)


def count_cells(mask: NDArray[np.bool_]) -> int:
    return int(np.count_nonzero(mask))


def grid_center(rows: int, cols: int) -> Cell:
    return Cell(cols // 2, rows // 2)


def outer_border(mask: NDArray[np.bool_]) -> NDArray[np.bool_]:
    """Unoccupied cells 8-adjacent to an occupied cell."""
    return binary_dilation(mask, structure=_EIGHT_NEIGHBORHOOD) & ~mask


def inner_border(mask: NDArray[np.bool_]) -> NDArray[np.bool_]:
    """Occupied cells 8-adjacent to an unoccupied cell; the grid edge counts as unoccupied."""
    return mask & ~binary_erosion(mask, structure=_EIGHT_NEIGHBORHOOD, border_value=0)


def _spiral_search(mask: NDArray[np.bool_], center: Cell) -> Cell | None:
    """First unoccupied cell on square rings sweeping outward from ``center``."""
    rows, cols = mask.shape
    for ring in range(max(rows, cols) + 1):
        for dy in range(-ring, ring + 1):
            for dx in range(-ring, ring + 1):
                if max(abs(dx), abs(dy)) != ring:
                    continue
                x, y = center.x + dx, center.y + dy
                if 0 <= x < cols and 0 <= y < rows and not mask[y, x]:
                    return Cell(x, y)
    return None


def expand_shape(
    mask: NDArray[np.bool_],
    target_count: int,
    rng: random.Random,
) -> NDArray[np.bool_]:
    """
    Grow a shape until it holds ``target_count`` cells.

    One random outer border cell is added per step. An empty mask is seeded at
    the grid center first. When no border cell exists the next free cell is
    taken from a spiral sweep around the center. Growth stops early once the
    grid is full.

    Args:
        mask: Boolean shape mask (not modified)
        target_count: Desired number of occupied cells
        rng: Random source

    Returns:
        New mask with at least ``min(target_count, mask.size)`` cells
    """
    result = mask.copy()
    rows, cols = result.shape
    center = grid_center(rows, cols)
    target_count = min(target_count, result.size)
    count = count_cells(result)

    while count < target_count:
        if count == 0:
            result[center.y, center.x] = True
            count += 1
            continue

        candidates = np.argwhere(outer_border(result))
        if len(candidates) == 0:
            cell = _spiral_search(result, center)
            if cell is None:
                break
            log_fallback(logger, "expand_spiral_sweep", f"no border cells, taking {cell}")
            result[cell.y, cell.x] = True
        else:
            y, x = candidates[rng.randrange(len(candidates))]
            result[y, x] = True
        count += 1

    return result


def shrink_shape(
    mask: NDArray[np.bool_],
    target_count: int,
    rng: random.Random,
    protected: Iterable[Cell] = (),
) -> NDArray[np.bool_]:
    """
    Remove random inner border cells until ``target_count`` cells remain.

    Args:
        mask: Boolean shape mask (not modified)
        target_count: Desired number of occupied cells
        rng: Random source
        protected: Cells that must never be removed (e.g. start and end)

    Returns:
        New mask; keeps more than ``target_count`` cells only when every
        remaining border cell is protected
    """
    result = mask.copy()
    keep = np.zeros_like(result)
    for cell in protected:
        keep[cell.y, cell.x] = True

    count = count_cells(result)
    while count > target_count:
        candidates = np.argwhere(inner_border(result) & ~keep)
        if len(candidates) == 0:
            break
        y, x = candidates[rng.randrange(len(candidates))]
        result[y, x] = False
        count -= 1

    return result


class ShapeGenerator:
    """
    Randomized region generator for maze shapes.

    Args:
        rng: Random source used for kind selection, noise and border picks
        spiral_turns: Number of turns of the spiral shape
        donut_inner_ratio: Inner radius of the donut relative to its radius
        size_tolerance: Relative band around the target that needs no correction
        min_radius: Lower bound on the computed radius
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        spiral_turns: float = 2.0,
        donut_inner_ratio: float = 0.4,
        size_tolerance: float = 0.2,
        min_radius: float = 2.0,
    ):
        self.rng = rng if rng is not None else random.Random()
        self.spiral_turns = spiral_turns
        self.donut_inner_ratio = donut_inner_ratio
        self.size_tolerance = size_tolerance
        self.min_radius = min_radius

    def compute_radius(self, rows: int, cols: int, target_count: int) -> float:
        """``min(sqrt(target / pi), min(rows, cols) / 2)``, floored at ``min_radius``."""
        max_radius = min(rows, cols) / 2
        radius = min(math.sqrt(target_count / math.pi), max_radius)
        return max(radius, self.min_radius)

    def choose_kind(self, kinds: Sequence[ShapeKind] | None = None) -> ShapeKind:
        options = list(kinds) if kinds else list(ShapeKind)
        return options[self.rng.randrange(len(options))]

    def generate(
        self,
        rows: int,
        cols: int,
        center_x: float,
        center_y: float,
        radius: float,
        kind: ShapeKind,
    ) -> NDArray[np.bool_]:
        """Raw mask of the given kind, without size normalization."""
        builders = {
            ShapeKind.BLOB: self.blob,
            ShapeKind.PARABOLA: self.parabola,
            ShapeKind.HEART: self.heart,
            ShapeKind.SPIRAL: self.spiral,
            ShapeKind.RANDOM: self.random_protrusions,
            ShapeKind.DONUT: self.donut,
        }
        try:
            builder = builders[ShapeKind(kind)]
        except ValueError:
            raise ValueError(f"Unknown shape kind: {kind}") from None
        return builder(rows, cols, center_x, center_y, radius)

    def generate_for_target(
        self,
        rows: int,
        cols: int,
        target_count: int,
        kinds: Sequence[ShapeKind] | None = None,
    ) -> ShapeResult:
        """
        Random shape around the grid center normalized toward ``target_count``.

        Args:
            rows: Number of rows
            cols: Number of columns
            target_count: Desired number of cells
            kinds: Kinds to draw from (all kinds when None)

        Returns:
            ShapeResult with the normalized mask
        """
        kind = self.choose_kind(kinds)
        radius = self.compute_radius(rows, cols, target_count)
        center = grid_center(rows, cols)

        mask = self.generate(rows, cols, center.x, center.y, radius, kind)
        raw_count = count_cells(mask)
        logger.debug(f"Generated {kind.value} shape: radius={radius:.2f}, cells={raw_count}, target={target_count}")

        mask = self.normalize(mask, target_count)
        return ShapeResult(mask=mask, kind=kind, radius=radius, raw_count=raw_count)

    def normalize(self, mask: NDArray[np.bool_], target_count: int) -> NDArray[np.bool_]:
        """Expand or shrink a mask that falls outside the tolerance band."""
        count = count_cells(mask)
        if count < (1 - self.size_tolerance) * target_count:
            mask = expand_shape(mask, target_count, self.rng)
            logger.debug(f"Expanded shape from {count} to {count_cells(mask)} cells")
        elif count > (1 + self.size_tolerance) * target_count:
            mask = shrink_shape(mask, target_count, self.rng)
            logger.debug(f"Shrunk shape from {count} to {count_cells(mask)} cells")
        return mask

    # Region generators

    def _noise(self, rows: int, cols: int, low: float, high: float) -> NDArray[np.float64]:
        values = [self.rng.uniform(low, high) for _ in range(rows * cols)]
        return np.array(values, dtype=np.float64).reshape(rows, cols)

    @staticmethod
    def _offsets(rows: int, cols: int, center_x: float, center_y: float):
        ys, xs = np.mgrid[0:rows, 0:cols]
        return xs - center_x, ys - center_y

    def blob(self, rows: int, cols: int, center_x: float, center_y: float, radius: float) -> NDArray[np.bool_]:
        dx, dy = self._offsets(rows, cols, center_x, center_y)
        distance = np.hypot(dx, dy)
        noise = self._noise(rows, cols, 0.0, 0.3 * radius)
        return distance <= radius + noise

    def parabola(self, rows: int, cols: int, center_x: float, center_y: float, radius: float) -> NDArray[np.bool_]:
        dx, dy = self._offsets(rows, cols, center_x, center_y)
        a = 1 / (2 * radius)
        y = dy + center_y
        expected_y = -a * dx**2 + center_y + radius
        return (y >= center_y - radius) & (y <= expected_y)

    def heart(self, rows: int, cols: int, center_x: float, center_y: float, radius: float) -> NDArray[np.bool_]:
        dx, dy = self._offsets(rows, cols, center_x, center_y)
        scale = radius / 2
        nx = dx / scale
        ny = dy / scale
        return (nx**2 + ny**2 - 1) ** 3 - nx**2 * ny**3 < 0

    def spiral(self, rows: int, cols: int, center_x: float, center_y: float, radius: float) -> NDArray[np.bool_]:
        """
        Cells within ``b pi / 4`` of the spiral ``r = b theta``.

        Every winding is tested, so a spiral with two turns covers radii up to
        the full radius.
        """
        dx, dy = self._offsets(rows, cols, center_x, center_y)
        distance = np.hypot(dx, dy)
        angle = np.mod(np.arctan2(dy, dx), 2 * np.pi)

        b = radius / (2 * np.pi * self.spiral_turns)
        tolerance = b * np.pi / 4

        mask = np.zeros((rows, cols), dtype=bool)
        for winding in range(math.ceil(self.spiral_turns)):
            spiral_radius = b * (angle + 2 * np.pi * winding)
            mask |= np.abs(distance - spiral_radius) <= tolerance
        return mask & (distance <= radius)

    def random_protrusions(
        self, rows: int, cols: int, center_x: float, center_y: float, radius: float
    ) -> NDArray[np.bool_]:
        """Disk of ``radius`` with 3-7 randomly angled protrusions OR-ed in."""
        dx, dy = self._offsets(rows, cols, center_x, center_y)
        mask = np.hypot(dx, dy) <= radius

        num_protrusions = self.rng.randint(3, 7)
        for _ in range(num_protrusions):
            angle = self.rng.uniform(0, 2 * np.pi)
            length = radius * self.rng.uniform(0.5, 1.0)
            width = radius * self.rng.uniform(0.1, 0.4)
            self._draw_protrusion(mask, center_x, center_y, angle, length, width)

        return mask

    @staticmethod
    def _draw_protrusion(
        mask: NDArray[np.bool_],
        center_x: float,
        center_y: float,
        angle: float,
        length: float,
        width: float,
    ) -> None:
        rows, cols = mask.shape
        dir_x, dir_y = math.cos(angle), math.sin(angle)
        offsets = np.arange(-width, width + 1e-9, 1.0)

        for step in range(math.ceil(length)):
            x = math.floor(center_x + dir_x * step)
            y = math.floor(center_y + dir_y * step)
            if not (0 <= x < cols and 0 <= y < rows):
                continue
            for ox in offsets:
                for oy in offsets:
                    nx, ny = math.floor(x + ox), math.floor(y + oy)
                    if 0 <= nx < cols and 0 <= ny < rows and abs(ox * dir_y - oy * dir_x) <= width:
                        mask[ny, nx] = True

    def donut(self, rows: int, cols: int, center_x: float, center_y: float, radius: float) -> NDArray[np.bool_]:
        """Annulus whose inner and outer boundaries each carry +-10% radius noise."""
        dx, dy = self._offsets(rows, cols, center_x, center_y)
        distance = np.hypot(dx, dy)
        inner_radius = self.donut_inner_ratio * radius
        inner_noise = self._noise(rows, cols, -0.1 * radius, 0.1 * radius)
        outer_noise = self._noise(rows, cols, -0.1 * radius, 0.1 * radius)
        return (distance >= inner_radius + inner_noise) & (distance <= radius + outer_noise)
