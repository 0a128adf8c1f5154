"""
Shaped maze generation.

The pipeline turns a rectangular board into a maze restricted to an organic
region:

1. ``ShapeGenerator`` builds a boolean shape mask (blob, parabola, heart,
   spiral, random, donut) normalized toward a target cell count
2. ``EndpointSelector`` picks a start and an end far enough apart, growing
   the shape when needed
3. ``MazeCarver`` carves a spanning tree from the start over the shape
4. ``ConnectivityRepair`` stitches unreachable cells back in and guarantees
   the end is reachable

Examples
--------
>>> import random
>>> from shapemaze.geometry.mazes import ShapeGenerator, ShapeKind, MazeCarver
>>> rng = random.Random(7)
>>> shape = ShapeGenerator(rng).generate_for_target(20, 20, 80, kinds=[ShapeKind.BLOB])
"""

from .carving import MazeCarver
from .endpoints import EndpointSelection, EndpointSelector, min_required_distance
from .graph_search import nearest_path, passage_path, reachable_mask, shape_distance, shape_distances
from .passages import Cell, Direction, PassageGrid
from .repair import ConnectivityRepair, RepairReport, RepairResult, is_fully_connected
from .shapes import ShapeGenerator, ShapeKind, ShapeResult, count_cells, expand_shape, shrink_shape
from .verification import verify_shaped_maze

__all__ = [
    # Grid primitives
    "Cell",
    "Direction",
    "PassageGrid",
    # Pipeline stages
    "ShapeGenerator",
    "ShapeKind",
    "ShapeResult",
    "expand_shape",
    "shrink_shape",
    "count_cells",
    "EndpointSelector",
    "EndpointSelection",
    "min_required_distance",
    "MazeCarver",
    "ConnectivityRepair",
    "RepairReport",
    "RepairResult",
    "is_fully_connected",
    # Search and verification
    "nearest_path",
    "passage_path",
    "reachable_mask",
    "shape_distance",
    "shape_distances",
    "verify_shaped_maze",
]
