"""
Integration tests for the full shaped maze pipeline.

Tests the structural guarantees of generated mazes (connectivity, symmetry,
no dead cells, solvability, distance floor) across seeds and shape kinds,
plus the query surface used by movement code.
"""

import random

import pytest

import numpy as np

from shapemaze import MazeConfig, ShapedMaze, ShapeKind
from shapemaze.geometry.mazes import (
    Cell,
    Direction,
    count_cells,
    passage_path,
    reachable_mask,
    shape_distance,
)
from shapemaze.utils.exceptions import ConfigurationError, InvalidDimensionsError

pytestmark = pytest.mark.integration

UNIT_STEPS = [(0, -1), (1, 0), (0, 1), (-1, 0)]


def _assert_structurally_valid(maze):
    mask = maze.shape_mask
    grid = maze.passage_grid
    values = maze.passages

    reached = reachable_mask(grid, maze.start)
    assert int(np.count_nonzero(reached & mask)) == count_cells(mask), "unreachable shape cells"
    assert grid.is_symmetric(), "passage bits are not symmetric"
    assert np.all(values[mask] > 0), "shape cell without exits"
    assert not values[~mask].any(), "passage bits outside the shape"
    assert passage_path(grid, maze.start, maze.end) is not None, "end unreachable"
    assert maze.start != maze.end
    assert mask[maze.start.y, maze.start.x]
    assert mask[maze.end.y, maze.end.x]


class TestPipelineProperties:
    """Test guarantees over many generated mazes."""

    @pytest.mark.parametrize("seed", range(15))
    def test_default_board(self, seed):
        maze = ShapedMaze(640, 480, 400, config=MazeConfig(seed=seed))

        _assert_structurally_valid(maze)
        assert maze.verify()["is_valid"]

    @pytest.mark.parametrize("kind", list(ShapeKind))
    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_every_kind(self, kind, seed):
        maze = ShapedMaze.from_grid(30, 25, 200, config=MazeConfig(seed=seed), kind=kind)

        _assert_structurally_valid(maze)
        assert maze.report.shape_kind is kind

    @pytest.mark.parametrize("target", [0, 2, 5, 60, 10_000])
    def test_extreme_targets(self, target):
        maze = ShapedMaze.from_grid(12, 9, target, rng=random.Random(target))

        _assert_structurally_valid(maze)
        assert maze.target_cell_count == (108 if target in (0, 10_000) else target)

    def test_distance_floor_or_recorded_fallback(self):
        for seed in range(20):
            maze = ShapedMaze(480, 480, 120, config=MazeConfig(seed=seed))
            report = maze.report

            assert report.min_distance == 60
            assert report.final_distance == shape_distance(maze.shape_mask, maze.start, maze.end)
            if report.used_farthest_fallback:
                assert {"farthest_end", "repair_farthest_end"} & set(report.fallbacks)
            else:
                assert report.final_distance >= report.min_distance

    def test_reproducible_with_seed(self):
        maze1 = ShapedMaze(320, 320, 150, config=MazeConfig(seed=11))
        maze2 = ShapedMaze(320, 320, 150, config=MazeConfig(seed=11))

        np.testing.assert_array_equal(maze1.shape_mask, maze2.shape_mask)
        np.testing.assert_array_equal(maze1.passages, maze2.passages)
        assert maze1.start == maze2.start
        assert maze1.end == maze2.end


class TestScenarios:
    """Concrete end-to-end scenarios."""

    @pytest.mark.parametrize("seed", [40, 90, 122, 182])
    def test_bridge_shortcuts_do_not_break_floor(self, seed):
        """Seeds whose island bridges shortcut the chosen endpoints."""
        maze = ShapedMaze.from_grid(10, 10, 20, rng=random.Random(seed))
        report = maze.report

        _assert_structurally_valid(maze)
        if not report.used_farthest_fallback:
            assert shape_distance(maze.shape_mask, maze.start, maze.end) >= 10

    @pytest.mark.parametrize("seed", range(10))
    def test_ten_by_ten_target_twenty(self, seed):
        maze = ShapedMaze.from_grid(10, 10, 20, rng=random.Random(seed))
        report = maze.report

        # Size band holds before repair adds or trims cells
        assert 16 <= report.normalized_shape_cells <= 24

        reached = reachable_mask(maze.passage_grid, maze.start)
        assert int(np.count_nonzero(reached & maze.shape_mask)) == maze.occupied_count

        # The farthest-cell fallback is best effort and may stay below the floor
        distance = shape_distance(maze.shape_mask, maze.start, maze.end)
        assert report.min_distance == 10
        assert report.final_distance == distance
        if not report.used_farthest_fallback:
            assert distance >= 10
        else:
            assert {"farthest_end", "repair_farthest_end"} & set(report.fallbacks)

    @pytest.mark.parametrize("seed", range(10))
    def test_target_one_is_seeded(self, seed):
        maze = ShapedMaze.from_grid(10, 10, 1, rng=random.Random(seed))

        assert maze.start != maze.end
        _assert_structurally_valid(maze)
        assert maze.verify()["is_solvable"]

    def test_two_cell_board(self):
        maze = ShapedMaze(32, 16, 0, config=MazeConfig(seed=0))

        assert maze.occupied_count == 2
        assert {maze.start, maze.end} == {Cell(0, 0), Cell(1, 0)}
        assert maze.is_move_allowed(0, 0, 1, 0)
        assert maze.is_move_allowed(1, 0, -1, 0)


class TestQueries:
    """Test the movement query surface."""

    @pytest.fixture
    def maze(self):
        return ShapedMaze(320, 320, 150, config=MazeConfig(seed=5))

    def test_move_allowed_matches_passages(self, maze):
        grid = maze.passage_grid
        for y in range(maze.rows):
            for x in range(maze.cols):
                for dx, dy in UNIT_STEPS:
                    allowed = maze.is_move_allowed(x, y, dx, dy)
                    direction = Direction.from_delta(dx, dy)
                    expected = grid.has_passage(Cell(x, y), direction) and maze.is_in_shape(x + dx, y + dy)
                    assert allowed == expected

    def test_move_allowed_is_idempotent(self, maze):
        start = maze.get_start()
        results = [[maze.is_move_allowed(start.x, start.y, dx, dy) for dx, dy in UNIT_STEPS] for _ in range(5)]

        assert all(r == results[0] for r in results)
        assert any(results[0])

    @pytest.mark.parametrize("delta", [(0, 0), (1, 1), (-1, 1), (2, 0), (0, -3)])
    def test_non_unit_steps_rejected(self, maze, delta):
        for y, x in np.argwhere(maze.shape_mask):
            assert not maze.is_move_allowed(int(x), int(y), *delta)

    def test_non_integer_arguments_rejected(self, maze):
        start = maze.start

        assert not maze.is_move_allowed(start.x, start.y, 1.0, 0)
        assert not maze.is_move_allowed(float(start.x), start.y, 0, 1)
        assert not maze.is_move_allowed(start.x, start.y, 0.5, 0)
        assert maze.has_wall(start.x, start.y, start.x + 1.0, start.y)

    def test_numpy_integer_arguments_accepted(self, maze):
        start = maze.start
        for direction in Direction:
            assert maze.is_move_allowed(
                np.int64(start.x), np.int64(start.y), direction.dx, direction.dy
            ) == maze.is_move_allowed(start.x, start.y, direction.dx, direction.dy)

    def test_out_of_grid_rejected(self, maze):
        assert not maze.is_move_allowed(0, 0, -1, 0)
        assert not maze.is_move_allowed(0, 0, 0, -1)
        assert not maze.is_move_allowed(maze.cols - 1, 0, 1, 0)
        assert not maze.is_move_allowed(-5, -5, 1, 0)

    def test_moves_into_empty_cells_rejected(self, maze):
        for y, x in np.argwhere(~maze.shape_mask):
            for dx, dy in UNIT_STEPS:
                sx, sy = int(x) - dx, int(y) - dy
                assert not maze.is_move_allowed(sx, sy, dx, dy)

    def test_has_wall(self, maze):
        start = maze.start
        for direction in Direction:
            to = start.step(direction)
            assert maze.has_wall(start.x, start.y, to.x, to.y) != maze.is_move_allowed(
                start.x, start.y, direction.dx, direction.dy
            )

        assert maze.has_wall(0, 0, 2, 0)
        assert maze.has_wall(0, 0, 1, 1)
        assert maze.has_wall(0, 0, -1, 0)

    def test_frozen_state(self, maze):
        with pytest.raises(ValueError):
            maze.shape_mask[0, 0] = True
        with pytest.raises(ValueError):
            maze.passages[0, 0] = 15

        copy = maze.passage_grid
        copy.isolate(maze.start)
        assert maze.verify()["is_valid"]


class TestExport:
    """Test raster and text export."""

    def test_numpy_array_dimensions(self):
        maze = ShapedMaze.from_grid(15, 20, 120, rng=random.Random(1))
        raster = maze.to_numpy_array(wall_thickness=1)

        assert raster.shape == (2 * 20 + 1, 2 * 15 + 1)
        assert set(np.unique(raster)) <= {0, 1}

    def test_numpy_array_open_cells_match_shape(self):
        maze = ShapedMaze.from_grid(12, 12, 60, rng=random.Random(2))
        raster = maze.to_numpy_array(wall_thickness=2)

        for y in range(maze.rows):
            for x in range(maze.cols):
                cell_open = raster[y * 4 + 2, x * 4 + 2] == 0
                assert cell_open == maze.is_in_shape(x, y)

    def test_numpy_array_encodes_passages(self):
        maze = ShapedMaze.from_grid(12, 12, 60, rng=random.Random(2))
        raster = maze.to_numpy_array()
        grid = maze.passage_grid

        for y, x in np.argwhere(maze.shape_mask):
            cell = Cell(int(x), int(y))
            assert (raster[2 * y + 1, 2 * x + 2] == 0) == grid.has_passage(cell, Direction.RIGHT)
            assert (raster[2 * y + 2, 2 * x + 1] == 0) == grid.has_passage(cell, Direction.DOWN)

    def test_to_text_markers(self):
        maze = ShapedMaze.from_grid(10, 8, 40, rng=random.Random(4))
        lines = maze.to_text().splitlines()

        assert len(lines) == 2 * 8 + 1
        assert all(len(line) == 2 * 10 + 1 for line in lines)
        assert lines[2 * maze.start.y + 1][2 * maze.start.x + 1] == "S"
        assert lines[2 * maze.end.y + 1][2 * maze.end.x + 1] == "E"


class TestConstruction:
    """Test construction input handling."""

    @pytest.mark.parametrize(
        ("width", "height"),
        [(0, 480), (640, 0), (-16, 480), (15, 480), (16, 16), (640, 15)],
    )
    def test_invalid_dimensions(self, width, height):
        with pytest.raises(InvalidDimensionsError):
            ShapedMaze(width, height, 10)

    def test_negative_target(self):
        with pytest.raises(ConfigurationError):
            ShapedMaze(640, 480, -1)

    def test_non_integer_target(self):
        with pytest.raises(ConfigurationError):
            ShapedMaze(640, 480, 12.5)

    def test_cell_size_from_config(self):
        maze = ShapedMaze(100, 60, 0, config=MazeConfig(cell_size=10, seed=0))

        assert (maze.cols, maze.rows) == (10, 6)
        assert maze.target_cell_count == 60

    def test_from_grid(self):
        maze = ShapedMaze.from_grid(7, 5, 20, config=MazeConfig(seed=2))

        assert (maze.cols, maze.rows) == (7, 5)
        assert (maze.width, maze.height) == (112, 80)

    def test_kind_by_value(self):
        maze = ShapedMaze(320, 320, 100, config=MazeConfig(seed=0), kind="heart")
        assert maze.report.shape_kind is ShapeKind.HEART


class TestGenerationReport:
    """Test the generation record."""

    def test_report_fields(self):
        maze = ShapedMaze(640, 480, 400, config=MazeConfig(seed=3))
        report = maze.report

        assert report.target_count == 400
        assert report.min_distance == 200
        assert report.final_shape_cells == maze.occupied_count
        assert report.radius >= 2.0
        assert report.raw_shape_cells > 0

    def test_as_dict(self):
        data = ShapedMaze(320, 320, 100, config=MazeConfig(seed=0)).report.as_dict()

        assert isinstance(data["shape_kind"], str)
        assert isinstance(data["repair"], dict)
        assert isinstance(data["fallbacks"], list)

    def test_fallbacks_logged(self, caplog):
        with caplog.at_level("WARNING"):
            maze = ShapedMaze.from_grid(10, 10, 1, rng=random.Random(0))

        assert maze.report.seeded_pair
        assert "seed_pair" in maze.report.fallbacks
        assert "Fallback [seed_pair]" in caplog.text

    def test_repr(self):
        maze = ShapedMaze(320, 320, 100, config=MazeConfig(seed=0))
        assert repr(maze).startswith("ShapedMaze(cols=20, rows=20")
