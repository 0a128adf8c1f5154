"""
Explicit maze session.

A ``MazeSession`` owns everything a single player run needs: the current
maze, the player cell and the step/level counters. Movement and rendering
code receive the session object instead of reaching for global state.
Completion is detected by the caller through ``is_complete``; the session
emits no events.
"""

from __future__ import annotations

import random

from shapemaze.config import MazeConfig
from shapemaze.core import ShapedMaze
from shapemaze.geometry.mazes.passages import Cell
from shapemaze.utils.exceptions import validate_parameter_value
from shapemaze.utils.maze_logging import get_logger

logger = get_logger(__name__)


class MazeSession:
    """
    One player's run through a sequence of mazes.

    Args:
        width: Board width in pixels
        height: Board height in pixels
        base_target: Target cell count of the first level
        level_increment: Cells added to the target per level
        config: Generation parameters shared by every level
        rng: Random source shared by every level (defaults to ``config.create_rng()``)
    """

    def __init__(
        self,
        width: int,
        height: int,
        base_target: int = 400,
        level_increment: int = 0,
        config: MazeConfig | None = None,
        rng: random.Random | None = None,
    ):
        validate_parameter_value(base_target, "base_target", int, (0, float("inf")), component="MazeSession")
        validate_parameter_value(level_increment, "level_increment", int, (0, float("inf")), component="MazeSession")

        self.config = config if config is not None else MazeConfig()
        self.rng = rng if rng is not None else self.config.create_rng()
        self.base_target = base_target
        self.level_increment = level_increment
        self.width = width
        self.height = height
        self.level = 1
        self.steps = 0
        self.maze = self._build_maze(width, height)
        self.player = self.maze.get_start()

    def target_for_level(self, level: int) -> int:
        return self.base_target + (level - 1) * self.level_increment

    def _build_maze(self, width: int, height: int) -> ShapedMaze:
        return ShapedMaze(
            width,
            height,
            self.target_for_level(self.level),
            config=self.config,
            rng=self.rng,
        )

    def move(self, dx: int, dy: int) -> bool:
        """Move the player by one cell if the maze allows it; returns whether it moved."""
        if not self.maze.is_move_allowed(self.player.x, self.player.y, dx, dy):
            return False
        self.player = Cell(self.player.x + dx, self.player.y + dy)
        self.steps += 1
        return True

    @property
    def is_complete(self) -> bool:
        return self.player == self.maze.get_end()

    def next_level(self) -> ShapedMaze:
        """Advance the level counter and replace the maze."""
        self.level += 1
        return self._restart(self.width, self.height)

    def resize(self, width: int, height: int) -> ShapedMaze:
        """Replace the maze for new board dimensions, keeping the level."""
        maze = self._restart(width, height)
        self.width = width
        self.height = height
        return maze

    def _restart(self, width: int, height: int) -> ShapedMaze:
        self.maze = self._build_maze(width, height)
        self.player = self.maze.get_start()
        self.steps = 0
        logger.info(f"Level {self.level}: new {self.maze.cols}x{self.maze.rows} maze, {self.maze.occupied_count} cells")
        return self.maze
