"""Core maze objects: the shaped maze facade and its generation report."""

from .shaped_maze import GenerationReport, ShapedMaze

__all__ = ["GenerationReport", "ShapedMaze"]
