"""Configuration models for shapemaze."""

from .maze_config import MazeConfig

__all__ = ["MazeConfig"]
