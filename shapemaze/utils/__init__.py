"""Utility modules for shapemaze: exceptions and logging."""

from .exceptions import (
    ConfigurationError,
    InvalidDimensionsError,
    MazeError,
    ShapeError,
    validate_parameter_value,
)
from .maze_logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "InvalidDimensionsError",
    "MazeError",
    "ShapeError",
    "validate_parameter_value",
    "configure_logging",
    "get_logger",
]
