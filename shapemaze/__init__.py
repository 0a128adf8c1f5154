from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("shapemaze")  # Matches the name in pyproject.toml
except PackageNotFoundError:
    # package is not installed
    __version__ = "0.0.0-dev"

from .config import MazeConfig  # noqa: E402
from .core import GenerationReport, ShapedMaze  # noqa: E402
from .geometry.mazes import (  # noqa: E402
    Cell,
    ConnectivityRepair,
    Direction,
    EndpointSelector,
    MazeCarver,
    PassageGrid,
    ShapeGenerator,
    ShapeKind,
    expand_shape,
    shrink_shape,
    verify_shaped_maze,
)
from .session import MazeSession  # noqa: E402
from .utils.exceptions import (  # noqa: E402
    ConfigurationError,
    InvalidDimensionsError,
    MazeError,
    ShapeError,
)

__all__ = [
    "__version__",
    "MazeConfig",
    "ShapedMaze",
    "GenerationReport",
    "MazeSession",
    "Cell",
    "Direction",
    "PassageGrid",
    "ShapeKind",
    "ShapeGenerator",
    "EndpointSelector",
    "MazeCarver",
    "ConnectivityRepair",
    "expand_shape",
    "shrink_shape",
    "verify_shaped_maze",
    "MazeError",
    "InvalidDimensionsError",
    "ConfigurationError",
    "ShapeError",
]
