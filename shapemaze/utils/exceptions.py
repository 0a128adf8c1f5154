"""
Exception classes for shapemaze with helpful error messages and user guidance.

Generation itself never raises: every fallback inside the pipeline is a policy
decision. The exceptions here cover invalid construction input and programming
errors (bad masks, start cells outside the shape).
"""

from __future__ import annotations

from typing import Any


class MazeError(Exception):
    """
    Base exception for maze errors with helpful context and suggestions.

    This exception class provides structured error information including:
    - Clear error description
    - Component context information
    - Suggested actions for resolution
    - Optional diagnostic data
    """

    def __init__(
        self,
        message: str,
        component: str | None = None,
        suggested_action: str | None = None,
        error_code: str | None = None,
        diagnostic_data: dict[str, Any] | None = None,
    ):
        self.component = component or "shapemaze"
        self.suggested_action = suggested_action
        self.error_code = error_code
        self.diagnostic_data = diagnostic_data or {}

        full_message = f"[{self.component}] {message}"

        if self.suggested_action:
            full_message += f"\nSuggestion: {self.suggested_action}"

        if self.error_code:
            full_message += f"\nError Code: {self.error_code}"

        if self.diagnostic_data:
            full_message += "\nDiagnostic Information:"
            for key, value in self.diagnostic_data.items():
                full_message += f"\n   - {key}: {value}"

        super().__init__(full_message)


class InvalidDimensionsError(MazeError):
    """Exception raised when the board cannot hold a maze."""

    def __init__(
        self,
        width: int,
        height: int,
        cell_size: int,
        component: str | None = None,
    ):
        cols = width // cell_size if cell_size > 0 else 0
        rows = height // cell_size if cell_size > 0 else 0
        diagnostic_data = {
            "width": width,
            "height": height,
            "cell_size": cell_size,
            "cols": cols,
            "rows": rows,
        }

        suggested_action = _generate_dimension_suggestions(width, height, cell_size)

        message = f"Invalid dimensions {width}x{height} for cell size {cell_size}"

        super().__init__(
            message=message,
            component=component,
            suggested_action=suggested_action,
            error_code="INVALID_DIMENSIONS",
            diagnostic_data=diagnostic_data,
        )


class ConfigurationError(MazeError):
    """Exception raised when a generation parameter is invalid."""

    def __init__(
        self,
        parameter_name: str,
        provided_value: Any,
        expected_type: type | None = None,
        valid_range: tuple | None = None,
        component: str | None = None,
    ):
        diagnostic_data = {
            "parameter": parameter_name,
            "provided_value": str(provided_value),
            "provided_type": type(provided_value).__name__,
        }

        if expected_type:
            diagnostic_data["expected_type"] = expected_type.__name__

        if valid_range:
            diagnostic_data["valid_range"] = f"[{valid_range[0]}, {valid_range[1]}]"

        suggested_action = _generate_configuration_suggestions(
            parameter_name, provided_value, expected_type, valid_range
        )

        message = f"Invalid configuration for parameter '{parameter_name}'"

        super().__init__(
            message=message,
            component=component,
            suggested_action=suggested_action,
            error_code="INVALID_CONFIGURATION",
            diagnostic_data=diagnostic_data,
        )


class ShapeError(MazeError):
    """Exception raised when a shape mask or cell does not fit the grid."""

    def __init__(
        self,
        message: str,
        component: str | None = None,
        cell: Any = None,
        grid_shape: tuple | None = None,
    ):
        diagnostic_data: dict[str, Any] = {}
        if cell is not None:
            diagnostic_data["cell"] = str(cell)
        if grid_shape is not None:
            diagnostic_data["grid_shape"] = str(grid_shape)

        super().__init__(
            message=message,
            component=component,
            suggested_action="Pass a boolean mask of shape (rows, cols) and a cell inside it",
            error_code="INVALID_SHAPE",
            diagnostic_data=diagnostic_data,
        )


def _generate_dimension_suggestions(width: int, height: int, cell_size: int) -> str:
    """Generate specific suggestions for dimension errors."""

    if cell_size <= 0:
        return "Cell size must be a positive number of pixels"

    if width <= 0 or height <= 0:
        return "Board width and height must be positive"

    return f"Use a board of at least {2 * cell_size}x{cell_size} pixels so two cells fit"


def _generate_configuration_suggestions(
    parameter_name: str,
    provided_value: Any,
    expected_type: type | None,
    valid_range: tuple | None,
) -> str:
    """Generate specific suggestions for configuration errors."""

    suggestions = []

    if expected_type and not isinstance(provided_value, expected_type):
        suggestions.append(f"Convert {parameter_name} to {expected_type.__name__}")

    if valid_range and isinstance(provided_value, (int, float)):
        if provided_value < valid_range[0]:
            suggestions.append(f"Increase {parameter_name} to at least {valid_range[0]}")
        elif provided_value > valid_range[1]:
            suggestions.append(f"Decrease {parameter_name} to at most {valid_range[1]}")

    if "target" in parameter_name.lower() and isinstance(provided_value, (int, float)) and provided_value < 0:
        suggestions.append("Use 0 to fill every cell the board can hold")

    return " | ".join(suggestions) if suggestions else f"Check {parameter_name} value and try again"


def validate_parameter_value(
    value: Any,
    parameter_name: str,
    expected_type: type | None = None,
    valid_range: tuple | None = None,
    component: str | None = None,
):
    """Validate parameter value and type."""
    if expected_type and not isinstance(value, expected_type):
        raise ConfigurationError(
            parameter_name=parameter_name,
            provided_value=value,
            expected_type=expected_type,
            component=component,
        )

    if valid_range and isinstance(value, (int, float)):
        if not (valid_range[0] <= value <= valid_range[1]):
            raise ConfigurationError(
                parameter_name=parameter_name,
                provided_value=value,
                valid_range=valid_range,
                component=component,
            )
