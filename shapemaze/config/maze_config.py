"""
Configuration for shaped maze generation.

All tunables of the pipeline live here. Defaults: 16 px cells, a +-20% size
band, 10 cluster-merge attempts and 10 endpoint expansion rounds of 10% each.
"""

from __future__ import annotations

import random

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shapemaze.geometry.mazes.shapes import ShapeKind


class MazeConfig(BaseModel):
    """
    Validated parameters for ``ShapedMaze`` generation.

    Example:
        >>> config = MazeConfig(seed=42, shape_kinds=[ShapeKind.HEART])
        >>> rng = config.create_rng()
    """

    cell_size: int = Field(16, ge=1, description="Pixels per cell edge")
    size_tolerance: float = Field(
        0.2, gt=0.0, lt=1.0, description="Relative band around the target before expand/shrink kicks in"
    )
    min_radius: float = Field(2.0, gt=0.0, description="Lower bound on the shape radius")
    spiral_turns: float = Field(2.0, gt=0.0, description="Number of turns of the spiral shape")
    donut_inner_ratio: float = Field(0.4, gt=0.0, lt=1.0, description="Inner radius of the donut as a fraction")
    shape_kinds: list[ShapeKind] = Field(
        default_factory=lambda: list(ShapeKind), description="Shape kinds drawn uniformly at random"
    )
    cluster_merge_attempts: int = Field(10, ge=0, le=1000, description="Bound on cluster-merge repair rounds")
    endpoint_expansion_attempts: int = Field(
        10, ge=0, le=1000, description="Bound on shape expansions while searching for a far end cell"
    )
    endpoint_expansion_fraction: float = Field(
        0.1, gt=0.0, le=1.0, description="Fraction of cells added per endpoint expansion"
    )
    seed: int | None = Field(None, description="Seed for the pipeline random source")

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("shape_kinds")
    @classmethod
    def validate_shape_kinds(cls, v: list[ShapeKind]) -> list[ShapeKind]:
        """Require at least one kind and no duplicates."""
        if not v:
            raise ValueError("shape_kinds must name at least one shape kind")
        if len(set(v)) != len(v):
            raise ValueError("shape_kinds must not contain duplicates")
        return v

    def create_rng(self) -> random.Random:
        """Fresh random source seeded from ``seed`` (OS entropy when None)."""
        return random.Random(self.seed)
