"""
Unit tests for the pydantic generation config.
"""

import random

import pytest
from pydantic import ValidationError

from shapemaze.config import MazeConfig
from shapemaze.geometry.mazes import ShapeKind


class TestMazeConfig:
    """Test MazeConfig defaults and validation."""

    def test_defaults(self):
        config = MazeConfig()

        assert config.cell_size == 16
        assert config.size_tolerance == 0.2
        assert config.min_radius == 2.0
        assert config.spiral_turns == 2.0
        assert config.donut_inner_ratio == 0.4
        assert config.shape_kinds == list(ShapeKind)
        assert config.cluster_merge_attempts == 10
        assert config.endpoint_expansion_attempts == 10
        assert config.endpoint_expansion_fraction == 0.1
        assert config.seed is None

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("cell_size", 0),
            ("size_tolerance", 0.0),
            ("size_tolerance", 1.0),
            ("min_radius", -1.0),
            ("donut_inner_ratio", 1.5),
            ("cluster_merge_attempts", -1),
            ("endpoint_expansion_fraction", 0.0),
        ],
    )
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValidationError):
            MazeConfig(**{field: value})

    def test_shape_kinds_from_values(self):
        config = MazeConfig(shape_kinds=["heart", "donut"])
        assert config.shape_kinds == [ShapeKind.HEART, ShapeKind.DONUT]

    def test_empty_shape_kinds_rejected(self):
        with pytest.raises(ValidationError, match="at least one"):
            MazeConfig(shape_kinds=[])

    def test_duplicate_shape_kinds_rejected(self):
        with pytest.raises(ValidationError, match="duplicates"):
            MazeConfig(shape_kinds=[ShapeKind.BLOB, ShapeKind.BLOB])

    def test_unknown_shape_kind_rejected(self):
        with pytest.raises(ValidationError):
            MazeConfig(shape_kinds=["hexagon"])

    def test_validate_assignment(self):
        config = MazeConfig()
        with pytest.raises(ValidationError):
            config.cell_size = -4

    def test_create_rng_reproducible(self):
        config = MazeConfig(seed=123)
        rng1 = config.create_rng()
        rng2 = config.create_rng()

        assert isinstance(rng1, random.Random)
        assert rng1 is not rng2
        assert [rng1.random() for _ in range(5)] == [rng2.random() for _ in range(5)]

    def test_serialization(self):
        config = MazeConfig(seed=5, shape_kinds=[ShapeKind.SPIRAL])
        restored = MazeConfig.model_validate(config.model_dump())

        assert restored == config
