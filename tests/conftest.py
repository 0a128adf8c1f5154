"""
Pytest configuration and shared fixtures for the shapemaze test suite.

This module provides seeded random sources, a deterministic first-choice
random source and small handcrafted masks used across the suite.
"""

import random

import pytest

import numpy as np

from shapemaze.utils.maze_logging import MazeLogger

# =============================================================================
# Test Configuration
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (slower, cross-component)")
    config.addinivalue_line("markers", "slow: Slow tests (may take >10 seconds)")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on test paths."""
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)

        if "large" in item.name or "slow" in item.name:
            item.add_marker(pytest.mark.slow)


# =============================================================================
# Random Sources
# =============================================================================


class FirstChoiceRandom(random.Random):
    """
    Random source that always makes the first choice.

    ``randrange(n)`` returns 0, ``uniform(a, b)`` returns ``a`` and
    ``randint(a, b)`` returns ``a``.
    """

    def getrandbits(self, k):
        return 0

    def random(self):
        return 0.0


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def first_choice_rng():
    """Deterministic random source always selecting index 0."""
    return FirstChoiceRandom()


# =============================================================================
# Masks
# =============================================================================


@pytest.fixture
def two_islands_mask():
    """7x5 mask with two 2x2 islands separated by an empty column band."""
    mask = np.zeros((5, 7), dtype=bool)
    mask[1:3, 0:2] = True
    mask[1:3, 5:7] = True
    return mask


@pytest.fixture
def full_mask():
    """Fully occupied 6x6 mask."""
    return np.ones((6, 6), dtype=bool)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore default logging settings after every test."""
    yield
    MazeLogger.configure(level="WARNING", log_to_file=False, use_colors=True, include_location=False)
