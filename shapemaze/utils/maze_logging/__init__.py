"""
Logging utilities for shapemaze.

Usage:
    >>> from shapemaze.utils.maze_logging import get_logger, configure_logging
    >>> configure_logging(level="INFO")
    >>> logger = get_logger(__name__)
    >>> logger.info("Generating maze...")
"""

from __future__ import annotations

from .logger import (
    LoggedOperation,
    MazeFormatter,
    MazeLogger,
    configure_development_logging,
    configure_logging,
    configure_production_logging,
    get_logger,
    log_fallback,
    log_generation_summary,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "configure_development_logging",
    "configure_production_logging",
    "log_fallback",
    "log_generation_summary",
    "LoggedOperation",
    "MazeFormatter",
    "MazeLogger",
]
