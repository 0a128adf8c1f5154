"""Geometry for shapemaze: grid primitives and the shaped maze pipeline."""

from .mazes import Cell, Direction, PassageGrid, ShapeKind

__all__ = ["Cell", "Direction", "PassageGrid", "ShapeKind"]
