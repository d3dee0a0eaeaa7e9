"""Frontier-driven chunk placement."""

from .maze import ChunkInstance, Frontier, Link, Maze, PointRef
from .aligner import (
    DEFAULT_OVERLAP_MARGIN,
    MarkerMatching,
    PlacementAligner,
    PoolEntry,
    ROTATIONS,
    TemplatePool,
)
from .engine import GrowthEngine

__all__ = [
    'ChunkInstance',
    'Frontier',
    'Link',
    'Maze',
    'PointRef',
    'DEFAULT_OVERLAP_MARGIN',
    'MarkerMatching',
    'PlacementAligner',
    'PoolEntry',
    'ROTATIONS',
    'TemplatePool',
    'GrowthEngine',
]
