"""Composable post-growth passes."""

from .base import MazePass, PassConfig, PassResult
from .selection_passes import PostProcessSelector, is_enemy_candidate, is_exit_candidate
from .population_passes import Populator

__all__ = [
    'MazePass',
    'PassConfig',
    'PassResult',
    'PostProcessSelector',
    'is_enemy_candidate',
    'is_exit_candidate',
    'Populator',
]
