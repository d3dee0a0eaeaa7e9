"""
Maze generation pipeline.

Provides the generate/regenerate facade, immutable settings and the
post-growth passes.
"""

from .settings import MazeSettings
from .settings_storage import (
    get_settings_dir,
    load_settings,
    save_settings,
    settings_from_dict,
    settings_to_dict,
)
from .generation_state import (
    GenerationState,
    Marker,
    MarkerType,
    SelectionOutcome,
    SelectionResult,
)
from .maze_pipeline import GenerationReport, MazeGenerator, PipelineStage

__all__ = [
    # Settings
    'MazeSettings',
    'get_settings_dir',
    'load_settings',
    'save_settings',
    'settings_from_dict',
    'settings_to_dict',
    # State
    'GenerationState',
    'Marker',
    'MarkerType',
    'SelectionOutcome',
    'SelectionResult',
    # Pipeline core
    'GenerationReport',
    'MazeGenerator',
    'PipelineStage',
]
