"""
chunkmaze - procedural chunk-based maze assembly.

Grows a collision-free layout out of pre-authored chunks connected through
labelled sockets, then places an exit, an enemy, batteries and the player.
"""

from .errors import MazeConfigError, MazeGenerationError, TemplateError
from .chunks import ChunkLibrary, ChunkTemplate, CollisionVolume, ConnectionPoint, DeadEndMarker
from .growth import GrowthEngine, Maze, MarkerMatching, PointRef
from .spatial import BoxOverlapOracle, OverlapReport, SpatialOracle
from .world import AssetCatalog, InMemoryScene, RandomSource, SceneMutator
from .pipeline import GenerationReport, MazeGenerator, MazeSettings

__version__ = '1.0.0'

__all__ = [
    'MazeConfigError',
    'MazeGenerationError',
    'TemplateError',
    'ChunkLibrary',
    'ChunkTemplate',
    'CollisionVolume',
    'ConnectionPoint',
    'DeadEndMarker',
    'GrowthEngine',
    'Maze',
    'MarkerMatching',
    'PointRef',
    'BoxOverlapOracle',
    'OverlapReport',
    'SpatialOracle',
    'AssetCatalog',
    'InMemoryScene',
    'RandomSource',
    'SceneMutator',
    'GenerationReport',
    'MazeGenerator',
    'MazeSettings',
]
