"""World boundary: random source, scene mutator and asset references."""

from .rng import RandomSource
from .scene import (
    AssetCatalog,
    InMemoryScene,
    Material,
    MOVEMENT_CONTROLLER,
    PLAYER_TAG,
    Prefab,
    SceneMutator,
    SceneNode,
    default_assets,
)

__all__ = [
    'RandomSource',
    'AssetCatalog',
    'InMemoryScene',
    'Material',
    'MOVEMENT_CONTROLLER',
    'PLAYER_TAG',
    'Prefab',
    'SceneMutator',
    'SceneNode',
    'default_assets',
]
