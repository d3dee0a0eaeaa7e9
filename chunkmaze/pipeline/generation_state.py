"""
Generation state shared between pipeline passes.

This module defines:
- Markers recording where actors were placed (player, exit, enemy, items)
- Selection outcomes for the exit and enemy socket searches
- GenerationState, the object every pass reads and mutates
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Tuple

from ..chunks.templates import ChunkLibrary
from ..growth.maze import Maze, PointRef
from ..spatial.oracle import SpatialOracle
from ..world.rng import RandomSource
from ..world.scene import AssetCatalog, SceneMutator
from .settings import MazeSettings


class MarkerType(Enum):
    """Categories of markers placed in a maze."""
    SPAWN_POINT = auto()      # Player start
    LEVEL_GOAL = auto()       # Exit
    ENEMY = auto()            # Enemy spawn
    ITEM = auto()             # Collectible (battery)


@dataclass
class Marker:
    """
    Record of a placed actor or goal.

    Attributes:
        name: Identifier (e.g., "SpawnPoint", "Exit", "Battery_2")
        marker_type: Category of marker
        position: World coordinates (x, y, z)
        chunk_index: Index of the chunk the marker belongs to, if any
        handle: Scene handle of the spawned node, if any
        tags: Additional metadata for content systems
    """
    name: str
    marker_type: MarkerType
    position: Tuple[float, float, float]
    chunk_index: Optional[int] = None
    handle: Optional[int] = None
    tags: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SelectionOutcome:
    """Result of a bounded socket search.

    Attributes:
        point: The socket finally held by the search
        attempts: Number of redraws after the initial draw
        exhausted: True when the attempt cap was hit with an ineligible socket
    """
    point: PointRef
    attempts: int
    exhausted: bool = False

    @property
    def eligible(self) -> bool:
        return not self.exhausted


@dataclass(frozen=True)
class SelectionResult:
    exit: SelectionOutcome
    enemy: SelectionOutcome

    @property
    def exit_point(self) -> PointRef:
        return self.exit.point

    @property
    def enemy_point(self) -> PointRef:
        return self.enemy.point


@dataclass
class GenerationState:
    """
    Everything one generation pass works on.

    Attributes:
        library: Template catalogue
        assets: Prefabs and materials for actors
        settings: Settings for this pass
        scene: World mutator
        oracle: Overlap oracle
        rng: Shared random source
        root: Scene handle chunks and the enemy are parented to
        maze: Maze produced by growth
        selection: Exit/enemy selection, once made
        markers: Actor and goal placements
        actor_handles: Scene handles of spawned non-chunk actors (excluding the player)
        player_handle: Scene handle of the player
        metadata: Additional generation metadata
    """
    library: ChunkLibrary
    assets: AssetCatalog
    settings: MazeSettings
    scene: SceneMutator
    oracle: SpatialOracle
    rng: RandomSource
    root: Optional[int] = None
    maze: Optional[Maze] = None
    selection: Optional[SelectionResult] = None
    markers: List[Marker] = field(default_factory=list)
    actor_handles: List[int] = field(default_factory=list)
    player_handle: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def seed(self) -> int:
        return self.rng.seed

    def add_marker(self, marker: Marker) -> None:
        self.markers.append(marker)

    def get_markers_by_type(self, marker_type: MarkerType) -> List[Marker]:
        return [m for m in self.markers if m.marker_type == marker_type]

    def get_marker_by_name(self, name: str) -> Optional[Marker]:
        for marker in self.markers:
            if marker.name == name:
                return marker
        return None
