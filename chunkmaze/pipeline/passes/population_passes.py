"""
Population: batteries and the player start.

Batteries are scattered at random offsets around random chunks with no
overlap or reachability check. The player is spawned above the first
placed chunk, on first generation only.
"""

import logging

import numpy as np

from ...geometry import Pose, as_tuple
from ...validation.maze_checks import issue_from_rule
from ...validation.rules import POP_001
from ..generation_state import GenerationState, Marker, MarkerType
from .base import MazePass, PassConfig, PassResult

logger = logging.getLogger(__name__)


class Populator(MazePass):
    """
    Spawn collectibles and (optionally) the player.

    Options:
        spawn_player: Spawn the player above the first chunk (default True)
        spawn_batteries: Scatter batteries (default True)
    """

    @property
    def name(self) -> str:
        return "Populator"

    @property
    def description(self) -> str:
        return "Scatter batteries and spawn the player"

    def execute(self, state: GenerationState, config: PassConfig) -> PassResult:
        result = PassResult(success=True, state=state)
        if config.options.get('spawn_batteries', True):
            result.metrics['batteries_spawned'] = self.spawn_batteries(state, result)
        if config.options.get('spawn_player', True):
            result.metrics['player_spawned'] = self.spawn_player(state, result)
        return result

    def spawn_batteries(self, state: GenerationState, result: PassResult) -> int:
        settings = state.settings
        if settings.batteries_per_maze == 0:
            return 0
        if state.assets.battery is None:
            issue = issue_from_rule(POP_001, asset="Battery prefab")
            logger.error(issue.message)
            result.add_error(issue.message)
            return 0

        rng = state.rng
        scatter = settings.battery_scatter
        spawned = 0
        for i in range(settings.batteries_per_maze):
            chunk_index = rng.index(state.maze.chunks)
            chunk = state.maze.chunk(chunk_index)
            offset = np.array([
                rng.uniform(-scatter, scatter),
                settings.battery_height,
                rng.uniform(-scatter, scatter),
            ])
            position = chunk.position + offset
            handle = state.scene.instantiate(state.assets.battery, Pose(position))
            state.actor_handles.append(handle)
            state.add_marker(Marker(
                name=f"Battery_{i}",
                marker_type=MarkerType.ITEM,
                position=as_tuple(position),
                chunk_index=chunk_index,
                handle=handle,
                tags={'item': 'battery'},
            ))
            spawned += 1
        return spawned

    def spawn_player(self, state: GenerationState, result: PassResult) -> bool:
        if state.assets.player is None:
            issue = issue_from_rule(POP_001, asset="Player prefab")
            logger.error(issue.message)
            result.add_error(issue.message)
            return False

        first = state.maze.chunk(0)
        position = first.position + np.array([0.0, state.settings.player_spawn_height, 0.0])
        handle = state.scene.instantiate(state.assets.player, Pose(position))
        state.player_handle = handle
        state.add_marker(Marker(
            name="SpawnPoint",
            marker_type=MarkerType.SPAWN_POINT,
            position=as_tuple(position),
            chunk_index=0,
            handle=handle,
            tags={'is_primary': True},
        ))
        return True
