"""
Post-growth selection: exit and enemy sockets.

The exit must be an open dead end (socket whose cap is still active); the
enemy must stand at a socket that is not one. Both searches redraw a random
chunk and a random socket on it until the candidate qualifies or the
attempt bound is hit. Hitting the bound is tolerated: the last candidate is
used and a warning is recorded.
"""

import logging
from typing import Callable

from ...chunks.connection_point import ConnectionPoint
from ...geometry import FORWARD, Pose, as_tuple
from ...growth.maze import PointRef
from ...validation.maze_checks import issue_from_rule
from ...validation.rules import POP_001, SEL_001, SEL_002
from ...world.scene import Prefab
from ..generation_state import (
    GenerationState,
    Marker,
    MarkerType,
    SelectionOutcome,
    SelectionResult,
)
from .base import MazePass, PassConfig, PassResult

logger = logging.getLogger(__name__)

EXIT_LIGHT = Prefab("ExitLight")
EXIT_TRIGGER = "ExitTrigger"


def is_exit_candidate(point: ConnectionPoint) -> bool:
    return point.is_open_dead_end


def is_enemy_candidate(point: ConnectionPoint) -> bool:
    return not point.is_open_dead_end


class PostProcessSelector(MazePass):
    """
    Select the exit and enemy sockets, spawn the enemy and mark the exit.

    Options:
        max_attempts: Override for settings.selection_max_attempts
    """

    @property
    def name(self) -> str:
        return "PostProcessSelector"

    @property
    def description(self) -> str:
        return "Pick exit/enemy sockets, spawn the enemy and decorate the exit"

    def random_socket(self, state: GenerationState) -> PointRef:
        """Uniform random chunk, then a uniform random socket on it."""
        maze = state.maze
        chunk_index = state.rng.index(maze.chunks)
        chunk = maze.chunk(chunk_index)
        return PointRef(chunk_index, state.rng.index(chunk.connection_points))

    def find_socket(self, state: GenerationState,
                    eligible: Callable[[ConnectionPoint], bool],
                    max_attempts: int) -> SelectionOutcome:
        """Bounded search for a socket satisfying ``eligible``.

        Eligibility is evaluated at the time of each draw.
        """
        maze = state.maze
        ref = self.random_socket(state)
        attempts = 0
        while not eligible(maze.point(ref)) and attempts < max_attempts:
            ref = self.random_socket(state)
            attempts += 1
        return SelectionOutcome(point=ref, attempts=attempts,
                                exhausted=not eligible(maze.point(ref)))

    def execute(self, state: GenerationState, config: PassConfig) -> PassResult:
        result = PassResult(success=True, state=state)
        max_attempts = config.options.get('max_attempts', state.settings.selection_max_attempts)

        exit_outcome = self.find_socket(state, is_exit_candidate, max_attempts)
        enemy_outcome = self.find_socket(state, is_enemy_candidate, max_attempts)
        state.selection = SelectionResult(exit=exit_outcome, enemy=enemy_outcome)

        for role, outcome in (("Exit", exit_outcome), ("Enemy", enemy_outcome)):
            result.metrics[f'{role.lower()}_attempts'] = outcome.attempts
            if outcome.exhausted:
                issue = issue_from_rule(SEL_001, chunk=outcome.point.chunk, role=role,
                                        attempts=max_attempts, ref=tuple(outcome.point))
                logger.warning(issue.format())
                result.add_warning(issue.message)

        self.spawn_enemy(state, enemy_outcome.point, result)
        self.decorate_exit(state, exit_outcome, result)
        return result

    def spawn_enemy(self, state: GenerationState, ref: PointRef, result: PassResult) -> None:
        if state.assets.enemy is None:
            issue = issue_from_rule(POP_001, asset="Enemy prefab")
            logger.error(issue.message)
            result.add_error(issue.message)
            return

        position = state.maze.world_position(ref)
        handle = state.scene.instantiate(state.assets.enemy, Pose(position), state.root)
        state.actor_handles.append(handle)
        state.add_marker(Marker(
            name="EnemySpawn",
            marker_type=MarkerType.ENEMY,
            position=as_tuple(position),
            chunk_index=ref.chunk,
            handle=handle,
            tags={'socket': tuple(ref)},
        ))

    def decorate_exit(self, state: GenerationState, outcome: SelectionOutcome,
                      result: PassResult) -> None:
        """Swap the exit cap's material, light it, and make it a trigger."""
        ref = outcome.point
        chunk = state.maze.chunk(ref.chunk)
        point = chunk.connection_points[ref.point]
        marker_handle = chunk.marker_handles.get(ref.point)

        if point.dead_end is None or marker_handle is None:
            issue = issue_from_rule(SEL_002, chunk=ref.chunk, ref=tuple(ref))
            logger.warning(issue.message)
            result.add_warning(issue.message)
            return

        material = state.assets.exit_material
        if material is None:
            issue = issue_from_rule(POP_001, asset="Exit material")
            logger.error(issue.message)
            result.add_error(issue.message)
            return

        settings = state.settings
        scene = state.scene
        marker_pose = Pose(chunk.pose.transform_point(point.dead_end.position), chunk.pose.yaw)

        scene.set_material(marker_handle, material)
        light_position = marker_pose.transform_point(FORWARD * settings.exit_light_offset)
        light = scene.instantiate(EXIT_LIGHT, Pose(light_position, marker_pose.yaw), marker_handle)
        scene.add_component(
            light, "Light",
            light_type="point",
            range=settings.exit_light_range,
            intensity=settings.exit_light_intensity,
            color=material.emission_color,
        )
        scene.add_component(marker_handle, "BoxCollider",
                            size=as_tuple(point.dead_end.size), is_trigger=True)
        scene.add_component(marker_handle, EXIT_TRIGGER)

        state.add_marker(Marker(
            name="Exit",
            marker_type=MarkerType.LEVEL_GOAL,
            position=as_tuple(marker_pose.position),
            chunk_index=ref.chunk,
            handle=marker_handle,
            tags={'socket': tuple(ref), 'degraded': outcome.exhausted},
        ))
