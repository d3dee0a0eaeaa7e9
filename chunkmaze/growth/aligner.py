"""
Placement alignment and collision search for a single frontier socket.

``PlacementAligner.try_connect`` draws a template, picks one of its sockets
as the mating socket, and tries the four quarter-turn yaws in shuffled
order. Each candidate pose keeps the mating socket pinned on the target
location; the first pose the oracle does not reject is committed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..chunks.templates import ChunkLibrary, ChunkTemplate
from ..geometry import Pose, as_tuple
from ..spatial.oracle import SpatialOracle
from ..world.rng import RandomSource
from ..world.scene import SceneMutator
from .maze import ChunkInstance, Link, Maze, PointRef

logger = logging.getLogger(__name__)

# Quarter turns about the vertical axis, in degrees
ROTATIONS = (0, 90, 180, 270)

DEFAULT_OVERLAP_MARGIN = 1.0


class MarkerMatching(Enum):
    """How the mating socket's dead-end cap is found when a link is made.

    IDENTITY caps exactly the mating socket. NAME caps the first socket on
    the new chunk whose marker shares the mating socket's marker name, which
    misfires when two sockets reuse a marker name.
    """
    IDENTITY = "identity"
    NAME = "name"


# ------------------------------------------------------------------
# Drawable template pool
# ------------------------------------------------------------------

@dataclass
class PoolEntry:
    template: ChunkTemplate
    single_use: bool = False


@dataclass
class TemplatePool:
    """Templates drawable during one growth pass.

    Reusable entries stay for the whole pass; a single-use entry is removed
    after its first successful placement.
    """
    entries: List[PoolEntry] = field(default_factory=list)
    draws: List[str] = field(default_factory=list)

    @classmethod
    def for_library(cls, library: ChunkLibrary) -> 'TemplatePool':
        entries = [PoolEntry(t) for t in library.reusable]
        entries.extend(PoolEntry(t, single_use=True) for t in library.single_use)
        return cls(entries=entries)

    def draw(self, rng: RandomSource) -> PoolEntry:
        entry = rng.choice(self.entries)
        self.draws.append(entry.template.name)
        return entry

    def consume(self, entry: PoolEntry) -> None:
        if entry.single_use:
            self.entries = [e for e in self.entries if e is not entry]

    def __contains__(self, template: ChunkTemplate) -> bool:
        return any(e.template is template for e in self.entries)

    def __len__(self) -> int:
        return len(self.entries)


# ------------------------------------------------------------------
# Aligner
# ------------------------------------------------------------------

class PlacementAligner:
    """Mates new chunks onto frontier sockets of a maze.

    Args:
        maze: Maze being grown; mutated on successful placement
        pool: Drawable templates for this pass
        oracle: Overlap oracle
        rng: Shared random source
        margin: Minimum penetration that rejects a candidate
        marker_matching: Strategy for capping the mating socket's marker
        scene: Optional scene to materialise committed chunks into
        parent: Scene handle committed chunks are parented to
    """

    def __init__(self, maze: Maze, pool: TemplatePool, oracle: SpatialOracle,
                 rng: RandomSource, margin: float = DEFAULT_OVERLAP_MARGIN,
                 marker_matching: MarkerMatching = MarkerMatching.IDENTITY,
                 scene: Optional[SceneMutator] = None, parent: Optional[int] = None):
        self.maze = maze
        self.pool = pool
        self.oracle = oracle
        self.rng = rng
        self.margin = margin
        self.marker_matching = marker_matching
        self.scene = scene
        self.parent = parent

    def try_connect(self, target: PointRef) -> bool:
        """Attempt to extend the maze through ``target``.

        Returns:
            True if a chunk was committed, False if every rotation was rejected
        """
        if not self.pool.entries:
            return False
        entry = self.pool.draw(self.rng)
        template = entry.template

        target_chunk = self.maze.chunk(target.chunk)
        target_point = self.maze.point(target)
        target_position = target_point.mating_position(target_chunk.pose)

        mate_index = self.rng.range(0, template.point_count)
        mate = template.connection_points[mate_index]
        alignment = target_position - mate.connection_offset

        for rotation in self.rng.shuffled(ROTATIONS):
            pose = Pose(alignment).rotated_about(target_position, rotation)
            candidate = ChunkInstance.from_template(template, pose)
            blocker = self._find_blocker(candidate)
            if blocker is not None:
                logger.debug("Rejected %s at yaw %d: overlaps chunk %d",
                             template.name, rotation, blocker)
                continue
            self._commit(target, candidate, mate_index, entry)
            return True
        return False

    def _find_blocker(self, candidate: ChunkInstance) -> Optional[int]:
        """Index of the first placed chunk the candidate overlaps too deeply."""
        for index, placed in enumerate(self.maze.chunks):
            report = self.oracle.overlap(
                candidate.template.collision, candidate.pose,
                placed.template.collision, placed.pose,
            )
            if report.blocks(self.margin):
                return index
        return None

    def _commit(self, target: PointRef, candidate: ChunkInstance,
                mate_index: int, entry: PoolEntry) -> None:
        index = self.maze.add_chunk(candidate)
        self.materialize(candidate)

        self.maze.frontier.extend(
            PointRef(index, i) for i in range(len(candidate.connection_points)) if i != mate_index
        )
        target_point = self.maze.point(target)
        target_point.consumed = True
        candidate.connection_points[mate_index].consumed = True
        self.maze.links.append(Link(target, PointRef(index, mate_index)))

        if target_point.dead_end is not None:
            self._cap(target)
            matching = self.matching_socket(candidate, mate_index)
            if matching is not None:
                self._cap(PointRef(index, matching))

        if entry.single_use:
            self.pool.consume(entry)
            logger.info("Removing single-use template '%s' (%d drawable left)",
                        candidate.name, len(self.pool))

    def matching_socket(self, candidate: ChunkInstance, mate_index: int) -> Optional[int]:
        mate = candidate.connection_points[mate_index]
        if mate.dead_end is None:
            return None
        if self.marker_matching is MarkerMatching.IDENTITY:
            return mate_index
        for i, point in enumerate(candidate.connection_points):
            if point.dead_end is not None and point.dead_end.name == mate.dead_end.name:
                return i
        return None

    def _cap(self, ref: PointRef) -> None:
        """Deactivate a socket's dead-end marker; the socket is connected through."""
        chunk = self.maze.chunk(ref.chunk)
        point = chunk.connection_points[ref.point]
        point.dead_end.active = False
        handle = chunk.marker_handles.get(ref.point)
        if self.scene is not None and handle is not None:
            self.scene.set_active(handle, False)

    def materialize(self, instance: ChunkInstance) -> None:
        """Create scene nodes for a committed chunk and its dead-end markers."""
        if self.scene is None:
            return
        instance.handle = self.scene.instantiate(instance.template, instance.pose, self.parent)
        for i, point in enumerate(instance.connection_points):
            if point.dead_end is None:
                continue
            marker_pose = Pose(instance.pose.transform_point(point.dead_end.position), instance.pose.yaw)
            instance.marker_handles[i] = self.scene.instantiate(point.dead_end, marker_pose, instance.handle)
        logger.debug("Materialised %s at %s", instance.name, as_tuple(instance.position))
