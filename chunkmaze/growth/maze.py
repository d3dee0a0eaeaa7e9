"""
Maze state: an arena of placed chunk instances plus the open frontier.

Chunks are referenced by their stable index in ``Maze.chunks``; sockets by
``PointRef(chunk, point)``. Nothing outside the maze holds a direct
reference to a ConnectionPoint, so tearing a maze down never leaves
dangling references behind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional

import numpy as np

from ..chunks.connection_point import ConnectionPoint
from ..chunks.templates import ChunkTemplate
from ..geometry import Pose
from ..world.rng import RandomSource


class PointRef(NamedTuple):
    """Stable reference to a socket: (chunk index, point index)."""
    chunk: int
    point: int


class Link(NamedTuple):
    """A committed connection: ``parent`` socket was extended by ``child``."""
    parent: PointRef
    child: PointRef


@dataclass
class ChunkInstance:
    """A placed (or candidate) copy of a template.

    Attributes:
        template: Source template
        pose: World pose
        connection_points: Per-instance socket copies, in template order
        handle: Scene handle once materialised
        marker_handles: Scene handles of dead-end markers by point index
    """
    template: ChunkTemplate
    pose: Pose
    connection_points: List[ConnectionPoint]
    handle: Optional[int] = None
    marker_handles: Dict[int, int] = field(default_factory=dict)

    @classmethod
    def from_template(cls, template: ChunkTemplate, pose: Pose) -> 'ChunkInstance':
        return cls(template=template, pose=pose, connection_points=template.instantiate_points())

    @property
    def name(self) -> str:
        return self.template.name

    @property
    def position(self) -> np.ndarray:
        return self.pose.position

    def point_world_position(self, point_index: int) -> np.ndarray:
        return self.connection_points[point_index].world_position(self.pose)


class Frontier:
    """Multiset of open sockets awaiting extension."""

    def __init__(self, refs: Iterable[PointRef] = ()):
        self._refs: List[PointRef] = list(refs)

    def add(self, ref: PointRef) -> None:
        self._refs.append(ref)

    def extend(self, refs: Iterable[PointRef]) -> None:
        self._refs.extend(refs)

    def pop_random(self, rng: RandomSource) -> PointRef:
        """Remove and return a uniformly chosen socket."""
        return self._refs.pop(rng.index(self._refs))

    def clear(self) -> None:
        self._refs.clear()

    def __len__(self) -> int:
        return len(self._refs)

    def __bool__(self) -> bool:
        return bool(self._refs)

    def __iter__(self) -> Iterator[PointRef]:
        return iter(list(self._refs))

    def __contains__(self, ref: PointRef) -> bool:
        return ref in self._refs


@dataclass
class Maze:
    """Layout produced by one growth pass.

    Invariants: ``depth == len(links) == len(chunks) - 1`` once seeded,
    ``depth <= depth_budget``, and the frontier only references unconsumed
    sockets of chunks in ``chunks``.
    """
    depth_budget: int
    chunks: List[ChunkInstance] = field(default_factory=list)
    frontier: Frontier = field(default_factory=Frontier)
    links: List[Link] = field(default_factory=list)
    dead_ends: List[PointRef] = field(default_factory=list)
    depth: int = 0

    def add_chunk(self, instance: ChunkInstance) -> int:
        self.chunks.append(instance)
        return len(self.chunks) - 1

    def chunk(self, index: int) -> ChunkInstance:
        return self.chunks[index]

    def point(self, ref: PointRef) -> ConnectionPoint:
        return self.chunks[ref.chunk].connection_points[ref.point]

    def point_refs(self) -> Iterator[PointRef]:
        for ci, chunk in enumerate(self.chunks):
            for pi in range(len(chunk.connection_points)):
                yield PointRef(ci, pi)

    def world_position(self, ref: PointRef) -> np.ndarray:
        return self.chunks[ref.chunk].point_world_position(ref.point)

    @property
    def budget_exhausted(self) -> bool:
        return self.depth >= self.depth_budget

    def clear(self) -> None:
        self.chunks.clear()
        self.frontier.clear()
        self.links.clear()
        self.dead_ends.clear()
        self.depth = 0

    def __len__(self) -> int:
        return len(self.chunks)
