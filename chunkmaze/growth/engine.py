"""
Frontier-driven growth of a chunk maze.

The engine seeds the maze with one reusable template at the origin, then
repeatedly pulls a random socket off the frontier and tries to extend it.
A socket that cannot be extended is a permanent dead end; it is never put
back. Growth stops when the frontier is empty or the depth budget is spent.
"""

import logging
from typing import Optional

from ..chunks.templates import ChunkLibrary
from ..errors import MazeConfigError
from ..geometry import Pose, as_tuple
from ..spatial.oracle import SpatialOracle
from ..world.rng import RandomSource
from ..world.scene import SceneMutator
from .aligner import DEFAULT_OVERLAP_MARGIN, MarkerMatching, PlacementAligner, TemplatePool
from .maze import ChunkInstance, Maze, PointRef

logger = logging.getLogger(__name__)


class GrowthEngine:
    """Grows a Maze from a ChunkLibrary under a depth budget."""

    def __init__(self, oracle: SpatialOracle, rng: RandomSource,
                 margin: float = DEFAULT_OVERLAP_MARGIN,
                 marker_matching: MarkerMatching = MarkerMatching.IDENTITY,
                 scene: Optional[SceneMutator] = None, parent: Optional[int] = None):
        self.oracle = oracle
        self.rng = rng
        self.margin = margin
        self.marker_matching = marker_matching
        self.scene = scene
        self.parent = parent
        self.last_pool: Optional[TemplatePool] = None

    def grow(self, library: ChunkLibrary, depth_budget: int) -> Maze:
        """Run one growth pass.

        Args:
            library: Template catalogue; must contain a reusable template
            depth_budget: Maximum number of successful placements

        Returns:
            The grown maze

        Raises:
            MazeConfigError: if the library cannot seed a maze
        """
        problems = library.validate()
        if problems:
            raise MazeConfigError("; ".join(problems))
        if depth_budget < 0:
            raise MazeConfigError(f"Depth budget must be >= 0, got {depth_budget}")

        maze = Maze(depth_budget=depth_budget)
        pool = TemplatePool.for_library(library)
        self.last_pool = pool
        aligner = PlacementAligner(
            maze, pool, self.oracle, self.rng,
            margin=self.margin,
            marker_matching=self.marker_matching,
            scene=self.scene,
            parent=self.parent,
        )

        seed_template = self.rng.choice(library.reusable)
        seed = ChunkInstance.from_template(seed_template, Pose.identity())
        seed_index = maze.add_chunk(seed)
        aligner.materialize(seed)
        maze.frontier.extend(PointRef(seed_index, i) for i in range(len(seed.connection_points)))
        logger.debug("Seeded maze with %s (%d open sockets)", seed_template.name, len(maze.frontier))

        while maze.frontier and maze.depth < depth_budget:
            ref = maze.frontier.pop_random(self.rng)
            if aligner.try_connect(ref):
                maze.depth += 1
            else:
                maze.dead_ends.append(ref)
                logger.info("Dead end at %s", as_tuple(maze.world_position(ref)))

        if maze.depth >= depth_budget:
            logger.info("Reached max depth: %d.", depth_budget)

        logger.info("Growth finished: %d chunks, %d dead ends, %d sockets left open",
                    len(maze.chunks), len(maze.dead_ends), len(maze.frontier))
        return maze
