import logging

import pytest

from chunkmaze.chunks import ChunkLibrary
from chunkmaze.chunks.builtin import crossroads, default_library, shrine
from chunkmaze.errors import MazeConfigError
from chunkmaze.geometry import Pose, as_tuple
from chunkmaze.growth import GrowthEngine, PointRef
from chunkmaze.validation import validate_maze
from chunkmaze.world import InMemoryScene, Prefab, RandomSource


def layout(maze):
    return [(c.name, as_tuple(c.position), c.pose.yaw) for c in maze.chunks]


class TestGrowthBudget:
    """Depth budget and frontier bookkeeping."""

    def test_single_placement(self, box_oracle, rng, crossroads_library):
        """One placement: the seed keeps three sockets, the new chunk adds three"""
        maze = GrowthEngine(box_oracle, rng).grow(crossroads_library, 1)

        assert len(maze.chunks) == 2
        assert maze.depth == 1
        assert len(maze.links) == 1
        assert len(maze.frontier) == 6
        assert sum(1 for ref in maze.frontier if ref.chunk == 1) == 3
        assert maze.dead_ends == []

    def test_zero_budget_keeps_seed_only(self, box_oracle, rng, crossroads_library):
        maze = GrowthEngine(box_oracle, rng).grow(crossroads_library, 0)

        assert len(maze.chunks) == 1
        assert maze.depth == 0
        assert list(maze.frontier) == [PointRef(0, i) for i in range(4)]

    def test_seed_at_origin(self, box_oracle, rng, library):
        maze = GrowthEngine(box_oracle, rng).grow(library, 3)
        assert as_tuple(maze.chunks[0].position) == (0.0, 0.0, 0.0)
        assert maze.chunks[0].pose.yaw == 0.0
        assert maze.chunks[0].name != 'Shrine'

    def test_frontier_grows_by_two_per_crossroads(self, clear_oracle, rng, crossroads_library):
        maze = GrowthEngine(clear_oracle, rng).grow(crossroads_library, 3)
        assert maze.depth == 3
        assert len(maze.frontier) == 10

    def test_everything_blocked(self, blocking_oracle, rng, crossroads_library, caplog):
        """Every socket becomes a dead end and nothing is placed"""
        caplog.set_level(logging.INFO, logger="chunkmaze")
        maze = GrowthEngine(blocking_oracle, rng).grow(crossroads_library, 10)

        assert maze.depth == 0
        assert len(maze.chunks) == 1
        assert len(maze.frontier) == 0
        assert sorted(maze.dead_ends) == [PointRef(0, i) for i in range(4)]
        assert caplog.text.count("Dead end at") == 4
        assert "Reached max depth" not in caplog.text

    def test_shallow_overlap_is_tolerated(self, shallow_oracle, rng, crossroads_library, caplog):
        caplog.set_level(logging.INFO, logger="chunkmaze")
        maze = GrowthEngine(shallow_oracle, rng).grow(crossroads_library, 4)

        assert maze.depth == 4
        assert len(maze.chunks) == 5
        assert "Reached max depth: 4." in caplog.text

    def test_rejects_unusable_library(self, box_oracle, rng):
        with pytest.raises(MazeConfigError):
            GrowthEngine(box_oracle, rng).grow(ChunkLibrary(single_use=[shrine()]), 5)

    def test_rejects_negative_budget(self, box_oracle, rng, crossroads_library):
        with pytest.raises(MazeConfigError):
            GrowthEngine(box_oracle, rng).grow(crossroads_library, -1)


class TestGrowthInvariants:
    """Layouts that pass the post-hoc checks."""

    @pytest.mark.parametrize("seed", range(8))
    def test_grown_maze_validates(self, box_oracle, seed):
        maze = GrowthEngine(box_oracle, RandomSource(seed)).grow(default_library(), 15)
        result = validate_maze(maze, box_oracle)

        assert result.passed, result.report()
        assert maze.depth <= 15
        assert maze.depth == len(maze.links) == len(maze.chunks) - 1
        for ref in maze.frontier:
            assert not maze.point(ref).consumed

    def test_links_join_consumed_sockets(self, box_oracle, rng, crossroads_library):
        maze = GrowthEngine(box_oracle, rng).grow(crossroads_library, 6)
        children = [link.child.chunk for link in maze.links]

        assert children == list(range(1, len(maze.chunks)))
        for link in maze.links:
            assert maze.point(link.parent).consumed
            assert maze.point(link.child).consumed
            assert not maze.point(link.parent).is_open_dead_end
            assert not maze.point(link.child).is_open_dead_end

    def test_seeded_runs_repeat(self, box_oracle):
        first = GrowthEngine(box_oracle, RandomSource(7)).grow(default_library(), 12)
        second = GrowthEngine(box_oracle, RandomSource(7)).grow(default_library(), 12)

        assert layout(first) == layout(second)
        assert first.links == second.links


class TestSingleUseTemplates:
    """Single-use templates are placed at most once per pass."""

    def test_placed_at_most_once(self, clear_oracle, single_use_library):
        engine = GrowthEngine(clear_oracle, RandomSource(1234))
        maze = engine.grow(single_use_library, 20)

        names = [c.name for c in maze.chunks]
        assert names.count('Shrine') == 1
        assert single_use_library.get('Shrine') not in engine.last_pool
        assert single_use_library.get('Crossroads') in engine.last_pool

    def test_pool_is_rebuilt_each_pass(self, clear_oracle, single_use_library):
        engine = GrowthEngine(clear_oracle, RandomSource(99))
        engine.grow(single_use_library, 20)
        maze = engine.grow(single_use_library, 20)

        assert single_use_library.single_use[0].name == 'Shrine'
        assert [c.name for c in maze.chunks].count('Shrine') == 1

    def test_never_seeds_the_maze(self, box_oracle):
        library = ChunkLibrary(reusable=[crossroads()], single_use=[shrine()])
        for seed in range(5):
            maze = GrowthEngine(box_oracle, RandomSource(seed)).grow(library, 0)
            assert maze.chunks[0].name == 'Crossroads'


class TestMaterialisation:
    """Committed chunks appear in the scene, candidates do not."""

    def test_scene_nodes_for_committed_chunks(self, blocking_oracle, crossroads_library):
        scene = InMemoryScene()
        root = scene.instantiate(Prefab("Maze"), Pose.identity())
        maze = GrowthEngine(blocking_oracle, RandomSource(3), scene=scene, parent=root).grow(
            crossroads_library, 5)

        # seed chunk plus its four caps; rejected candidates leave nothing behind
        assert len(scene.nodes) == 1 + 1 + 4
        seed = maze.chunks[0]
        assert scene.get(seed.handle).parent == root
        assert sorted(seed.marker_handles) == [0, 1, 2, 3]
        assert all(scene.get(h).parent == seed.handle for h in seed.marker_handles.values())

    def test_caps_deactivated_in_scene(self, box_oracle, crossroads_library):
        scene = InMemoryScene()
        maze = GrowthEngine(box_oracle, RandomSource(5), scene=scene).grow(crossroads_library, 1)
        link = maze.links[0]

        parent_cap = maze.chunk(link.parent.chunk).marker_handles[link.parent.point]
        child_cap = maze.chunk(link.child.chunk).marker_handles[link.child.point]
        assert scene.get(parent_cap).active is False
        assert scene.get(child_cap).active is False
        for ref in maze.frontier:
            assert scene.get(maze.chunk(ref.chunk).marker_handles[ref.point]).active is True
