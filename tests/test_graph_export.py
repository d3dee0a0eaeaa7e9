import json

from chunkmaze.growth import GrowthEngine
from chunkmaze.pipeline import MazeGenerator, MazeSettings
from chunkmaze.pipeline.debug import export_maze_dot, export_maze_json, maze_to_dict
from chunkmaze.chunks.builtin import default_library
from chunkmaze.world import RandomSource


class TestGraphExport:
    """DOT and JSON debug output."""

    def test_dot_has_node_per_chunk_and_edge_per_link(self, box_oracle, library):
        maze = GrowthEngine(box_oracle, RandomSource(12)).grow(library, 6)
        dot = export_maze_dot(maze)

        assert dot.startswith("digraph ChunkMaze {")
        assert dot.rstrip().endswith("}")
        assert sum(1 for line in dot.splitlines() if "fillcolor" in line) == len(maze.chunks)
        assert dot.count("->") == len(maze.links)

    def test_dot_highlights_selection(self):
        report = MazeGenerator(default_library(), settings=MazeSettings(seed=9)).generate()
        dot = export_maze_dot(report.maze, report.selection)
        assert '#90EE90' in dot
        if report.selection.exit_point.chunk != 0:
            assert '#FFB6C1' in dot

    def test_json_statistics(self, box_oracle, library):
        maze = GrowthEngine(box_oracle, RandomSource(12)).grow(library, 6)
        data = json.loads(export_maze_json(maze, seed=12))

        assert data['metadata']['seed'] == 12
        stats = data['statistics']
        assert stats['chunk_count'] == len(maze.chunks)
        assert stats['link_count'] == maze.depth
        assert stats['open_sockets'] == len(maze.frontier)
        assert sum(stats['templates'].values()) == len(maze.chunks)

    def test_layout_dict(self, box_oracle, crossroads_library):
        maze = GrowthEngine(box_oracle, RandomSource(12)).grow(crossroads_library, 1)
        layout = maze_to_dict(maze)

        assert layout['chunks'][0]['position'] == [0.0, 0.0, 0.0]
        assert layout['links'] == [{'parent': list(maze.links[0].parent),
                                    'child': list(maze.links[0].child)}]
        assert len(layout['frontier']) == 6
        consumed = [s for c in layout['chunks'] for s in c['sockets'] if s['consumed']]
        assert len(consumed) == 2
        assert not any(s['dead_end_active'] for s in consumed)
