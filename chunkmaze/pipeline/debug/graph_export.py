"""
Graph export utilities for maze debugging.

Provides export functions to inspect generated mazes in:
- DOT format (Graphviz) for visual graph inspection
- JSON format for programmatic analysis and reproducibility tracking
"""

from typing import Any, Dict, Optional
import json

from ...geometry import as_tuple
from ...growth.maze import Maze
from ..generation_state import SelectionResult


def export_maze_dot(maze: Maze, selection: Optional[SelectionResult] = None) -> str:
    """Export a maze's chunk graph as Graphviz DOT format.

    Nodes are chunks, edges are committed links labelled with the socket
    names on either side.

    Args:
        maze: Grown maze
        selection: Optional exit/enemy selection to highlight

    Returns:
        DOT format string
    """
    exit_chunk = selection.exit_point.chunk if selection else None
    enemy_chunk = selection.enemy_point.chunk if selection else None

    lines = ['digraph ChunkMaze {']
    lines.append('  rankdir=LR;')
    lines.append('  node [shape=box, style=filled];')
    lines.append('')

    for index, chunk in enumerate(maze.chunks):
        x, y, z = as_tuple(chunk.position)
        label_lines = [
            chunk.name,
            f"id: {index}",
            f"pos: ({x:.1f}, {z:.1f})",
            f"yaw: {chunk.pose.yaw:.0f}",
        ]
        label = '\\n'.join(label_lines)

        if index == 0:
            color = '#90EE90'   # Seed: light green
        elif index == exit_chunk:
            color = '#FFB6C1'   # Exit: light pink
        elif index == enemy_chunk:
            color = '#FFD700'   # Enemy: gold
        else:
            color = '#D3D3D3'
        lines.append(f'  chunk_{index} [label="{label}" fillcolor="{color}"];')

    lines.append('')

    for link in maze.links:
        parent_name = maze.point(link.parent).name
        child_name = maze.point(link.child).name
        lines.append(
            f'  chunk_{link.parent.chunk} -> chunk_{link.child.chunk} '
            f'[label="{parent_name}:{child_name}"];'
        )

    lines.append('}')
    return '\n'.join(lines)


def maze_to_dict(maze: Maze) -> Dict[str, Any]:
    chunks = []
    for index, chunk in enumerate(maze.chunks):
        chunks.append({
            'id': index,
            'template': chunk.name,
            'position': list(as_tuple(chunk.position)),
            'yaw': chunk.pose.yaw,
            'sockets': [
                {
                    'name': point.name,
                    'position': list(as_tuple(point.world_position(chunk.pose))),
                    'consumed': point.consumed,
                    'dead_end_active': point.is_open_dead_end,
                }
                for point in chunk.connection_points
            ],
        })
    return {
        'chunks': chunks,
        'links': [
            {'parent': list(link.parent), 'child': list(link.child)}
            for link in maze.links
        ],
        'frontier': [list(ref) for ref in maze.frontier],
        'dead_ends': [list(ref) for ref in maze.dead_ends],
    }


def export_maze_json(maze: Maze, seed: int) -> str:
    """Export a maze as JSON with metadata.

    Args:
        maze: Grown maze
        seed: The seed used for generation

    Returns:
        JSON string with layout and debug metadata
    """
    template_counts: Dict[str, int] = {}
    for chunk in maze.chunks:
        template_counts[chunk.name] = template_counts.get(chunk.name, 0) + 1

    output = {
        'metadata': {
            'seed': seed,
            'version': '1.0',
            'generator': 'chunkmaze',
        },
        'statistics': {
            'chunk_count': len(maze.chunks),
            'link_count': len(maze.links),
            'depth': maze.depth,
            'depth_budget': maze.depth_budget,
            'open_sockets': len(maze.frontier),
            'dead_end_count': len(maze.dead_ends),
            'templates': template_counts,
        },
        'layout': maze_to_dict(maze),
    }
    return json.dumps(output, indent=2)
