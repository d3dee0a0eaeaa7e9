"""
Built-in chunk set: square hall pieces on a fixed grid.

Every piece occupies a CHUNK_SIZE x CHUNK_HEIGHT x CHUNK_SIZE box centered
on its origin. Sockets sit at the origin and their connection offset points
at the middle of a door face, so two pieces mate face to face.
"""

from typing import Dict, List, Tuple

from .connection_point import ConnectionPoint, DeadEndMarker
from .templates import ChunkLibrary, ChunkTemplate, CollisionVolume

CHUNK_SIZE = 10.0
CHUNK_HEIGHT = 4.0

# Door face offsets by socket name (local frame, +Z is north)
DOOR_OFFSETS: Dict[str, Tuple[float, float, float]] = {
    'north': (0.0, 0.0, CHUNK_SIZE / 2),
    'south': (0.0, 0.0, -CHUNK_SIZE / 2),
    'east': (CHUNK_SIZE / 2, 0.0, 0.0),
    'west': (-CHUNK_SIZE / 2, 0.0, 0.0),
}

# Cap sized to close a door face
DEAD_END_SIZE = (4.0, CHUNK_HEIGHT, 0.5)


def _socket(direction: str) -> ConnectionPoint:
    offset = DOOR_OFFSETS[direction]
    size = DEAD_END_SIZE if direction in ('north', 'south') else DEAD_END_SIZE[::-1]
    marker = DeadEndMarker(
        name=f"DeadEnd_{direction.capitalize()}",
        position=(offset[0], CHUNK_HEIGHT / 2, offset[2]),
        size=size,
    )
    return ConnectionPoint(name=direction, connection_offset=offset, dead_end=marker)


def _piece(name: str, directions: List[str], **metadata) -> ChunkTemplate:
    return ChunkTemplate(
        name=name,
        collision=CollisionVolume.from_size(
            (CHUNK_SIZE, CHUNK_HEIGHT, CHUNK_SIZE),
            center=(0.0, CHUNK_HEIGHT / 2, 0.0),
        ),
        connection_points=[_socket(d) for d in directions],
        metadata=dict(metadata),
    )


def straight_hall() -> ChunkTemplate:
    return _piece('StraightHall', ['north', 'south'], category='hall')


def corner() -> ChunkTemplate:
    return _piece('Corner', ['north', 'east'], category='hall')


def t_junction() -> ChunkTemplate:
    return _piece('TJunction', ['north', 'east', 'west'], category='hall')


def crossroads() -> ChunkTemplate:
    return _piece('Crossroads', ['north', 'south', 'east', 'west'], category='hall')


def shrine() -> ChunkTemplate:
    """Single-socket room, registered as single-use in the default library."""
    return _piece('Shrine', ['south'], category='room')


def default_library() -> ChunkLibrary:
    """Library with the four hall pieces reusable and the shrine single-use."""
    return ChunkLibrary(
        reusable=[straight_hall(), corner(), t_junction(), crossroads()],
        single_use=[shrine()],
    )
