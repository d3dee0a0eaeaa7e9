"""
Connection points (sockets) and their dead-end caps.

A connection point is a named attachment location on a chunk template.
Templates pre-declare their sockets; every placed chunk instance receives
its own copies via ``ConnectionPoint.instantiate()`` so that per-instance
state (``consumed`` and the marker's ``active`` flag) is never shared.

Offsets are expressed in the chunk's local frame:

- ``position``: where the socket sits relative to the chunk origin
- ``connection_offset``: displacement from the socket to the mating
  location. For a target socket the mating location in world space is
  ``world(position) + rotate(connection_offset)``; a mating socket is
  aligned so that ``origin + rotate(connection_offset)`` lands on it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

import numpy as np

from ..geometry import Pose, vec3


@dataclass
class DeadEndMarker:
    """Visual/physical cap shown while a socket is unconnected.

    ``active`` doubles as the dead-end flag: True means the socket is capped
    (still a dead end), False means a chunk is connected through it.
    """
    name: str
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    size: np.ndarray = field(default_factory=lambda: np.ones(3))
    active: bool = True

    def __post_init__(self):
        self.position = vec3(self.position)
        self.size = vec3(self.size)

    def copy(self) -> 'DeadEndMarker':
        return DeadEndMarker(self.name, self.position.copy(), self.size.copy(), self.active)


@dataclass
class ConnectionPoint:
    """A named attachment socket on a chunk.

    Attributes:
        name: Socket identifier, unique within its template
        position: Local socket position
        connection_offset: Local displacement to the mating location
        dead_end: Optional cap marker
        consumed: True once a link has been made through this socket
    """
    name: str
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    connection_offset: np.ndarray = field(default_factory=lambda: np.zeros(3))
    dead_end: Optional[DeadEndMarker] = None
    consumed: bool = False

    def __post_init__(self):
        self.position = vec3(self.position)
        self.connection_offset = vec3(self.connection_offset)

    @property
    def is_open_dead_end(self) -> bool:
        """True if this socket carries a marker that is still active."""
        return self.dead_end is not None and self.dead_end.active

    def instantiate(self) -> 'ConnectionPoint':
        """Fresh per-instance copy with reset state."""
        marker = self.dead_end.copy() if self.dead_end is not None else None
        if marker is not None:
            marker.active = True
        return replace(
            self,
            position=self.position.copy(),
            connection_offset=self.connection_offset.copy(),
            dead_end=marker,
            consumed=False,
        )

    def world_position(self, pose: Pose) -> np.ndarray:
        return pose.transform_point(self.position)

    def world_connection_offset(self, pose: Pose) -> np.ndarray:
        return pose.transform_direction(self.connection_offset)

    def mating_position(self, pose: Pose) -> np.ndarray:
        """World location where a mating socket of a new chunk must land."""
        return self.world_position(pose) + self.world_connection_offset(pose)
