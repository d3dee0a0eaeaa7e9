"""
Rigid-transform helpers for chunk placement.

Chunks only ever rotate about the vertical (Y) axis, so a pose is a world
position plus a yaw angle in degrees. Rotation follows the engine
convention: a positive yaw turns +X towards -Z (a 90 degree turn maps
(x, z) to (z, -x)).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Tuple

import numpy as np

Vec3Like = Iterable[float]

EPSILON = 1e-6

UP = np.array([0.0, 1.0, 0.0])
FORWARD = np.array([0.0, 0.0, 1.0])


def vec3(values: Vec3Like = (0.0, 0.0, 0.0)) -> np.ndarray:
    """Coerce a 3-sequence into a float numpy vector."""
    arr = np.asarray(tuple(values), dtype=float)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3-component vector, got shape {arr.shape}")
    return arr


def as_tuple(v: np.ndarray) -> Tuple[float, float, float]:
    return (float(v[0]), float(v[1]), float(v[2]))


def yaw_matrix(degrees: float) -> np.ndarray:
    """3x3 rotation matrix for a yaw of ``degrees`` about +Y."""
    # Quarter turns are snapped so that repeated 90 degree rotations stay exact
    quarter = degrees / 90.0
    if abs(quarter - round(quarter)) < EPSILON:
        c, s = [(1, 0), (0, 1), (-1, 0), (0, -1)][int(round(quarter)) % 4]
    else:
        rad = math.radians(degrees)
        c, s = math.cos(rad), math.sin(rad)
    return np.array([
        [c, 0.0, s],
        [0.0, 1.0, 0.0],
        [-s, 0.0, c],
    ], dtype=float)


def rotate_yaw(v: Vec3Like, degrees: float) -> np.ndarray:
    """Rotate a vector about the vertical axis."""
    return yaw_matrix(degrees) @ vec3(v)


def rotate_about(point: Vec3Like, pivot: Vec3Like, degrees: float) -> np.ndarray:
    """Rotate ``point`` about a vertical axis passing through ``pivot``."""
    p = vec3(pivot)
    return p + rotate_yaw(vec3(point) - p, degrees)


@dataclass
class Pose:
    """World placement of a chunk or actor.

    Attributes:
        position: World position of the local origin
        yaw: Rotation about +Y in degrees
    """
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    yaw: float = 0.0

    def __post_init__(self):
        self.position = vec3(self.position)
        self.yaw = float(self.yaw) % 360.0

    @classmethod
    def identity(cls) -> 'Pose':
        return cls()

    @property
    def rotation(self) -> np.ndarray:
        return yaw_matrix(self.yaw)

    def transform_point(self, local: Vec3Like) -> np.ndarray:
        """Map a point from local space to world space."""
        return self.position + self.rotation @ vec3(local)

    def transform_direction(self, local: Vec3Like) -> np.ndarray:
        """Map a direction from local space to world space (no translation)."""
        return self.rotation @ vec3(local)

    def rotated_about(self, pivot: Vec3Like, degrees: float) -> 'Pose':
        """Return this pose rotated about a vertical axis through ``pivot``."""
        return Pose(rotate_about(self.position, pivot, degrees), self.yaw + degrees)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Pose):
            return NotImplemented
        return (np.allclose(self.position, other.position, atol=EPSILON)
                and abs(((self.yaw - other.yaw) + 180.0) % 360.0 - 180.0) < EPSILON)

    def __repr__(self) -> str:
        x, y, z = as_tuple(self.position)
        return f"Pose(position=({x:.2f}, {y:.2f}, {z:.2f}), yaw={self.yaw:.1f})"
