"""
Overlap oracle boundary and a box implementation.

Placement only needs one question answered: do two posed collision volumes
interpenetrate, and by how much. Any exact geometry backend can answer it by
implementing ``SpatialOracle.overlap``. ``BoxOverlapOracle`` is the
reference backend: a separating-axis test for boxes that are only rotated
about the vertical axis.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List

import numpy as np

from ..chunks.templates import CollisionVolume
from ..geometry import EPSILON, UP, Pose


@dataclass
class OverlapReport:
    """Result of an overlap query.

    Attributes:
        overlapped: True if the volumes interpenetrate
        direction: Unit vector along which volume A must move to separate
        distance: Penetration depth along ``direction``
    """
    overlapped: bool
    direction: np.ndarray = field(default_factory=lambda: np.zeros(3))
    distance: float = 0.0

    def blocks(self, margin: float) -> bool:
        """Whether this overlap is deep enough to reject a placement.

        Contacts shallower than ``margin`` are tolerated: coincident chunk
        faces at a seam report near-zero penetration.
        """
        return self.overlapped and self.distance >= margin

    @classmethod
    def clear(cls) -> 'OverlapReport':
        return cls(overlapped=False)


class SpatialOracle(ABC):
    """Side-effect free penetration query between two posed volumes."""

    @abstractmethod
    def overlap(self, volume_a: CollisionVolume, pose_a: Pose,
                volume_b: CollisionVolume, pose_b: Pose) -> OverlapReport:
        pass


class BoxOverlapOracle(SpatialOracle):
    """Separating-axis penetration test for yaw-rotated boxes.

    With rotation restricted to the vertical axis the candidate separating
    axes are the two horizontal axes of each box plus world up; the edge
    cross products reduce to the same set.
    """

    def overlap(self, volume_a: CollisionVolume, pose_a: Pose,
                volume_b: CollisionVolume, pose_b: Pose) -> OverlapReport:
        rot_a = pose_a.rotation
        rot_b = pose_b.rotation
        center_a = pose_a.transform_point(volume_a.center)
        center_b = pose_b.transform_point(volume_b.center)
        delta = center_a - center_b

        axes: List[np.ndarray] = [rot_a[:, 0], rot_a[:, 2], rot_b[:, 0], rot_b[:, 2], UP]

        best_depth = None
        best_axis = None
        for axis in axes:
            radius_a = self._projected_radius(rot_a, volume_a.half_extents, axis)
            radius_b = self._projected_radius(rot_b, volume_b.half_extents, axis)
            separation = float(np.dot(delta, axis))
            depth = radius_a + radius_b - abs(separation)
            if depth <= EPSILON:
                return OverlapReport.clear()
            if best_depth is None or depth < best_depth - EPSILON:
                best_depth = depth
                best_axis = axis if separation >= 0 else -axis

        return OverlapReport(overlapped=True, direction=np.array(best_axis, dtype=float),
                             distance=float(best_depth))

    @staticmethod
    def _projected_radius(rotation: np.ndarray, half_extents: np.ndarray, axis: np.ndarray) -> float:
        return float(np.sum(np.abs(rotation.T @ axis) * half_extents))
