import numpy as np

from chunkmaze.chunks.templates import CollisionVolume
from chunkmaze.geometry import Pose
from chunkmaze.spatial.oracle import BoxOverlapOracle, OverlapReport


def box(size, center=(0.0, 0.0, 0.0)):
    return CollisionVolume.from_size(size, center)


class TestBoxOverlapOracle:
    """Separating-axis penetration queries."""

    def setup_method(self):
        self.oracle = BoxOverlapOracle()
        self.cube = box((10, 4, 10))

    def test_disjoint_boxes(self):
        report = self.oracle.overlap(self.cube, Pose((0, 0, 0)), self.cube, Pose((20, 0, 0)))
        assert report.overlapped is False

    def test_touching_faces_do_not_overlap(self):
        """Chunks sharing a seam report no penetration"""
        report = self.oracle.overlap(self.cube, Pose((0, 0, 0)), self.cube, Pose((10, 0, 0)))
        assert report.overlapped is False
        assert not report.blocks(1.0)

    def test_penetration_depth_and_direction(self):
        report = self.oracle.overlap(self.cube, Pose((7, 0, 0)), self.cube, Pose((0, 0, 0)))
        assert report.overlapped
        assert np.isclose(report.distance, 3.0)
        assert np.allclose(report.direction, (1, 0, 0))

    def test_identical_placement_overlaps_fully(self):
        report = self.oracle.overlap(self.cube, Pose(), self.cube, Pose())
        assert report.overlapped
        assert np.isclose(report.distance, 4.0)  # shallowest axis is the 4-unit height

    def test_rotated_box(self):
        """A yawed box projects its long axis onto world Z"""
        slab = box((10, 4, 2))
        small = box((2, 4, 2))
        report = self.oracle.overlap(slab, Pose((0, 0, 0), 90), small, Pose((1.5, 0, 4)))
        assert report.overlapped
        assert np.isclose(report.distance, 0.5)
        assert np.allclose(report.direction, (-1, 0, 0))

    def test_collision_center_offset_is_posed(self):
        raised = box((10, 4, 10), center=(0, 2, 0))
        report = self.oracle.overlap(raised, Pose((0, 0, 0)), raised, Pose((0, 4, 0)))
        assert report.overlapped is False


class TestOverlapReport:
    """Margin-tolerant rejection."""

    def test_shallow_contact_tolerated(self):
        assert not OverlapReport(True, np.zeros(3), 0.99).blocks(1.0)

    def test_margin_is_inclusive(self):
        assert OverlapReport(True, np.zeros(3), 1.0).blocks(1.0)

    def test_no_overlap_never_blocks(self):
        assert not OverlapReport(False, np.zeros(3), 50.0).blocks(1.0)
