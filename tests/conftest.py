import numpy as np
import pytest

from chunkmaze.chunks.builtin import crossroads, default_library, shrine
from chunkmaze.chunks.templates import ChunkLibrary
from chunkmaze.spatial.oracle import BoxOverlapOracle, OverlapReport, SpatialOracle
from chunkmaze.world.rng import RandomSource
from chunkmaze.world.scene import InMemoryScene, default_assets


class FixedOracle(SpatialOracle):
    """Reports the same overlap for every query and records the poses it saw."""

    def __init__(self, overlapped: bool, distance: float = 0.0):
        self.overlapped = overlapped
        self.distance = distance
        self.queries = []

    def overlap(self, volume_a, pose_a, volume_b, pose_b):
        self.queries.append((pose_a, pose_b))
        if not self.overlapped:
            return OverlapReport.clear()
        return OverlapReport(True, np.array([0.0, 1.0, 0.0]), self.distance)


@pytest.fixture
def blocking_oracle():
    return FixedOracle(overlapped=True, distance=5.0)


@pytest.fixture
def shallow_oracle():
    return FixedOracle(overlapped=True, distance=0.5)


@pytest.fixture
def clear_oracle():
    return FixedOracle(overlapped=False)


@pytest.fixture
def box_oracle():
    return BoxOverlapOracle()


@pytest.fixture
def rng():
    return RandomSource(1234)


@pytest.fixture
def scene():
    return InMemoryScene()


@pytest.fixture
def assets():
    return default_assets()


@pytest.fixture
def crossroads_library():
    return ChunkLibrary(reusable=[crossroads()])


@pytest.fixture
def library():
    return default_library()


@pytest.fixture
def single_use_library():
    return ChunkLibrary(reusable=[crossroads()], single_use=[shrine()])


@pytest.fixture
def make_fixed_oracle():
    """Factory for fresh oracles that reject every placement."""
    return lambda: FixedOracle(overlapped=True, distance=5.0)
