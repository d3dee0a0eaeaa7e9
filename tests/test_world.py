import pytest

from chunkmaze.geometry import Pose
from chunkmaze.world import InMemoryScene, Material, Prefab, RandomSource


class TestRandomSource:
    """Seeded sampling."""

    def test_same_seed_same_draws(self):
        a, b = RandomSource(42), RandomSource(42)
        assert [a.range(0, 10) for _ in range(20)] == [b.range(0, 10) for _ in range(20)]
        assert a.shuffled([0, 1, 2, 3]) == b.shuffled([0, 1, 2, 3])

    def test_range_is_exclusive(self):
        rng = RandomSource(1)
        assert {rng.range(0, 2) for _ in range(200)} == {0, 1}

    def test_empty_range(self):
        with pytest.raises(ValueError):
            RandomSource(1).range(3, 3)

    def test_shuffled_is_a_permutation(self):
        rng = RandomSource(5)
        items = (0, 90, 180, 270)
        assert sorted(rng.shuffled(items)) == list(items)

    def test_uniform_bounds(self):
        rng = RandomSource(9)
        assert all(-4.0 <= rng.uniform(-4.0, 4.0) < 4.0 for _ in range(200))

    def test_random_seed_recorded(self):
        assert isinstance(RandomSource().seed, int)


class TestInMemoryScene:
    """Headless scene graph."""

    def test_destroy_is_recursive(self):
        scene = InMemoryScene()
        root = scene.instantiate(Prefab("Root"), Pose())
        child = scene.instantiate(Prefab("Child"), Pose(), root)
        grandchild = scene.instantiate(Prefab("Grandchild"), Pose(), child)

        scene.destroy(child)

        assert scene.exists(root)
        assert not scene.exists(child)
        assert not scene.exists(grandchild)
        assert scene.get(root).children == []

    def test_components_from_prefab(self):
        scene = InMemoryScene()
        handle = scene.instantiate(Prefab("Player", tag="Player", components=("CharacterController",)), Pose())

        assert scene.find_by_tag("Player") == handle
        assert scene.set_component_enabled(handle, "CharacterController", False)
        assert not scene.set_component_enabled(handle, "Rigidbody", False)
        assert scene.get(handle).components["CharacterController"]["enabled"] is False

    def test_mutations_recorded(self):
        scene = InMemoryScene()
        handle = scene.instantiate(Prefab("Cap"), Pose())
        scene.set_active(handle, False)
        scene.set_material(handle, Material("ExitGlow"))
        scene.set_position(handle, (1, 2, 3))

        assert [op for op, _, _ in scene.history] == [
            'instantiate', 'set_active', 'set_material', 'set_position']
        assert tuple(scene.world_position(handle)) == (1.0, 2.0, 3.0)

    def test_unknown_handle(self):
        with pytest.raises(KeyError):
            InMemoryScene().set_active(99, True)
