import json

import numpy as np
import pytest

from chunkmaze.chunks import (
    ChunkLibrary,
    ChunkTemplate,
    CollisionVolume,
    ConnectionPoint,
    DeadEndMarker,
    library_from_dict,
    load_library,
    save_library,
    template_from_dict,
    template_to_dict,
)
from chunkmaze.chunks.builtin import CHUNK_SIZE, crossroads, default_library, shrine
from chunkmaze.errors import MazeConfigError, TemplateError
from chunkmaze.geometry import Pose


def hall(name="Hall", points=None):
    if points is None:
        points = [ConnectionPoint("north", connection_offset=(0, 0, 5))]
    return ChunkTemplate(name, CollisionVolume.from_size((10, 4, 10)), points)


class TestConnectionPoint:
    """Socket state and world placement."""

    def test_instantiate_copies_state(self):
        """Instances never share marker or consumed state with the template"""
        template_point = ConnectionPoint("north", connection_offset=(0, 0, 5),
                                         dead_end=DeadEndMarker("DeadEnd_North"))
        instance = template_point.instantiate()
        instance.consumed = True
        instance.dead_end.active = False
        instance.connection_offset[2] = 99

        assert template_point.consumed is False
        assert template_point.dead_end.active is True
        assert template_point.connection_offset[2] == 5

    def test_instantiate_resets_marker(self):
        point = ConnectionPoint("a", dead_end=DeadEndMarker("Cap", active=False))
        assert point.instantiate().dead_end.active is True

    def test_open_dead_end(self):
        assert not ConnectionPoint("a").is_open_dead_end
        point = ConnectionPoint("a", dead_end=DeadEndMarker("Cap"))
        assert point.is_open_dead_end
        point.dead_end.active = False
        assert not point.is_open_dead_end

    def test_mating_position_follows_pose(self):
        point = ConnectionPoint("north", connection_offset=(0, 0, 5))
        assert np.allclose(point.mating_position(Pose((0, 0, 10), 0)), (0, 0, 15))
        assert np.allclose(point.mating_position(Pose((0, 0, 10), 90)), (5, 0, 10))


class TestChunkTemplate:
    """Template construction rules."""

    def test_requires_connection_points(self):
        with pytest.raises(TemplateError):
            hall(points=[])

    def test_rejects_duplicate_socket_names(self):
        with pytest.raises(TemplateError, match="duplicate"):
            hall(points=[ConnectionPoint("a"), ConnectionPoint("a")])

    def test_rejects_degenerate_collision(self):
        with pytest.raises(TemplateError):
            CollisionVolume(half_extents=(5, 0, 5))

    def test_instantiate_points_are_fresh(self):
        template = crossroads()
        first = template.instantiate_points()
        second = template.instantiate_points()
        assert len(first) == template.point_count == 4
        assert all(a is not b for a, b in zip(first, second))


class TestChunkLibrary:
    """Reusable and single-use registration."""

    def test_partitions_templates(self):
        library = default_library()
        assert [t.name for t in library.reusable] == ['StraightHall', 'Corner', 'TJunction', 'Crossroads']
        assert [t.name for t in library.single_use] == ['Shrine']
        assert library.is_single_use(library.get('Shrine'))
        assert 'Crossroads' in library
        assert len(library) == 5

    def test_duplicate_registration(self):
        library = ChunkLibrary(reusable=[crossroads()])
        with pytest.raises(TemplateError):
            library.register(crossroads(), single_use=True)

    def test_empty_reusable_set_is_invalid(self):
        library = ChunkLibrary(single_use=[shrine()])
        assert library.validate() == ["Chunk library has no reusable templates to seed the maze"]

    def test_template_error_is_config_error(self):
        assert issubclass(TemplateError, MazeConfigError)


class TestChunkIO:
    """JSON template catalogues."""

    def test_save_and_load(self, tmp_path):
        path = save_library(default_library(), tmp_path / "catalogue" / "chunks.json")
        loaded = load_library(path)

        assert loaded.list_templates() == default_library().list_templates()
        assert [t.name for t in loaded.single_use] == ['Shrine']
        north = loaded.get('Crossroads').connection_points[0]
        assert north.name == 'north'
        assert np.allclose(north.connection_offset, (0, 0, CHUNK_SIZE / 2))
        assert north.dead_end.name == 'DeadEnd_North'

    def test_template_dict_shape(self):
        data = template_to_dict(shrine())
        assert data['name'] == 'Shrine'
        assert data['collision']['half_extents'] == [5.0, 2.0, 5.0]
        assert data['connection_points'][0]['dead_end']['name'] == 'DeadEnd_South'
        json.dumps(data)

    def test_socket_without_marker(self):
        template = template_from_dict({
            "name": "Open",
            "collision": {"half_extents": [1, 1, 1]},
            "connection_points": [{"name": "a", "connection_offset": [0, 0, 1]}],
        })
        assert template.connection_points[0].dead_end is None
        assert np.allclose(template.collision.center, (0, 0, 0))

    def test_missing_collision(self):
        with pytest.raises(TemplateError, match="Malformed template 'X'"):
            template_from_dict({"name": "X", "connection_points": [{"name": "a"}]})

    def test_bad_vector(self):
        with pytest.raises(TemplateError):
            template_from_dict({
                "name": "X",
                "collision": {"half_extents": [1, 1]},
                "connection_points": [{"name": "a"}],
            })

    def test_catalogue_must_be_object(self):
        with pytest.raises(TemplateError):
            library_from_dict([])

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(TemplateError, match="Invalid JSON"):
            load_library(path)
