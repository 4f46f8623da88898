import pytest

from gridwalk.coordinates import Direction, TileCoordinate, tile_to_screen
from gridwalk.errors import MapObjectError
from gridwalk.events import EventListener, ExecutionType, TriggerType
from gridwalk.map_objects import Object, Tile
from gridwalk.maps import MapLoadData
from gridwalk.settings import BASE_OBJECT_Z
from gridwalk.tilemap import Map

from conftest import BOB, FLOOR, FLOWER, WALL, FakeTileSet, default_properties, make_load_data


def test_every_cell_starts_with_its_tile(field_map):
    assert field_map.cols == 5 and field_map.rows == 5
    assert len(field_map.tiles) == 25
    for coordinate, map_objects in field_map.placement.items():
        assert isinstance(map_objects[0], Tile)
        assert map_objects[0].coordinate == coordinate
        assert map_objects[0].image == f"image-{FLOOR}"


def test_top_row_is_highest_y():
    data = make_load_data([
        [WALL, WALL],
        [FLOOR, FLOOR],
    ])
    tile_map = Map(data)
    assert tile_map.tiles[TileCoordinate(1, 2)].tile_id == WALL
    assert tile_map.tiles[TileCoordinate(2, 1)].tile_id == FLOOR


def test_object_blocks_and_spawns_satellites(town_map):
    bob_cell = TileCoordinate(3, 3)
    bob = [o for o in town_map.objects[bob_cell] if o.parent is None][0]
    assert bob.name.startswith("bob_")
    assert not town_map.can_pass(bob_cell)
    assert town_map.tiles[bob_cell].has_collision

    expected = {
        TileCoordinate(3, 4): Direction.DOWN,
        TileCoordinate(3, 2): Direction.UP,
        TileCoordinate(2, 3): Direction.RIGHT,
        TileCoordinate(4, 3): Direction.LEFT,
    }
    for cell, facing in expected.items():
        assert town_map.can_pass(cell)
        events = town_map.get_events_on(cell)
        assert [e.event_id for e in events] == ["talk"]
        assert events[0].placed_direction is facing
        satellite = town_map.objects[cell][0]
        assert satellite.parent == bob.name


def test_satellites_outside_the_map_are_dropped():
    objects = [[0, 0, 0], [0, 0, 0], [BOB, 0, 0]]
    tile_map = Map(make_load_data([[FLOOR] * 3 for _ in range(3)], object_grid=objects))
    satellites = [o for o in tile_map.iter_objects() if o.parent is not None]
    assert sorted(s.coordinate for s in satellites) == [TileCoordinate(1, 2), TileCoordinate(2, 1)]


def test_collision_layer_blocks():
    collision = [[0, 1], [0, 0]]
    tile_map = Map(make_load_data([[FLOOR, FLOOR], [FLOOR, FLOOR]], collision_grid=collision))
    assert not tile_map.can_pass(TileCoordinate(2, 2))
    assert tile_map.can_pass(TileCoordinate(1, 2))


def test_cells_without_tiles_are_passable(field_map):
    assert field_map.can_pass(TileCoordinate(40, 40))
    assert field_map.get_events_on(TileCoordinate(40, 40)) == []
    assert not field_map.contains(TileCoordinate(40, 40))


def test_tile_events_come_from_properties():
    tile_map = Map(make_load_data([[FLOWER, FLOOR]]))
    events = tile_map.get_events_on(TileCoordinate(1, 1))
    assert len(events) == 1
    assert events[0].event_id == "talk"
    assert events[0].placed_direction is None
    assert tile_map.get_events_on(TileCoordinate(2, 1)) == []


def test_find_path_stays_on_the_map(field_map):
    path = field_map.find_path(TileCoordinate(1, 1), TileCoordinate(5, 5))
    assert len(path) == 8
    assert all(field_map.contains(c) for c in path)
    assert field_map.find_path(TileCoordinate(1, 1), TileCoordinate(6, 1)) is None


def test_find_path_avoids_objects(town_map):
    path = town_map.find_path(TileCoordinate(3, 1), TileCoordinate(3, 5))
    assert TileCoordinate(3, 3) not in path
    assert len(path) == 6


# -- strict construction -------------------------------------------------------

def _expect_load_error(data, match):
    with pytest.raises(MapObjectError, match=match):
        Map(data)


def test_missing_tile_property():
    _expect_load_error(make_load_data([[FLOOR, 99]]), "property is not defined")


def test_missing_collision_entry():
    data = make_load_data([[FLOOR, FLOOR]])
    del data.collision_placement[TileCoordinate(2, 1)]
    _expect_load_error(data, "collisionPlacement")


def test_missing_object_entry():
    data = make_load_data([[FLOOR, FLOOR]])
    del data.object_placement[TileCoordinate(1, 1)]
    _expect_load_error(data, "objectPlacement")


def test_missing_tile_set_id():
    properties = default_properties()
    del properties[FLOOR]["tileSetID"]
    _expect_load_error(make_load_data([[FLOOR]], properties=properties), "tileSetID")


def test_unknown_tile_set():
    properties = default_properties()
    properties[FLOOR]["tileSetID"] = "7"
    _expect_load_error(make_load_data([[FLOOR]], properties=properties), "ID = 7")


def test_object_without_tile_set_name():
    properties = default_properties()
    del properties[BOB]["tileSetName"]
    data = make_load_data([[FLOOR]], object_grid=[[BOB]], properties=properties)
    _expect_load_error(data, "tileSetName")


def test_crop_failure():
    data = make_load_data([[FLOOR, WALL]], tile_sets={1: FakeTileSet(broken={WALL})})
    _expect_load_error(data, "crop")


def test_placement_outside_grid():
    data = make_load_data([[FLOOR]])
    data.tile_placement[TileCoordinate(3, 1)] = FLOOR
    _expect_load_error(data, "outside")


@pytest.mark.parametrize("raw", [
    "talk",
    "talk,12,bob,Hi,L",
    "dance,1111",
    "talk,1111,bob,Hi",
])
def test_bad_event_property(raw):
    properties = default_properties()
    properties[BOB]["event"] = raw
    data = make_load_data([[FLOOR] * 3 for _ in range(3)], object_grid=[[0, 0, 0], [0, BOB, 0], [0, 0, 0]],
                          properties=properties)
    _expect_load_error(data, "Error occurred while generating event listener")


def test_bad_tile_event_property():
    properties = default_properties()
    properties[FLOWER]["event"] = "talk,1111,stranger,Hi,L"
    _expect_load_error(make_load_data([[FLOWER]], properties=properties),
                       "Error occurred while generating event listener")


# -- mutation ------------------------------------------------------------------

def test_set_object_and_lookup(field_map):
    hero = Object("hero", tile_to_screen(TileCoordinate(2, 4)))
    field_map.set_object(hero)
    assert field_map.get_object_by_name("hero") is hero
    assert field_map.get_object_coordinate_by_name("hero") == TileCoordinate(2, 4)
    assert field_map.get_map_objects_on(TileCoordinate(2, 4))[-1] is hero
    assert field_map.get_object_by_name("nobody") is None


def test_update_object_placement_moves_between_cells(field_map):
    hero = Object("hero", tile_to_screen(TileCoordinate(1, 1)))
    field_map.set_object(hero)
    hero.position = tile_to_screen(TileCoordinate(2, 1))
    field_map.update_object_placement(hero)

    assert hero not in field_map.objects[TileCoordinate(1, 1)]
    assert hero not in field_map.placement[TileCoordinate(1, 1)]
    assert field_map.objects[TileCoordinate(2, 1)] == [hero]
    assert isinstance(field_map.placement[TileCoordinate(1, 1)][0], Tile)
    assert field_map.get_object_coordinate_by_name("hero") == TileCoordinate(2, 1)


def test_update_object_placement_ignores_unknown_objects(field_map):
    stranger = Object("stranger", tile_to_screen(TileCoordinate(1, 1)))
    field_map.update_object_placement(stranger)
    assert field_map.get_object_by_name("stranger") is None


def test_get_map_objects_on_returns_a_copy(field_map):
    cell = TileCoordinate(1, 1)
    field_map.get_map_objects_on(cell).clear()
    assert len(field_map.placement[cell]) == 1


def test_remove_event(field_map):
    tile = field_map.tiles[TileCoordinate(2, 2)]
    listener = EventListener("mark", TriggerType.TOUCH, ExecutionType.ONCE, invoke=lambda s, a: None)
    tile.events.append(listener)
    assert field_map.remove_event(listener)
    assert tile.events == []
    assert not field_map.remove_event(listener)


def test_z_order_lower_objects_on_top(field_map):
    high = Object("high", tile_to_screen(TileCoordinate(1, 4)))
    low = Object("low", tile_to_screen(TileCoordinate(1, 1)))
    level_a = Object("level_a", tile_to_screen(TileCoordinate(3, 2)))
    level_b = Object("level_b", tile_to_screen(TileCoordinate(2, 2)))
    for obj in (high, low, level_a, level_b):
        field_map.set_object(obj)

    field_map.update_objects_z_position()

    assert high.z_position == BASE_OBJECT_Z
    assert low.z_position > level_a.z_position > high.z_position
    assert low.z_position == BASE_OBJECT_Z + 3
    # equal heights keep the order they are stored in
    first, second = [o for o in field_map.iter_objects() if o in (level_a, level_b)]
    assert first.z_position < second.z_position


def test_load_data_from_grids_skips_empty_tiles():
    data = MapLoadData.from_grids([[0, FLOOR]], tile_properties={}, tile_sets={})
    assert data.tile_placement == {TileCoordinate(2, 1): FLOOR}
    assert data.collision_placement == {TileCoordinate(1, 1): 0, TileCoordinate(2, 1): 0}
