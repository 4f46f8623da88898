import pytest

from gridwalk.controller import GameController
from gridwalk.coordinates import TileCoordinate
from gridwalk.errors import CropError
from gridwalk.maps import MapLoadData
from gridwalk.tilemap import Map

FLOOR = 1
WALL = 2
BOB = 3
FLOWER = 4
SIGN = 5


class FakeTileSet:
    """Hands out a string per tile id; ids in *broken* fail to crop."""

    def __init__(self, broken=()):
        self.broken = set(broken)
        self.cropped = []

    def crop_tile_image(self, tile_id):
        if tile_id in self.broken:
            raise CropError(f"no image for {tile_id}")
        self.cropped.append(tile_id)
        return f"image-{tile_id}"


class ManualAnimator:
    """Animation sink that only finishes when the test says so."""

    def __init__(self):
        self.runs = []

    def run(self, obj, steps, on_complete):
        self.runs.append((obj, steps, on_complete))

    def finish(self):
        obj, steps, on_complete = self.runs.pop(0)
        if steps:
            obj.position = steps[-1].destination
        on_complete()


def default_properties():
    return {
        FLOOR: {"tileSetID": "1", "tileSetName": "ground"},
        WALL: {"tileSetID": "1", "tileSetName": "ground"},
        BOB: {
            "tileSetID": "1",
            "tileSetName": "bob",
            "collision": "1",
            "event": "talk,1111,bob,Hi,L",
        },
        FLOWER: {"tileSetID": "1", "tileSetName": "ground", "event": "talk,0000,player,Nice.,R"},
        SIGN: {
            "tileSetID": "1",
            "tileSetName": "sign",
            "collision": "1",
            "event": "ready_action,0100,sign,Read me,R",
        },
    }


def make_load_data(tile_grid, collision_grid=None, object_grid=None, properties=None, tile_sets=None):
    return MapLoadData.from_grids(
        tile_grid,
        tile_properties=properties if properties is not None else default_properties(),
        tile_sets=tile_sets if tile_sets is not None else {1: FakeTileSet()},
        collision_grid=collision_grid,
        object_grid=object_grid,
        name="test",
    )


def open_field(cols, rows):
    return make_load_data([[FLOOR] * cols for _ in range(rows)])


@pytest.fixture
def field_map():
    """5x5 open floor."""
    return Map(open_field(5, 5))


@pytest.fixture
def town_map():
    """5x5 floor with Bob at (3, 3) talking from all four sides."""
    objects = [[0] * 5 for _ in range(5)]
    objects[2][2] = BOB
    return Map(make_load_data([[FLOOR] * 5 for _ in range(5)], object_grid=objects))


@pytest.fixture
def animator():
    return ManualAnimator()


@pytest.fixture
def controller(town_map, animator):
    ctl = GameController(town_map, animator=animator)
    ctl.spawn_player(TileCoordinate(1, 1))
    return ctl
