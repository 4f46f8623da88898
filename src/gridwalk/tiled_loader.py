"""Loader for Tiled (.tmx) map files using pytmx.

A map needs three tile layers, matched by name without regard to case:

* ``tile``: the ground; every non-empty cell becomes a Tile.
* ``collision``: any non-empty cell blocks passage.
* ``object``: non-empty cells place an Object of that tile.

Tile ids handed to the engine are the gids written in the file. pytmx
renumbers gids while loading, so the loader maps them back. Tile properties
are handed over as strings; ``tileSetID`` and ``tileSetName`` default to the
tile set's first gid and name.
"""

from __future__ import annotations

import logging
import os

import pytmx

from gridwalk.coordinates import TileCoordinate
from gridwalk.errors import CropError, MapLoadError
from gridwalk.maps import MapLoadData, TileID, TileProperty

logger = logging.getLogger(__name__)

TILE_LAYER = "tile"
COLLISION_LAYER = "collision"
OBJECT_LAYER = "object"

# Keys pytmx adds to tile properties that are not map-author data
_PYTMX_KEYS = frozenset({"id", "width", "height", "frames", "colliders", "source", "trans"})


class TiledTileSet:
    """Tile set backed by the images pytmx loaded for a map."""

    def __init__(self, tmx_data: pytmx.TiledMap, firstgid: int, name: str, loaded_gids: dict[int, int]):
        self.tmx_data = tmx_data
        self.firstgid = firstgid
        self.name = name
        # file gid -> gid pytmx stores the image under
        self.loaded_gids = loaded_gids

    def crop_tile_image(self, tile_id: TileID):
        loaded_gid = self.loaded_gids.get(tile_id)
        if loaded_gid is None:
            raise CropError(f"{self.name}: gid {tile_id} is not used by the map")
        try:
            image = self.tmx_data.get_tile_image_by_gid(loaded_gid)
        except (TypeError, ValueError, IndexError) as exc:
            raise CropError(f"{self.name}: no image for gid {tile_id}") from exc
        if image is None:
            raise CropError(f"{self.name}: no image for gid {tile_id}")
        return image


def _stringify(value) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def _find_layer(tmx_data, name: str):
    for layer in tmx_data.layers:
        if not hasattr(layer, "data"):
            continue
        if layer.name.lower().strip() == name:
            return layer
    raise MapLoadError(f"Tile layer {name!r} not found in {tmx_data.filename}")


def load_map_data(path: str, image_loader=None) -> MapLoadData:
    """Read *path* into load tables.

    *image_loader* is passed to pytmx; ``pytmx.util_pygame.pygame_image_loader``
    gives pygame surfaces (needs a display). The default keeps pytmx's
    placeholder images, which is enough for everything but drawing.
    """
    if image_loader is None:
        tmx_data = pytmx.TiledMap(path)
    else:
        tmx_data = pytmx.TiledMap(path, image_loader=image_loader)
    return map_data_from_tmx(tmx_data, name=os.path.splitext(os.path.basename(path))[0])


def map_data_from_tmx(tmx_data, name: str = "") -> MapLoadData:
    cols, rows = tmx_data.width, tmx_data.height

    tile_layer = _find_layer(tmx_data, TILE_LAYER)
    collision_layer = _find_layer(tmx_data, COLLISION_LAYER)
    object_layer = _find_layer(tmx_data, OBJECT_LAYER)

    def coordinate(x, y):
        # TMX rows run top-down; the engine counts y from the bottom.
        return TileCoordinate(x + 1, rows - y)

    # file gid -> first loaded gid seen for it (flipped variants share the file gid)
    loaded_gids: dict[int, int] = {}

    def file_gid(gid):
        if not gid:
            return 0
        tiled_gid = tmx_data.tiledgidmap.get(gid, gid)
        loaded_gids.setdefault(tiled_gid, gid)
        return tiled_gid

    tile_placement: dict[TileCoordinate, int] = {}
    collision_placement: dict[TileCoordinate, int] = {}
    object_placement: dict[TileCoordinate, int] = {}

    for x, y, gid in tile_layer:
        if gid:
            tile_placement[coordinate(x, y)] = file_gid(gid)
    for x, y, gid in collision_layer:
        collision_placement[coordinate(x, y)] = 1 if gid else 0
    for x, y, gid in object_layer:
        object_placement[coordinate(x, y)] = file_gid(gid)

    tile_sets: dict[int, TiledTileSet] = {}
    tile_properties: dict[TileID, TileProperty] = {}
    for tiled_gid, gid in sorted(loaded_gids.items()):
        try:
            tileset = tmx_data.get_tileset_from_gid(gid)
        except ValueError as exc:
            raise MapLoadError(f"gid {tiled_gid} does not belong to any tile set") from exc
        if tileset.firstgid not in tile_sets:
            tile_sets[tileset.firstgid] = TiledTileSet(tmx_data, tileset.firstgid, tileset.name, loaded_gids)

        raw = tmx_data.get_tile_properties_by_gid(gid) or {}
        prop: TileProperty = {
            key: _stringify(value)
            for key, value in raw.items()
            if key not in _PYTMX_KEYS and value is not None
        }
        prop.setdefault("tileSetID", str(tileset.firstgid))
        prop.setdefault("tileSetName", tileset.name)
        tile_properties[tiled_gid] = prop

    logger.info(
        "Read %s: %dx%d, %d tile sets, %d distinct tiles",
        name or tmx_data.filename, cols, rows, len(tile_sets), len(tile_properties),
    )
    return MapLoadData(
        cols=cols,
        rows=rows,
        tile_properties=tile_properties,
        tile_sets=tile_sets,
        collision_placement=collision_placement,
        tile_placement=tile_placement,
        object_placement=object_placement,
        name=name,
    )
