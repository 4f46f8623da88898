"""The Map aggregate: what sits where, and whether it can be walked through."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from gridwalk.coordinates import TileCoordinate, screen_to_tile
from gridwalk.events import EventListener
from gridwalk.map_objects import MapObject, Object, Tile
from gridwalk.maps import MapLoadData
from gridwalk.pathfinding import find_path
from gridwalk.settings import BASE_OBJECT_Z

logger = logging.getLogger(__name__)


class Map:
    """Owns every tile and object of one loaded map.

    ``placement`` lists, per cell, the tile first and then the objects on it in
    insertion order. ``objects`` holds the same objects without the tiles.
    Construction is all-or-nothing: any broken reference raises MapObjectError.
    """

    def __init__(self, data: MapLoadData):
        self.name = data.name
        self.cols = data.cols
        self.rows = data.rows
        self.placement: dict[TileCoordinate, list[MapObject]] = {}
        self.objects: dict[TileCoordinate, list[Object]] = {}

        tiles = Tile.create_tiles(
            data.rows,
            data.cols,
            properties=data.tile_properties,
            tile_sets=data.tile_sets,
            collision_placement=data.collision_placement,
            tile_placement=data.tile_placement,
        )
        objects = Object.create_objects(
            tiles,
            properties=data.tile_properties,
            tile_sets=data.tile_sets,
            object_placement=data.object_placement,
        )

        self.tiles: dict[TileCoordinate, Tile] = tiles
        for coordinate, tile in tiles.items():
            self.placement[coordinate] = [tile]
        for coordinate, objects_on_tile in objects.items():
            self.placement[coordinate].extend(objects_on_tile)
        self.objects = objects

        logger.info(
            "Loaded map %r: %dx%d, %d tiles, %d objects",
            self.name, self.cols, self.rows, len(tiles),
            sum(len(o) for o in objects.values()),
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def contains(self, coordinate: TileCoordinate) -> bool:
        return coordinate in self.tiles

    def iter_objects(self) -> Iterator[Object]:
        for objects_on_tile in self.objects.values():
            yield from objects_on_tile

    def _find_by_name(self, name: str) -> tuple[TileCoordinate, Object] | None:
        for coordinate, map_objects in self.placement.items():
            for map_object in map_objects:
                if isinstance(map_object, Object) and map_object.name == name:
                    return coordinate, map_object
        return None

    def get_object_by_name(self, name: str) -> Object | None:
        found = self._find_by_name(name)
        return found[1] if found else None

    def get_object_coordinate_by_name(self, name: str) -> TileCoordinate | None:
        found = self._find_by_name(name)
        return found[0] if found else None

    def get_map_objects_on(self, coordinate: TileCoordinate) -> list[MapObject]:
        return list(self.placement.get(coordinate, []))

    def get_events_on(self, coordinate: TileCoordinate) -> list[EventListener]:
        events: list[EventListener] = []
        for map_object in self.placement.get(coordinate, []):
            events.extend(map_object.events)
        return events

    def can_pass(self, coordinate: TileCoordinate) -> bool:
        return not any(o.has_collision for o in self.placement.get(coordinate, []))

    def find_path(self, departure: TileCoordinate, destination: TileCoordinate) -> list[TileCoordinate] | None:
        return find_path(departure, destination, self.can_pass, within=self.contains)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_object(self, obj: Object) -> None:
        """Register an object created outside the map file (e.g. the player)."""
        coordinate = screen_to_tile(obj.position)
        self.objects.setdefault(coordinate, []).append(obj)
        self.placement.setdefault(coordinate, []).append(obj)
        logger.debug("Placed %s at %s", obj.name, coordinate)

    def update_object_placement(self, obj: Object) -> None:
        """Move *obj* to the cell under its live position."""
        departure = self.get_object_coordinate_by_name(obj.name)
        if departure is None:
            logger.debug("%s is not on the map; placement left as is", obj.name)
            return
        destination = screen_to_tile(obj.position)
        if destination == departure:
            return

        cell = self.placement[departure]
        for idx, map_object in enumerate(cell):
            if isinstance(map_object, Object) and map_object.name == obj.name:
                del cell[idx]
                break
        objects_on_tile = self.objects.get(departure, [])
        for idx, current in enumerate(objects_on_tile):
            if current.name == obj.name:
                del objects_on_tile[idx]
                break

        self.placement.setdefault(destination, []).append(obj)
        self.objects.setdefault(destination, []).append(obj)
        logger.debug("Moved %s from %s to %s", obj.name, departure, destination)

    def remove_event(self, listener: EventListener) -> bool:
        """Detach a consumed listener from whichever map object carries it."""
        for map_objects in self.placement.values():
            for map_object in map_objects:
                for idx, current in enumerate(map_object.events):
                    if current.id == listener.id:
                        del map_object.events[idx]
                        return True
        return False

    def update_objects_z_position(self) -> None:
        """Lower objects on screen draw on top; equal heights keep their order."""
        ordered = sorted(self.iter_objects(), key=lambda o: o.position.y, reverse=True)
        for offset, obj in enumerate(ordered):
            obj.z_position = BASE_OBJECT_Z + offset
