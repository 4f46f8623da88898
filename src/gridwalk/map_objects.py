"""Things that sit on the grid: tiles and objects.

Both expose the same capabilities (collision, attached listeners, parent handle)
without sharing a base class; :class:`MapObject` describes that contract.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from pygame.math import Vector2

from gridwalk.coordinates import Direction, TileCoordinate, screen_to_tile, tile_to_screen
from gridwalk.errors import CropError, EventError, MapObjectError
from gridwalk.events import EventListener
from gridwalk.maps import TileID, TileProperty, TileSet, TileSetID
from gridwalk.settings import DEFAULT_OBJECT_SPEED

logger = logging.getLogger(__name__)

_EVENT_ERROR_PREFIX = "Error occurred while generating event listener: "


@runtime_checkable
class MapObject(Protocol):
    has_collision: bool
    events: list[EventListener]
    parent: str | None


@dataclass
class MotionStep:
    """One tile of movement handed to the animation sink."""
    direction: Direction
    departure: Vector2
    destination: Vector2
    duration: float
    step_index: int

    @property
    def animation(self) -> str:
        return f"walk_{self.direction.label}"


def _tile_set_for(property: TileProperty, tile_sets: dict[TileSetID, TileSet], owner: str) -> TileSet:
    raw_id = property.get("tileSetID")
    if raw_id is None:
        raise MapObjectError(f"tileSetID is not defined in {owner}'s property ({property})")
    try:
        tile_set_id = int(raw_id)
    except ValueError:
        raise MapObjectError(f"tileSetID {raw_id!r} of {owner} is not an integer") from None
    tile_set = tile_sets.get(tile_set_id)
    if tile_set is None:
        raise MapObjectError(
            f"tileSet (ID = {tile_set_id}) used by {owner} is not defined in tileSets "
            f"({sorted(tile_sets)})"
        )
    return tile_set


def _crop(tile_set: TileSet, tile_id: TileID, owner: str) -> Any:
    try:
        image = tile_set.crop_tile_image(tile_id)
    except CropError as exc:
        raise MapObjectError(f"Failed to crop image of {owner}") from exc
    if image is None:
        raise MapObjectError(f"Failed to crop image of {owner}")
    return image


class Tile:
    """One cell of the tile layer. Never moves."""

    def __init__(self, tile_id: TileID, coordinate: TileCoordinate, property: TileProperty):
        self.tile_id = tile_id
        self.coordinate = coordinate
        self.property = property
        self.image = None
        self.has_collision = False
        self.events: list[EventListener] = []
        self.parent: str | None = None

    def set_collision(self):
        self.has_collision = True

    def __repr__(self):
        return f"Tile(id={self.tile_id}, coordinate={self.coordinate}, collision={self.has_collision})"

    @classmethod
    def create_tiles(
        cls,
        rows: int,
        cols: int,
        properties: dict[TileID, TileProperty],
        tile_sets: dict[TileSetID, TileSet],
        collision_placement: dict[TileCoordinate, int],
        tile_placement: dict[TileCoordinate, int],
    ) -> dict[TileCoordinate, Tile]:
        """Build every tile of the tile layer.

        Raises MapObjectError on the first missing property, collision entry,
        tile set or image, or on an unparsable ``event`` property.
        """
        from gridwalk.event_parser import generate_listener_for_tile, parse

        tiles: dict[TileCoordinate, Tile] = {}
        for coordinate, tile_id in tile_placement.items():
            if not (1 <= coordinate.x <= cols and 1 <= coordinate.y <= rows):
                raise MapObjectError(
                    f"Coordinate {coordinate} in tilePlacement is outside the {cols}x{rows} grid"
                )
            property = properties.get(tile_id)
            if property is None:
                raise MapObjectError(f"tileID {tile_id}'s property is not defined in properties")

            tile = cls(tile_id, coordinate, property)

            collision = collision_placement.get(coordinate)
            if collision is None:
                raise MapObjectError(
                    f"Coordinate {coordinate} specified in tilePlacement is not defined "
                    f"in collisionPlacement"
                )
            if collision != 0:
                tile.set_collision()

            tile_set = _tile_set_for(property, tile_sets, f"tile {tile_id}")
            tile.image = _crop(tile_set, tile_id, f"tile {tile_id} at {coordinate}")

            raw_event = property.get("event")
            if raw_event:
                # A tile holds at most one listener of its own.
                try:
                    tile.events.append(generate_listener_for_tile(parse(raw_event)))
                except EventError as exc:
                    raise MapObjectError(
                        f"{_EVENT_ERROR_PREFIX}tile {tile_id} at {coordinate}: {exc}"
                    ) from exc

            tiles[coordinate] = tile
        return tiles


class Object:
    """Anything placed on top of the tile layer: the player, NPCs, props, satellites.

    ``position`` is the live screen position and the only record of where the
    object is; the tile coordinate is always derived from it.
    """

    def __init__(self, name: str, position, image=None, speed: float = DEFAULT_OBJECT_SPEED):
        self.name = name
        self.position = Vector2(position)
        self.image = image
        self.speed = speed
        self.direction = Direction.DOWN
        self.z_position = 0.0
        self.has_collision = False
        self.events: list[EventListener] = []
        self.parent: str | None = None
        # Alternates 0/1 so consecutive steps lead with different feet.
        self.step_index = 0

    @property
    def coordinate(self) -> TileCoordinate:
        return screen_to_tile(self.position)

    def set_collision(self):
        self.has_collision = True

    def set_direction(self, direction: Direction):
        self.direction = direction

    def get_action_to(self, departure, destination) -> MotionStep:
        """Describe a straight one-tile move and advance the walk cycle."""
        departure = Vector2(departure)
        destination = Vector2(destination)
        diff = destination - departure
        direction = Direction.from_delta(diff.x, diff.y)
        if direction is not None:
            self.direction = direction
        step = MotionStep(
            direction=self.direction,
            departure=departure,
            destination=destination,
            duration=self.speed,
            step_index=self.step_index,
        )
        self.step_index = 1 - self.step_index
        return step

    def __repr__(self):
        return f"Object(name={self.name!r}, coordinate={self.coordinate})"

    @classmethod
    def create_objects(
        cls,
        tiles: dict[TileCoordinate, Tile],
        properties: dict[TileID, TileProperty],
        tile_sets: dict[TileSetID, TileSet],
        object_placement: dict[TileCoordinate, int],
    ) -> dict[TileCoordinate, list[Object]]:
        """Build the objects of the object layer plus their event satellites.

        *tiles* may be modified: an object with ``collision == "1"`` makes the
        tile beneath it blocking.
        """
        from gridwalk.event_parser import generate_event_objects, parse

        objects: dict[TileCoordinate, list[Object]] = {coordinate: [] for coordinate in tiles}

        for coordinate in tiles:
            object_id = object_placement.get(coordinate)
            if object_id is None:
                raise MapObjectError(
                    f"Coordinate {coordinate} specified in tiles is not defined in objectPlacement"
                )
            if object_id == 0:
                continue

            property = properties.get(object_id)
            if property is None:
                raise MapObjectError(f"ObjectID {object_id}'s property is not defined in properties")

            tile_set = _tile_set_for(property, tile_sets, f"object {object_id}")
            image = _crop(tile_set, object_id, f"object {object_id} at {coordinate}")

            tile_set_name = property.get("tileSetName")
            if tile_set_name is None:
                raise MapObjectError(
                    f"tileSetName is not defined in objectID {object_id}'s property ({property})"
                )

            obj = cls(
                name=f"{tile_set_name}_{uuid.uuid4().hex}",
                position=tile_to_screen(coordinate),
                image=image,
            )
            objects[coordinate].append(obj)

            if property.get("collision") == "1":
                tiles[coordinate].set_collision()

            raw_event = property.get("event")
            if raw_event:
                try:
                    placed, _discarded = generate_event_objects(parse(raw_event), obj)
                except EventError as exc:
                    raise MapObjectError(
                        f"{_EVENT_ERROR_PREFIX}object {object_id} at {coordinate}: {exc}"
                    ) from exc
                for satellite in placed:
                    cell = satellite.coordinate
                    if cell in objects:
                        objects[cell].append(satellite)
                    else:
                        logger.debug("Satellite %s falls outside the map; dropped", satellite.name)
        return objects
