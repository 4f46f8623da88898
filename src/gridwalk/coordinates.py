"""Tile and screen coordinate model.

Tile coordinates are 1-based with ``y`` growing northwards. Screen (sheet)
coordinates are pixels measured from the bottom-left corner of tile (1, 1),
also with ``y`` growing upwards.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from pygame.math import Vector2

from gridwalk.settings import TILE_SIZE


class Direction(Enum):
    UP = (0, 1)
    DOWN = (0, -1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def delta(self) -> tuple[int, int]:
        return self.value

    @property
    def reverse(self) -> Direction:
        dx, dy = self.value
        return Direction((-dx, -dy))

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def from_delta(cls, dx: float, dy: float) -> Direction | None:
        """Direction of a straight move, or None for diagonal/zero moves."""
        if dx > 0 and dy == 0:
            return cls.RIGHT
        if dx < 0 and dy == 0:
            return cls.LEFT
        if dx == 0 and dy > 0:
            return cls.UP
        if dx == 0 and dy < 0:
            return cls.DOWN
        return None


@dataclass(frozen=True, order=True)
class TileCoordinate:
    x: int
    y: int

    def neighbour(self, direction: Direction) -> TileCoordinate:
        dx, dy = direction.delta
        return TileCoordinate(self.x + dx, self.y + dy)

    def neighbours(self) -> list[TileCoordinate]:
        return [self.neighbour(d) for d in Direction]

    def manhattan(self, other: TileCoordinate) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def __str__(self):
        return f"({self.x}, {self.y})"


def tile_to_screen(coordinate: TileCoordinate) -> Vector2:
    return Vector2((coordinate.x - 1) * TILE_SIZE, (coordinate.y - 1) * TILE_SIZE)


def screen_to_tile(position) -> TileCoordinate:
    """Return the tile containing *position*; sub-tile offsets are floored away."""
    x, y = position[0], position[1]
    return TileCoordinate(math.floor(x / TILE_SIZE) + 1, math.floor(y / TILE_SIZE) + 1)
