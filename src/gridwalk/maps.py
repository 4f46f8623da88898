"""Load tables handed to the map engine by a map-file reader."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from gridwalk.coordinates import TileCoordinate

TileID = int
TileSetID = int
TileProperty = dict[str, str]


class TileSet(Protocol):
    """Source of tile images. The engine never looks inside the image."""

    def crop_tile_image(self, tile_id: TileID) -> Any:
        """Return the image for *tile_id*; raise CropError (or return None) on failure."""
        ...


@dataclass
class MapLoadData:
    """Fully decoded content of one map file."""
    cols: int
    rows: int
    tile_properties: dict[TileID, TileProperty]
    tile_sets: dict[TileSetID, TileSet]
    collision_placement: dict[TileCoordinate, int] = field(default_factory=dict)
    tile_placement: dict[TileCoordinate, int] = field(default_factory=dict)
    object_placement: dict[TileCoordinate, int] = field(default_factory=dict)
    name: str = ""

    @classmethod
    def from_grids(
        cls,
        tile_grid: list[list[int]],
        tile_properties: dict[TileID, TileProperty],
        tile_sets: dict[TileSetID, TileSet],
        collision_grid: list[list[int]] | None = None,
        object_grid: list[list[int]] | None = None,
        name: str = "",
    ) -> MapLoadData:
        """Build load data from row lists written top row first.

        The top row becomes ``y == rows`` and the bottom row ``y == 1``.
        Missing collision/object grids mean "nothing there".
        """
        rows = len(tile_grid)
        cols = len(tile_grid[0]) if rows else 0
        empty = [[0] * cols for _ in range(rows)]
        collision_grid = collision_grid if collision_grid is not None else empty
        object_grid = object_grid if object_grid is not None else empty

        def to_placement(grid):
            placement = {}
            for row_idx, row in enumerate(grid):
                for col_idx, value in enumerate(row):
                    placement[TileCoordinate(col_idx + 1, rows - row_idx)] = value
            return placement

        tile_placement = {c: v for c, v in to_placement(tile_grid).items() if v != 0}
        return cls(
            cols=cols,
            rows=rows,
            tile_properties=tile_properties,
            tile_sets=tile_sets,
            collision_placement=to_placement(collision_grid),
            tile_placement=tile_placement,
            object_placement=to_placement(object_grid),
            name=name,
        )
