#!/usr/bin/env python3
"""Generate assets/maps/demo.tmx, a small map for the debug viewer.

Run: python tools/generate_demo_tmx.py
"""

import os
from xml.sax.saxutils import quoteattr

# Gids of the embedded tile set (local tile id = gid - 1)
GRASS = 1
WALL = 2
BOB = 3
SIGN = 4
FLOWER = 5
BLOCK = 6  # collision layer marker

TILE_PROPERTIES = {
    BOB: {"collision": "1", "event": "talk,1111,bob,Hello there!,L"},
    SIGN: {"collision": "1", "event": "ready_action,1000,sign,Beware of walls.,R"},
    FLOWER: {"event": "talk,0000,player,What a nice flower.,L"},
}

# fmt: off
LAYOUT = [
    "WWWWWWWWWWWWWWWWWWWW",
    "W..................W",
    "W..B.......WWWW....W",
    "W..........W..W....W",
    "W....F.....W..W..S.W",
    "W..........W.......W",
    "W..WWWWW...........W",
    "W......W.....F.....W",
    "W..................W",
    "WWWWWWWWWWWWWWWWWWWW",
]
# fmt: on


def build_layers():
    tile, collision, obj = [], [], []
    for line in LAYOUT:
        tile_row, collision_row, object_row = [], [], []
        for ch in line:
            tile_row.append(WALL if ch == "W" else (FLOWER if ch == "F" else GRASS))
            collision_row.append(BLOCK if ch == "W" else 0)
            object_row.append({"B": BOB, "S": SIGN}.get(ch, 0))
        tile.append(tile_row)
        collision.append(collision_row)
        obj.append(object_row)
    return tile, collision, obj


def write_tmx(path, width, height, layers):
    """Write a TMX XML file with an embedded tile set."""

    def csv_data(layer):
        rows = []
        for row in layer:
            rows.append(",".join(str(gid) for gid in row))
        return ",\n".join(rows)

    tiles_xml = []
    for gid, props in TILE_PROPERTIES.items():
        lines = "\n".join(
            f"    <property name={quoteattr(k)} value={quoteattr(v)}/>" for k, v in props.items()
        )
        tiles_xml.append(f'  <tile id="{gid - 1}">\n   <properties>\n{lines}\n   </properties>\n  </tile>')

    layer_xml = []
    for idx, (name, layer) in enumerate(layers, start=1):
        layer_xml.append(f""" <layer id="{idx}" name="{name}" width="{width}" height="{height}">
  <data encoding="csv">
{csv_data(layer)}
</data>
 </layer>""")

    xml = f"""<?xml version="1.0" encoding="UTF-8"?>
<map version="1.10" tiledversion="1.11.2" orientation="orthogonal" renderorder="right-down"
     width="{width}" height="{height}" tilewidth="32" tileheight="32"
     infinite="0" nextlayerid="{len(layers) + 1}" nextobjectid="1">
 <tileset firstgid="1" name="demo" tilewidth="32" tileheight="32" tilecount="8" columns="4">
  <image source="demo.png" width="128" height="64"/>
{chr(10).join(tiles_xml)}
 </tileset>
{chr(10).join(layer_xml)}
</map>
"""

    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w") as f:
        f.write(xml)


if __name__ == "__main__":
    tile, collision, obj = build_layers()
    out = os.path.join(os.path.dirname(__file__), "..", "assets", "maps", "demo.tmx")
    write_tmx(out, len(LAYOUT[0]), len(LAYOUT), [("tile", tile), ("collision", collision), ("object", obj)])
    print(f"Generated demo.tmx ({len(LAYOUT[0])}x{len(LAYOUT)} tiles)")
