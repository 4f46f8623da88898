import argparse
import logging
import os
import sys

import pygame
from gridwalk.controller import GameController
from gridwalk.coordinates import TileCoordinate, tile_to_screen
from gridwalk.errors import MapLoadError, MapObjectError
from gridwalk.settings import (
    SCREEN_WIDTH, SCREEN_HEIGHT, FPS, TILE_SIZE,
    COLOR_BLACK, COLOR_FLOOR, COLOR_BLOCKED, COLOR_EVENT, COLOR_OBJECT, COLOR_PLAYER,
)
from gridwalk.tiled_loader import load_map_data
from gridwalk.tilemap import Map

logger = logging.getLogger(__name__)

_DEFAULT_MAP = os.path.normpath(
    os.path.join(os.path.dirname(os.path.abspath(__file__)), os.pardir, os.pardir, "assets", "maps", "demo.tmx")
)


class Game:
    """Debug viewer: clicks walk the player, SPACE/RETURN presses the action button."""

    def __init__(self, tile_map: Map, spawn: TileCoordinate):
        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption(f"gridwalk - {tile_map.name}")
        self.clock = pygame.time.Clock()
        self.running = True
        self.controller = GameController(tile_map)
        self.controller.spawn_player(spawn)
        # Sheet y grows upwards; the window's grows downwards.
        self.sheet_height = tile_map.rows * TILE_SIZE

    def to_sheet(self, window_pos):
        return (window_pos[0], self.sheet_height - window_pos[1])

    def to_window_rect(self, sheet_pos):
        return pygame.Rect(
            int(sheet_pos[0]), int(self.sheet_height - sheet_pos[1] - TILE_SIZE), TILE_SIZE, TILE_SIZE
        )

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
                return
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.controller.touched(self.to_sheet(event.pos))
            elif event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_SPACE, pygame.K_RETURN):
                    self.controller.action_button_touched()
                elif event.key == pygame.K_ESCAPE:
                    self.running = False

    def update(self, dt):
        self.controller.update(dt)

    def draw(self):
        tile_map = self.controller.map
        self.screen.fill(COLOR_BLACK)
        for coordinate, tile in tile_map.tiles.items():
            if not tile_map.can_pass(coordinate):
                color = COLOR_BLOCKED
            elif tile_map.get_events_on(coordinate):
                color = COLOR_EVENT
            else:
                color = COLOR_FLOOR
            pygame.draw.rect(self.screen, color, self.to_window_rect(tile_to_screen(coordinate)))

        for obj in sorted(tile_map.iter_objects(), key=lambda o: o.z_position):
            if obj.parent is not None:
                continue  # satellites are invisible
            color = COLOR_PLAYER if obj.name == self.controller.player_name else COLOR_OBJECT
            pygame.draw.rect(self.screen, color, self.to_window_rect(obj.position).inflate(-8, -8))

        self.controller.dialog.draw(self.screen)
        pygame.display.flip()

    def run(self):
        while self.running:
            dt = self.clock.tick(FPS) / 1000.0
            self.handle_events()
            self.update(dt)
            self.draw()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Walk around a Tiled map and trigger its events.")
    parser.add_argument("map", nargs="?", default=_DEFAULT_MAP, help="path to a .tmx file")
    parser.add_argument("--spawn", nargs=2, type=int, default=(2, 2), metavar=("X", "Y"),
                        help="player start tile (1-based, y counted from the bottom)")
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        tile_map = Map(load_map_data(args.map))
    except FileNotFoundError:
        logger.error("Map file %s not found (run tools/generate_demo_tmx.py)", args.map)
        return 1
    except (MapLoadError, MapObjectError) as exc:
        logger.error("Could not load %s: %s", args.map, exc)
        return 1

    pygame.init()
    game = Game(tile_map, TileCoordinate(*args.spawn))
    game.run()
    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
