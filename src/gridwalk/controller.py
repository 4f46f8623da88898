"""Scene controller: the sender every event listener receives."""

from __future__ import annotations

import logging

from gridwalk.coordinates import TileCoordinate, tile_to_screen
from gridwalk.dialogue import Dialog
from gridwalk.events import EventDispatcher, EventListener, TriggerType
from gridwalk.map_objects import Object
from gridwalk.movement import AnimationSink, MovementSequencer, WalkAnimator
from gridwalk.scene_events import PLAYER_MOVE, EventParams, get_listener_by_id
from gridwalk.settings import PLAYER_NAME
from gridwalk.tilemap import Map

logger = logging.getLogger(__name__)


class GameController:
    """Routes touches and button presses to the armed listeners.

    The touch dispatcher starts with the ``player_move`` listener armed; events
    such as ``talk`` swap it out and back in.
    """

    def __init__(self, tile_map: Map, animator: AnimationSink | None = None, dialog: Dialog | None = None):
        self.map = tile_map
        self.animator = animator if animator is not None else WalkAnimator()
        self.dialog = dialog if dialog is not None else Dialog()
        self.sequencer = MovementSequencer(tile_map, self.animator)
        self.action_button_visible = False
        self.player_name = PLAYER_NAME

        self.touch_event = EventDispatcher(TriggerType.TOUCH, name="touch")
        self.action_event = EventDispatcher(TriggerType.BUTTON, name="action")
        self.touch_event.add(get_listener_by_id(PLAYER_MOVE, EventParams()))

    @property
    def player(self) -> Object | None:
        return self.map.get_object_by_name(self.player_name)

    def spawn_player(self, coordinate: TileCoordinate, image=None) -> Object:
        player = Object(self.player_name, tile_to_screen(coordinate), image=image)
        self.map.set_object(player)
        logger.info("Player spawned at %s", coordinate)
        return player

    def touched(self, position) -> int:
        """A touch/click at *position* (screen coordinates)."""
        return self.touch_event.trigger(self, position)

    def action_button_touched(self) -> int:
        if not self.action_button_visible:
            return 0
        return self.action_event.trigger(self)

    def run_immediately(self, listener: EventListener, args=None) -> None:
        if listener.trigger_type is not TriggerType.IMMEDIATE:
            raise ValueError(f"{listener!r} is not an immediate listener")
        listener.invoke(self, args)

    def update(self, dt: float) -> None:
        update = getattr(self.animator, "update", None)
        if update is not None:
            update(dt)
        self.map.update_objects_z_position()
