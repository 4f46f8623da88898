"""Registry of scene event factories.

Every event type id used in map files resolves here to a factory that checks
its arguments once and returns a listener closing over them. The registry is
filled at import time and never changed afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from gridwalk.coordinates import Direction, screen_to_tile
from gridwalk.errors import EventIdNotFoundError, InvalidParamError
from gridwalk.events import EventListener, ExecutionType, TriggerType
from gridwalk.settings import DEFAULT_ACTION_TALK, TALKER_IMAGE

if TYPE_CHECKING:
    from gridwalk.controller import GameController

logger = logging.getLogger(__name__)

TALK = "talk"
BTN_PUSHED = "ready_action"
PLAYER_MOVE = "player_move"
END_OF_TALK = "wait_for_touch"
RESUME_MOVE = "resume_move"

TALK_SIDES = {"L": "left", "R": "right"}


@dataclass
class EventParams:
    """Arguments for a factory; the overrides replace the factory's defaults."""
    args: list[str] = field(default_factory=list)
    placed_direction: Direction | None = None
    trigger_type: TriggerType | None = None
    execution_type: ExecutionType | None = None


def _listener(event_id, params, trigger_type, execution_type, invoke) -> EventListener:
    return EventListener(
        event_id=event_id,
        trigger_type=params.trigger_type or trigger_type,
        execution_type=params.execution_type or execution_type,
        invoke=invoke,
        placed_direction=params.placed_direction,
    )


def _talk_args(args: list[str]) -> tuple[str, str, str]:
    if len(args) != 3:
        raise InvalidParamError(f"talk expects talker, body and side, got {args}")
    talker, body, side = (a.strip() for a in args)
    portrait = TALKER_IMAGE.get(talker)
    if portrait is None:
        raise InvalidParamError(f"Unknown talker {talker!r}")
    if side not in TALK_SIDES:
        raise InvalidParamError(f"Talk side must be 'L' or 'R', got {side!r}")
    return portrait, body, TALK_SIDES[side]


def talk(params: EventParams) -> EventListener:
    portrait, body, side = _talk_args(params.args)
    placed_direction = params.placed_direction

    def invoke(controller: GameController, _args):
        player = controller.player
        if player is not None and placed_direction is not None:
            player.set_direction(placed_direction)
        controller.action_button_visible = False
        controller.dialog.show(portrait, body, side)
        controller.touch_event.remove_by_event_id(PLAYER_MOVE)
        if not controller.touch_event.has_event(END_OF_TALK):
            controller.touch_event.add(get_listener_by_id(END_OF_TALK, EventParams()))

    return _listener(TALK, params, TriggerType.TOUCH, ExecutionType.LOOP, invoke)


def wait_for_touch(params: EventParams) -> EventListener:
    def invoke(controller: GameController, _args):
        controller.dialog.hide()
        controller.run_immediately(get_listener_by_id(RESUME_MOVE, EventParams()))

    return _listener(END_OF_TALK, params, TriggerType.TOUCH, ExecutionType.ONCE, invoke)


def resume_move(params: EventParams) -> EventListener:
    def invoke(controller: GameController, _args):
        if not controller.touch_event.has_event(PLAYER_MOVE):
            controller.touch_event.add(get_listener_by_id(PLAYER_MOVE, EventParams()))

    return _listener(RESUME_MOVE, params, TriggerType.IMMEDIATE, ExecutionType.ONCE, invoke)


def ready_action(params: EventParams) -> EventListener:
    talk_args = list(params.args) if params.args else list(DEFAULT_ACTION_TALK)
    # Validate now so a bad map fails at load, not when the button is pressed.
    _talk_args(talk_args)

    def invoke(controller: GameController, _args):
        controller.action_button_visible = True
        controller.action_event.remove_by_event_id(TALK)
        controller.action_event.add(get_listener_by_id(TALK, EventParams(
            args=talk_args,
            trigger_type=TriggerType.BUTTON,
            execution_type=ExecutionType.ONCE,
        )))

    return _listener(BTN_PUSHED, params, TriggerType.TOUCH, ExecutionType.LOOP, invoke)


def player_move(params: EventParams) -> EventListener:
    def invoke(controller: GameController, touched):
        player = controller.player
        if player is None or touched is None:
            return
        if controller.sequencer.is_walking(player):
            logger.debug("%s is still walking; touch ignored", player.name)
            return

        controller.dialog.hide()
        controller.action_button_visible = False
        controller.action_event.clear()
        departure = player.coordinate
        destination = screen_to_tile(touched)
        path = controller.map.find_path(departure, destination)
        if not path:
            logger.debug("No route from %s to %s", departure, destination)
            return
        controller.sequencer.walk(player, path, controller)

    return _listener(PLAYER_MOVE, params, TriggerType.TOUCH, ExecutionType.LOOP, invoke)


EVENT_REGISTRY: dict[str, Callable[[EventParams], EventListener]] = {
    TALK: talk,
    BTN_PUSHED: ready_action,
    PLAYER_MOVE: player_move,
    END_OF_TALK: wait_for_touch,
    RESUME_MOVE: resume_move,
}


def get_listener_by_id(event_id: str, params: EventParams) -> EventListener:
    factory = EVENT_REGISTRY.get(event_id)
    if factory is None:
        raise EventIdNotFoundError(f"Event type {event_id!r} is not registered")
    return factory(params)
