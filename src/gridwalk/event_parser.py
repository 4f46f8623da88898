"""Parse ``event`` properties from map files into listeners.

The raw form is ``"<event type>,<placement mask>,<arg1>,<arg2>,..."`` where the
mask has one ``0``/``1`` character per neighbour in the order up, down, left,
right, e.g. ``"talk,1000,player,Hello,L"``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from gridwalk.coordinates import Direction, tile_to_screen
from gridwalk.errors import IllegalArgumentFormatError, IllegalParamFormatError, InvalidPropertyError
from gridwalk.events import EventListener, TriggerType
from gridwalk.map_objects import Object
from gridwalk.scene_events import EventParams, get_listener_by_id

logger = logging.getLogger(__name__)

# Bit order of the placement mask.
PLACEMENT_ORDER = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)


@dataclass
class EventProperty:
    event_type_id: str
    placement_bitmask: tuple[bool, bool, bool, bool]
    args: list[str] = field(default_factory=list)

    def is_placed(self, direction: Direction) -> bool:
        return self.placement_bitmask[PLACEMENT_ORDER.index(direction)]


def parse(raw: str) -> EventProperty:
    tokens = raw.split(",")
    if len(tokens) < 2:
        raise IllegalArgumentFormatError(
            f"Event property {raw!r} needs at least an event type and a placement mask"
        )
    event_type_id, mask = tokens[0].strip(), tokens[1].strip()
    if len(mask) != 4 or any(c not in "01" for c in mask):
        raise IllegalParamFormatError(
            f"Placement mask {mask!r} in {raw!r} must be four '0'/'1' characters"
        )
    if not event_type_id:
        raise InvalidPropertyError(f"Event property {raw!r} has an empty event type")
    bitmask = tuple(c == "1" for c in mask)
    return EventProperty(event_type_id=event_type_id, placement_bitmask=bitmask, args=tokens[2:])


def generate_listener_for_tile(property: EventProperty) -> EventListener:
    """Listener attached to a tile itself; the placement mask does not apply."""
    return get_listener_by_id(
        property.event_type_id,
        EventParams(args=list(property.args), trigger_type=TriggerType.TOUCH),
    )


def generate_event_objects(property: EventProperty, parent: Object) -> tuple[list[Object], list[Object]]:
    """Build the four trigger cells around *parent*.

    Each satellite carries one listener whose placed direction points back at
    *parent* (the cell above gets DOWN, and so on). Returns ``(placed,
    discarded)`` split by the placement mask; every satellite is generated, so a
    bad event fails even when its mask is ``0000``.
    """
    origin = parent.coordinate
    placed: list[Object] = []
    discarded: list[Object] = []
    for direction in PLACEMENT_ORDER:
        satellite = Object(
            name=f"{parent.name}_{direction.label}",
            position=tile_to_screen(origin.neighbour(direction)),
        )
        satellite.parent = parent.name
        satellite.events.append(
            get_listener_by_id(
                property.event_type_id,
                EventParams(
                    args=list(property.args),
                    placed_direction=direction.reverse,
                    trigger_type=TriggerType.TOUCH,
                ),
            )
        )
        if property.is_placed(direction):
            placed.append(satellite)
        else:
            discarded.append(satellite)
    logger.debug(
        "Event %r around %s: placed %s, discarded %s",
        property.event_type_id, parent.name,
        [s.name for s in placed], [s.name for s in discarded],
    )
    return placed, discarded

