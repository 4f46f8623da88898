"""Event listeners and the dispatchers that decide when they fire."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from gridwalk.controller import GameController
    from gridwalk.coordinates import Direction

logger = logging.getLogger(__name__)


class TriggerType(Enum):
    TOUCH = auto()      # the walk ends on the listener's cell, or the screen is touched
    IMMEDIATE = auto()  # run straight away by another listener
    BUTTON = auto()     # the action button was pressed


class ExecutionType(Enum):
    ONCE = auto()
    LOOP = auto()


Invoke = Callable[["GameController", Any], None]

_listener_ids = itertools.count(1)


@dataclass(eq=False)
class EventListener:
    """A typed reaction bound to its validated arguments at creation."""
    event_id: str
    trigger_type: TriggerType
    execution_type: ExecutionType
    invoke: Invoke
    placed_direction: Direction | None = None
    id: int = field(default_factory=lambda: next(_listener_ids))

    @property
    def once(self) -> bool:
        return self.execution_type is ExecutionType.ONCE

    def __repr__(self):
        return (
            f"EventListener(id={self.id}, event_id={self.event_id!r}, "
            f"trigger={self.trigger_type.name}, execution={self.execution_type.name})"
        )


class EventDispatcher:
    """Holds the listeners armed for one kind of trigger."""

    def __init__(self, trigger_type: TriggerType, name: str = ""):
        self.trigger_type = trigger_type
        self.name = name or trigger_type.name.lower()
        self._listeners: list[EventListener] = []

    def __len__(self):
        return len(self._listeners)

    def __contains__(self, listener):
        return any(l.id == listener.id for l in self._listeners)

    @property
    def listeners(self) -> list[EventListener]:
        return list(self._listeners)

    def has_event(self, event_id: str) -> bool:
        return any(l.event_id == event_id for l in self._listeners)

    def add(self, listener: EventListener) -> None:
        if listener.trigger_type is not self.trigger_type:
            raise ValueError(
                f"{self.name} dispatcher only accepts {self.trigger_type.name} "
                f"listeners, got {listener!r}"
            )
        self._listeners.append(listener)

    def remove(self, listener: EventListener) -> bool:
        for idx, current in enumerate(self._listeners):
            if current.id == listener.id:
                del self._listeners[idx]
                return True
        return False

    def remove_by_event_id(self, event_id: str) -> int:
        """Drop every listener created for *event_id*. Returns how many were removed."""
        before = len(self._listeners)
        self._listeners = [l for l in self._listeners if l.event_id != event_id]
        return before - len(self._listeners)

    def clear(self) -> None:
        self._listeners.clear()

    def trigger(self, sender, args=None) -> int:
        """Fire the currently armed listeners in the order they were added.

        Listeners armed while this round runs wait for the next trigger.
        ONCE listeners are disarmed as they fire.
        """
        fired = 0
        for listener in list(self._listeners):
            if listener not in self:
                # disarmed by an earlier listener in this round
                continue
            if listener.once:
                self.remove(listener)
            logger.debug("%s: firing %r", self.name, listener)
            listener.invoke(sender, args)
            fired += 1
        return fired
