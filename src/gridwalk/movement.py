"""Walking objects along paths and firing the events they run into."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Protocol

from pygame.math import Vector2

from gridwalk.coordinates import TileCoordinate, tile_to_screen
from gridwalk.events import EventListener
from gridwalk.map_objects import MotionStep, Object
from gridwalk.tilemap import Map

logger = logging.getLogger(__name__)


class AnimationSink(Protocol):
    def run(self, obj: Object, steps: list[MotionStep], on_complete: Callable[[], None]) -> None:
        ...


@dataclass
class _Walk:
    obj: Object
    steps: list[MotionStep]
    on_complete: Callable[[], None]
    index: int = 0
    elapsed: float = 0.0


class WalkAnimator:
    """Frame-driven animation sink.

    ``update(dt)`` slides each running object along its motion steps and calls
    the completion callback once the last step has been reached. Callbacks run
    inside ``update``, on the caller's thread.
    """

    def __init__(self):
        self._walks: list[_Walk] = []

    @property
    def busy(self) -> bool:
        return bool(self._walks)

    def run(self, obj: Object, steps: list[MotionStep], on_complete: Callable[[], None]) -> None:
        self._walks.append(_Walk(obj, list(steps), on_complete))

    def current_animation(self, obj: Object) -> str | None:
        for walk in self._walks:
            if walk.obj is obj and walk.index < len(walk.steps):
                return walk.steps[walk.index].animation
        return None

    def update(self, dt: float) -> None:
        finished: list[_Walk] = []
        for walk in self._walks:
            remaining = dt
            while walk.index < len(walk.steps) and remaining >= 0:
                step = walk.steps[walk.index]
                left_in_step = step.duration - walk.elapsed
                if remaining < left_in_step:
                    walk.elapsed += remaining
                    t = walk.elapsed / step.duration
                    walk.obj.position = step.departure.lerp(step.destination, t)
                    break
                remaining -= left_in_step
                walk.obj.position = Vector2(step.destination)
                walk.index += 1
                walk.elapsed = 0.0
            if walk.index >= len(walk.steps):
                finished.append(walk)

        for walk in finished:
            self._walks.remove(walk)
        for walk in finished:
            walk.on_complete()


@dataclass
class WalkPlan:
    """A path cut at the first cell carrying events."""
    steps: list[MotionStep]
    destination: TileCoordinate | None
    pending: list[EventListener] = field(default_factory=list)


class MovementSequencer:
    """Runs "walk, stop at the first event, then fire it" as one unit per actor.

    An actor with a walk in flight ignores further walk requests until its
    completion callback has run.
    """

    def __init__(self, tile_map: Map, animator: AnimationSink):
        self.map = tile_map
        self.animator = animator
        self._walking: set[str] = set()

    def is_walking(self, actor: Object) -> bool:
        return actor.name in self._walking

    def plan(self, actor: Object, path: list[TileCoordinate]) -> WalkPlan:
        steps: list[MotionStep] = []
        pending: list[EventListener] = []
        destination = None
        position = Vector2(actor.position)
        for step in path:
            step_point = tile_to_screen(step)
            steps.append(actor.get_action_to(position, step_point))
            position = step_point
            destination = step

            events_on_step = self.map.get_events_on(step)
            if events_on_step:
                pending = events_on_step
                break
        return WalkPlan(steps=steps, destination=destination, pending=pending)

    def walk(self, actor: Object, path: list[TileCoordinate], sender) -> bool:
        """Start walking *actor* along *path*. Returns False if nothing was started."""
        if self.is_walking(actor):
            logger.debug("%s is already walking; request ignored", actor.name)
            return False
        if not path:
            return False

        plan = self.plan(actor, path)
        self._walking.add(actor.name)
        logger.debug(
            "%s walks %d of %d steps to %s (%d pending events)",
            actor.name, len(plan.steps), len(path), plan.destination, len(plan.pending),
        )

        def on_complete():
            self._finish(actor, plan, sender)

        self.animator.run(actor, plan.steps, on_complete)
        return True

    def _finish(self, actor: Object, plan: WalkPlan, sender) -> None:
        self._walking.discard(actor.name)
        if plan.destination is not None:
            actor.position = tile_to_screen(plan.destination)
        self.map.update_object_placement(actor)
        for listener in plan.pending:
            if listener.once:
                self.map.remove_event(listener)
            logger.debug("%s reached %r", actor.name, listener)
            listener.invoke(sender, None)
