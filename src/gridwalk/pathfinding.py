"""A* path search on the tile grid.

Moves are 4-directional with a uniform cost of 1, so Manhattan distance is
both admissible and consistent and the returned route is always a shortest
one. Among frontier nodes with equal priority the most recently discovered one
is expanded first; which of several equally short routes comes back is not part
of the contract.

Public API
----------
``find_path(departure, destination, can_pass, within=None)``
    -> ``list[TileCoordinate]`` (departure excluded, destination included),
    ``[]`` when already there, or ``None`` when there is no route.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import Callable

from gridwalk.coordinates import TileCoordinate
from gridwalk.settings import MAX_PATH_EXPANSIONS

logger = logging.getLogger(__name__)

Predicate = Callable[[TileCoordinate], bool]


def find_path(
    departure: TileCoordinate,
    destination: TileCoordinate,
    can_pass: Predicate,
    within: Predicate | None = None,
    max_expansions: int = MAX_PATH_EXPANSIONS,
) -> list[TileCoordinate] | None:
    """Shortest walkable route from *departure* to *destination*.

    *can_pass* says whether a cell may be entered. *within* bounds the search
    to the map; without it the grid is unbounded and *max_expansions* is the
    only limit.
    """
    if departure == destination:
        return []
    if within is not None and not within(destination):
        return None
    if not can_pass(destination):
        return None

    # Decreasing tie counter: among equal f the newest entry pops first.
    discovery = itertools.count(0, -1)
    open_set: list[tuple[int, int, TileCoordinate]] = [
        (departure.manhattan(destination), next(discovery), departure)
    ]
    g_score: dict[TileCoordinate, int] = {departure: 0}
    came_from: dict[TileCoordinate, TileCoordinate] = {}
    closed: set[TileCoordinate] = set()

    while open_set:
        _f, _tie, current = heapq.heappop(open_set)

        if current in closed:
            continue
        closed.add(current)

        if current == destination:
            path: list[TileCoordinate] = []
            node = destination
            while node in came_from:
                path.append(node)
                node = came_from[node]
            path.reverse()
            return path

        if len(closed) > max_expansions:
            logger.warning(
                "Path search %s -> %s gave up after %d expansions",
                departure, destination, max_expansions,
            )
            return None

        for neighbour in current.neighbours():
            if neighbour in closed:
                continue
            if within is not None and not within(neighbour):
                continue
            if not can_pass(neighbour):
                continue
            tentative = g_score[current] + 1
            if tentative < g_score.get(neighbour, tentative + 1):
                g_score[neighbour] = tentative
                came_from[neighbour] = current
                f = tentative + neighbour.manhattan(destination)
                heapq.heappush(open_set, (f, next(discovery), neighbour))

    return None
