"""Routing strategies — one waypoint generator per RoutingStrategy.

Every generator takes the two nozzle points, the route's index in the
connection list (for parallel-pipe staggering) and a RouteContext, and
returns a polyline whose first and last points are exactly the nozzles.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from pidlayout.pipeline.config import RouterConfig

from .models import Point, RoutingStrategy
from .occupancy import OccupiedSpace
from .pathfinder import find_path, simplify_path


log = logging.getLogger(__name__)


@dataclass
class RouteContext:
    """Per-connection routing state."""

    space: OccupiedSpace
    config: RouterConfig
    bounds: tuple[float, float, float, float]   # drawable (xmin, ymin, xmax, ymax)
    ignore: set[str] = field(default_factory=set)   # owners transparent to this route
    fallback: bool = False                      # set when smart search gave up


def route_direct(start: Point, end: Point, index: int, ctx: RouteContext) -> list[Point]:
    return [start, end]


def route_manhattan(start: Point, end: Point, index: int, ctx: RouteContext) -> list[Point]:
    """Z-shaped route through the midpoint of the dominant axis.

    Parallel pipes are staggered by ``(index % 3) * min_pipe_spacing``
    on the middle riser so all three segments stay axis-aligned.
    """
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    offset = (index % 3) * ctx.config.min_pipe_spacing

    if abs(dx) > abs(dy):
        mid_x = start[0] + dx * 0.5 + offset
        return [start, (mid_x, start[1]), (mid_x, end[1]), end]
    mid_y = start[1] + dy * 0.5 + offset
    return [start, (start[0], mid_y), (end[0], mid_y), end]


def route_orthogonal(start: Point, end: Point, index: int, ctx: RouteContext) -> list[Point]:
    """Horizontal-first L, or a quarter/three-quarter detour when the
    straight bounding box between the nozzles touches an obstacle."""
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    offset = (index % 5) * ctx.config.min_pipe_spacing * 0.5

    if not ctx.space.blocks_box(start, end, ctx.ignore):
        mid_x = start[0] + dx * 0.5 + offset
        return [start, (mid_x, start[1]), (mid_x, end[1]), end]

    if abs(dx) > abs(dy):
        qx = start[0] + dx * 0.25
        tqx = start[0] + dx * 0.75
        detour_y = end[1] + offset
        return [
            start,
            (qx, start[1]),
            (qx, detour_y),
            (tqx, detour_y),
            (tqx, end[1]),
            end,
        ]
    qy = start[1] + dy * 0.25
    tqy = start[1] + dy * 0.75
    detour_x = end[0] + offset
    return [
        start,
        (start[0], qy),
        (detour_x, qy),
        (detour_x, tqy),
        (end[0], tqy),
        end,
    ]


def _elbow(a: Point, b: Point, horizontal_first: bool) -> list[Point]:
    """Corner joining *a* to *b* with axis-aligned segments (none if aligned)."""
    if a[0] == b[0] or a[1] == b[1]:
        return []
    return [(b[0], a[1])] if horizontal_first else [(a[0], b[1])]


def route_smart(start: Point, end: Point, index: int, ctx: RouteContext) -> list[Point]:
    """A* around occupied space; Manhattan route if the search fails.

    Off-grid nozzles join the grid path through an elbow that leaves
    and enters each nozzle horizontally.
    """
    cfg = ctx.config
    field_ = ctx.space.obstacle_field(cfg.min_pipe_spacing, ctx.ignore)
    path = find_path(
        start, end, field_, ctx.bounds, cfg.grid_size,
        max_expansions=cfg.max_expansions,
    )
    if not path:
        log.warning("A* found no path %s -> %s, falling back to manhattan",
                    start, end)
        ctx.fallback = True
        return route_manhattan(start, end, index, ctx)

    joined = [
        start,
        *_elbow(start, path[0], horizontal_first=True),
        *path,
        *_elbow(path[-1], end, horizontal_first=False),
        end,
    ]
    deduped = [p for k, p in enumerate(joined) if k == 0 or p != joined[k - 1]]
    waypoints = simplify_path(deduped)
    if len(waypoints) < 2:
        waypoints.append(end)
    return waypoints


StrategyFn = Callable[[Point, Point, int, RouteContext], list[Point]]

ROUTERS: dict[RoutingStrategy, StrategyFn] = {
    RoutingStrategy.MANHATTAN: route_manhattan,
    RoutingStrategy.DIRECT: route_direct,
    RoutingStrategy.ORTHOGONAL: route_orthogonal,
    RoutingStrategy.SMART: route_smart,
}
