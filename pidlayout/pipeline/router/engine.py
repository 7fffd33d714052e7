"""Main routing engine — one polyline per connection, in input order.

Algorithm overview:
  1. Index placed equipment by tag; build occupied space from their
     footprints grown by the equipment clearance.
  2. For each connection (input order decides precedence):
       a. drop it if either endpoint is not placed;
       b. pick the facing nozzle on each endpoint (grid-snapped);
       c. run the chosen strategy, ignoring the endpoints' own
          footprints as obstacles;
       d. style it, add flow arrows, and (when avoiding crossings)
          add its segment corridors to occupied space.
"""

from __future__ import annotations

import dataclasses
import logging

from pidlayout.pipeline.config import CanvasConfig, RouterConfig, coerce_enum
from pidlayout.pipeline.diagnostics import (
    Diagnostic, MISSING_REFERENCE, SEARCH_EXHAUSTION, OUT_OF_BOUNDS,
)
from pidlayout.pipeline.diagram.models import EquipmentNode, Connection

from .geometry import (
    connection_point, snap_point, flow_arrows, route_length, points_outside,
)
from .models import Point, Route, RoutingResult, RoutingStrategy
from .occupancy import OccupiedSpace
from .strategies import ROUTERS, RouteContext
from .styles import categorize_pipe, line_style, line_width


log = logging.getLogger(__name__)


def route_pipes(
    equipment: list[EquipmentNode],
    connections: list[Connection],
    canvas: CanvasConfig | None = None,
    *,
    strategy: RoutingStrategy | str = RoutingStrategy.MANHATTAN,
    avoid_crossings: bool = True,
    snap_to_grid: bool = True,
    config: RouterConfig | None = None,
) -> RoutingResult:
    """Route every connection between placed equipment.

    Parameters
    ----------
    equipment : list[EquipmentNode]
        Placed nodes (placer output).  Not modified.
    connections : list[Connection]
        Pipes to route.  Earlier connections claim space first.
    strategy : RoutingStrategy | str
        Waypoint generator for every connection.
    avoid_crossings : bool
        Add each routed pipe's corridors to occupied space.
    snap_to_grid : bool
        Snap nozzles and waypoints to the routing grid.

    Returns
    -------
    RoutingResult
        Routes, dropped connections and diagnostics.
    """
    if canvas is None:
        canvas = CanvasConfig()
    if config is None:
        config = RouterConfig()
    strategy = coerce_enum(RoutingStrategy, strategy, "routing strategy")
    config.validate()
    canvas.validate(config.margins)

    by_tag = {n.tag: n for n in equipment}
    space = OccupiedSpace.from_equipment(equipment, config.equipment_clearance)
    bounds = canvas.drawable(config.margins)
    generate = ROUTERS[strategy]
    result = RoutingResult(routes=[])

    log.info("Router: %d connections over %d equipment, strategy=%s",
             len(connections), len(equipment), strategy.value)

    for index, conn in enumerate(connections):
        src = by_tag.get(conn.from_tag)
        dst = by_tag.get(conn.to_tag)
        if src is None or dst is None:
            missing = conn.from_tag if src is None else conn.to_tag
            log.warning("Router: missing equipment %s for connection %s -> %s",
                        missing, conn.from_tag, conn.to_tag)
            result.dropped.append(f"{conn.from_tag}->{conn.to_tag}")
            result.diagnostics.append(Diagnostic(
                kind=MISSING_REFERENCE,
                stage="router",
                subject=f"{conn.from_tag}->{conn.to_tag}",
                message=f"Equipment {missing} is not placed; connection dropped",
            ))
            continue

        route_id = f"pipe_{index}"
        start = connection_point(src, dst, config.connection_offset)
        end = connection_point(dst, src, config.connection_offset)
        if snap_to_grid:
            start = snap_point(start, config.grid_size)
            end = snap_point(end, config.grid_size)

        ctx = RouteContext(
            space=space, config=config, bounds=bounds,
            ignore={src.tag, dst.tag},
        )
        waypoints = generate(start, end, index, ctx)
        if snap_to_grid:
            waypoints = [snap_point(p, config.grid_size) for p in waypoints]

        used = strategy
        if ctx.fallback:
            used = RoutingStrategy.MANHATTAN
            result.diagnostics.append(Diagnostic(
                kind=SEARCH_EXHAUSTION,
                stage="router",
                subject=route_id,
                message=(f"No A* path from {conn.from_tag} to {conn.to_tag} "
                         f"within {config.max_expansions} expansions; "
                         f"routed manhattan instead"),
            ))

        outside = points_outside(waypoints, bounds)
        if outside:
            log.warning("Router: %s has %d waypoints outside the drawable area",
                        route_id, len(outside))
            result.diagnostics.append(Diagnostic(
                kind=OUT_OF_BOUNDS,
                stage="router",
                subject=route_id,
                message=f"{len(outside)} waypoints outside the drawable area",
            ))

        category = categorize_pipe(conn)
        route = Route(
            id=route_id,
            from_tag=src.tag,
            to_tag=dst.tag,
            from_point=start,
            to_point=end,
            waypoints=waypoints,
            category=category,
            line_style=line_style(category),
            line_width=line_width(conn.nominal_size),
            flow_arrows=flow_arrows(waypoints),
            strategy=used,
            line_number=conn.line_number,
            fluid=conn.fluid,
            nominal_size=conn.nominal_size,
            connection_type=conn.connection_type,
            attributes=dict(conn.attributes),
        )
        result.routes.append(route)
        log.debug("Router: %s %s -> %s, %d waypoints",
                  route_id, src.tag, dst.tag, len(waypoints))

        if avoid_crossings:
            space.add_route(route_id, waypoints, config.min_pipe_spacing)

    log.info("Router: %d routed, %d dropped, %d diagnostics",
             len(result.routes), len(result.dropped), len(result.diagnostics))
    return result


def auto_generate_connections(equipment: list[EquipmentNode]) -> list[Connection]:
    """Chain equipment in list order with 4" process lines."""
    return [
        Connection(
            from_tag=a.tag,
            to_tag=b.tag,
            line_number=f"{a.tag}-{b.tag}",
            fluid="Process",
            nominal_size=4.0,
            connection_type="process",
        )
        for a, b in zip(equipment, equipment[1:])
    ]


def reroute_pipe(
    routes: list[Route], route_id: str, waypoints: list[Point],
) -> list[Route]:
    """Return *routes* with one route's waypoints replaced (manual edit).

    Nozzle points follow the new polyline's ends and flow arrows are
    recomputed.  An unknown id leaves the list unchanged.
    """
    if len(waypoints) < 2:
        raise ValueError("A route needs at least two waypoints")
    if not any(r.id == route_id for r in routes):
        log.warning("Router: reroute target %s not found", route_id)
    pts = [(float(x), float(y)) for x, y in waypoints]
    return [
        dataclasses.replace(
            r,
            waypoints=pts,
            from_point=pts[0],
            to_point=pts[-1],
            flow_arrows=flow_arrows(pts),
        ) if r.id == route_id else r
        for r in routes
    ]


def order_by_length(routes: list[Route]) -> list[Route]:
    """Routes sorted shortest first (stable)."""
    return sorted(routes, key=lambda r: route_length(r.waypoints))
