"""Point helpers for routing — nozzles, snapping, arrows, lengths."""

from __future__ import annotations

import math

from pidlayout.pipeline.diagram.models import EquipmentNode
from pidlayout.pipeline.placer.geometry import snap_value

from .models import Point, FlowArrow


def connection_point(
    equipment: EquipmentNode, target: EquipmentNode, offset: float = 30.0,
) -> Point:
    """Nozzle on the side of *equipment* that faces *target*.

    Horizontal when the centres differ more in x than in y, otherwise
    vertical; *offset* units from the centre.
    """
    dx = target.x - equipment.x
    dy = target.y - equipment.y
    if abs(dx) > abs(dy):
        return (equipment.x + (offset if dx > 0 else -offset), equipment.y)
    return (equipment.x, equipment.y + (offset if dy > 0 else -offset))


def snap_point(point: Point, grid_size: float) -> Point:
    return (snap_value(point[0], grid_size), snap_value(point[1], grid_size))


def flow_arrows(waypoints: list[Point]) -> list[FlowArrow]:
    """One arrow per segment, at its midpoint, pointing downstream."""
    arrows = []
    for (x1, y1), (x2, y2) in zip(waypoints, waypoints[1:]):
        arrows.append(FlowArrow(
            x=(x1 + x2) / 2,
            y=(y1 + y2) / 2,
            angle=math.atan2(y2 - y1, x2 - x1),
        ))
    return arrows


def route_length(waypoints: list[Point]) -> float:
    """Sum of Euclidean segment lengths."""
    return sum(
        math.hypot(x2 - x1, y2 - y1)
        for (x1, y1), (x2, y2) in zip(waypoints, waypoints[1:])
    )


def is_orthogonal(waypoints: list[Point]) -> bool:
    """True if every segment is horizontal or vertical."""
    return all(
        x1 == x2 or y1 == y2
        for (x1, y1), (x2, y2) in zip(waypoints, waypoints[1:])
    )


def points_outside(
    waypoints: list[Point], bounds: tuple[float, float, float, float],
) -> list[Point]:
    """Waypoints outside (xmin, ymin, xmax, ymax); edges count as inside."""
    xmin, ymin, xmax, ymax = bounds
    return [
        (x, y) for x, y in waypoints
        if not (xmin <= x <= xmax and ymin <= y <= ymax)
    ]
