"""Low-level geometry helpers for the placer."""

from __future__ import annotations

import math

from shapely.geometry import box as shapely_box

from pidlayout.pipeline.config import CanvasConfig
from pidlayout.pipeline.diagram.models import EquipmentNode

# Extra push so a resolved pair lands strictly outside the collision test.
SEPARATION_EPS = 0.5


def snap_value(value: float, grid_size: float) -> float:
    """Round half-up to the nearest multiple of *grid_size*."""
    return math.floor(value / grid_size + 0.5) * grid_size


def boxes_collide(a: EquipmentNode, b: EquipmentNode, margin: float) -> bool:
    """True if the footprints, each grown by *margin*, overlap on both axes."""
    return (
        abs(a.x - b.x) < (a.width + b.width) / 2 + margin
        and abs(a.y - b.y) < (a.height + b.height) / 2 + margin
    )


def separation_vector(
    a: EquipmentNode, b: EquipmentNode, margin: float,
) -> tuple[float, float]:
    """Displacement to add to *b* (and subtract from *a*) to separate them.

    The pair is pushed apart along the line connecting their centres
    until one axis clears the inflated boxes.  Each node moves half the
    overlap.  Coincident centres separate along +x.
    """
    dx = b.x - a.x
    dy = b.y - a.y
    dist = math.hypot(dx, dy)
    if dist == 0:
        ux, uy = 1.0, 0.0
    else:
        ux, uy = dx / dist, dy / dist

    need_x = (a.width + b.width) / 2 + margin
    need_y = (a.height + b.height) / 2 + margin
    reach: list[float] = []
    if abs(ux) > 1e-12:
        reach.append(need_x / abs(ux))
    if abs(uy) > 1e-12:
        reach.append(need_y / abs(uy))
    overlap = min(reach) - dist + SEPARATION_EPS
    if overlap <= 0:
        return (0.0, 0.0)
    half = overlap / 2
    return (ux * half, uy * half)


def count_collisions(nodes: list[EquipmentNode], margin: float) -> int:
    """Number of colliding node pairs."""
    n = 0
    for i in range(len(nodes)):
        for j in range(i + 1, len(nodes)):
            if boxes_collide(nodes[i], nodes[j], margin):
                n += 1
    return n


def node_inside_canvas(node: EquipmentNode, canvas: CanvasConfig) -> bool:
    """True if the footprint lies within the canvas (edges may touch)."""
    frame = shapely_box(0, 0, canvas.width, canvas.height)
    footprint = shapely_box(node.left, node.top, node.right, node.bottom)
    return frame.covers(footprint)
