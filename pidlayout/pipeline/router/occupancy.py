"""Occupied space — obstacle rectangles for one routing call.

Equipment footprints (grown by the equipment clearance) go in first.
When crossings are avoided, each committed route adds one corridor per
segment.  Rectangles record an owner so a connection can ignore its
own endpoint equipment.
"""

from __future__ import annotations

from dataclasses import dataclass

from shapely.geometry import Point as ShapelyPoint, box as shapely_box
from shapely.ops import unary_union
from shapely.prepared import prep as shapely_prep

from pidlayout.pipeline.diagram.models import EquipmentNode

from .models import Point


@dataclass
class OccupiedRect:
    """Axis-aligned obstacle; (x, y) is the top-left corner."""

    x: float
    y: float
    width: float
    height: float
    owner: str          # equipment tag or route id
    kind: str           # "equipment" | "pipe"

    def touches_box(self, minx: float, miny: float, maxx: float, maxy: float) -> bool:
        """Inclusive bounding-box overlap test."""
        return not (maxx < self.x or minx > self.x + self.width
                    or maxy < self.y or miny > self.y + self.height)


class ObstacleField:
    """Point-in-obstacle test over a fixed set of (inflated) rectangles."""

    def __init__(self, rects: list[OccupiedRect], inflate: float) -> None:
        boxes = [
            shapely_box(r.x - inflate, r.y - inflate,
                        r.x + r.width + inflate, r.y + r.height + inflate)
            for r in rects
        ]
        self._empty = not boxes
        self._prepared = None if self._empty else shapely_prep(unary_union(boxes))

    def blocked(self, x: float, y: float) -> bool:
        """True if (x, y) lies inside or on the edge of any obstacle."""
        if self._empty:
            return False
        return self._prepared.covers(ShapelyPoint(x, y))


class OccupiedSpace:
    """Transient rectangle list; built per routing call, never shared."""

    def __init__(self, rects: list[OccupiedRect] | None = None) -> None:
        self.rects: list[OccupiedRect] = list(rects or [])

    @classmethod
    def from_equipment(
        cls, equipment: list[EquipmentNode], clearance: float,
    ) -> OccupiedSpace:
        return cls([
            OccupiedRect(
                x=n.left - clearance,
                y=n.top - clearance,
                width=n.width + 2 * clearance,
                height=n.height + 2 * clearance,
                owner=n.tag,
                kind="equipment",
            )
            for n in equipment
        ])

    def add_route(self, route_id: str, waypoints: list[Point], spacing: float) -> None:
        """Add one corridor per segment: its bounding box grown by spacing/2."""
        half = spacing / 2
        for (x1, y1), (x2, y2) in zip(waypoints, waypoints[1:]):
            self.rects.append(OccupiedRect(
                x=min(x1, x2) - half,
                y=min(y1, y2) - half,
                width=abs(x2 - x1) + spacing,
                height=abs(y2 - y1) + spacing,
                owner=route_id,
                kind="pipe",
            ))

    def excluding(self, owners: set[str]) -> list[OccupiedRect]:
        return [r for r in self.rects if r.owner not in owners]

    def blocks_box(
        self, a: Point, b: Point, ignore: set[str] | None = None,
    ) -> bool:
        """True if the bounding box of segment a-b touches any obstacle."""
        minx, maxx = min(a[0], b[0]), max(a[0], b[0])
        miny, maxy = min(a[1], b[1]), max(a[1], b[1])
        return any(
            r.touches_box(minx, miny, maxx, maxy)
            for r in self.excluding(ignore or set())
        )

    def obstacle_field(
        self, inflate: float, ignore: set[str] | None = None,
    ) -> ObstacleField:
        return ObstacleField(self.excluding(ignore or set()), inflate)

    def __len__(self) -> int:
        return len(self.rects)
