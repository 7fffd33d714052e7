"""Router output dataclasses and strategy enums."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pidlayout.pipeline.diagnostics import Diagnostic


Point = tuple[float, float]


class RoutingStrategy(str, Enum):
    MANHATTAN = "manhattan"
    DIRECT = "direct"
    ORTHOGONAL = "orthogonal"
    SMART = "smart"


class PipeCategory(str, Enum):
    PROCESS = "process"
    UTILITY_STEAM = "utility-steam"
    UTILITY_COOLING = "utility-cooling"
    UTILITY_AIR = "utility-air"
    UTILITY_NITROGEN = "utility-nitrogen"
    INSTRUMENT = "instrument"
    SIGNAL = "signal"


# ── Output dataclasses ─────────────────────────────────────────────


@dataclass
class FlowArrow:
    """Arrow at a segment midpoint; angle in radians, atan2(dy, dx)."""

    x: float
    y: float
    angle: float


@dataclass
class Route:
    """A routed pipe between two placed equipment nodes."""

    id: str                             # "pipe_<connection index>"
    from_tag: str
    to_tag: str
    from_point: Point
    to_point: Point
    waypoints: list[Point]              # first == from_point, last == to_point
    category: PipeCategory = PipeCategory.PROCESS
    line_style: str = "solid"
    line_width: int = 2
    flow_arrows: list[FlowArrow] = field(default_factory=list)
    strategy: RoutingStrategy = RoutingStrategy.MANHATTAN   # strategy actually used
    line_number: str = ""
    fluid: str = ""
    nominal_size: float = 2.0
    connection_type: str = "process"
    attributes: dict = field(default_factory=dict)

    @property
    def midpoint(self) -> Point:
        """Middle waypoint (used to anchor process data callouts)."""
        return self.waypoints[len(self.waypoints) // 2]


@dataclass
class RoutingResult:
    """All routes plus the connections that could not be routed."""

    routes: list[Route]
    dropped: list[str] = field(default_factory=list)   # "<from>-><to>"
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return len(self.dropped) == 0 and not self.diagnostics

    def by_id(self) -> dict[str, Route]:
        return {r.id: r for r in self.routes}
