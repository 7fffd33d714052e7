"""Router — pipe routes between placed equipment.

Submodules:
  models        Output dataclasses and strategy/category enums.
  geometry      Nozzle points, snapping, flow arrows, route length.
  occupancy     Occupied space (equipment footprints and pipe corridors).
  pathfinder    A* on the implicit routing grid, path simplification.
  strategies    Waypoint generators (direct, manhattan, orthogonal, smart).
  styles        Pipe categorization, line style and width.
  engine        Main routing loop and route editing helpers.
  serialization JSON conversion (routing_to_dict, parse_routing).
"""

from .models import (
    Point, RoutingStrategy, PipeCategory, FlowArrow, Route, RoutingResult,
)
from .engine import route_pipes, auto_generate_connections, reroute_pipe, order_by_length
from .geometry import connection_point, flow_arrows, route_length, is_orthogonal
from .occupancy import OccupiedSpace, OccupiedRect
from .strategies import (
    RouteContext, route_direct, route_manhattan, route_orthogonal, route_smart,
)
from .styles import categorize_pipe, line_style, line_width
from .serialization import route_to_dict, routing_to_dict, parse_route, parse_routing

__all__ = [
    # Models
    "Point", "RoutingStrategy", "PipeCategory", "FlowArrow", "Route", "RoutingResult",
    # Engine
    "route_pipes", "auto_generate_connections", "reroute_pipe", "order_by_length",
    "connection_point", "flow_arrows", "route_length", "is_orthogonal",
    "OccupiedSpace", "OccupiedRect",
    "RouteContext", "route_direct", "route_manhattan", "route_orthogonal", "route_smart",
    "categorize_pipe", "line_style", "line_width",
    # Serialization
    "route_to_dict", "routing_to_dict", "parse_route", "parse_routing",
]
