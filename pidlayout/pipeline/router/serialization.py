"""Routing serialization — JSON conversion."""

from __future__ import annotations

from .models import Route, RoutingResult, FlowArrow, PipeCategory, RoutingStrategy


def route_to_dict(route: Route) -> dict:
    return {
        "id": route.id,
        "from_tag": route.from_tag,
        "to_tag": route.to_tag,
        "from_point": list(route.from_point),
        "to_point": list(route.to_point),
        "waypoints": [list(p) for p in route.waypoints],
        "category": route.category.value,
        "line_style": route.line_style,
        "line_width": route.line_width,
        "flow_arrows": [
            {"x": a.x, "y": a.y, "angle": a.angle}
            for a in route.flow_arrows
        ],
        "strategy": route.strategy.value,
        "line_number": route.line_number,
        "fluid": route.fluid,
        "nominal_size": route.nominal_size,
        "connection_type": route.connection_type,
        "attributes": dict(route.attributes),
    }


def routing_to_dict(result: RoutingResult) -> dict:
    """Serialize a RoutingResult to a JSON-safe dict."""
    return {
        "routes": [route_to_dict(r) for r in result.routes],
        "dropped": list(result.dropped),
        "diagnostics": [d.to_dict() for d in result.diagnostics],
    }


def parse_route(data: dict) -> Route:
    return Route(
        id=data["id"],
        from_tag=data["from_tag"],
        to_tag=data["to_tag"],
        from_point=tuple(data["from_point"]),
        to_point=tuple(data["to_point"]),
        waypoints=[tuple(p) for p in data["waypoints"]],
        category=PipeCategory(data.get("category", "process")),
        line_style=data.get("line_style", "solid"),
        line_width=data.get("line_width", 2),
        flow_arrows=[
            FlowArrow(x=a["x"], y=a["y"], angle=a["angle"])
            for a in data.get("flow_arrows", [])
        ],
        strategy=RoutingStrategy(data.get("strategy", "manhattan")),
        line_number=data.get("line_number", ""),
        fluid=data.get("fluid", ""),
        nominal_size=data.get("nominal_size", 2.0),
        connection_type=data.get("connection_type", "process"),
        attributes=dict(data.get("attributes") or {}),
    )


def parse_routing(data: dict) -> RoutingResult:
    """Parse a routing dict back into a RoutingResult (without diagnostics)."""
    return RoutingResult(
        routes=[parse_route(r) for r in data.get("routes", [])],
        dropped=list(data.get("dropped", [])),
    )
