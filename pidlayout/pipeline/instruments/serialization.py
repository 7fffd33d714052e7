"""Instrumentation serialization — JSON conversion."""

from __future__ import annotations

from .models import (
    Instrument, ControlLoop, SignalRoute, InstrumentationResult,
    MountingLocation, SignalType,
)


def instrument_to_dict(inst: Instrument) -> dict:
    return {
        "tag": inst.tag,
        "measured_variable": inst.measured_variable,
        "functions": list(inst.functions),
        "loop_number": inst.loop_number,
        "suffix": inst.suffix,
        "is_valid": inst.is_valid,
        "description": inst.description,
        "service": inst.service,
        "mounting": inst.mounting.value,
        "signal_type": inst.signal_type.value,
        "connection_point": inst.connection_point,
        "equipment_tag": inst.equipment_tag,
        "x": inst.x,
        "y": inst.y,
        "group": inst.group,
    }


def loop_to_dict(loop: ControlLoop) -> dict:
    return {
        "loop_id": loop.loop_id,
        "measured_variable": loop.measured_variable,
        "instruments": list(loop.instruments),
        "has_controller": loop.has_controller,
        "has_transmitter": loop.has_transmitter,
        "has_valve": loop.has_valve,
        "has_indicator": loop.has_indicator,
    }


def signal_route_to_dict(route: SignalRoute) -> dict:
    return {
        "id": route.id,
        "instrument_tag": route.instrument_tag,
        "equipment_tag": route.equipment_tag,
        "waypoints": [list(p) for p in route.waypoints],
        "signal_type": route.signal_type.value,
        "line_style": route.line_style,
    }


def instrumentation_to_dict(result: InstrumentationResult) -> dict:
    """Serialize an InstrumentationResult to a JSON-safe dict."""
    return {
        "instruments": [instrument_to_dict(i) for i in result.instruments],
        "loops": [loop_to_dict(lp) for lp in result.loops],
        "signal_routes": [signal_route_to_dict(r) for r in result.signal_routes],
        "diagnostics": [d.to_dict() for d in result.diagnostics],
    }


def parse_instrument(data: dict) -> Instrument:
    return Instrument(
        tag=data["tag"],
        measured_variable=data["measured_variable"],
        functions=list(data.get("functions", [])),
        loop_number=data.get("loop_number", "000"),
        suffix=data.get("suffix", ""),
        is_valid=data.get("is_valid", True),
        description=data.get("description", ""),
        service=data.get("service", ""),
        mounting=MountingLocation(data.get("mounting", "field")),
        signal_type=SignalType(data.get("signal_type", "electric")),
        connection_point=data.get("connection_point"),
        equipment_tag=data.get("equipment_tag"),
        x=data.get("x", 0.0),
        y=data.get("y", 0.0),
        group=data.get("group", ""),
    )


def parse_instrumentation(data: dict) -> InstrumentationResult:
    """Parse an instrumentation dict back (without diagnostics)."""
    return InstrumentationResult(
        instruments=[parse_instrument(i) for i in data.get("instruments", [])],
        loops=[
            ControlLoop(
                loop_id=lp["loop_id"],
                measured_variable=lp["measured_variable"],
                instruments=list(lp.get("instruments", [])),
                has_controller=lp.get("has_controller", False),
                has_transmitter=lp.get("has_transmitter", False),
                has_valve=lp.get("has_valve", False),
                has_indicator=lp.get("has_indicator", False),
            )
            for lp in data.get("loops", [])
        ],
        signal_routes=[
            SignalRoute(
                id=r["id"],
                instrument_tag=r["instrument_tag"],
                equipment_tag=r["equipment_tag"],
                waypoints=[tuple(p) for p in r["waypoints"]],
                signal_type=SignalType(r["signal_type"]),
                line_style=r["line_style"],
            )
            for r in data.get("signal_routes", [])
        ],
    )
