"""Instrumentation engine — categorize, associate, place and wire instruments.

Algorithm overview:
  1. Parse each tag (ISA-5.1) and derive mounting location, signal type
     and a connection-point hint.
  2. Resolve each instrument to a placed equipment node: explicit
     reference, description keyword, measured-variable heuristic, then
     nearest equipment.
  3. Group instruments into control loops by loop number.
  4. Run the chosen placement strategy.
  5. Route one signal line per instrument with resolved equipment.
"""

from __future__ import annotations

import logging
import math

from pidlayout.pipeline.config import CanvasConfig, InstrumentConfig, coerce_enum
from pidlayout.pipeline.diagnostics import Diagnostic, MISSING_REFERENCE, MALFORMED_TAG
from pidlayout.pipeline.diagram.classify import type_matches
from pidlayout.pipeline.diagram.models import EquipmentNode, InstrumentSpec

from .layouts import LAYOUTS
from .models import (
    Instrument, ControlLoop, SignalRoute, InstrumentSymbol, InstrumentationResult,
    MountingLocation, SignalType, InstrumentStrategy,
)
from .tags import parse_tag


log = logging.getLogger(__name__)


SIGNAL_LINE_STYLES: dict[SignalType, str] = {
    SignalType.ELECTRIC: "solid",
    SignalType.PNEUMATIC: "dashed",
    SignalType.HYDRAULIC: "dashdot",
    SignalType.CAPILLARY: "dotted",
    SignalType.WIRELESS: "dashdotdot",
}

# Equipment words looked for in an instrument's description
DESCRIPTION_KEYWORDS = ("pump", "vessel", "tank", "column", "exchanger", "reactor", "drum")

# Measured variable -> equipment type keywords it usually sits on
VARIABLE_EQUIPMENT: dict[str, tuple[str, ...]] = {
    "F": ("pump",),
    "L": ("tank", "vessel", "drum"),
    "P": ("vessel", "column", "reactor"),
    "T": ("exchanger", "reactor", "furnace"),
}


# ── Categorization ─────────────────────────────────────────────────


def determine_mounting(functions: list[str], is_local: bool = False) -> MountingLocation:
    if "T" in functions or "E" in functions:
        return MountingLocation.FIELD
    if "C" in functions or "R" in functions:
        return MountingLocation.DCS
    if "I" in functions:
        return MountingLocation.FIELD if is_local else MountingLocation.PANEL
    return MountingLocation.FIELD


def determine_signal_type(declared: str) -> SignalType:
    """Signal type from the declared free-text field; electric by default."""
    t = (declared or "").lower()
    if "pneumatic" in t or "air" in t:
        return SignalType.PNEUMATIC
    if "wireless" in t or "radio" in t:
        return SignalType.WIRELESS
    if "hydraulic" in t:
        return SignalType.HYDRAULIC
    if "capillary" in t:
        return SignalType.CAPILLARY
    return SignalType.ELECTRIC


def determine_connection_point(spec: InstrumentSpec) -> str | None:
    """Explicit equipment reference, else an equipment word in the description."""
    if spec.equipment_tag:
        return spec.equipment_tag
    desc = (spec.description or "").lower()
    for keyword in DESCRIPTION_KEYWORDS:
        if keyword in desc:
            return keyword
    return None


def categorize_instrument(spec: InstrumentSpec) -> Instrument:
    info = parse_tag(spec.tag)
    return Instrument(
        tag=spec.tag,
        measured_variable=info.measured_variable,
        functions=info.functions,
        loop_number=info.loop_number,
        suffix=info.suffix,
        is_valid=info.is_valid,
        description=info.description,
        service=spec.description,
        mounting=determine_mounting(info.functions, spec.is_local),
        signal_type=determine_signal_type(spec.signal_type),
        connection_point=determine_connection_point(spec),
        x=spec.x if spec.x is not None else 0.0,
        y=spec.y if spec.y is not None else 0.0,
    )


# ── Equipment association ──────────────────────────────────────────


def _type_text(node: EquipmentNode) -> str:
    return node.equipment_type or node.category.value


def find_equipment(
    instrument: Instrument, equipment: list[EquipmentNode],
) -> EquipmentNode | None:
    """Pick the equipment an instrument measures.

    Tried in order: equipment whose tag (then type) contains the
    connection point, the first equipment matching the measured
    variable's keywords, and finally the nearest equipment to the
    instrument's current position.
    """
    if instrument.connection_point:
        hint = instrument.connection_point.lower()
        for node in equipment:
            if node.tag.lower() == hint:
                return node
        for node in equipment:
            if hint in node.tag.lower():
                return node
        for node in equipment:
            if hint in _type_text(node).lower():
                return node

    keywords = VARIABLE_EQUIPMENT.get(instrument.measured_variable)
    if keywords:
        for node in equipment:
            if type_matches(_type_text(node), keywords):
                return node

    if not equipment:
        return None
    closest = equipment[0]
    best = math.hypot(closest.x - instrument.x, closest.y - instrument.y)
    for node in equipment[1:]:
        d = math.hypot(node.x - instrument.x, node.y - instrument.y)
        if d < best:
            closest, best = node, d
    return closest


def identify_control_loops(instruments: list[Instrument]) -> list[ControlLoop]:
    """Group by loop number (first-appearance order) and flag loop parts."""
    loops: dict[str, ControlLoop] = {}
    for inst in instruments:
        loop = loops.get(inst.loop_number)
        if loop is None:
            loop = ControlLoop(
                loop_id=inst.loop_number,
                measured_variable=inst.measured_variable,
            )
            loops[inst.loop_number] = loop
        loop.instruments.append(inst.tag)
        loop.has_controller |= "C" in inst.functions
        loop.has_transmitter |= "T" in inst.functions
        loop.has_valve |= "V" in inst.functions
        loop.has_indicator |= "I" in inst.functions
    return list(loops.values())


# ── Signal lines ───────────────────────────────────────────────────


def route_signal_lines(
    instruments: list[Instrument],
    equipment: list[EquipmentNode],
    config: InstrumentConfig | None = None,
) -> list[SignalRoute]:
    """One signal line per instrument with resolved equipment.

    The line is straight, or an L (vertical first) when both axis
    deltas exceed the bend threshold.
    """
    if config is None:
        config = InstrumentConfig()
    by_tag = {n.tag: n for n in equipment}
    routes = []
    for inst in instruments:
        node = by_tag.get(inst.equipment_tag) if inst.equipment_tag else None
        if node is None:
            continue
        start = (inst.x, inst.y)
        end = (node.x, node.y)
        if (abs(node.x - inst.x) > config.signal_bend_threshold
                and abs(node.y - inst.y) > config.signal_bend_threshold):
            waypoints = [start, (inst.x, node.y), end]
        else:
            waypoints = [start, end]
        routes.append(SignalRoute(
            id=f"signal_{inst.tag}",
            instrument_tag=inst.tag,
            equipment_tag=node.tag,
            waypoints=waypoints,
            signal_type=inst.signal_type,
            line_style=SIGNAL_LINE_STYLES.get(inst.signal_type, "solid"),
        ))
    return routes


# ── Main entry point ───────────────────────────────────────────────


def place_instruments(
    equipment: list[EquipmentNode],
    instruments: list[InstrumentSpec],
    canvas: CanvasConfig | None = None,
    *,
    strategy: InstrumentStrategy | str = InstrumentStrategy.AUTO,
    config: InstrumentConfig | None = None,
) -> InstrumentationResult:
    """Categorize, associate, place and wire every instrument.

    Malformed tags and explicit references to equipment that is not
    placed are reported as diagnostics; the instrument is kept.
    """
    if canvas is None:
        canvas = CanvasConfig()
    if config is None:
        config = InstrumentConfig()
    strategy = coerce_enum(InstrumentStrategy, strategy, "instrument strategy")
    config.validate()
    canvas.validate(config.margins)

    result = InstrumentationResult(instruments=[])
    placed_tags = {n.tag for n in equipment}

    for spec in instruments:
        inst = categorize_instrument(spec)
        if not inst.is_valid:
            log.warning("Instruments: malformed tag %r, treated as unclassified", spec.tag)
            result.diagnostics.append(Diagnostic(
                kind=MALFORMED_TAG,
                stage="instruments",
                subject=spec.tag,
                message=f"Tag {spec.tag!r} does not follow ISA-5.1; defaulted to XI-000",
            ))

        if spec.equipment_tag and spec.equipment_tag not in placed_tags:
            log.warning("Instruments: %s references missing equipment %s",
                        spec.tag, spec.equipment_tag)
            result.diagnostics.append(Diagnostic(
                kind=MISSING_REFERENCE,
                stage="instruments",
                subject=spec.tag,
                message=f"Equipment {spec.equipment_tag} is not placed; no signal line",
            ))
        else:
            node = find_equipment(inst, equipment)
            inst.equipment_tag = node.tag if node is not None else None
        result.instruments.append(inst)

    result.loops = identify_control_loops(result.instruments)

    log.info("Instruments: %d instruments, %d loops, strategy=%s",
             len(result.instruments), len(result.loops), strategy.value)

    LAYOUTS[strategy](
        result.instruments, {n.tag: n for n in equipment}, canvas, config)
    result.signal_routes = route_signal_lines(result.instruments, equipment, config)
    return result


# ── Helpers used outside the pipeline ──────────────────────────────


def auto_generate_instruments(equipment: list[EquipmentNode]) -> list[InstrumentSpec]:
    """Typical instruments per equipment; loop numbers count up from 100.

    Pumps get flow and discharge pressure, vessels level and pressure,
    exchangers an outlet temperature.
    """
    specs: list[InstrumentSpec] = []
    loop = 100

    def add(prefix: str, node: EquipmentNode, text: str) -> None:
        nonlocal loop
        specs.append(InstrumentSpec(
            tag=f"{prefix}-{loop}",
            description=f"{node.tag} {text}",
            equipment_tag=node.tag,
            signal_type="electric",
        ))
        loop += 1

    for node in equipment:
        t = _type_text(node)
        if type_matches(t, ("pump",)):
            add("FT", node, "Flow Transmitter")
            add("PT", node, "Discharge Pressure")
        if type_matches(t, ("tank", "vessel", "drum")):
            add("LT", node, "Level Transmitter")
            add("PT", node, "Pressure")
        if type_matches(t, ("exchanger", "heater", "cooler")):
            add("TT", node, "Outlet Temperature")
    return specs


def instrument_symbol(instrument: Instrument) -> InstrumentSymbol:
    """ISA bubble style: field circle, panel circle-on-line or DCS box."""
    if instrument.mounting == MountingLocation.PANEL:
        circle = "panel"
    elif instrument.mounting == MountingLocation.DCS:
        circle = "dcs"
    else:
        circle = "field"
    return InstrumentSymbol(
        circle_type=circle,
        show_balloon=any(f in instrument.functions for f in ("C", "I", "R")),
        letters=instrument.letters,
        loop_number=instrument.loop_number,
    )
