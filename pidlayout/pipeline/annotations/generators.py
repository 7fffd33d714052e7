"""Annotation generators — synthesize callouts from the laid-out diagram.

Geometry is a fixed offset from the associated element: process data
sits beside the middle waypoint of a pipe, equipment notes beside the
equipment centre, design basis in the top-left corner of the sheet.
"""

from __future__ import annotations

from pidlayout.pipeline.config import AnnotationConfig
from pidlayout.pipeline.diagram.classify import type_matches
from pidlayout.pipeline.diagram.models import EquipmentNode, DiagramMetadata
from pidlayout.pipeline.router.models import Route

from .models import Annotation, AnnotationType, AnnotationToggles, SafetyLevel


PRESSURE_VESSEL_KEYWORDS = ("vessel", "column", "reactor", "drum")
FLAMMABLE_KEYWORDS = ("hydrogen", "methane", "propane", "butane", "gasoline")

# subtype -> (attribute names, unit, dy from the pipe midpoint)
_PROCESS_DATA = (
    ("flow", ("flow_rate", "design_flow"), "m³/h", -30),
    ("temperature", ("temperature", "design_temperature"), "°C", 0),
    ("pressure", ("pressure", "design_pressure"), "bar", 30),
)


def _as_float(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _type_text(node: EquipmentNode) -> str:
    return node.equipment_type or node.category.value


def process_data_annotations(route: Route) -> list[Annotation]:
    """Flow / temperature / pressure boxes stacked beside the pipe midpoint."""
    mx, my = route.midpoint
    out = []
    for subtype, names, unit, dy in _PROCESS_DATA:
        value = next(
            (route.attributes[n] for n in names
             if route.attributes.get(n) not in (None, "")),
            None,
        )
        if value is None:
            continue
        out.append(Annotation(
            type=AnnotationType.PROCESS_DATA,
            subtype=subtype,
            text=f"{value} {unit}",
            x=mx + 40,
            y=my + dy,
            width=100,
            height=40,
            associated_element=route.id,
            priority=2,
        ))
    return out


def equipment_annotations(node: EquipmentNode) -> list[Annotation]:
    """Tag label above the equipment, spec note to its right."""
    out = [Annotation(
        type=AnnotationType.EQUIPMENT_TAG,
        text=node.tag,
        detail=node.description or node.equipment_type,
        x=node.x,
        y=node.y - 80,
        width=150,
        height=50,
        associated_element=node.tag,
        priority=1,
    )]

    if node.attr("specifications", "capacity", "power") is None:
        return out
    specs = []
    if node.attr("capacity") is not None:
        specs.append(f"Capacity: {node.attr('capacity')}")
    if node.attr("power") is not None:
        specs.append(f"Power: {node.attr('power')}")
    if node.attr("design_pressure") is not None:
        specs.append(f"Design P: {node.attr('design_pressure')} bar")
    if node.attr("design_temperature") is not None:
        specs.append(f"Design T: {node.attr('design_temperature')}°C")
    if specs:
        out.append(Annotation(
            type=AnnotationType.NOTE,
            text="\n".join(specs),
            x=node.x + 80,
            y=node.y,
            width=180,
            height=20 + len(specs) * 15,
            associated_element=node.tag,
            priority=3,
        ))
    return out


def safety_annotations(
    equipment: list[EquipmentNode], config: AnnotationConfig | None = None,
) -> list[Annotation]:
    """High-pressure vessel and flammable-fluid warnings."""
    if config is None:
        config = AnnotationConfig()
    out = []
    for node in equipment:
        if type_matches(_type_text(node), PRESSURE_VESSEL_KEYWORDS):
            pressure = _as_float(node.attr("design_pressure", default=0))
            if pressure > config.high_pressure_bar:
                level = (SafetyLevel.CRITICAL if pressure > config.critical_pressure_bar
                         else SafetyLevel.HIGH)
                out.append(Annotation(
                    type=AnnotationType.SAFETY,
                    text="HIGH PRESSURE VESSEL",
                    detail=f"Design: {node.attr('design_pressure')} bar\nRequires PSV",
                    x=node.x + 100,
                    y=node.y - 50,
                    width=200,
                    height=60,
                    safety_level=level,
                    associated_element=node.tag,
                    priority=1,
                ))

        fluid = str(node.attr("fluid", default=""))
        if any(k in fluid.lower() for k in FLAMMABLE_KEYWORDS):
            out.append(Annotation(
                type=AnnotationType.SAFETY,
                text="FLAMMABLE FLUID",
                detail=f"{fluid}\nFire protection required",
                x=node.x - 120,
                y=node.y,
                width=200,
                height=60,
                safety_level=SafetyLevel.HIGH,
                associated_element=node.tag,
                priority=1,
            ))
    return out


def design_basis_annotations(
    metadata: DiagramMetadata, config: AnnotationConfig | None = None,
) -> list[Annotation]:
    """Design conditions and process description, fixed top-left."""
    if config is None:
        config = AnnotationConfig()
    m = config.margins
    out = []
    if metadata.design_temperature or metadata.design_pressure:
        lines = []
        if metadata.design_temperature:
            lines.append(f"Temperature: {metadata.design_temperature:g}°C")
        if metadata.design_pressure:
            lines.append(f"Pressure: {metadata.design_pressure:g} bar")
        if metadata.design_flow:
            lines.append(f"Flow: {metadata.design_flow:g} m³/h")
        out.append(Annotation(
            type=AnnotationType.DESIGN_BASIS,
            text="DESIGN CONDITIONS",
            detail="\n".join(lines),
            x=m.left + 20,
            y=m.top + 20,
            width=250,
            height=80,
            fixed=True,
            priority=3,
        ))
    if metadata.process_description:
        out.append(Annotation(
            type=AnnotationType.NOTE,
            text="PROCESS DESCRIPTION",
            detail=metadata.process_description,
            x=m.left + 20,
            y=m.top + 120,
            width=300,
            height=100,
            fixed=True,
            priority=3,
        ))
    return out


def generate_annotations(
    equipment: list[EquipmentNode],
    routes: list[Route],
    metadata: DiagramMetadata | None = None,
    *,
    toggles: AnnotationToggles | None = None,
    config: AnnotationConfig | None = None,
) -> list[Annotation]:
    """All enabled annotation families, in generation order (unplaced)."""
    if toggles is None:
        toggles = AnnotationToggles()
    if config is None:
        config = AnnotationConfig()

    annotations: list[Annotation] = []
    if toggles.process_data:
        for route in routes:
            annotations.extend(process_data_annotations(route))
    if toggles.equipment_notes:
        for node in equipment:
            annotations.extend(equipment_annotations(node))
    if toggles.safety_notes:
        annotations.extend(safety_annotations(equipment, config))
    if toggles.design_basis and metadata is not None:
        annotations.extend(design_basis_annotations(metadata, config))
    return annotations
