"""Layout pipeline — chains the four stages over one diagram.

Stages in order:
    place → route → instrument → annotate

Every stage consumes the previous stage's result and never modifies
it.  The run can stop after any stage; later results are then None.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pidlayout.pipeline.config import (
    CanvasConfig, PlacementConfig, RouterConfig, InstrumentConfig, AnnotationConfig,
    ConfigurationError,
)
from pidlayout.pipeline.diagnostics import Diagnostic, count_by_kind
from pidlayout.pipeline.diagram.models import (
    EquipmentNode, Connection, InstrumentSpec, DiagramMetadata,
)
from pidlayout.pipeline.diagram.parsing import (
    parse_equipment, parse_connections, parse_instruments, parse_metadata,
)
from pidlayout.pipeline.placer import (
    LayoutStrategy, FlowDirection, PlacementResult, place_equipment, placement_to_dict,
)
from pidlayout.pipeline.router import (
    RoutingStrategy, RoutingResult, route_pipes, auto_generate_connections,
    routing_to_dict,
)
from pidlayout.pipeline.instruments import (
    InstrumentStrategy, InstrumentationResult, place_instruments,
    auto_generate_instruments, instrumentation_to_dict,
)
from pidlayout.pipeline.annotations import (
    AnnotationToggles, AnnotationResult, annotate_diagram, annotations_to_dict,
)


log = logging.getLogger(__name__)


STAGES = ("place", "route", "instrument", "annotate")


@dataclass
class PipelineOptions:
    """Strategies, toggles and per-stage configs for one run."""

    canvas: CanvasConfig = field(default_factory=CanvasConfig)
    placement: LayoutStrategy | str = LayoutStrategy.PROCESS_SEQUENCE
    flow_direction: FlowDirection | str = FlowDirection.AUTO
    respect_elevation: bool = True
    auto_optimize: bool = True
    routing: RoutingStrategy | str = RoutingStrategy.MANHATTAN
    avoid_crossings: bool = True
    snap_to_grid: bool = True
    instruments: InstrumentStrategy | str = InstrumentStrategy.AUTO
    toggles: AnnotationToggles = field(default_factory=AnnotationToggles)
    auto_connections: bool = True       # chain equipment when no connections given
    auto_instruments: bool = False      # typical instruments when none given
    placement_config: PlacementConfig = field(default_factory=PlacementConfig)
    router_config: RouterConfig = field(default_factory=RouterConfig)
    instrument_config: InstrumentConfig = field(default_factory=InstrumentConfig)
    annotation_config: AnnotationConfig = field(default_factory=AnnotationConfig)


@dataclass
class Diagram:
    """Fully positioned diagram model."""

    metadata: DiagramMetadata
    placement: PlacementResult
    routing: RoutingResult | None = None
    instrumentation: InstrumentationResult | None = None
    annotations: AnnotationResult | None = None

    @property
    def diagnostics(self) -> list[Diagnostic]:
        out = list(self.placement.diagnostics)
        for stage in (self.routing, self.instrumentation, self.annotations):
            if stage is not None:
                out.extend(stage.diagnostics)
        return out


def run_pipeline(
    equipment: list[EquipmentNode],
    connections: list[Connection] | None = None,
    instruments: list[InstrumentSpec] | None = None,
    metadata: DiagramMetadata | None = None,
    *,
    options: PipelineOptions | None = None,
    stop_after: str | None = None,
) -> Diagram:
    """Run the layout stages in order.

    Raises
    ------
    ConfigurationError
        Invalid configuration, unknown strategy or unknown stage name.
    """
    if options is None:
        options = PipelineOptions()
    if metadata is None:
        metadata = DiagramMetadata()
    if stop_after is not None and stop_after not in STAGES:
        raise ConfigurationError(
            f"Unknown stage {stop_after!r} (expected one of: {', '.join(STAGES)})")
    last = STAGES.index(stop_after) if stop_after else len(STAGES) - 1

    placement = place_equipment(
        equipment, options.canvas,
        strategy=options.placement,
        flow_direction=options.flow_direction,
        respect_elevation=options.respect_elevation,
        auto_optimize=options.auto_optimize,
        config=options.placement_config,
    )
    diagram = Diagram(metadata=metadata, placement=placement)
    placed = placement.equipment
    if last < 1:
        return diagram

    if not connections and options.auto_connections:
        connections = auto_generate_connections(placed)
        log.info("Pipeline: generated %d connections from equipment order",
                 len(connections))
    diagram.routing = route_pipes(
        placed, connections or [], options.canvas,
        strategy=options.routing,
        avoid_crossings=options.avoid_crossings,
        snap_to_grid=options.snap_to_grid,
        config=options.router_config,
    )
    if last < 2:
        return diagram

    if not instruments and options.auto_instruments:
        instruments = auto_generate_instruments(placed)
        log.info("Pipeline: generated %d instruments", len(instruments))
    diagram.instrumentation = place_instruments(
        placed, instruments or [], options.canvas,
        strategy=options.instruments,
        config=options.instrument_config,
    )
    if last < 3:
        return diagram

    diagram.annotations = annotate_diagram(
        placed, diagram.routing.routes, metadata,
        instruments=diagram.instrumentation.instruments,
        toggles=options.toggles,
        config=options.annotation_config,
    )

    counts = count_by_kind(diagram.diagnostics)
    if counts:
        log.warning("Pipeline: finished with diagnostics %s", counts)
    else:
        log.info("Pipeline: finished cleanly")
    return diagram


def load_document(data: dict) -> tuple[
    list[EquipmentNode], list[Connection], list[InstrumentSpec], DiagramMetadata,
]:
    """Parse an input document ``{"equipment": [...], "connections": [...],
    "instruments": [...], "metadata": {...}}``."""
    return (
        parse_equipment(data.get("equipment") or []),
        parse_connections(data.get("connections") or []),
        parse_instruments(data.get("instruments") or []),
        parse_metadata(data.get("metadata")),
    )


def diagram_to_dict(diagram: Diagram) -> dict:
    """Serialize a Diagram to a JSON-safe dict."""
    md = diagram.metadata
    return {
        "metadata": {
            "drawing_number": md.drawing_number,
            "title": md.title,
            "revision": md.revision,
            "design_temperature": md.design_temperature,
            "design_pressure": md.design_pressure,
            "design_flow": md.design_flow,
            "process_description": md.process_description,
        },
        "placement": placement_to_dict(diagram.placement),
        "routing": routing_to_dict(diagram.routing) if diagram.routing else None,
        "instrumentation": (instrumentation_to_dict(diagram.instrumentation)
                            if diagram.instrumentation else None),
        "annotations": (annotations_to_dict(diagram.annotations)
                        if diagram.annotations else None),
        "diagnostics": [d.to_dict() for d in diagram.diagnostics],
    }
