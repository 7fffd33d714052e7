"""Annotation engine entry point — generate then place."""

from __future__ import annotations

from pidlayout.pipeline.config import AnnotationConfig
from pidlayout.pipeline.diagram.models import EquipmentNode, DiagramMetadata
from pidlayout.pipeline.instruments.models import Instrument
from pidlayout.pipeline.router.models import Route

from .generators import generate_annotations
from .models import Annotation, AnnotationResult, AnnotationToggles
from .placement import place_annotations


def instrument_boxes(
    instruments: list[Instrument], size: float,
) -> list[tuple[float, float, float, float]]:
    """(x, y, w, h) box of each instrument bubble, centred on its position."""
    half = size / 2
    return [(i.x - half, i.y - half, size, size) for i in instruments]


def annotate_diagram(
    equipment: list[EquipmentNode],
    routes: list[Route],
    metadata: DiagramMetadata | None = None,
    *,
    instruments: list[Instrument] | None = None,
    toggles: AnnotationToggles | None = None,
    extra: list[Annotation] | None = None,
    config: AnnotationConfig | None = None,
) -> AnnotationResult:
    """Generate the enabled annotation families and place them.

    Placed *instruments* are obstacles for floating annotations.  *extra*
    annotations (legends, clouds, custom notes) join the generated ones
    before placement.
    """
    if config is None:
        config = AnnotationConfig()
    annotations = generate_annotations(
        equipment, routes, metadata, toggles=toggles, config=config)
    if extra:
        annotations.extend(extra)
    obstacles = instrument_boxes(instruments or [], config.instrument_size)
    return place_annotations(annotations, config, obstacles=obstacles)
