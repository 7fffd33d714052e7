"""Annotations — process data, equipment notes, safety and design-basis callouts.

Submodules:
  models         Annotation dataclass, type/safety enums, toggles, result.
  generators     Synthesize annotations from equipment, routes and metadata.
  placement      Greedy priority placement with overlap avoidance.
  supplementary  Revision clouds, legends, tables, callouts, dimensions.
  engine         annotate_diagram (generate + place).
  serialization  JSON conversion (annotations_to_dict, parse_annotation).
"""

from .models import (
    AnnotationType, SafetyLevel, Annotation, AnnotationToggles, AnnotationResult,
)
from .generators import (
    generate_annotations, process_data_annotations, equipment_annotations,
    safety_annotations, design_basis_annotations,
)
from .placement import place_annotations, rects_overlap, residual_overlaps
from .supplementary import (
    revision_cloud, notes_legend, process_data_table, callout,
    generate_callouts, dimension, make_annotation, count_by_type, filter_by_type,
)
from .engine import annotate_diagram, instrument_boxes
from .serialization import annotation_to_dict, annotations_to_dict, parse_annotation

__all__ = [
    # Models
    "AnnotationType", "SafetyLevel", "Annotation", "AnnotationToggles",
    "AnnotationResult",
    # Generators
    "generate_annotations", "process_data_annotations", "equipment_annotations",
    "safety_annotations", "design_basis_annotations",
    # Placement
    "place_annotations", "rects_overlap", "residual_overlaps",
    # Supplementary
    "revision_cloud", "notes_legend", "process_data_table", "callout",
    "generate_callouts", "dimension", "make_annotation",
    "count_by_type", "filter_by_type",
    # Engine
    "annotate_diagram", "instrument_boxes",
    # Serialization
    "annotation_to_dict", "annotations_to_dict", "parse_annotation",
]
