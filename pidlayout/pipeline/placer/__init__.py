"""Placer — positions every equipment node on the canvas.

Submodules:
  models        Output dataclasses and strategy enums.
  geometry      Box collision, separation vector, grid snap, containment.
  strategies    One initial-layout function per LayoutStrategy.
  engine        place_equipment pipeline, relaxation and rearrange.
  serialization JSON conversion (placement_to_dict, parse_placement).
"""

from .models import LayoutStrategy, FlowDirection, EquipmentAnalysis, PlacementResult
from .engine import (
    place_equipment, optimize_positions, apply_elevation_adjustments,
    snap_to_grid, rearrange, equipment_size, nodes_outside_canvas,
)
from .strategies import analyze_equipment, determine_flow_direction
from .serialization import placement_to_dict, parse_placement
from .geometry import boxes_collide, count_collisions, snap_value

__all__ = [
    # Models
    "LayoutStrategy", "FlowDirection", "EquipmentAnalysis", "PlacementResult",
    # Engine
    "place_equipment", "optimize_positions", "apply_elevation_adjustments",
    "snap_to_grid", "rearrange", "equipment_size", "nodes_outside_canvas",
    "analyze_equipment", "determine_flow_direction",
    # Serialization
    "placement_to_dict", "parse_placement",
    # Geometry (used by tests)
    "boxes_collide", "count_collisions", "snap_value",
]
