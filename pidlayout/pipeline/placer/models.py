"""Placer output dataclasses and strategy enums."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pidlayout.pipeline.diagnostics import Diagnostic
from pidlayout.pipeline.diagram.models import EquipmentNode


class LayoutStrategy(str, Enum):
    PROCESS_SEQUENCE = "process-sequence"
    EQUIPMENT_TYPE = "equipment-type"
    ELEVATION = "elevation"
    GRID = "grid"


class FlowDirection(str, Enum):
    LEFT_TO_RIGHT = "left-to-right"
    TOP_TO_BOTTOM = "top-to-bottom"
    AUTO = "auto"


@dataclass
class EquipmentAnalysis:
    """Equipment bucketed by role, used by the auto flow-direction rule."""

    major: list[str] = field(default_factory=list)          # columns, towers, reactors
    rotating: list[str] = field(default_factory=list)       # pumps, compressors
    heat_transfer: list[str] = field(default_factory=list)
    vessels: list[str] = field(default_factory=list)


@dataclass
class PlacementResult:
    """Positioned equipment, ready for the router."""

    equipment: list[EquipmentNode]
    strategy: LayoutStrategy
    flow_direction: FlowDirection       # resolved, never AUTO
    rounds: int = 0                     # entries in collision_history
    collision_history: list[int] = field(default_factory=list)
    residual_collisions: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.residual_collisions == 0 and not self.diagnostics

    def by_tag(self) -> dict[str, EquipmentNode]:
        return {n.tag: n for n in self.equipment}
