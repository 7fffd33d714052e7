"""Annotation dataclasses and enums."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pidlayout.pipeline.diagnostics import Diagnostic


class AnnotationType(str, Enum):
    NOTE = "note"
    PROCESS_DATA = "process_data"
    EQUIPMENT_TAG = "equipment_tag"
    SAFETY = "safety"
    DESIGN_BASIS = "design_basis"
    REVISION = "revision"
    CALLOUT = "callout"
    DIMENSION = "dimension"
    LEGEND = "legend"


class SafetyLevel(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


@dataclass
class Annotation:
    """A text/graphic callout.  (x, y) is the top-left of its box."""

    type: AnnotationType
    x: float
    y: float
    width: float
    height: float
    text: str = ""
    detail: str = ""
    priority: int = 5                   # lower is placed first
    fixed: bool = False                 # skip overlap resolution
    associated_element: str | None = None   # equipment tag or route id
    subtype: str = ""
    safety_level: SafetyLevel | None = None
    extra: dict = field(default_factory=dict)

    @property
    def box(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)


@dataclass
class AnnotationToggles:
    """Which annotation families the generator produces."""

    process_data: bool = True
    equipment_notes: bool = True
    safety_notes: bool = True
    design_basis: bool = True


@dataclass
class AnnotationResult:
    annotations: list[Annotation]
    residual_overlaps: list[tuple[int, int]] = field(default_factory=list)
    """Index pairs (into ``annotations``) of floating boxes that still overlap."""
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.residual_overlaps and not self.diagnostics
