"""Diagram input dataclasses — equipment, connections, instrument records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class EquipmentCategory(str, Enum):
    PUMP = "pump"
    VESSEL = "vessel"
    COLUMN = "column"
    HEAT_EXCHANGER = "heat_exchanger"
    COMPRESSOR = "compressor"
    SEPARATOR = "separator"
    REACTOR = "reactor"
    OTHER = "other"


class ElevationBand(str, Enum):
    OVERHEAD = "overhead"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    GROUND = "ground"


@dataclass
class EquipmentNode:
    """A process unit.  (x, y) is the centre of its footprint."""

    tag: str
    category: EquipmentCategory = EquipmentCategory.OTHER
    equipment_type: str = ""            # raw type text from the equipment list
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    elevation: ElevationBand = ElevationBand.MEDIUM
    description: str = ""
    attributes: dict = field(default_factory=dict)

    @property
    def left(self) -> float:
        return self.x - self.width / 2

    @property
    def right(self) -> float:
        return self.x + self.width / 2

    @property
    def top(self) -> float:
        return self.y - self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height / 2

    @property
    def center(self) -> tuple[float, float]:
        return (self.x, self.y)

    def attr(self, *names: str, default=None):
        """First non-empty attribute among *names*."""
        for name in names:
            value = self.attributes.get(name)
            if value not in (None, ""):
                return value
        return default


@dataclass
class Connection:
    from_tag: str
    to_tag: str
    line_number: str = ""
    fluid: str = ""
    nominal_size: float = 2.0           # inches
    connection_type: str = "process"    # "process" | "instrument" | "signal"
    attributes: dict = field(default_factory=dict)


@dataclass
class InstrumentSpec:
    """An instrument as listed by the caller, before categorization."""

    tag: str
    description: str = ""
    equipment_tag: str | None = None    # explicit equipment reference
    signal_type: str = ""
    is_local: bool = False
    x: float | None = None
    y: float | None = None


@dataclass
class DiagramMetadata:
    drawing_number: str = ""
    title: str = ""
    revision: str = ""
    design_temperature: float | None = None
    design_pressure: float | None = None
    design_flow: float | None = None
    process_description: str = ""
