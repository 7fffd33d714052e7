"""Instrumentation dataclasses and enums."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pidlayout.pipeline.diagnostics import Diagnostic


class MountingLocation(str, Enum):
    FIELD = "field"
    PANEL = "panel"
    DCS = "dcs"
    SHARED = "shared"


class SignalType(str, Enum):
    ELECTRIC = "electric"
    PNEUMATIC = "pneumatic"
    WIRELESS = "wireless"
    HYDRAULIC = "hydraulic"
    CAPILLARY = "capillary"


class InstrumentStrategy(str, Enum):
    AUTO = "auto"
    BY_EQUIPMENT = "by-equipment"
    BY_FUNCTION = "by-function"
    BY_LOOP = "by-loop"


@dataclass
class TagInfo:
    """An ISA-5.1 tag split into its parts."""

    measured_variable: str
    functions: list[str]
    loop_number: str
    suffix: str
    is_valid: bool
    description: str = ""


@dataclass
class Instrument:
    """A categorized instrument, positioned once placement has run."""

    tag: str
    measured_variable: str
    functions: list[str]
    loop_number: str
    suffix: str = ""
    is_valid: bool = True
    description: str = ""               # from the ISA letter tables
    service: str = ""                   # caller's free-text description
    mounting: MountingLocation = MountingLocation.FIELD
    signal_type: SignalType = SignalType.ELECTRIC
    connection_point: str | None = None     # equipment tag or type keyword
    equipment_tag: str | None = None        # resolved placed equipment
    x: float = 0.0
    y: float = 0.0
    group: str = ""                     # placement group key

    @property
    def letters(self) -> str:
        return self.measured_variable + "".join(self.functions)


@dataclass
class ControlLoop:
    loop_id: str
    measured_variable: str
    instruments: list[str] = field(default_factory=list)   # tags, input order
    has_controller: bool = False
    has_transmitter: bool = False
    has_valve: bool = False
    has_indicator: bool = False


@dataclass
class SignalRoute:
    id: str                             # "signal_<instrument tag>"
    instrument_tag: str
    equipment_tag: str
    waypoints: list[tuple[float, float]]
    signal_type: SignalType
    line_style: str


@dataclass
class InstrumentSymbol:
    """What the renderer needs to draw an ISA bubble."""

    circle_type: str                    # "field" | "panel" | "dcs"
    show_balloon: bool
    letters: str
    loop_number: str


@dataclass
class InstrumentationResult:
    instruments: list[Instrument]
    loops: list[ControlLoop] = field(default_factory=list)
    signal_routes: list[SignalRoute] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def by_tag(self) -> dict[str, Instrument]:
        return {i.tag: i for i in self.instruments}
