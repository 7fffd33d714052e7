"""Instrumentation — ISA tag parsing, loops, instrument placement, signal lines.

Submodules:
  models        Instrument, ControlLoop, SignalRoute and strategy enums.
  tags          ISA-5.1 tag grammar and letter tables.
  layouts       One placement function per InstrumentStrategy.
  engine        Categorization, equipment association, place_instruments.
  serialization JSON conversion (instrumentation_to_dict, parse_instrumentation).
"""

from .models import (
    MountingLocation, SignalType, InstrumentStrategy, TagInfo,
    Instrument, ControlLoop, SignalRoute, InstrumentSymbol, InstrumentationResult,
)
from .tags import parse_tag, describe
from .engine import (
    place_instruments, categorize_instrument, determine_mounting,
    determine_signal_type, find_equipment, identify_control_loops,
    route_signal_lines, auto_generate_instruments, instrument_symbol,
)
from .serialization import instrumentation_to_dict, parse_instrumentation

__all__ = [
    # Models
    "MountingLocation", "SignalType", "InstrumentStrategy", "TagInfo",
    "Instrument", "ControlLoop", "SignalRoute", "InstrumentSymbol",
    "InstrumentationResult",
    # Tags
    "parse_tag", "describe",
    # Engine
    "place_instruments", "categorize_instrument", "determine_mounting",
    "determine_signal_type", "find_equipment", "identify_control_loops",
    "route_signal_lines", "auto_generate_instruments", "instrument_symbol",
    # Serialization
    "instrumentation_to_dict", "parse_instrumentation",
]
