"""Diagram input model — dataclasses, classification, parsing, serialization."""

from .models import (
    EquipmentCategory, ElevationBand,
    EquipmentNode, Connection, InstrumentSpec, DiagramMetadata,
)
from .classify import categorize_equipment, determine_elevation
from .parsing import (
    parse_equipment, parse_connections, parse_instruments, parse_metadata,
)
from .serialization import equipment_to_dict, connection_to_dict

__all__ = [
    # Models
    "EquipmentCategory", "ElevationBand",
    "EquipmentNode", "Connection", "InstrumentSpec", "DiagramMetadata",
    # Classification
    "categorize_equipment", "determine_elevation",
    # Parsing / Serialization
    "parse_equipment", "parse_connections", "parse_instruments", "parse_metadata",
    "equipment_to_dict", "connection_to_dict",
]
