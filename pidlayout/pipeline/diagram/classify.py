"""Keyword classification of raw equipment type strings.

Equipment lists come from extraction services with free-text types
("Centrifugal Pump", "Reflux Drum", "Shell & Tube Exchanger").  These
helpers map that text onto the fixed category and elevation enums by
substring matching, in a fixed precedence order.
"""

from __future__ import annotations

from .models import EquipmentCategory, ElevationBand


_CATEGORY_KEYWORDS: tuple[tuple[EquipmentCategory, tuple[str, ...]], ...] = (
    (EquipmentCategory.PUMP, ("pump",)),
    (EquipmentCategory.COMPRESSOR, ("compressor", "blower")),
    (EquipmentCategory.COLUMN, ("column", "tower")),
    (EquipmentCategory.REACTOR, ("reactor",)),
    (EquipmentCategory.HEAT_EXCHANGER,
     ("exchanger", "cooler", "heater", "condenser", "reboiler")),
    (EquipmentCategory.SEPARATOR, ("separator",)),
    (EquipmentCategory.VESSEL, ("tank", "vessel", "drum", "accumulator")),
)

MAJOR_KEYWORDS = ("column", "tower", "reactor")
ROTATING_KEYWORDS = ("pump", "compressor")
HEAT_TRANSFER_KEYWORDS = ("exchanger", "cooler", "heater")
VESSEL_KEYWORDS = ("tank", "vessel", "drum", "separator")


def categorize_equipment(equipment_type: str) -> EquipmentCategory:
    """Map a free-text equipment type onto an EquipmentCategory."""
    text = (equipment_type or "").lower()
    try:
        return EquipmentCategory(text)
    except ValueError:
        pass
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(k in text for k in keywords):
            return category
    return EquipmentCategory.OTHER


def determine_elevation(equipment_type: str, description: str = "") -> ElevationBand:
    """Infer the elevation band from type and service description."""
    t = (equipment_type or "").lower()
    d = (description or "").lower()

    if ("condenser" in t or "reflux drum" in t
            or "overhead" in d or "top product" in d):
        return ElevationBand.OVERHEAD
    if "column" in t or "tower" in t or "accumulator" in t:
        return ElevationBand.HIGH
    if ("reboiler" in t or "bottom receiver" in t
            or "bottom" in d or "sump" in d):
        return ElevationBand.LOW
    if "pump" in t or "pump" in d:
        return ElevationBand.GROUND
    return ElevationBand.MEDIUM


def is_major(equipment_type: str) -> bool:
    t = (equipment_type or "").lower()
    return any(k in t for k in MAJOR_KEYWORDS)


def is_rotating(equipment_type: str) -> bool:
    t = (equipment_type or "").lower()
    return any(k in t for k in ROTATING_KEYWORDS)


def type_matches(equipment_type: str, keywords: tuple[str, ...]) -> bool:
    """True if any keyword is a substring of the lower-cased type."""
    t = (equipment_type or "").lower()
    return any(k in t for k in keywords)
