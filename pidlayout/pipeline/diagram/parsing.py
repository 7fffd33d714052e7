"""Diagram input parsing — convert raw dicts/JSON records into dataclasses.

Upstream extraction services are not consistent about key names, so
each parser accepts the common aliases (``tag`` / ``tag_number``,
``type`` / ``equipment_type``, ``pipe_size`` / ``nominal_size``, ...).
Keys that are not part of the typed model are kept in ``attributes``.
"""

from __future__ import annotations

from .classify import categorize_equipment, determine_elevation
from .models import (
    EquipmentNode, Connection, InstrumentSpec, DiagramMetadata, ElevationBand,
)


_EQUIPMENT_KEYS = {
    "tag", "tag_number", "type", "equipment_type", "category",
    "description", "service", "elevation", "x", "y", "width", "height",
    "attributes",
}

_CONNECTION_KEYS = {
    "from_tag", "from_equipment", "from", "to_tag", "to_equipment", "to",
    "line_number", "fluid", "nominal_size", "pipe_size",
    "connection_type", "attributes",
}


def _first(data: dict, *keys: str, default=None):
    for k in keys:
        v = data.get(k)
        if v not in (None, ""):
            return v
    return default


def _extra_attributes(data: dict, known: set[str]) -> dict:
    attrs = dict(data.get("attributes") or {})
    for k, v in data.items():
        if k not in known:
            attrs[k] = v
    return attrs


def parse_equipment(records: list[dict]) -> list[EquipmentNode]:
    """Parse equipment records.  Records without a tag get ``EQUIP-<n>``."""
    nodes = []
    for i, rec in enumerate(records):
        eq_type = str(_first(rec, "equipment_type", "type", "category", default=""))
        description = str(_first(rec, "description", "service", default=""))
        elevation = rec.get("elevation")
        nodes.append(EquipmentNode(
            tag=str(_first(rec, "tag", "tag_number", default=f"EQUIP-{i + 1}")),
            category=categorize_equipment(str(_first(rec, "category", default=eq_type))),
            equipment_type=eq_type,
            x=float(rec.get("x", 0.0)),
            y=float(rec.get("y", 0.0)),
            width=float(rec.get("width", 0.0)),
            height=float(rec.get("height", 0.0)),
            elevation=(ElevationBand(elevation) if elevation
                       else determine_elevation(eq_type, description)),
            description=description,
            attributes=_extra_attributes(rec, _EQUIPMENT_KEYS),
        ))
    return nodes


def parse_connections(records: list[dict]) -> list[Connection]:
    """Parse connection records.  Both endpoints are required."""
    connections = []
    for rec in records:
        from_tag = _first(rec, "from_tag", "from_equipment", "from")
        to_tag = _first(rec, "to_tag", "to_equipment", "to")
        if from_tag is None or to_tag is None:
            raise KeyError(f"Connection record needs both endpoints: {rec!r}")
        connections.append(Connection(
            from_tag=str(from_tag),
            to_tag=str(to_tag),
            line_number=str(rec.get("line_number") or ""),
            fluid=str(rec.get("fluid") or ""),
            nominal_size=float(_first(rec, "nominal_size", "pipe_size", default=2)),
            connection_type=str(rec.get("connection_type") or "process"),
            attributes=_extra_attributes(rec, _CONNECTION_KEYS),
        ))
    return connections


def parse_instruments(records: list[dict]) -> list[InstrumentSpec]:
    """Parse instrument records.  Tags are kept verbatim for the tag parser."""
    instruments = []
    for rec in records:
        x = rec.get("x")
        y = rec.get("y")
        instruments.append(InstrumentSpec(
            tag=str(_first(rec, "tag", "tag_number", default="")),
            description=str(rec.get("description") or ""),
            equipment_tag=_first(rec, "equipment_tag", "associated_equipment"),
            signal_type=str(rec.get("signal_type") or ""),
            is_local=bool(rec.get("is_local", False)),
            x=float(x) if x is not None else None,
            y=float(y) if y is not None else None,
        ))
    return instruments


def parse_metadata(data: dict | None) -> DiagramMetadata:
    """Parse drawing metadata and design basis."""
    data = data or {}

    def _num(*keys: str) -> float | None:
        v = _first(data, *keys)
        return float(v) if v is not None else None

    return DiagramMetadata(
        drawing_number=str(_first(data, "drawing_number", "pid_drawing_number", default="")),
        title=str(_first(data, "title", "pid_title", default="")),
        revision=str(_first(data, "revision", "pid_revision", default="")),
        design_temperature=_num("design_temperature"),
        design_pressure=_num("design_pressure"),
        design_flow=_num("design_flow"),
        process_description=str(
            _first(data, "process_description", "pid_description", default="")),
    )
