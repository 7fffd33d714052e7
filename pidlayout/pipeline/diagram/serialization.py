"""Diagram input serialization — JSON-safe dicts for positioned equipment."""

from __future__ import annotations

from .models import EquipmentNode, Connection


def equipment_to_dict(node: EquipmentNode) -> dict:
    return {
        "tag": node.tag,
        "category": node.category.value,
        "equipment_type": node.equipment_type,
        "x": node.x,
        "y": node.y,
        "width": node.width,
        "height": node.height,
        "elevation": node.elevation.value,
        "description": node.description,
        "attributes": dict(node.attributes),
    }


def connection_to_dict(conn: Connection) -> dict:
    return {
        "from_tag": conn.from_tag,
        "to_tag": conn.to_tag,
        "line_number": conn.line_number,
        "fluid": conn.fluid,
        "nominal_size": conn.nominal_size,
        "connection_type": conn.connection_type,
        "attributes": dict(conn.attributes),
    }
