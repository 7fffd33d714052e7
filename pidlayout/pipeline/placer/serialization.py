"""Placement serialization — JSON conversion."""

from __future__ import annotations

from pidlayout.pipeline.diagram.models import (
    EquipmentNode, EquipmentCategory, ElevationBand,
)
from pidlayout.pipeline.diagram.serialization import equipment_to_dict

from .models import PlacementResult, LayoutStrategy, FlowDirection


def placement_to_dict(result: PlacementResult) -> dict:
    """Serialize a PlacementResult to a JSON-safe dict."""
    return {
        "strategy": result.strategy.value,
        "flow_direction": result.flow_direction.value,
        "equipment": [equipment_to_dict(n) for n in result.equipment],
        "rounds": result.rounds,
        "collision_history": list(result.collision_history),
        "residual_collisions": result.residual_collisions,
        "diagnostics": [d.to_dict() for d in result.diagnostics],
    }


def parse_placement(data: dict) -> PlacementResult:
    """Parse a placement dict back into a PlacementResult.

    Diagnostics are not restored; they describe the run that produced
    the placement, not the placement itself.
    """
    equipment = [
        EquipmentNode(
            tag=e["tag"],
            category=EquipmentCategory(e["category"]),
            equipment_type=e.get("equipment_type", ""),
            x=e["x"],
            y=e["y"],
            width=e["width"],
            height=e["height"],
            elevation=ElevationBand(e.get("elevation", "medium")),
            description=e.get("description", ""),
            attributes=dict(e.get("attributes") or {}),
        )
        for e in data["equipment"]
    ]
    return PlacementResult(
        equipment=equipment,
        strategy=LayoutStrategy(data["strategy"]),
        flow_direction=FlowDirection(data["flow_direction"]),
        rounds=data.get("rounds", 0),
        collision_history=list(data.get("collision_history", [])),
        residual_collisions=data.get("residual_collisions", 0),
    )
