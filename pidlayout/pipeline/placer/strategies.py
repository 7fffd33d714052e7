"""Initial layout strategies — one function per LayoutStrategy.

Every strategy receives sized copies of the equipment nodes and assigns
centre coordinates in place.  No strategy checks for collisions; that is
the optimisation pass's job.
"""

from __future__ import annotations

import math
from typing import Callable

from pidlayout.pipeline.config import CanvasConfig, PlacementConfig
from pidlayout.pipeline.diagram.classify import (
    is_major, is_rotating, type_matches,
    HEAT_TRANSFER_KEYWORDS, VESSEL_KEYWORDS,
)
from pidlayout.pipeline.diagram.models import EquipmentNode, EquipmentCategory

from .models import LayoutStrategy, FlowDirection, EquipmentAnalysis


def _type_text(node: EquipmentNode) -> str:
    return node.equipment_type or node.category.value


def analyze_equipment(nodes: list[EquipmentNode]) -> EquipmentAnalysis:
    """Bucket equipment into major / rotating / heat-transfer / vessels."""
    analysis = EquipmentAnalysis()
    for node in nodes:
        t = _type_text(node)
        if is_major(t):
            analysis.major.append(node.tag)
        elif is_rotating(t):
            analysis.rotating.append(node.tag)
        elif type_matches(t, HEAT_TRANSFER_KEYWORDS):
            analysis.heat_transfer.append(node.tag)
        elif type_matches(t, VESSEL_KEYWORDS):
            analysis.vessels.append(node.tag)
    return analysis


def determine_flow_direction(analysis: EquipmentAnalysis) -> FlowDirection:
    """Pick a flow direction for ``FlowDirection.AUTO``.

    Tall equipment (more than two columns/reactors) reads best left to
    right.  Trains dominated by rotating equipment read top to bottom.
    """
    if len(analysis.major) > 2:
        return FlowDirection.LEFT_TO_RIGHT
    if len(analysis.rotating) > len(analysis.major):
        return FlowDirection.TOP_TO_BOTTOM
    return FlowDirection.LEFT_TO_RIGHT


# ── Strategies ─────────────────────────────────────────────────────


def layout_process_sequence(
    nodes: list[EquipmentNode],
    canvas: CanvasConfig,
    config: PlacementConfig,
    direction: FlowDirection,
) -> None:
    """Equal spacing along the flow axis in list order, centred across it."""
    m = config.margins
    gaps = max(len(nodes) - 1, 1)

    if direction == FlowDirection.TOP_TO_BOTTOM:
        available = canvas.height - m.top - m.bottom
        spacing = max(config.min_spacing, available / gaps)
        for i, node in enumerate(nodes):
            node.x = canvas.width / 2
            node.y = m.top + i * spacing
    else:
        available = canvas.width - m.left - m.right
        spacing = max(config.min_spacing, available / gaps)
        for i, node in enumerate(nodes):
            node.x = m.left + i * spacing
            node.y = canvas.height / 2


def layout_by_equipment_type(
    nodes: list[EquipmentNode],
    canvas: CanvasConfig,
    config: PlacementConfig,
    direction: FlowDirection,
) -> None:
    """One band per category (first-appearance order) along the flow axis."""
    m = config.margins
    groups: dict[EquipmentCategory, list[EquipmentNode]] = {}
    for node in nodes:
        groups.setdefault(node.category, []).append(node)
    if not groups:
        return

    if direction == FlowDirection.TOP_TO_BOTTOM:
        band = (canvas.height - m.top - m.bottom) / len(groups)
        for gi, members in enumerate(groups.values()):
            for k, node in enumerate(members):
                node.x = m.left + k * config.group_step
                node.y = m.top + gi * band
    else:
        band = (canvas.width - m.left - m.right) / len(groups)
        for gi, members in enumerate(groups.values()):
            for k, node in enumerate(members):
                node.x = m.left + gi * band
                node.y = m.top + k * config.group_step


def layout_by_elevation(
    nodes: list[EquipmentNode],
    canvas: CanvasConfig,
    config: PlacementConfig,
    direction: FlowDirection,
) -> None:
    """Fixed fractional height per elevation band, evenly spread in x."""
    m = config.margins
    usable_h = canvas.height - m.top - m.bottom
    step = (canvas.width - m.left - m.right) / max(len(nodes), 1)
    medium = config.elevation_levels.get("medium", 0.5)
    for i, node in enumerate(nodes):
        level = config.elevation_levels.get(node.elevation.value, medium)
        node.x = m.left + i * step
        node.y = m.top + usable_h * level


def layout_in_grid(
    nodes: list[EquipmentNode],
    canvas: CanvasConfig,
    config: PlacementConfig,
    direction: FlowDirection,
) -> None:
    """ceil(sqrt(n)) columns, equal cells, each node at its cell centre."""
    if not nodes:
        return
    m = config.margins
    cols = math.ceil(math.sqrt(len(nodes)))
    rows = math.ceil(len(nodes) / cols)
    cell_w = (canvas.width - m.left - m.right) / cols
    cell_h = (canvas.height - m.top - m.bottom) / rows
    for i, node in enumerate(nodes):
        row, col = divmod(i, cols)
        node.x = m.left + col * cell_w + cell_w / 2
        node.y = m.top + row * cell_h + cell_h / 2


LayoutFn = Callable[
    [list[EquipmentNode], CanvasConfig, PlacementConfig, FlowDirection], None,
]

LAYOUTS: dict[LayoutStrategy, LayoutFn] = {
    LayoutStrategy.PROCESS_SEQUENCE: layout_process_sequence,
    LayoutStrategy.EQUIPMENT_TYPE: layout_by_equipment_type,
    LayoutStrategy.ELEVATION: layout_by_elevation,
    LayoutStrategy.GRID: layout_in_grid,
}
