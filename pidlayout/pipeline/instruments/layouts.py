"""Instrument placement strategies — one function per InstrumentStrategy.

Each function assigns ``x``, ``y`` and ``group`` in place.  Instruments
must already carry their resolved ``equipment_tag``.
"""

from __future__ import annotations

import math
from typing import Callable

from pidlayout.pipeline.config import CanvasConfig, InstrumentConfig
from pidlayout.pipeline.diagram.models import EquipmentNode

from .models import Instrument, MountingLocation, InstrumentStrategy


GRID_COLUMNS = 5
GRID_COL_STEP = 100.0
GRID_ROW_STEP = 80.0


def _place_in_bottom_grid(
    inst: Instrument, index: int, canvas: CanvasConfig, config: InstrumentConfig,
) -> None:
    """Fallback grid above the panel strip for instruments without equipment."""
    m = config.margins
    col = index % GRID_COLUMNS
    row = index // GRID_COLUMNS
    inst.x = m.left + col * GRID_COL_STEP
    inst.y = (canvas.height - m.bottom - config.panel_height - 100
              - row * GRID_ROW_STEP)
    inst.group = "unassigned"


def _place_around(
    inst: Instrument, node: EquipmentNode, angle: float, radius: float,
) -> None:
    inst.x = node.x + math.cos(angle) * radius
    inst.y = node.y + math.sin(angle) * radius
    inst.group = node.tag


def place_auto(
    instruments: list[Instrument],
    equipment: dict[str, EquipmentNode],
    canvas: CanvasConfig,
    config: InstrumentConfig,
) -> None:
    """Field instruments ring their equipment; panel and DCS get rows.

    Field instruments sit at ``index * 45° + 22.5°`` around the resolved
    equipment, or in the bottom grid without one.  Panel instruments
    line the bottom margin and DCS instruments the top margin.
    """
    m = config.margins
    field_insts = [i for i in instruments
                   if i.mounting not in (MountingLocation.PANEL, MountingLocation.DCS)]
    panel = [i for i in instruments if i.mounting == MountingLocation.PANEL]
    dcs = [i for i in instruments if i.mounting == MountingLocation.DCS]

    for index, inst in enumerate(field_insts):
        node = equipment.get(inst.equipment_tag) if inst.equipment_tag else None
        if node is None:
            _place_in_bottom_grid(inst, index, canvas, config)
            continue
        angle = index * math.pi / 4 + math.pi / 8
        _place_around(inst, node, angle, config.field_radius)

    for index, inst in enumerate(panel):
        inst.x = m.left + index * config.row_step + 50
        inst.y = canvas.height - m.bottom - 50
        inst.group = "panel"

    for index, inst in enumerate(dcs):
        inst.x = m.left + index * config.row_step + 50
        inst.y = m.top + 30
        inst.group = "dcs"


def place_by_equipment(
    instruments: list[Instrument],
    equipment: dict[str, EquipmentNode],
    canvas: CanvasConfig,
    config: InstrumentConfig,
) -> None:
    """Widening spiral (60° steps, radius 70 + 10·i) around each equipment."""
    groups: dict[str, list[Instrument]] = {}
    orphans: list[Instrument] = []
    for inst in instruments:
        if inst.equipment_tag in equipment:
            groups.setdefault(inst.equipment_tag, []).append(inst)
        else:
            orphans.append(inst)

    for tag, node in equipment.items():
        for index, inst in enumerate(groups.get(tag, [])):
            angle = index * math.pi / 3 + math.pi / 6
            _place_around(inst, node, angle, 70 + index * 10)

    for index, inst in enumerate(orphans):
        _place_in_bottom_grid(inst, index, canvas, config)


def place_by_function(
    instruments: list[Instrument],
    equipment: dict[str, EquipmentNode],
    canvas: CanvasConfig,
    config: InstrumentConfig,
) -> None:
    """One row per primary function letter, first-appearance order."""
    m = config.margins
    groups: dict[str, list[Instrument]] = {}
    for inst in instruments:
        primary = inst.functions[0] if inst.functions else "I"
        groups.setdefault(primary, []).append(inst)

    for gi, (letter, members) in enumerate(groups.items()):
        base_y = m.top + 100 + gi * 150
        for index, inst in enumerate(members):
            inst.x = m.left + index * config.row_step + 50
            inst.y = base_y
            inst.group = letter


def place_by_loop(
    instruments: list[Instrument],
    equipment: dict[str, EquipmentNode],
    canvas: CanvasConfig,
    config: InstrumentConfig,
) -> None:
    """Loop blocks, four per row, instruments 80 apart inside a block."""
    m = config.margins
    groups: dict[str, list[Instrument]] = {}
    for inst in instruments:
        groups.setdefault(inst.loop_number, []).append(inst)

    for li, (loop_id, members) in enumerate(groups.items()):
        base_x = m.left + (li % 4) * 300
        base_y = m.top + 100 + (li // 4) * 200
        for index, inst in enumerate(members):
            inst.x = base_x + index * 80
            inst.y = base_y
            inst.group = loop_id


LayoutFn = Callable[
    [list[Instrument], dict[str, EquipmentNode],
     CanvasConfig, InstrumentConfig],
    None,
]

LAYOUTS: dict[InstrumentStrategy, LayoutFn] = {
    InstrumentStrategy.AUTO: place_auto,
    InstrumentStrategy.BY_EQUIPMENT: place_by_equipment,
    InstrumentStrategy.BY_FUNCTION: place_by_function,
    InstrumentStrategy.BY_LOOP: place_by_loop,
}
