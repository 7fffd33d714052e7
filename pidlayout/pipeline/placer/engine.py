"""Main placement engine — initial layout, elevation nudge, relaxation, snap.

Algorithm overview:
  1. Copy the caller's nodes and give each a footprint (caller size, or
     the per-category default).
  2. Resolve the flow direction (``auto`` looks at the equipment mix).
  3. Run the chosen layout strategy.
  4. Optionally nudge each node by its elevation band's offset.
  5. Optionally relax pairwise collisions (best effort, capped rounds).
  6. Snap every coordinate to the placement grid.
"""

from __future__ import annotations

import copy
import logging

from pidlayout.pipeline.config import (
    CanvasConfig, PlacementConfig, coerce_enum,
)
from pidlayout.pipeline.diagnostics import (
    Diagnostic, PLACEMENT_EXHAUSTION, OUT_OF_BOUNDS,
)
from pidlayout.pipeline.diagram.models import EquipmentNode, EquipmentCategory

from .geometry import (
    snap_value, boxes_collide, separation_vector, count_collisions,
    node_inside_canvas,
)
from .models import LayoutStrategy, FlowDirection, PlacementResult
from .strategies import LAYOUTS, analyze_equipment, determine_flow_direction


log = logging.getLogger(__name__)


# ── Sizing ─────────────────────────────────────────────────────────


def equipment_size(
    category: EquipmentCategory | str,
    config: PlacementConfig | None = None,
) -> tuple[float, float]:
    """Default (width, height) for an equipment category."""
    if config is None:
        config = PlacementConfig()
    key = category.value if isinstance(category, EquipmentCategory) else str(category)
    return config.equipment_sizes.get(key, config.equipment_sizes["other"])


def _assign_size(node: EquipmentNode, config: PlacementConfig) -> None:
    if node.width > 0 and node.height > 0:
        return
    node.width, node.height = equipment_size(node.category, config)


# ── Passes ─────────────────────────────────────────────────────────


def apply_elevation_adjustments(
    nodes: list[EquipmentNode],
    direction: FlowDirection,
    config: PlacementConfig | None = None,
) -> None:
    """Shift each node along the axis across the flow by its band offset."""
    if config is None:
        config = PlacementConfig()
    for node in nodes:
        offset = config.elevation_offsets.get(node.elevation.value, 0.0)
        if direction == FlowDirection.TOP_TO_BOTTOM:
            node.x += offset
        else:
            node.y += offset


def optimize_positions(
    nodes: list[EquipmentNode],
    config: PlacementConfig | None = None,
) -> list[int]:
    """Relax pairwise collisions in place.

    Each round first counts colliding pairs (boxes grown by half the
    minimum spacing); a clean round ends the loop.  Otherwise every
    colliding pair is pushed apart along the line between centres.
    A push that leaves more colliding pairs than the round started with
    is undone and relaxation stops there, so the history never rises.
    This is a relaxation, not a solver: the layout may still overlap.

    Returns the per-round collision counts.
    """
    if config is None:
        config = PlacementConfig()
    margin = config.min_spacing / 2
    history: list[int] = []

    for _ in range(config.max_iterations):
        collisions = count_collisions(nodes, margin)
        history.append(collisions)
        if collisions == 0:
            break
        before = [(n.x, n.y) for n in nodes]
        for i in range(len(nodes)):
            for j in range(i + 1, len(nodes)):
                a, b = nodes[i], nodes[j]
                if not boxes_collide(a, b, margin):
                    continue
                dx, dy = separation_vector(a, b, margin)
                a.x -= dx
                a.y -= dy
                b.x += dx
                b.y += dy
        after = count_collisions(nodes, margin)
        if after > collisions:
            for node, (x, y) in zip(nodes, before):
                node.x, node.y = x, y
            log.debug("Placer: push raised collisions %d -> %d, undone",
                      collisions, after)
            break

    return history


def snap_to_grid(nodes: list[EquipmentNode], grid_size: float) -> None:
    """Round every centre coordinate to the nearest grid multiple."""
    for node in nodes:
        node.x = snap_value(node.x, grid_size)
        node.y = snap_value(node.y, grid_size)


def nodes_outside_canvas(
    nodes: list[EquipmentNode], canvas: CanvasConfig,
) -> list[str]:
    """Tags of nodes whose footprint leaves the canvas."""
    return [n.tag for n in nodes if not node_inside_canvas(n, canvas)]


# ── Main placement function ───────────────────────────────────────


def place_equipment(
    equipment: list[EquipmentNode],
    canvas: CanvasConfig | None = None,
    *,
    strategy: LayoutStrategy | str = LayoutStrategy.PROCESS_SEQUENCE,
    flow_direction: FlowDirection | str = FlowDirection.AUTO,
    respect_elevation: bool = True,
    auto_optimize: bool = True,
    config: PlacementConfig | None = None,
) -> PlacementResult:
    """Position every equipment node on the canvas.

    Parameters
    ----------
    equipment : list[EquipmentNode]
        Nodes in process order.  Not modified; the result holds copies.
    canvas : CanvasConfig | None
        Drawing area.  Defaults to 1200×800.
    strategy : LayoutStrategy | str
        Initial layout.
    flow_direction : FlowDirection | str
        ``auto`` picks a direction from the equipment mix.
    respect_elevation : bool
        Nudge nodes by their elevation band after the initial layout.
    auto_optimize : bool
        Run collision relaxation before snapping.

    Returns
    -------
    PlacementResult
        Positioned copies plus relaxation history and diagnostics.

    Raises
    ------
    ConfigurationError
        Unknown strategy, invalid spacing/grid or no drawable area.
    """
    if canvas is None:
        canvas = CanvasConfig()
    if config is None:
        config = PlacementConfig()
    strategy = coerce_enum(LayoutStrategy, strategy, "layout strategy")
    flow_direction = coerce_enum(FlowDirection, flow_direction, "flow direction")
    config.validate()
    canvas.validate(config.margins)

    nodes = copy.deepcopy(list(equipment))
    for node in nodes:
        _assign_size(node, config)

    if flow_direction == FlowDirection.AUTO:
        flow_direction = determine_flow_direction(analyze_equipment(nodes))

    log.info("Placer: %d nodes, strategy=%s, direction=%s, canvas=%gx%g",
             len(nodes), strategy.value, flow_direction.value,
             canvas.width, canvas.height)

    LAYOUTS[strategy](nodes, canvas, config, flow_direction)

    if respect_elevation:
        apply_elevation_adjustments(nodes, flow_direction, config)

    result = PlacementResult(
        equipment=nodes, strategy=strategy, flow_direction=flow_direction,
    )

    if auto_optimize:
        history = optimize_positions(nodes, config)
        result.collision_history = history
        result.rounds = len(history)
        remaining = count_collisions(nodes, config.min_spacing / 2)
        if remaining > 0:
            log.warning("Placer: %d colliding pairs remain after %d rounds",
                        remaining, len(history))
            result.diagnostics.append(Diagnostic(
                kind=PLACEMENT_EXHAUSTION,
                stage="placer",
                subject="equipment",
                message=(f"{remaining} colliding pairs remain after "
                         f"{len(history)} relaxation rounds"),
            ))
        else:
            log.debug("Placer: relaxation history %s", history)

    snap_to_grid(nodes, config.grid_size)
    result.residual_collisions = count_collisions(nodes, config.min_spacing / 2)

    for tag in nodes_outside_canvas(nodes, canvas):
        log.warning("Placer: %s extends beyond the canvas", tag)
        result.diagnostics.append(Diagnostic(
            kind=OUT_OF_BOUNDS,
            stage="placer",
            subject=tag,
            message=f"{tag} extends beyond the {canvas.width:g}x{canvas.height:g} canvas",
        ))

    return result


def rearrange(
    nodes: list[EquipmentNode],
    tag_or_index: str | int,
    x: float,
    y: float,
    config: PlacementConfig | None = None,
) -> tuple[list[EquipmentNode], list[int]]:
    """Move one node (a drag) and re-relax the whole set.

    The initial layout strategy is never re-run and the result is not
    re-snapped.  An unknown tag or out-of-range index leaves positions
    as they are before relaxation.

    Returns (moved copies, collision history).
    """
    if config is None:
        config = PlacementConfig()
    config.validate()
    moved = copy.deepcopy(list(nodes))

    if isinstance(tag_or_index, int):
        index = tag_or_index if 0 <= tag_or_index < len(moved) else -1
    else:
        index = next(
            (i for i, n in enumerate(moved) if n.tag == tag_or_index), -1)

    if index < 0:
        log.warning("Placer: rearrange target %r not found", tag_or_index)
    else:
        moved[index].x = x
        moved[index].y = y

    history = optimize_positions(moved, config)
    return moved, history
