"""Supplementary annotations — revision clouds, legends, tables,
callouts, dimensions — plus small helpers over annotation lists."""

from __future__ import annotations

import datetime
import math
import random

from pidlayout.pipeline.config import CanvasConfig, AnnotationConfig
from pidlayout.pipeline.diagram.models import EquipmentNode

from .models import Annotation, AnnotationType


PROCESS_TABLE_HEADERS = ("Parameter", "Normal", "Design", "Unit")

# Approximate arc length of one cloud scallop
CLOUD_ARC_LENGTH = 30.0


def revision_cloud(
    center_x: float,
    center_y: float,
    radius: float,
    revision: str,
    description: str = "",
    *,
    rng: random.Random | None = None,
    date: datetime.date | None = None,
) -> Annotation:
    """Cloud around a revised area.

    Scallop start angles are jittered by *rng*; pass a seeded
    ``random.Random`` for reproducible output.
    """
    if rng is None:
        rng = random.Random()
    if date is None:
        date = datetime.date.today()
    n_arcs = max(8, int(2 * math.pi * radius / CLOUD_ARC_LENGTH))
    step = 2 * math.pi / n_arcs
    arcs = [i * step + rng.uniform(-0.2, 0.2) * step for i in range(n_arcs)]
    return Annotation(
        type=AnnotationType.REVISION,
        x=center_x - radius,
        y=center_y - radius,
        width=radius * 2,
        height=radius * 2,
        text=f"REV {revision}",
        detail=description,
        priority=1,
        extra={
            "cloud_radius": radius,
            "revision": revision,
            "date": date.isoformat(),
            "arcs": arcs,
        },
    )


def notes_legend(
    notes: list[str],
    canvas: CanvasConfig | None = None,
    config: AnnotationConfig | None = None,
) -> Annotation:
    """Numbered notes block, fixed bottom-left; height capped at 200."""
    if canvas is None:
        canvas = CanvasConfig()
    if config is None:
        config = AnnotationConfig()
    m = config.margins
    return Annotation(
        type=AnnotationType.LEGEND,
        text="NOTES",
        x=m.left + 20,
        y=canvas.height - m.bottom - 200,
        width=400,
        height=min(200, 40 + len(notes) * 20),
        fixed=True,
        priority=4,
        extra={"items": [{"number": i + 1, "text": n} for i, n in enumerate(notes)]},
    )


def process_data_table(
    rows: list[list],
    canvas: CanvasConfig | None = None,
    config: AnnotationConfig | None = None,
) -> Annotation:
    """Process data summary table, fixed top-right; height capped at 300."""
    if canvas is None:
        canvas = CanvasConfig()
    if config is None:
        config = AnnotationConfig()
    m = config.margins
    return Annotation(
        type=AnnotationType.LEGEND,
        text="PROCESS DATA SUMMARY",
        x=canvas.width - m.right - 450,
        y=m.top + 20,
        width=430,
        height=min(300, 60 + len(rows) * 25),
        fixed=True,
        priority=4,
        extra={"headers": list(PROCESS_TABLE_HEADERS), "rows": [list(r) for r in rows]},
    )


def callout(
    text: str,
    x: float,
    y: float,
    target_x: float,
    target_y: float,
    *,
    detail: str = "",
    style: str = "leader",
    associated_element: str | None = None,
) -> Annotation:
    """Free-form callout box at (x, y) with a leader line to a target point."""
    return Annotation(
        type=AnnotationType.CALLOUT,
        text=text,
        detail=detail,
        x=x,
        y=y,
        width=140,
        height=50,
        priority=2,
        associated_element=associated_element,
        extra={"style": style, "leader": [[target_x, target_y], [x, y]]},
    )


def generate_callouts(
    equipment: list[EquipmentNode], style: str = "leader",
) -> list[Annotation]:
    """One tag callout per equipment, fanned out 100 units from its centre."""
    out = []
    for index, node in enumerate(equipment):
        angle = index * math.pi / 4 + math.pi / 6
        out.append(callout(
            node.tag,
            node.x + math.cos(angle) * 100,
            node.y + math.sin(angle) * 100,
            node.x,
            node.y,
            detail=node.description or node.equipment_type,
            style=style,
            associated_element=node.tag,
        ))
    return out


def dimension(
    a: tuple[float, float],
    b: tuple[float, float],
    orientation: str = "horizontal",
) -> Annotation:
    """Dimension line between two points along one axis."""
    if orientation not in ("horizontal", "vertical"):
        raise ValueError(f"Unknown dimension orientation {orientation!r}")
    dx = abs(b[0] - a[0])
    dy = abs(b[1] - a[1])
    distance = dx if orientation == "horizontal" else dy
    return Annotation(
        type=AnnotationType.DIMENSION,
        x=min(a[0], b[0]),
        y=min(a[1], b[1]),
        width=dx,
        height=dy,
        text=f"{distance:g}",
        subtype=orientation,
        priority=4,
        extra={"from": list(a), "to": list(b), "distance": distance, "unit": "mm"},
    )


def make_annotation(
    type: AnnotationType | str,
    text: str,
    x: float,
    y: float,
    *,
    width: float = 150,
    height: float = 60,
    detail: str = "",
    priority: int = 3,
    fixed: bool = False,
    **extra,
) -> Annotation:
    """Custom annotation; unknown keyword arguments land in ``extra``."""
    return Annotation(
        type=AnnotationType(type),
        text=text,
        x=x,
        y=y,
        width=width,
        height=height,
        detail=detail,
        priority=priority,
        fixed=fixed,
        extra=dict(extra),
    )


def count_by_type(annotations: list[Annotation]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for a in annotations:
        counts[a.type.value] = counts.get(a.type.value, 0) + 1
    return counts


def filter_by_type(
    annotations: list[Annotation], type: AnnotationType | str,
) -> list[Annotation]:
    wanted = AnnotationType(type)
    return [a for a in annotations if a.type == wanted]
