"""Greedy priority placement of annotation boxes.

Annotations are placed in ascending priority (stable, so ties keep
input order).  Fixed annotations are accepted where they are.  A
floating annotation tries its own position, then eight offsets around
it, and takes the first box clear of everything accepted so far.  When
all nine collide it is shifted right by the fallback amount and
accepted anyway; those cases are reported, not hidden.
"""

from __future__ import annotations

import dataclasses
import logging

from pidlayout.pipeline.config import AnnotationConfig
from pidlayout.pipeline.diagnostics import Diagnostic, RESIDUAL_OVERLAP

from .models import Annotation, AnnotationResult


log = logging.getLogger(__name__)


def rects_overlap(
    a: tuple[float, float, float, float], b: tuple[float, float, float, float],
) -> bool:
    """Axis-aligned overlap of (x, y, w, h) boxes; touching edges overlap."""
    x1, y1, w1, h1 = a
    x2, y2, w2, h2 = b
    return not (x1 + w1 < x2 or x2 + w2 < x1 or y1 + h1 < y2 or y2 + h2 < y1)


def _clear(
    box: tuple[float, float, float, float],
    placed: list[Annotation],
    obstacles: list[tuple[float, float, float, float]],
) -> bool:
    return not (any(rects_overlap(box, p.box) for p in placed)
                or any(rects_overlap(box, o) for o in obstacles))


def residual_overlaps(annotations: list[Annotation]) -> list[tuple[int, int]]:
    """Index pairs of floating annotations whose boxes overlap."""
    pairs = []
    for i in range(len(annotations)):
        if annotations[i].fixed:
            continue
        for j in range(i + 1, len(annotations)):
            if annotations[j].fixed:
                continue
            if rects_overlap(annotations[i].box, annotations[j].box):
                pairs.append((i, j))
    return pairs


def place_annotations(
    annotations: list[Annotation],
    config: AnnotationConfig | None = None,
    *,
    obstacles: list[tuple[float, float, float, float]] | None = None,
) -> AnnotationResult:
    """Resolve annotation overlaps; the input list is not modified.

    *obstacles* are (x, y, w, h) boxes already drawn on the sheet, such
    as instrument bubbles.  Floating annotations avoid them like any
    accepted annotation; they are not part of the result.
    """
    if config is None:
        config = AnnotationConfig()
    obstacles = list(obstacles or [])
    ordered = sorted(annotations, key=lambda a: a.priority)
    placed: list[Annotation] = []
    result = AnnotationResult(annotations=placed)

    for ann in ordered:
        if ann.fixed:
            placed.append(ann)
            continue

        position = None
        candidates = [(0.0, 0.0), *config.candidate_offsets]
        for dx, dy in candidates:
            box = (ann.x + dx, ann.y + dy, ann.width, ann.height)
            if _clear(box, placed, obstacles):
                position = (ann.x + dx, ann.y + dy)
                break

        if position is None:
            position = (ann.x + config.fallback_shift, ann.y)
            subject = ann.associated_element or ann.text
            log.warning("Annotations: no free slot for %s %r, shifted by %g",
                        ann.type.value, subject, config.fallback_shift)
            result.diagnostics.append(Diagnostic(
                kind=RESIDUAL_OVERLAP,
                stage="annotations",
                subject=subject,
                message=(f"{ann.type.value} annotation overlaps at every candidate "
                         f"position; placed with a {config.fallback_shift:g} unit shift"),
            ))

        placed.append(dataclasses.replace(ann, x=position[0], y=position[1]))

    result.residual_overlaps = residual_overlaps(placed)
    log.info("Annotations: placed %d (%d fixed), %d residual overlaps",
             len(placed), sum(1 for a in placed if a.fixed),
             len(result.residual_overlaps))
    return result
