"""Annotation serialization — JSON conversion."""

from __future__ import annotations

from .models import Annotation, AnnotationResult, AnnotationType, SafetyLevel


def annotation_to_dict(a: Annotation) -> dict:
    return {
        "type": a.type.value,
        "x": a.x,
        "y": a.y,
        "width": a.width,
        "height": a.height,
        "text": a.text,
        "detail": a.detail,
        "priority": a.priority,
        "fixed": a.fixed,
        "associated_element": a.associated_element,
        "subtype": a.subtype,
        "safety_level": a.safety_level.value if a.safety_level else None,
        "extra": dict(a.extra),
    }


def annotations_to_dict(result: AnnotationResult) -> dict:
    """Serialize an AnnotationResult to a JSON-safe dict."""
    return {
        "annotations": [annotation_to_dict(a) for a in result.annotations],
        "residual_overlaps": [list(p) for p in result.residual_overlaps],
        "diagnostics": [d.to_dict() for d in result.diagnostics],
    }


def parse_annotation(data: dict) -> Annotation:
    level = data.get("safety_level")
    return Annotation(
        type=AnnotationType(data["type"]),
        x=data["x"],
        y=data["y"],
        width=data["width"],
        height=data["height"],
        text=data.get("text", ""),
        detail=data.get("detail", ""),
        priority=data.get("priority", 5),
        fixed=data.get("fixed", False),
        associated_element=data.get("associated_element"),
        subtype=data.get("subtype", ""),
        safety_level=SafetyLevel(level) if level else None,
        extra=dict(data.get("extra") or {}),
    )
