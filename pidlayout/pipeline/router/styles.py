"""Pipe categorization, line styles and line widths."""

from __future__ import annotations

from pidlayout.pipeline.diagram.models import Connection

from .models import PipeCategory


LINE_STYLES: dict[PipeCategory, str] = {
    PipeCategory.PROCESS: "solid",
    PipeCategory.UTILITY_STEAM: "dashed",
    PipeCategory.UTILITY_COOLING: "dashed",
    PipeCategory.UTILITY_AIR: "dotted",
    PipeCategory.UTILITY_NITROGEN: "dotted",
    PipeCategory.INSTRUMENT: "dotted",
    PipeCategory.SIGNAL: "dotted",
}

# (minimum nominal size in inches, line width), largest first
_WIDTH_BUCKETS = ((12, 6), (8, 5), (6, 4), (4, 3), (2, 2))


def categorize_pipe(conn: Connection) -> PipeCategory:
    """Service category from fluid name, line number and connection type."""
    fluid = (conn.fluid or "").lower()
    line = (conn.line_number or "").lower()

    if "steam" in fluid or "stm" in line:
        return PipeCategory.UTILITY_STEAM
    if "cooling" in fluid or "cw" in fluid or "cw" in line:
        return PipeCategory.UTILITY_COOLING
    if "air" in fluid or "air" in line:
        return PipeCategory.UTILITY_AIR
    if "nitrogen" in fluid or "n2" in line:
        return PipeCategory.UTILITY_NITROGEN
    if conn.connection_type == "instrument" or "inst" in line:
        return PipeCategory.INSTRUMENT
    if conn.connection_type == "signal":
        return PipeCategory.SIGNAL
    return PipeCategory.PROCESS


def line_style(category: PipeCategory) -> str:
    return LINE_STYLES.get(category, "solid")


def line_width(nominal_size: float) -> int:
    """Drawn width (1-6) bucketed from nominal pipe size."""
    for min_size, width in _WIDTH_BUCKETS:
        if nominal_size >= min_size:
            return width
    return 1
