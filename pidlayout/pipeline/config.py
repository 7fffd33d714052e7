"""Shared configuration for the layout pipeline.

The canvas is the single source of truth for the drawable area.  Each
stage carries its own frozen config object with the defaults that stage
was tuned for; a stage never reads another stage's config.

All distances are in drawing units (px on the renderer's canvas).
"""

from __future__ import annotations

from dataclasses import dataclass, field


class ConfigurationError(ValueError):
    """Raised when a configuration object is structurally invalid."""


@dataclass(frozen=True)
class Margins:
    top: float = 100.0
    right: float = 100.0
    bottom: float = 100.0
    left: float = 100.0

    @classmethod
    def uniform(cls, value: float) -> Margins:
        return cls(top=value, right=value, bottom=value, left=value)


@dataclass(frozen=True)
class CanvasConfig:
    """Canvas dimensions shared by every stage."""

    width: float = 1200.0
    height: float = 800.0

    def validate(self, margins: Margins | None = None) -> None:
        """Raise ConfigurationError if the canvas has no drawable area."""
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"Canvas must have positive dimensions, got "
                f"{self.width}×{self.height}")
        if margins is None:
            return
        if margins.left + margins.right >= self.width:
            raise ConfigurationError(
                f"Horizontal margins ({margins.left} + {margins.right}) "
                f"leave no drawable width on a {self.width}-wide canvas")
        if margins.top + margins.bottom >= self.height:
            raise ConfigurationError(
                f"Vertical margins ({margins.top} + {margins.bottom}) "
                f"leave no drawable height on a {self.height}-high canvas")

    def drawable(self, margins: Margins) -> tuple[float, float, float, float]:
        """Return (xmin, ymin, xmax, ymax) of the area inside *margins*."""
        return (
            margins.left,
            margins.top,
            self.width - margins.right,
            self.height - margins.bottom,
        )


def _require_positive(name: str, value: float) -> None:
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")


def coerce_enum(enum_cls, value, what: str):
    """Parse a strategy name (or pass an enum member through)."""
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise ConfigurationError(
            f"Unknown {what} {value!r} (expected one of: {choices})") from None


# ── Placer ─────────────────────────────────────────────────────────


DEFAULT_EQUIPMENT_SIZES: dict[str, tuple[float, float]] = {
    "pump": (60.0, 60.0),
    "vessel": (80.0, 100.0),
    "column": (60.0, 150.0),
    "reactor": (100.0, 120.0),
    "heat_exchanger": (80.0, 60.0),
    "compressor": (70.0, 70.0),
    "separator": (90.0, 90.0),
    "other": (70.0, 70.0),
}

DEFAULT_ELEVATION_LEVELS: dict[str, float] = {
    "overhead": 0.20,
    "high": 0.35,
    "medium": 0.50,
    "low": 0.65,
    "ground": 0.85,
}

DEFAULT_ELEVATION_OFFSETS: dict[str, float] = {
    "overhead": -150.0,
    "high": -75.0,
    "medium": 0.0,
    "low": 75.0,
    "ground": 150.0,
}


@dataclass(frozen=True)
class PlacementConfig:
    min_spacing: float = 150.0
    grid_size: float = 50.0
    margins: Margins = field(default_factory=Margins)
    group_step: float = 120.0
    """Secondary-axis step between members of one equipment-type band."""
    max_iterations: int = 50
    equipment_sizes: dict[str, tuple[float, float]] = field(
        default_factory=lambda: dict(DEFAULT_EQUIPMENT_SIZES))
    elevation_levels: dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_ELEVATION_LEVELS))
    elevation_offsets: dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_ELEVATION_OFFSETS))

    def validate(self) -> None:
        _require_positive("min_spacing", self.min_spacing)
        _require_positive("grid_size", self.grid_size)
        if self.max_iterations < 1:
            raise ConfigurationError("max_iterations must be at least 1")


# ── Router ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class RouterConfig:
    grid_size: float = 25.0
    min_pipe_spacing: float = 30.0
    connection_offset: float = 30.0
    """Distance from equipment centre to its nozzle (connection point)."""
    equipment_clearance: float = 30.0
    """Inflation applied to equipment footprints in occupied space."""
    margins: Margins = field(default_factory=lambda: Margins.uniform(50.0))
    max_expansions: int = 1000
    """A* node expansion budget per route."""

    def validate(self) -> None:
        _require_positive("grid_size", self.grid_size)
        if self.min_pipe_spacing < 0:
            raise ConfigurationError("min_pipe_spacing must not be negative")
        if self.max_expansions < 1:
            raise ConfigurationError("max_expansions must be at least 1")


# ── Instruments ────────────────────────────────────────────────────


@dataclass(frozen=True)
class InstrumentConfig:
    grid_size: float = 25.0
    instrument_size: float = 40.0
    panel_height: float = 100.0
    margins: Margins = field(default_factory=lambda: Margins.uniform(50.0))
    field_radius: float = 80.0
    row_step: float = 100.0
    signal_bend_threshold: float = 100.0
    """Both axis deltas must exceed this for an L-shaped signal line."""

    def validate(self) -> None:
        _require_positive("grid_size", self.grid_size)
        _require_positive("instrument_size", self.instrument_size)


# ── Annotations ────────────────────────────────────────────────────


DEFAULT_ANNOTATION_OFFSETS: tuple[tuple[float, float], ...] = (
    (0, -50),     # above
    (0, 50),      # below
    (50, 0),      # right
    (-50, 0),     # left
    (50, -50),    # top-right
    (50, 50),     # bottom-right
    (-50, -50),   # top-left
    (-50, 50),    # bottom-left
)


@dataclass(frozen=True)
class AnnotationConfig:
    margins: Margins = field(default_factory=lambda: Margins.uniform(50.0))
    candidate_offsets: tuple[tuple[float, float], ...] = DEFAULT_ANNOTATION_OFFSETS
    fallback_shift: float = 60.0
    default_priority: int = 5
    high_pressure_bar: float = 10.0
    critical_pressure_bar: float = 40.0
    instrument_size: float = 40.0
    """Bubble size used when placed instruments act as obstacles."""
