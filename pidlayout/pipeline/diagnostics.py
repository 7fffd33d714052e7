"""Degraded-outcome records returned alongside every stage result.

The engines never raise for data-shape problems that can be defaulted.
Instead each skipped item, fallback or residual overlap is appended to
the stage's diagnostics list so callers can surface "N connections could
not be routed" without the pipeline halting.
"""

from __future__ import annotations

from dataclasses import dataclass

MISSING_REFERENCE = "missing-reference"
SEARCH_EXHAUSTION = "search-exhaustion"
PLACEMENT_EXHAUSTION = "placement-exhaustion"
MALFORMED_TAG = "malformed-tag"
OUT_OF_BOUNDS = "out-of-bounds"
RESIDUAL_OVERLAP = "residual-overlap"


@dataclass
class Diagnostic:
    kind: str
    stage: str          # "placer" | "router" | "instruments" | "annotations"
    subject: str        # tag, route id or annotation text the record is about
    message: str

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "stage": self.stage,
            "subject": self.subject,
            "message": self.message,
        }


def count_by_kind(diagnostics: list[Diagnostic]) -> dict[str, int]:
    """Return kind -> number of diagnostics of that kind."""
    counts: dict[str, int] = {}
    for d in diagnostics:
        counts[d.kind] = counts.get(d.kind, 0) + 1
    return counts
