"""ISA-5.1 tag grammar and letter tables.

A tag is ``<letters>[-]<digits>?<letter>?``: the first letter is the
measured variable, the remaining letters are function codes, the digit
run is the loop number and a trailing letter is a suffix (``FT-101A``).
"""

from __future__ import annotations

import re

from .models import TagInfo


MEASURED_VARIABLES: dict[str, str] = {
    "A": "Analysis",
    "B": "Burner/Combustion",
    "C": "Conductivity",
    "D": "Density",
    "E": "Voltage",
    "F": "Flow",
    "G": "Gauging",
    "H": "Hand",
    "I": "Current",
    "J": "Power",
    "K": "Time",
    "L": "Level",
    "M": "Moisture",
    "N": "User defined",
    "O": "User defined",
    "P": "Pressure",
    "Q": "Quantity",
    "R": "Radiation",
    "S": "Speed",
    "T": "Temperature",
    "U": "Multivariable",
    "V": "Vibration",
    "W": "Weight",
    "X": "Unclassified",
    "Y": "Event",
    "Z": "Position",
}

FUNCTION_LETTERS: dict[str, str] = {
    "A": "Alarm",
    "C": "Controller",
    "E": "Element (Sensor)",
    "G": "Glass/Gauge",
    "I": "Indicator",
    "K": "Control Station",
    "L": "Light",
    "O": "Orifice",
    "R": "Recorder",
    "S": "Switch",
    "T": "Transmitter",
    "V": "Valve",
    "W": "Well",
    "X": "Unclassified",
    "Y": "Relay/Compute",
    "Z": "Driver/Actuator",
}

TAG_PATTERN = re.compile(r"^([A-Z]+)-?(\d+)?([A-Z])?$")

DEFAULT_LOOP = "000"


def describe(measured_variable: str, functions: list[str]) -> str:
    """Readable name, e.g. ``("F", ["T"])`` -> "Flow Transmitter"."""
    variable = MEASURED_VARIABLES.get(measured_variable, "Unknown")
    words = " ".join(FUNCTION_LETTERS.get(f, "") for f in functions)
    return f"{variable} {words}".strip()


def parse_tag(tag: str) -> TagInfo:
    """Split an instrument tag.  Unparseable tags become an unclassified
    indicator on loop 000 with ``is_valid`` False."""
    match = TAG_PATTERN.match((tag or "").strip().upper())
    if not match:
        return TagInfo(
            measured_variable="X",
            functions=["I"],
            loop_number=DEFAULT_LOOP,
            suffix="",
            is_valid=False,
            description=describe("X", ["I"]),
        )
    letters, loop, suffix = match.groups()
    functions = list(letters[1:])
    return TagInfo(
        measured_variable=letters[0],
        functions=functions,
        loop_number=loop or DEFAULT_LOOP,
        suffix=suffix or "",
        is_valid=True,
        description=describe(letters[0], functions),
    )
