"""
pidlayout — entry point.

Usage:
    python -m pidlayout layout input.json
    python -m pidlayout layout input.json --placement grid --routing smart
    python -m pidlayout layout input.json --width 1600 --height 900 --output out.json
"""

import json
import logging
import sys
from pathlib import Path

USAGE = (
    "Usage: python -m pidlayout layout <input.json> [--placement S] "
    "[--routing S] [--instruments S] [--width W] [--height H] "
    "[--output FILE] [--verbose]"
)


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)
    cmd = args[0] if args else ""

    if cmd != "layout" or len(args) < 2:
        if cmd and cmd != "layout":
            print(f"Unknown command: {cmd}")
        print(USAGE)
        return 1

    from pidlayout.pipeline.config import CanvasConfig, ConfigurationError
    from pidlayout.pipeline.runner import (
        PipelineOptions, run_pipeline, load_document, diagram_to_dict,
    )

    input_path = Path(args[1])
    options = PipelineOptions()
    width = height = None
    output = None
    verbose = False
    for i, a in enumerate(args):
        nxt = args[i + 1] if i + 1 < len(args) else None
        if a == "--placement" and nxt:
            options.placement = nxt
        elif a == "--routing" and nxt:
            options.routing = nxt
        elif a == "--instruments" and nxt:
            options.instruments = nxt
        elif a == "--width" and nxt:
            width = float(nxt)
        elif a == "--height" and nxt:
            height = float(nxt)
        elif a == "--output" and nxt:
            output = Path(nxt)
        elif a == "--verbose":
            verbose = True

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        data = json.loads(input_path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("expected a JSON object at the top level")
        canvas = data.get("canvas") or {}
        options.canvas = CanvasConfig(
            width=width or float(canvas.get("width", CanvasConfig.width)),
            height=height or float(canvas.get("height", CanvasConfig.height)),
        )
        equipment, connections, instruments, metadata = load_document(data)
    except (OSError, KeyError, TypeError, ValueError) as e:
        print(f"Invalid input {input_path}: {e}")
        return 1

    try:
        diagram = run_pipeline(
            equipment, connections, instruments, metadata, options=options)
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        return 2

    text = json.dumps(diagram_to_dict(diagram), indent=2)
    if output is not None:
        output.write_text(text, encoding="utf-8")
        print(f"Wrote {output} ({len(diagram.diagnostics)} diagnostics)")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
