"""Layout pipeline — turns an equipment list into a positioned P&ID model.

Stages:
  placer        Equipment positions (layout strategy, relaxation, grid snap).
  router        Pipe routes between placed equipment.
  instruments   ISA tag parsing, instrument placement and signal lines.
  annotations   Process data, notes and safety callouts without overlaps.

``runner.run_pipeline`` chains the stages.  Shared pieces live in
``config`` (canvas and per-stage settings), ``diagnostics`` (degraded
outcome records) and ``diagram`` (input model and record parsing).
"""
