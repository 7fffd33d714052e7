"""Tests for the equipment placer.

Uses a two-node pump → vessel train on a 1000×600 canvas as the primary
case, plus the process-train fixture for strategy coverage.

Validates:
  - Process-sequence spacing along the flow axis
  - Elevation nudges move nodes across the flow
  - Every strategy produces grid-aligned coordinates
  - Collision relaxation reports a per-round history that never rises
  - Exhausted relaxation is reported, not raised
  - Invalid configuration is rejected
  - Serialization round-trips correctly
"""

from __future__ import annotations

import json
import random
import unittest

from pidlayout.pipeline.config import (
    CanvasConfig, PlacementConfig, ConfigurationError,
)
from pidlayout.pipeline.diagnostics import PLACEMENT_EXHAUSTION
from pidlayout.pipeline.diagram import (
    EquipmentNode, EquipmentCategory, parse_equipment,
)
from pidlayout.pipeline.placer import (
    LayoutStrategy, FlowDirection,
    place_equipment, optimize_positions, snap_to_grid, rearrange,
    analyze_equipment, determine_flow_direction, equipment_size,
    placement_to_dict, parse_placement,
    boxes_collide, count_collisions, snap_value,
)
from tests.process_fixture import make_equipment


def _pump_and_vessel() -> list[EquipmentNode]:
    return parse_equipment([
        {"tag": "P-101", "type": "pump"},
        {"tag": "V-101", "type": "vessel"},
    ])


def _pump(tag: str, x: float, y: float = 0.0) -> EquipmentNode:
    return EquipmentNode(tag=tag, category=EquipmentCategory.PUMP,
                         x=x, y=y, width=60, height=60)


class TestGeometryHelpers(unittest.TestCase):

    def test_snap_rounds_half_up(self):
        self.assertEqual(snap_value(24, 50), 0)
        self.assertEqual(snap_value(25, 50), 50)
        self.assertEqual(snap_value(-26, 50), -50)

    def test_boxes_collide_respects_margin(self):
        """Two 60-wide pumps 100 apart touch only once the margin is added."""
        a, b = _pump("A", 0), _pump("B", 100)
        self.assertFalse(boxes_collide(a, b, 0))
        self.assertTrue(boxes_collide(a, b, 75))

    def test_equipment_size_defaults(self):
        self.assertEqual(equipment_size(EquipmentCategory.PUMP), (60.0, 60.0))
        self.assertEqual(equipment_size("column"), (60.0, 150.0))
        self.assertEqual(equipment_size("unknown"), (70.0, 70.0))


class TestProcessSequence(unittest.TestCase):
    """Pump → vessel, left to right, margins 100."""

    def setUp(self):
        self.canvas = CanvasConfig(1000, 600)
        self.equipment = _pump_and_vessel()

    def test_flow_axis_spacing(self):
        """Endpoints at the margins, both centred vertically."""
        result = place_equipment(
            self.equipment, self.canvas,
            strategy="process-sequence", flow_direction="left-to-right",
            respect_elevation=False,
        )
        pump, vessel = result.equipment
        self.assertEqual((pump.x, pump.y), (100, 300))
        self.assertEqual((vessel.x, vessel.y), (900, 300))
        self.assertEqual(result.residual_collisions, 0)
        self.assertEqual(result.collision_history, [0])
        self.assertTrue(result.ok)

    def test_input_not_mutated(self):
        place_equipment(self.equipment, self.canvas, flow_direction="left-to-right")
        self.assertEqual(self.equipment[0].x, 0.0)
        self.assertEqual(self.equipment[0].width, 0.0)

    def test_elevation_moves_pump_down(self):
        """A ground-level pump drops 150 below the flow line."""
        result = place_equipment(
            self.equipment, self.canvas,
            flow_direction="left-to-right", respect_elevation=True,
        )
        by_tag = result.by_tag()
        self.assertEqual((by_tag["P-101"].x, by_tag["P-101"].y), (100, 450))
        self.assertEqual((by_tag["V-101"].x, by_tag["V-101"].y), (900, 300))

    def test_default_sizes_assigned(self):
        result = place_equipment(self.equipment, self.canvas)
        pump, vessel = result.equipment
        self.assertEqual((pump.width, pump.height), (60, 60))
        self.assertEqual((vessel.width, vessel.height), (80, 100))

    def test_caller_size_kept(self):
        self.equipment[1].width = 200
        self.equipment[1].height = 40
        result = place_equipment(self.equipment, self.canvas)
        self.assertEqual((result.equipment[1].width, result.equipment[1].height),
                         (200, 40))


class TestFlowDirection(unittest.TestCase):

    def test_rotating_train_runs_top_to_bottom(self):
        nodes = parse_equipment([
            {"tag": "P-1", "type": "pump"},
            {"tag": "P-2", "type": "pump"},
            {"tag": "V-1", "type": "vessel"},
        ])
        analysis = analyze_equipment(nodes)
        self.assertEqual(analysis.rotating, ["P-1", "P-2"])
        self.assertEqual(analysis.vessels, ["V-1"])
        self.assertEqual(determine_flow_direction(analysis),
                         FlowDirection.TOP_TO_BOTTOM)

    def test_many_columns_run_left_to_right(self):
        nodes = parse_equipment([
            {"tag": f"T-{i}", "type": "column"} for i in range(3)
        ] + [{"tag": f"P-{i}", "type": "pump"} for i in range(5)])
        self.assertEqual(determine_flow_direction(analyze_equipment(nodes)),
                         FlowDirection.LEFT_TO_RIGHT)

    def test_auto_resolved_in_result(self):
        result = place_equipment(make_equipment())
        self.assertNotEqual(result.flow_direction, FlowDirection.AUTO)


class TestStrategies(unittest.TestCase):
    """Each initial layout, with relaxation and elevation switched off."""

    def test_equipment_type_bands(self):
        nodes = parse_equipment([
            {"tag": "P-1", "type": "pump"},
            {"tag": "P-2", "type": "pump"},
            {"tag": "V-1", "type": "vessel"},
        ])
        result = place_equipment(
            nodes, CanvasConfig(1200, 800), strategy="equipment-type",
            flow_direction="left-to-right",
            respect_elevation=False, auto_optimize=False,
        )
        p1, p2, v1 = result.equipment
        self.assertEqual(p1.x, p2.x)
        self.assertEqual((p1.y, p2.y), (100, 200))
        self.assertEqual((v1.x, v1.y), (600, 100))

    def test_elevation_bands(self):
        """Column in the high band sits above the ground-level pump."""
        nodes = parse_equipment([
            {"tag": "T-1", "type": "Distillation Column"},
            {"tag": "P-1", "type": "pump"},
        ])
        result = place_equipment(
            nodes, CanvasConfig(1200, 800), strategy=LayoutStrategy.ELEVATION,
            respect_elevation=False, auto_optimize=False,
        )
        column, pump = result.equipment
        self.assertEqual((column.x, column.y), (100, 300))
        self.assertEqual((pump.x, pump.y), (600, 600))

    def test_grid_cells(self):
        result = place_equipment(
            make_equipment(), CanvasConfig(1200, 800), strategy="grid",
            respect_elevation=False,
        )
        positions = [(n.x, n.y) for n in result.equipment]
        self.assertEqual(positions, [(350, 250), (850, 250), (350, 550), (850, 550)])

    def test_every_strategy_snaps(self):
        for strategy in LayoutStrategy:
            with self.subTest(strategy=strategy.value):
                result = place_equipment(make_equipment(), strategy=strategy)
                for node in result.equipment:
                    self.assertEqual(node.x % 50, 0)
                    self.assertEqual(node.y % 50, 0)


class TestCollisionRelaxation(unittest.TestCase):

    def test_coincident_pair(self):
        """Two pumps on the same spot separate in one round."""
        nodes = [_pump("A", 500, 300), _pump("B", 500, 300)]
        history = optimize_positions(nodes)
        self.assertEqual(history, [1, 0])
        self.assertFalse(boxes_collide(nodes[0], nodes[1], 75))

    def test_three_pumps_converge(self):
        nodes = [_pump("A", 0), _pump("B", 10), _pump("C", 20)]
        history = optimize_positions(nodes)
        self.assertLessEqual(len(history), 50)
        self.assertEqual(history[-1], 0)
        for earlier, later in zip(history, history[1:]):
            self.assertGreaterEqual(earlier, later)
        self.assertEqual(count_collisions(nodes, 75), 0)

    def test_history_never_rises_on_crowded_sets(self):
        """Eight pumps dropped at random into a 400-unit square."""
        for seed in range(100):
            rng = random.Random(seed)
            nodes = [_pump(f"P-{k}", rng.uniform(0, 400), rng.uniform(0, 400))
                     for k in range(8)]
            with self.subTest(seed=seed):
                history = optimize_positions(nodes)
                self.assertTrue(1 <= len(history) <= 50)
                for earlier, later in zip(history, history[1:]):
                    self.assertGreaterEqual(earlier, later)
                self.assertLessEqual(count_collisions(nodes, 75), history[-1])

    def test_exhaustion_reported(self):
        """One round is not enough for a crowded band; the result says so."""
        nodes = parse_equipment([{"tag": f"P-{i}", "type": "pump"} for i in range(3)])
        result = place_equipment(
            nodes, strategy="equipment-type", flow_direction="left-to-right",
            respect_elevation=False, config=PlacementConfig(max_iterations=1),
        )
        self.assertEqual(result.collision_history, [2])
        kinds = [d.kind for d in result.diagnostics]
        self.assertIn(PLACEMENT_EXHAUSTION, kinds)
        self.assertFalse(result.ok)

    def test_last_round_clears_collisions(self):
        """Hitting the round cap is fine when the final push separated everything."""
        nodes = parse_equipment([{"tag": f"P-{i}", "type": "pump"} for i in range(2)])
        result = place_equipment(
            nodes, strategy="equipment-type", flow_direction="left-to-right",
            respect_elevation=False, config=PlacementConfig(max_iterations=1),
        )
        self.assertEqual(result.collision_history, [1])
        self.assertEqual(result.rounds, 1)
        self.assertEqual(result.diagnostics, [])
        self.assertEqual(result.residual_collisions, 0)
        self.assertTrue(result.ok)

    def test_snap_is_idempotent(self):
        nodes = [_pump("A", 123.4, 77.7), _pump("B", 901, 349)]
        snap_to_grid(nodes, 50)
        once = [(n.x, n.y) for n in nodes]
        snap_to_grid(nodes, 50)
        self.assertEqual([(n.x, n.y) for n in nodes], once)


class TestRearrange(unittest.TestCase):

    def test_drag_onto_neighbour(self):
        nodes = [_pump("A", 100, 300), _pump("B", 600, 300)]
        moved, history = rearrange(nodes, "B", 110, 300)
        self.assertGreater(history[0], 0)
        self.assertEqual(history[-1], 0)
        self.assertEqual(count_collisions(moved, 75), 0)
        self.assertEqual(nodes[1].x, 600)

    def test_by_index(self):
        nodes = [_pump("A", 100, 300), _pump("B", 600, 300)]
        moved, history = rearrange(nodes, 0, 100, 500)
        self.assertEqual((moved[0].x, moved[0].y), (100, 500))
        self.assertEqual(history, [0])

    def test_unknown_target_only_relaxes(self):
        nodes = [_pump("A", 100, 300), _pump("B", 600, 300)]
        moved, _ = rearrange(nodes, "X-9", 0, 0)
        self.assertEqual([(n.x, n.y) for n in moved], [(100, 300), (600, 300)])


class TestConfiguration(unittest.TestCase):

    def test_zero_canvas(self):
        with self.assertRaises(ConfigurationError):
            place_equipment(_pump_and_vessel(), CanvasConfig(0, 600))

    def test_margins_consume_canvas(self):
        with self.assertRaises(ConfigurationError):
            place_equipment(_pump_and_vessel(), CanvasConfig(150, 600))

    def test_unknown_strategy(self):
        with self.assertRaises(ConfigurationError):
            place_equipment(_pump_and_vessel(), strategy="spiral")

    def test_bad_grid(self):
        with self.assertRaises(ConfigurationError):
            place_equipment(_pump_and_vessel(), config=PlacementConfig(grid_size=0))

    def test_configuration_error_is_value_error(self):
        self.assertTrue(issubclass(ConfigurationError, ValueError))


class TestPlacementSerialization(unittest.TestCase):

    def test_round_trip(self):
        result = place_equipment(make_equipment())
        text = json.dumps(placement_to_dict(result))
        restored = parse_placement(json.loads(text))
        self.assertEqual(restored.strategy, result.strategy)
        self.assertEqual(restored.flow_direction, result.flow_direction)
        self.assertEqual(
            [(n.tag, n.x, n.y, n.category) for n in restored.equipment],
            [(n.tag, n.x, n.y, n.category) for n in result.equipment],
        )
        self.assertEqual(restored.collision_history, result.collision_history)


if __name__ == "__main__":
    unittest.main()
